"""
Schemas for the application.

This module exports all Pydantic models and schemas used for request/response validation.
"""

from app.schemas.login import (
    UserBase,
    UserCreate,
    UserOut,
    LoginAuth,
    LoginAuthResponse,
    SessionOut,
    SuccessResponse,
)

from app.schemas.repair import (
    RepairSource,
    # Record schemas
    RepairBase,
    RepairCreate,
    RepairImport,
    RepairForm,
    RepairResponse,
    # Responses
    RepairListResponse,
    RepairSubmitResponse,
    CSVImportResponse,
)

__all__ = [
    "UserBase",
    "UserCreate",
    "UserOut",
    "LoginAuth",
    "LoginAuthResponse",
    "SessionOut",
    "SuccessResponse",
    "RepairSource",
    "RepairBase",
    "RepairCreate",
    "RepairImport",
    "RepairForm",
    "RepairResponse",
    "RepairListResponse",
    "RepairSubmitResponse",
    "CSVImportResponse",
]
