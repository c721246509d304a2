"""
Database models for the application.
"""

from app.core.database import Base
from app.models.user import User
from app.models.revoked_token import RevokedToken
from app.models.repair import Repair

__all__ = [
    "Base",
    "User",
    "RevokedToken",
    "Repair",
]
