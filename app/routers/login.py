"""
Account and session API endpoints.

Create an account, sign in for a bearer token, sign out, inspect the session.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.auth import get_password_hash, verify_password, create_access_token
from app.models.user import User
from app.schemas.login import (
    UserCreate,
    UserOut,
    LoginAuth,
    LoginAuthResponse,
    SessionOut,
    SuccessResponse,
)
from app.services.session_provider import JwtSessionProvider

router = APIRouter(prefix="/auth", tags=["Auth"])
security = HTTPBearer(auto_error=False)


def get_session_provider(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> JwtSessionProvider:
    token = credentials.credentials if credentials else None
    return JwtSessionProvider(db, token)


def _not_authenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    Create a new account.

    Args:
        user_data: Name, email and plain text password
        db: Database session

    Returns:
        Created user (without password)

    Raises:
        HTTPException 400: If email already exists
    """
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = User(
        name=user_data.name,
        email=user_data.email,
        password=get_password_hash(user_data.password)
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    return new_user


@router.post("/login", response_model=LoginAuthResponse)
def login(login_data: LoginAuth, db: Session = Depends(get_db)):
    """
    Authenticate a user and return an access token.

    Raises:
        HTTPException 401: If credentials are invalid
    """
    user = db.query(User).filter(User.email == login_data.email).first()
    if not user or not verify_password(login_data.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={
        "user_id": user.id,
        "email": user.email,
        "name": user.name,
    })

    return LoginAuthResponse(
        access_token=access_token,
        token_type="bearer",
        user=user
    )


@router.post("/logout", response_model=SuccessResponse)
def logout(provider: JwtSessionProvider = Depends(get_session_provider)):
    """Revoke the bearer token used for this request."""
    if provider.get_session() is None:
        raise _not_authenticated()

    provider.sign_out()
    return SuccessResponse(message="Signed out")


@router.get("/me", response_model=SessionOut)
def current_session(provider: JwtSessionProvider = Depends(get_session_provider)):
    """Claims of the current session."""
    session = provider.get_session()
    if session is None:
        raise _not_authenticated()

    return SessionOut(
        user_id=session["user_id"],
        email=session["email"],
        name=session["name"],
    )
