"""
Session providers.
Answer "is somebody signed in?" for the repair log and end that session on logout.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.core.auth import decode_access_token
from app.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)


class SessionProvider(ABC):
    """Identity/session capability consumed by the repair log"""

    @abstractmethod
    def get_session(self) -> Optional[dict]:
        """Return the current session claims, or None when nobody is signed in"""

    @abstractmethod
    def sign_out(self) -> None:
        """End the current session"""


class JwtSessionProvider(SessionProvider):
    """
    Session backed by a bearer JWT.

    A token is a session when it decodes, is an access token and its jti has
    not been revoked. Signing out records the jti in revoked_tokens.
    """

    def __init__(self, db: Session, token: Optional[str]):
        self.db = db
        self.token = token

    def get_session(self) -> Optional[dict]:
        if not self.token:
            return None

        try:
            payload = decode_access_token(self.token)
        except HTTPException:
            logger.info("Rejected bearer token: could not validate credentials")
            return None

        jti = payload.get("jti")
        if not jti:
            return None

        revoked = self.db.query(RevokedToken).filter(RevokedToken.jti == jti).first()
        if revoked:
            logger.info(f"Rejected bearer token: {jti} was signed out")
            return None

        return payload

    def sign_out(self) -> None:
        session = self.get_session()
        if session is None:
            return

        try:
            self.db.add(RevokedToken(jti=session["jti"]))
            self.db.commit()
        except IntegrityError:
            # Signed out concurrently by another request
            self.db.rollback()

        logger.info(f"Signed out {session.get('email')}")
