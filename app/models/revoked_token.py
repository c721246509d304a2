"""
Revoked token model.
Access tokens signed out before they expire.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class RevokedToken(Base):
    """Revoked token model - stores the jti claim of signed-out tokens"""
    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    jti = Column(String(64), nullable=False, unique=True, index=True)
    revoked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<RevokedToken(id={self.id}, jti='{self.jti}')>"
