"""
User model for database operations.
"""

from sqlalchemy import Column, Integer, String
from app.core.database import Base


class User(Base):
    """
    User table model.

    Table: users
    Accounts allowed to open the repair log. Passwords are bcrypt hashes.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"
