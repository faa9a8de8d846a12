"""User and login models for the database."""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from components.core.database import Base


class Role(str, enum.Enum):
    """Roles controlling which operations a user may perform."""
    SUPER = "super"
    ADMIN = "admin"
    USUARIO = "usuario"


class User(Base):
    """User model representing an account in the system."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # Hashed password
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USUARIO,
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    payments = relationship("Payment", back_populates="user", foreign_keys="Payment.user_id")
    logins = relationship("Login", back_populates="user")


class Login(Base):
    """Append-only record of successful logins."""
    __tablename__ = "logins"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    login_time = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="logins")
