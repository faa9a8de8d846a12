"""Payment models for the database."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from components.core.database import Base


class Payment(Base):
    """Payment model. Rows are never removed, only deactivated."""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    payment_date = Column(Date, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="payments", foreign_keys=[user_id])
    deletions = relationship(
        "DeletedPayment",
        back_populates="payment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class DeletedPayment(Base):
    """Audit record written for every deactivation of a payment."""
    __tablename__ = "deleted_payments"

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False)
    deleted_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    deleted_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    payment = relationship("Payment", back_populates="deletions")
