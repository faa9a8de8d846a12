"""Repository for payment operations."""

import enum
import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import DeactivationFailed, NotFound, StorageError
from components.payment.models import DeletedPayment, Payment
from components.payment import schemas
from components.user.models import Role

logger = logging.getLogger(__name__)


class UpdateOutcome(str, enum.Enum):
    """Result of a partial update on an existing payment."""
    UPDATED = "updated"
    NOT_MODIFIED = "not_modified"


class PaymentRepository:
    """Repository for payment operations.

    Payments are never physically removed: ``deactivate`` writes an audit
    record and flips the ``active`` flag.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def _rollback(self, message: str, exc: SQLAlchemyError) -> StorageError:
        await self.session.rollback()
        logger.exception(message)
        return StorageError(message, str(exc))

    async def create(self, payment: schemas.PaymentCreate, owner_id: int) -> Payment:
        """Create an active payment owned by ``payment.user_id`` or ``owner_id``."""
        db_payment = Payment(
            payment_date=payment.payment_date,
            amount=payment.amount,
            payment_method=payment.payment_method,
            description=payment.description,
            location=payment.location,
            user_id=payment.user_id if payment.user_id is not None else owner_id,
            active=True,
        )
        self.session.add(db_payment)
        try:
            await self.session.commit()
            await self.session.refresh(db_payment)
        except SQLAlchemyError as exc:
            raise await self._rollback("payment creation failed", exc) from exc

        logger.info("Created payment %s for user %s", db_payment.id, db_payment.user_id)
        return db_payment

    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID regardless of its active flag."""
        result = await self.session.execute(
            select(Payment).where(Payment.id == payment_id)
        )
        return result.scalar_one_or_none()

    async def list_active(
        self,
        caller_id: int,
        caller_role: Role,
        requested_user_id: Optional[int] = None,
    ) -> List[Payment]:
        """
        List active payments.

        A ``usuario`` caller always gets its own payments and the requested
        user filter is ignored. Other roles get the requested user's payments,
        falling back to their own.
        """
        if caller_role == Role.USUARIO or requested_user_id is None:
            owner_id = caller_id
        else:
            owner_id = requested_user_id

        try:
            result = await self.session.execute(
                select(Payment)
                .where(Payment.user_id == owner_id, Payment.active.is_(True))
                .order_by(Payment.id)
            )
        except SQLAlchemyError as exc:
            raise await self._rollback("payment fetch failed", exc) from exc
        return list(result.scalars().all())

    async def update(self, payment_id: int, payment: schemas.PaymentUpdate) -> UpdateOutcome:
        """Apply a partial update, reporting NOT_MODIFIED when nothing changes."""
        try:
            db_payment = await self.get_by_id(payment_id)
        except SQLAlchemyError as exc:
            raise await self._rollback("payment update failed", exc) from exc
        if db_payment is None:
            raise NotFound()

        changes = {
            field: value
            for field, value in payment.changes().items()
            if getattr(db_payment, field) != value
        }
        if not changes:
            return UpdateOutcome.NOT_MODIFIED

        for field, value in changes.items():
            setattr(db_payment, field, value)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._rollback("payment update failed", exc) from exc

        logger.info("Updated payment %s fields %s", payment_id, sorted(changes))
        return UpdateOutcome.UPDATED

    async def deactivate(self, payment_id: int, actor_id: int) -> DeletedPayment:
        """
        Soft delete a payment.

        Two steps in one transaction:
        1. write the DeletedPayment audit record and flush it;
        2. set ``active`` to False and stamp ``deleted_at``.

        If step 1 fails the transaction is rolled back, the payment keeps its
        flag and DeactivationFailed is raised. Deactivating an inactive
        payment is allowed and writes another audit record.
        """
        try:
            db_payment = await self.get_by_id(payment_id)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise DeactivationFailed(error=str(exc)) from exc
        if db_payment is None:
            raise NotFound()

        audit = DeletedPayment(payment_id=db_payment.id, deleted_by=actor_id)
        self.session.add(audit)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Audit record for payment %s could not be written", payment_id)
            raise DeactivationFailed(error=str(exc)) from exc

        db_payment.active = False
        db_payment.deleted_at = func.now()
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Deactivation of payment %s failed", payment_id)
            raise DeactivationFailed(error=str(exc)) from exc

        await self.session.refresh(audit)
        await self.session.refresh(db_payment)
        logger.info("Payment %s deactivated by user %s", payment_id, actor_id)
        return audit

    async def audit_trail(self, payment_id: int) -> List[DeletedPayment]:
        """Get the deactivation records of a payment, oldest first."""
        result = await self.session.execute(
            select(DeletedPayment)
            .where(DeletedPayment.payment_id == payment_id)
            .order_by(DeletedPayment.id)
        )
        return list(result.scalars().all())
