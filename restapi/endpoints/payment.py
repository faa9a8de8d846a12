"""Payment endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.access.policy import Identity, Operation
from components.core import schemas as core_schemas
from components.core.init_db import get_db
from components.payment.repository import PaymentRepository, UpdateOutcome
from components.payment import schemas
from restapi.endpoints.auth import require

router = APIRouter(
    prefix="/payments",
    tags=["payments"],
    responses={
        401: {"model": core_schemas.ErrorResponse, "description": "Role not allowed"},
        403: {"model": core_schemas.ErrorResponse, "description": "Missing or invalid token"},
        500: {"model": core_schemas.ErrorResponse, "description": "Storage failure"},
    },
)


@router.post("", response_model=schemas.Payment, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment: schemas.PaymentCreate,
    db: AsyncSession = Depends(get_db),
    caller: Identity = Depends(require(Operation.CREATE_PAYMENT)),
):
    """Create a payment. Without ``user_id`` the caller owns it."""
    repo = PaymentRepository(db)
    return await repo.create(payment, owner_id=caller.user_id)


@router.get("", response_model=List[schemas.Payment])
async def list_payments(
    user_id: Optional[int] = Query(None, description="Owner to list, ignored for role usuario"),
    db: AsyncSession = Depends(get_db),
    caller: Identity = Depends(require(Operation.LIST_PAYMENTS)),
):
    """List active payments."""
    repo = PaymentRepository(db)
    return await repo.list_active(caller.user_id, caller.role, requested_user_id=user_id)


@router.put(
    "/{payment_id}",
    response_model=core_schemas.Message,
    responses={
        304: {"description": "Payment not modified"},
        404: {"model": core_schemas.ErrorResponse, "description": "Payment not found"},
    },
)
async def update_payment(
    payment_id: int,
    payment: schemas.PaymentUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Identity = Depends(require(Operation.UPDATE_PAYMENT)),
):
    """Partially update a payment."""
    repo = PaymentRepository(db)
    outcome = await repo.update(payment_id, payment)
    if outcome is UpdateOutcome.NOT_MODIFIED:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)
    return core_schemas.Message(message="payment updated successfully")


@router.delete(
    "/{payment_id}",
    response_model=core_schemas.Message,
    responses={404: {"model": core_schemas.ErrorResponse, "description": "Payment not found"}},
)
async def deactivate_payment(
    payment_id: int,
    db: AsyncSession = Depends(get_db),
    caller: Identity = Depends(require(Operation.DEACTIVATE_PAYMENT)),
):
    """Soft delete a payment, recording who deactivated it."""
    repo = PaymentRepository(db)
    await repo.deactivate(payment_id, actor_id=caller.user_id)
    return core_schemas.Message(message="payment deleted successfully")
