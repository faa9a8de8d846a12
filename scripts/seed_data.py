"""Script to seed test data into the database."""

from datetime import date
from decimal import Decimal
import asyncio
import logging

from sqlalchemy import delete

from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.core.log_config import configure_logging
from components.payment.models import DeletedPayment, Payment
from components.payment.repository import PaymentRepository
from components.payment.schemas import PaymentCreate
from components.user.models import Login, Role, User
from components.user.repository import UserRepository
from components.user.schemas import UserCreate

logger = logging.getLogger("seed_data")

USERS = [
    UserCreate(name="Super", email="super@example.com", password="password123", role=Role.SUPER),
    UserCreate(name="Admin", email="admin@example.com", password="password123", role=Role.ADMIN),
    UserCreate(name="Juan", email="juan@example.com", password="password123", role=Role.USUARIO),
]


async def seed_data(db_manager: DatabaseManager) -> None:
    """Seed one user per role and a few payments for the regular user."""
    await db_manager.create_tables()
    async with db_manager.get_db() as db:
        # Clear existing data
        for model in (DeletedPayment, Payment, Login, User):
            await db.execute(delete(model))
        await db.commit()

        users = {}
        for user_in in USERS:
            users[user_in.role] = await UserRepository(db).create(user_in)

        owner = users[Role.USUARIO]
        admin = users[Role.ADMIN]
        payments = PaymentRepository(db)
        created = []
        for day, amount, method in [(1, "100.00", "card"), (5, "45.50", "cash"), (12, "230.10", "transfer")]:
            created.append(await payments.create(
                PaymentCreate(
                    payment_date=date(2024, 10, day),
                    amount=Decimal(amount),
                    payment_method=method,
                    description=f"Seed payment {day}",
                    location="Main office",
                ),
                owner_id=owner.id,
            ))

        # One deactivated payment so the audit table is not empty
        await payments.deactivate(created[-1].id, actor_id=admin.id)
        logger.info("Seeded %d users and %d payments", len(users), len(created))


async def main() -> None:
    configure_logging(get_settings().LOG_LEVEL)
    db_manager = DatabaseManager()
    try:
        await seed_data(db_manager)
    finally:
        await db_manager.dispose()


if __name__ == "__main__":
    asyncio.run(main())
