"""
Role based access policy.

Each gated operation maps to the set of roles allowed to run it. The gate
resolves the caller from the Authorization header, then checks the role
against this table before any payment is looked up, so a denied caller
never learns whether a payment exists.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from components.core.config import Settings, get_settings
from components.core.exceptions import AuthenticationRequired, Forbidden, InvalidToken
from components.core.security import verify_token
from components.user.models import Role

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    CREATE_PAYMENT = "create_payment"
    LIST_PAYMENTS = "list_payments"
    UPDATE_PAYMENT = "update_payment"
    DEACTIVATE_PAYMENT = "deactivate_payment"


@dataclass(frozen=True)
class Identity:
    """Caller resolved from a verified token."""
    user_id: int
    role: Role


def permission_table(settings: Optional[Settings] = None) -> Dict[Operation, FrozenSet[Role]]:
    """Build the operation -> permitted roles table."""
    settings = settings or get_settings()
    return {
        Operation.CREATE_PAYMENT: frozenset({Role.ADMIN, Role.SUPER}),
        Operation.LIST_PAYMENTS: frozenset({Role.ADMIN, Role.SUPER, Role.USUARIO}),
        Operation.UPDATE_PAYMENT: frozenset(Role(role) for role in settings.UPDATE_PAYMENT_ROLES),
        Operation.DEACTIVATE_PAYMENT: frozenset({Role.ADMIN, Role.SUPER}),
    }


def extract_token(authorization: Optional[str]) -> str:
    """Take the token part of an ``Authorization: <scheme> <token>`` header."""
    if not authorization:
        raise AuthenticationRequired()
    parts = authorization.split()
    if len(parts) < 2:
        raise AuthenticationRequired()
    return parts[1]


def authenticate(authorization: Optional[str]) -> Identity:
    """Resolve the caller identity from the Authorization header."""
    payload = verify_token(extract_token(authorization))
    if payload is None:
        logger.warning("Rejected unverifiable token")
        raise InvalidToken()

    try:
        return Identity(user_id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError):
        logger.warning("Rejected token with malformed claims")
        raise InvalidToken()


def authorize(
    identity: Identity,
    operation: Operation,
    table: Optional[Dict[Operation, FrozenSet[Role]]] = None,
) -> Identity:
    """Check the caller role against the permitted roles of an operation."""
    table = table if table is not None else permission_table()
    if identity.role not in table[operation]:
        logger.warning(
            "User %s with role %s denied %s", identity.user_id, identity.role.value, operation.value
        )
        raise Forbidden()
    return identity
