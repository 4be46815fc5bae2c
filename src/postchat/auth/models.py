"""
postchat.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, decoded from the bearer token.
    """

    user_id: uuid.UUID


def principal_from_claims(payload: dict) -> Principal:
    """
    Build a Principal from validated JWT claims. Raises ValueError when `sub`
    is not a user id.
    """

    return Principal(user_id=uuid.UUID(str(payload.get("sub", ""))))
