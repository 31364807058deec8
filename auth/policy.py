"""
auth/policy.py -- Ownership checks for mutating routes.

Routes are either public or protected; protected ones declare
Depends(get_current_user). Beyond that, the service historically does not
compare the caller with the owner of the target: any authenticated user may
delete any account or any author's posts. That gap is kept by default and
closed by Settings.enforce_ownership.

Layer rule: no imports from api/ or blog/.
"""

from __future__ import annotations

import logging

from auth.models import User
from core.errors import Forbidden

logger = logging.getLogger("blogapi.auth")


def require_owner(actor: User, owner_id: str, enforce: bool) -> None:
    """Raise Forbidden if enforce is set and actor is not owner_id.

    With enforce=False a mismatch is only logged.
    """
    if actor.id == owner_id:
        return
    if enforce:
        raise Forbidden()
    logger.warning("User %s is mutating resources owned by %s (ownership not enforced)", actor.id, owner_id)
