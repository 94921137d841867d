"""
Resolve Identity Use Case
=========================

Decides who owns an order being placed: a verified registered user, or
nobody (guest checkout).
"""
import logging
from enum import Enum
from typing import Optional

from storefront.domain.exceptions import IdentityUnresolvable
from storefront.domain.models.identity import Identity
from storefront.domain.repositories.identity_repository import IdentityRepository

logger = logging.getLogger(__name__)


class ClaimSource(str, Enum):
    """Where a claimed owner id came from."""
    SESSION = "session"  # authenticated session forwarded by the gateway
    BODY = "body"  # user_id field of the checkout form


class ResolveIdentityUseCase:
    """
    Use case for resolving the owner of a checkout.

    A claim that cannot be verified (unknown id, identity store down) is
    downgraded to guest checkout so that a stale session never blocks a
    sale. With strict=True a claim coming from the authenticated session
    must verify, otherwise IdentityUnresolvable is raised. Requests with
    no claim at all always take the guest path.
    """

    def __init__(self, identity_repository: IdentityRepository, strict: bool = False):
        """
        Initialize use case with repository.

        Args:
            identity_repository: Read access to registered users
            strict: Reject unverifiable session claims instead of downgrading
        """
        self._repository = identity_repository
        self._strict = strict

    def execute(
        self,
        claimed_owner_id: Optional[int],
        source: ClaimSource = ClaimSource.BODY,
    ) -> Optional[Identity]:
        """
        Execute the resolve identity use case.

        Args:
            claimed_owner_id: Owner id claimed by the request, if any
            source: Where the claim came from

        Returns:
            The verified identity, or None for a guest checkout

        Raises:
            IdentityUnresolvable: strict mode and an unverifiable session claim
        """
        if claimed_owner_id is None:
            return None

        try:
            identity = self._repository.find_by_id(claimed_owner_id)
            reason = "not found"
        except Exception as e:
            logger.warning("Identity lookup for %s failed: %s", claimed_owner_id, e, exc_info=True)
            identity = None
            reason = f"lookup failed: {e}"

        if identity is not None:
            return identity

        if self._strict and source is ClaimSource.SESSION:
            raise IdentityUnresolvable(claimed_owner_id, reason)

        logger.warning(
            "User ID %s (%s) could not be verified (%s). Treating as guest.",
            claimed_owner_id, source.value, reason,
        )
        return None
