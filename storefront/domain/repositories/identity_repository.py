"""
Identity Repository Interface
=============================

Read access to registered users.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from storefront.domain.models.identity import Identity


class IdentityRepository(ABC):
    """Abstract repository over the identity store."""

    @abstractmethod
    def find_by_id(self, identity_id: int) -> Optional[Identity]:
        """
        Find a registered user by ID.

        Returns:
            Identity if found, None otherwise
        """
        pass

    @abstractmethod
    def find_by_ids(self, identity_ids: Iterable[int]) -> Dict[int, Identity]:
        """Find several users at once, keyed by id."""
        pass
