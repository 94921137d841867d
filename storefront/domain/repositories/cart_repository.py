"""
Cart Repository Interface
=========================

The order service only ever empties a user's saved cart.
"""
from abc import ABC, abstractmethod


class CartRepository(ABC):

    @abstractmethod
    def clear(self, owner_id: int) -> int:
        """
        Delete all cart entries of a user.

        Returns:
            Number of entries removed
        """
        pass
