"""Website (tenant) lookups used to label orders in listings."""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from storefront.domain.models.website import Website


class WebsiteRepository(ABC):

    @abstractmethod
    def find_by_id(self, website_id: int) -> Optional[Website]:
        pass

    @abstractmethod
    def find_by_ids(self, website_ids: Iterable[int]) -> Dict[int, Website]:
        pass
