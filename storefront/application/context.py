"""Per-request context passed from the API layer into use cases."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    """
    website_id: tenant the request is served for (always explicit)
    session_owner_id: user id of the authenticated session, if any
    """
    website_id: int
    session_owner_id: Optional[int] = None
