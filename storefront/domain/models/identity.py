"""
Identity Model
==============

A registered storefront user as returned by the identity store.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Identity:
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
