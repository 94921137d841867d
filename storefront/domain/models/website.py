"""Tenant (storefront instance) that scopes orders, products and settings."""
from dataclasses import dataclass


@dataclass
class Website:
    id: int
    name: str
