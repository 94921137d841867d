"""
Product Model
=============

Catalog product as seen by the order service. The catalog owns the
product lifecycle; orders only read prices and move stock.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Product:
    id: int
    name: str
    price: Decimal
    stock: int = 0
    image_url: Optional[str] = None
    website_id: Optional[int] = None
