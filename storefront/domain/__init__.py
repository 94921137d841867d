"""
Domain Layer
============

Core business logic and domain models.
This layer has no dependencies on external frameworks or infrastructure.

Contains:
- Models: orders, line items and the external entities orders refer to
- Repository Interfaces: Abstract contracts for data access and the unit of work
- Exceptions: the order error taxonomy
"""
