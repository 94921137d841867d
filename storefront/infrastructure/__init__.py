"""
Infrastructure Layer
====================

Concrete implementations of the domain repository interfaces.

Contains:
- db: MongoDB repositories and the transactional unit of work
"""
