"""Repository implementations for DynamoDB operations.

Repositories provide a clean abstraction over the store client,
making request handling independent of the persistence layer.
"""

from app.db.repositories.product import ProductRepository

__all__ = [
    "ProductRepository",
]
