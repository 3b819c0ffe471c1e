"""Product repository interface.

Extends ``IRepository[Product]`` with the locking read and the two stock
mutations used by order creation and cancellation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: Any) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def decrement_stock(self, id: Any, quantity: int) -> bool:
        """Atomically subtract ``quantity`` if enough stock remains.

        Returns ``False`` (and changes nothing) when the stock is lower
        than ``quantity`` at the time of the update.
        """

    @abstractmethod
    def release_stock(self, id: Any, quantity: int) -> None:
        """Atomically add ``quantity`` back to the product's stock."""
