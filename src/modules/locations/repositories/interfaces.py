"""Location catalog repository interface.

The catalog is read-only at runtime, so ``save`` exists only to satisfy
``IRepository`` and is used by seeding code and tests.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.locations.models import Baladiya, Wilaya


class ILocationRepository(IRepository["Wilaya"]):
    """Repository contract for wilayas and their baladiyas."""

    @abstractmethod
    def get_with_details(self, id: int) -> Optional[Wilaya]:
        """Retrieve a wilaya with baladiyas and delivery zone loaded."""

    @abstractmethod
    def list_with_counts(self) -> List[Wilaya]:
        """All wilayas ordered by id, annotated with ``baladiya_count``."""

    @abstractmethod
    def get_baladiya(self, id: int) -> Optional[Baladiya]:
        """Retrieve a baladiya by its commune code."""

    @abstractmethod
    def list_baladiyas(self, wilaya_id: int) -> List[Baladiya]:
        """Baladiyas of a wilaya, ordered by name."""

    @abstractmethod
    def search_wilayas(self, query: str, limit: int) -> List[Wilaya]:
        """Case-insensitive match on name, latin name or code."""

    @abstractmethod
    def search_baladiyas(self, query: str, limit: int) -> List[Baladiya]:
        """Case-insensitive match on name, latin name or postal code."""
