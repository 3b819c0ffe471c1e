"""Location catalog use cases.

Read-only queries over the wilaya/baladiya catalog plus the combined
search used by the checkout address picker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

import structlog

from modules.locations.exceptions import (
    InvalidBaladiya,
    InvalidSearchQuery,
    InvalidWilaya,
    WilayaNotFound,
)
from modules.locations.models import Wilaya

if TYPE_CHECKING:
    from modules.locations.models import Baladiya
    from modules.locations.repositories.interfaces import ILocationRepository

logger = structlog.get_logger(__name__)

SEARCH_MIN_LENGTH = 2
SEARCH_DEFAULT_LIMIT = 20
SEARCH_MAX_LIMIT = 50


class SearchType:
    WILAYA = "wilaya"
    BALADIYA = "baladiya"
    ALL = "all"

    CHOICES = (WILAYA, BALADIYA, ALL)


class LocationService:
    """Application service for the location catalog."""

    def __init__(self, location_repository: ILocationRepository) -> None:
        self._location_repo = location_repository

    def list_wilayas(self) -> List[Wilaya]:
        return self._location_repo.list_with_counts()

    def get_wilaya(self, wilaya_id: int) -> Wilaya:
        """Return a wilaya with its baladiyas and delivery zone.

        Raises:
            InvalidWilaya: id outside 1-58.
            WilayaNotFound: valid id but not seeded.
        """
        self.validate_wilaya_id(wilaya_id)
        wilaya = self._location_repo.get_with_details(wilaya_id)
        if not wilaya:
            raise WilayaNotFound(f"Wilaya {wilaya_id} not found.")
        return wilaya

    def list_baladiyas(self, wilaya_id: int) -> List[Baladiya]:
        self.validate_wilaya_id(wilaya_id)
        if not self._location_repo.get_by_id(wilaya_id):
            raise WilayaNotFound(f"Wilaya {wilaya_id} not found.")
        return self._location_repo.list_baladiyas(wilaya_id)

    def resolve_address(self, wilaya_id: int, baladiya_id: int) -> tuple[Wilaya, Baladiya]:
        """Resolve a delivery address, checking the baladiya belongs to the wilaya.

        Raises:
            WilayaNotFound: the wilaya does not exist.
            InvalidBaladiya: unknown baladiya or one from another wilaya.
        """
        wilaya = self._location_repo.get_by_id(wilaya_id)
        if not wilaya:
            raise WilayaNotFound(f"Wilaya {wilaya_id} not found.", attr="wilaya_id")
        baladiya = self._location_repo.get_baladiya(baladiya_id)
        if not baladiya or baladiya.wilaya_id != wilaya.id:
            raise InvalidBaladiya(
                f"Baladiya {baladiya_id} does not belong to wilaya {wilaya_id}.",
                attr="baladiya_id",
            )
        return wilaya, baladiya

    def search(
        self,
        query: str,
        type: str = SearchType.ALL,
        limit: int = SEARCH_DEFAULT_LIMIT,
    ) -> Dict[str, List[Any]]:
        """Search wilayas and/or baladiyas by name or code.

        When both kinds are searched the limit is split in half between
        them.  ``limit`` is clamped to 1-50.
        """
        query = (query or "").strip()
        if len(query) < SEARCH_MIN_LENGTH:
            raise InvalidSearchQuery(
                f"Query must be at least {SEARCH_MIN_LENGTH} characters.", attr="q"
            )
        if type not in SearchType.CHOICES:
            type = SearchType.ALL
        limit = max(1, min(limit, SEARCH_MAX_LIMIT))
        per_kind = max(1, limit // 2) if type == SearchType.ALL else limit

        results: Dict[str, List[Any]] = {"wilayas": [], "baladiyas": []}
        if type in (SearchType.WILAYA, SearchType.ALL):
            results["wilayas"] = self._location_repo.search_wilayas(query, per_kind)
        if type in (SearchType.BALADIYA, SearchType.ALL):
            results["baladiyas"] = self._location_repo.search_baladiyas(query, per_kind)

        logger.debug(
            "locations.searched",
            query_length=len(query),
            type=type,
            wilayas=len(results["wilayas"]),
            baladiyas=len(results["baladiyas"]),
        )
        return results

    @staticmethod
    def validate_wilaya_id(wilaya_id: int) -> None:
        if not Wilaya.is_valid_id(wilaya_id):
            raise InvalidWilaya(
                f"Wilaya id must be between {Wilaya.MIN_ID} and {Wilaya.MAX_ID}.",
                attr="wilaya_id",
            )
