"""Customer repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.dtos import CustomerInfoDTO
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_phone(self, phone: str) -> Optional[Customer]:
        """Retrieve a customer by normalised phone number."""

    @abstractmethod
    def upsert_by_phone(
        self,
        info: CustomerInfoDTO,
        wilaya_id: Optional[int] = None,
        baladiya_id: Optional[int] = None,
        address: str = "",
    ) -> Tuple[Customer, bool]:
        """Return the customer with ``info.phone``, creating it if absent.

        An existing customer is returned unmodified.  The boolean is
        ``True`` when a new customer was created.
        """
