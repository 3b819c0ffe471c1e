"""Django ORM implementation of the Customer repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.customers.dtos import CustomerInfoDTO
from modules.customers.models import Customer, mask_phone, normalize_phone
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: Any) -> Optional[Customer]:
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        queryset = Customer.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        entity.save()
        return entity

    def get_by_phone(self, phone: str) -> Optional[Customer]:
        return Customer.objects.filter(phone=normalize_phone(phone)).first()

    def upsert_by_phone(
        self,
        info: CustomerInfoDTO,
        wilaya_id: Optional[int] = None,
        baladiya_id: Optional[int] = None,
        address: str = "",
    ) -> Tuple[Customer, bool]:
        # get_or_create retries the lookup if a concurrent insert wins the race
        customer, created = Customer.objects.get_or_create(
            phone=normalize_phone(info.phone),
            defaults={
                "name": info.name,
                "email": info.email or "",
                "wilaya_id": wilaya_id,
                "baladiya_id": baladiya_id,
                "address": address,
            },
        )
        logger.info(
            "customer.created" if created else "customer.reused",
            customer_id=str(customer.id),
            phone=mask_phone(customer.phone),
        )
        return customer, created
