from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from modules.delivery.models import DeliveryZone
from modules.locations.data import DEFAULT_ESTIMATED_DAYS, WILAYAS
from modules.locations.models import Baladiya, Wilaya


class Command(BaseCommand):
    help = "Seed the 58 wilayas, their delivery zones and (optionally) baladiyas."

    def add_arguments(self, parser):
        parser.add_argument(
            "--communes",
            type=Path,
            help=(
                "JSON file of communes: a list (or list of lists) of objects "
                "with id, commune_name, wilaya_code."
            ),
        )
        parser.add_argument(
            "--reset-costs",
            action="store_true",
            help="Overwrite delivery zone costs with the reference values.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding location catalog...")

        wilayas_created = self._seed_wilayas()
        zones_created = self._seed_zones(reset_costs=options["reset_costs"])
        baladiyas = 0
        if options.get("communes"):
            baladiyas = self._seed_baladiyas(options["communes"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"wilayas={wilayas_created}, "
                f"zones={zones_created}, "
                f"baladiyas={baladiyas}"
            )
        )

    def _seed_wilayas(self) -> int:
        self.stdout.write("Creating wilayas...")
        created = 0
        for seed in WILAYAS:
            _, was_created = Wilaya.objects.update_or_create(
                id=seed.id,
                defaults={
                    "name": seed.name,
                    "name_latin": seed.name_latin,
                    "code": seed.code,
                },
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating wilayas... Done!"))
        return created

    def _seed_zones(self, reset_costs: bool = False) -> int:
        self.stdout.write("Creating delivery zones...")
        created = 0
        for seed in WILAYAS:
            costs = {
                "home_delivery_cost": seed.home_delivery_cost,
                "office_delivery_cost": seed.office_delivery_cost,
            }
            zone, was_created = DeliveryZone.objects.get_or_create(
                wilaya_id=seed.id,
                defaults={
                    **costs,
                    "estimated_days": DEFAULT_ESTIMATED_DAYS,
                    "is_active": True,
                },
            )
            if not was_created and reset_costs:
                for field, value in costs.items():
                    setattr(zone, field, value)
                zone.save(update_fields=list(costs))
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating delivery zones... Done!"))
        return created

    def _seed_baladiyas(self, path: Path) -> int:
        self.stdout.write(f"Loading communes from {path}...")
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise CommandError(f"Cannot read communes file {path}: {exc}") from exc

        count = 0
        for commune in _flatten(raw):
            wilaya_code = str(commune["wilaya_code"]).zfill(2)
            wilaya_id = int(wilaya_code)
            if not Wilaya.is_valid_id(wilaya_id):
                self.stdout.write(
                    self.style.WARNING(f"Skipping commune {commune['id']}: bad wilaya.")
                )
                continue
            Baladiya.objects.update_or_create(
                id=int(commune["id"]),
                defaults={
                    "name": commune["commune_name"].strip(),
                    "name_latin": (commune.get("commune_name_ascii") or "").strip(),
                    "postal_code": str(commune.get("post_code") or commune["id"]).strip(),
                    "wilaya_id": wilaya_id,
                },
            )
            count += 1
        self.stdout.write(self.style.SUCCESS("Loading communes... Done!"))
        return count


def _flatten(raw: Any) -> Iterable[dict]:
    for entry in raw:
        if isinstance(entry, list):
            yield from _flatten(entry)
        else:
            yield entry
