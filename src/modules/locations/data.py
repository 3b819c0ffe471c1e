"""Reference data for the 58 wilayas.

One row per wilaya: ``(id, arabic name, latin name, home delivery cost,
stop-desk delivery cost)``.  Costs are in DA and only used to seed the
delivery zones; the ``DeliveryZone`` rows are the source of truth once the
catalog is seeded.
"""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple


class WilayaSeed(NamedTuple):
    id: int
    name: str
    name_latin: str
    home_delivery_cost: Decimal
    office_delivery_cost: Decimal

    @property
    def code(self) -> str:
        return f"{self.id:02d}"


def _row(id: int, name: str, name_latin: str, home: int, office: int) -> WilayaSeed:
    return WilayaSeed(id, name, name_latin, Decimal(home), Decimal(office))


DEFAULT_ESTIMATED_DAYS = 3

WILAYAS: tuple[WilayaSeed, ...] = (
    _row(1, "أدرار", "Adrar", 1200, 800),
    _row(2, "الشلف", "Chlef", 700, 450),
    _row(3, "الأغواط", "Laghouat", 900, 600),
    _row(4, "أم البواقي", "Oum El Bouaghi", 800, 450),
    _row(5, "باتنة", "Batna", 800, 450),
    _row(6, "بجاية", "Béjaïa", 700, 450),
    _row(7, "بسكرة", "Biskra", 900, 600),
    _row(8, "بشار", "Béchar", 1200, 800),
    _row(9, "البليدة", "Blida", 600, 450),
    _row(10, "البويرة", "Bouira", 700, 450),
    _row(11, "تمنراست", "Tamanrasset", 1200, 800),
    _row(12, "تبسة", "Tébessa", 800, 450),
    _row(13, "تلمسان", "Tlemcen", 800, 450),
    _row(14, "تيارت", "Tiaret", 800, 450),
    _row(15, "تيزي وزو", "Tizi Ouzou", 700, 450),
    _row(16, "الجزائر", "Alger", 500, 300),
    _row(17, "الجلفة", "Djelfa", 900, 600),
    _row(18, "جيجل", "Jijel", 700, 450),
    _row(19, "سطيف", "Sétif", 600, 450),
    _row(20, "سعيدة", "Saïda", 800, 450),
    _row(21, "سكيكدة", "Skikda", 700, 450),
    _row(22, "سيدي بلعباس", "Sidi Bel Abbès", 700, 450),
    _row(23, "عنابة", "Annaba", 700, 450),
    _row(24, "قالمة", "Guelma", 800, 450),
    _row(25, "قسنطينة", "Constantine", 700, 450),
    _row(26, "المدية", "Médéa", 600, 450),
    _row(27, "مستغانم", "Mostaganem", 700, 450),
    _row(28, "المسيلة", "M'Sila", 800, 450),
    _row(29, "معسكر", "Mascara", 700, 450),
    _row(30, "ورقلة", "Ouargla", 900, 600),
    _row(31, "وهران", "Oran", 700, 450),
    _row(32, "البيض", "El Bayadh", 900, 600),
    _row(33, "إليزي", "Illizi", 1400, 1000),
    _row(34, "برج بوعريريج", "Bordj Bou Arréridj", 700, 450),
    _row(35, "بومرداس", "Boumerdès", 650, 400),
    _row(36, "الطارف", "El Tarf", 800, 450),
    _row(37, "تندوف", "Tindouf", 1200, 800),
    _row(38, "تيسمسيلت", "Tissemsilt", 800, 450),
    _row(39, "الوادي", "El Oued", 900, 600),
    _row(40, "خنشلة", "Khenchela", 800, 450),
    _row(41, "سوق أهراس", "Souk Ahras", 800, 450),
    _row(42, "تيبازة", "Tipaza", 500, 400),
    _row(43, "ميلة", "Mila", 600, 450),
    _row(44, "عين الدفلى", "Aïn Defla", 600, 450),
    _row(45, "النعامة", "Naâma", 900, 600),
    _row(46, "عين تموشنت", "Aïn Témouchent", 700, 450),
    _row(47, "غرداية", "Ghardaïa", 950, 600),
    _row(48, "غليزان", "Relizane", 700, 450),
    _row(49, "تيميمون", "Timimoun", 1200, 900),
    _row(50, "برج باجي مختار", "Bordj Badji Mokhtar", 1600, 1200),
    _row(51, "أولاد جلال", "Ouled Djellal", 900, 600),
    _row(52, "بني عباس", "Béni Abbès", 1200, 800),
    _row(53, "عين صالح", "In Salah", 1200, 800),
    _row(54, "عين قزام", "In Guezzam", 2000, 1500),
    _row(55, "تقرت", "Touggourt", 900, 600),
    _row(56, "جانت", "Djanet", 2100, 1600),
    _row(57, "المغير", "El M'Ghair", 900, 600),
    _row(58, "المنيعة", "El Meniaa", 950, 600),
)

WILAYAS_BY_ID = {seed.id: seed for seed in WILAYAS}
