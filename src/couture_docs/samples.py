"""Generate plausible sample records for previewing the sheets."""

from datetime import date, datetime, timedelta
from typing import List, Optional

import numpy as np
from faker import Faker

from .models import (
    STANDARD_MEASUREMENTS, Customer, CustomOrderRecord, HemLengths, MaterialMovement,
    MeasurementRecord, MeasurementUnit, OrderItem, Payment, ProductionSheetRecord,
    SleeveLengths,
)

GARMENT_TYPES = ["Robe", "Boubou", "Ensemble pagne", "Chemise", "Jupe", "Pantalon", "Tunique", "Veste"]
CUSTOM_TYPES = ["Wax", "Bazin", "Kente", "Lin", "Soie", None]
ITEM_STATUSES = ["PENDING", "CUTTING", "SEWING", "FITTING", "FINISHING", "COMPLETED"]
ORDER_STATUSES = ["PENDING", "IN_PRODUCTION", "FITTING", "READY", "DELIVERED"]
PRIORITIES = ["NORMAL", "NORMAL", "URGENT", "VIP"]
PAYMENT_METHODS = ["Especes", "Orange Money", "Wave", "MTN MoMo", "Carte"]
REFERRAL_SOURCES = ["Instagram", "Facebook", "Bouche a oreille", "TikTok", "Passage en boutique"]

# Material name, unit, unit price range (FCFA)
MATERIALS = [
    ("Tissu wax", "m", (2500, 6000)),
    ("Doublure", "m", (1000, 2500)),
    ("Fermeture eclair", "pce", (200, 800)),
    ("Boutons", "pce", (50, 300)),
    ("Fil a coudre", "bob", (300, 700)),
    ("Entoilage", "m", (800, 1800)),
    ("Perles", "sachet", (1000, 3000)),
]


def make_faker(rng: np.random.Generator) -> Faker:
    """French-locale Faker seeded from the generator."""
    fake = Faker("fr_FR")
    fake.seed_instance(int(rng.integers(0, 2**31)))
    return fake


def _round_price(value: float, step: int = 500) -> int:
    return int(round(value / step) * step)


def _length(rng: np.random.Generator, low: float, high: float) -> str:
    return f"{int(rng.integers(low, high))}"


def generate_customer(rng: np.random.Generator, fake: Faker, with_photo: Optional[str] = None) -> Customer:
    phone = f"07{rng.integers(10000000, 99999999)}"
    return Customer(
        name=fake.name(),
        phone=phone,
        email=fake.email(),
        whatsapp=phone if rng.random() > 0.3 else f"05{rng.integers(10000000, 99999999)}",
        city="Abidjan",
        country="Cote d'Ivoire",
        date_of_birth=fake.date_of_birth(minimum_age=18, maximum_age=65),
        referral_source=str(rng.choice(REFERRAL_SOURCES)),
        photo=with_photo,
    )


def generate_measurement_record(
    rng: np.random.Generator,
    fake: Faker,
    measured_on: Optional[date] = None,
) -> MeasurementRecord:
    """Every field filled, with a few compound values like '50 - 45'."""
    values = {}
    for name, _ in STANDARD_MEASUREMENTS:
        value = _length(rng, 15, 110)
        if rng.random() < 0.15:
            value = f"{value} - {_length(rng, 15, 110)}"
        values[name] = value

    def hems() -> HemLengths:
        return HemLengths(
            before_knee=_length(rng, 85, 95),
            knee_level=_length(rng, 95, 102),
            after_knee=_length(rng, 102, 110),
            mid_calf=_length(rng, 110, 120),
            ankle=_length(rng, 125, 135),
            extra_long=_length(rng, 138, 150),
        )

    return MeasurementRecord(
        measured_on=measured_on or fake.date_between(start_date="-30d", end_date="today"),
        unit=MeasurementUnit.CM,
        sleeves=SleeveLengths(
            short_sleeve=_length(rng, 18, 25),
            elbow_length=_length(rng, 28, 34),
            three_quarter=_length(rng, 40, 48),
            long_sleeve=_length(rng, 55, 65),
        ),
        dress=hems(),
        skirt=hems(),
        notes=fake.paragraph(nb_sentences=3),
        taken_by=fake.first_name(),
        **values,
    )


def generate_items(rng: np.random.Generator, fake: Faker, count: int) -> List[OrderItem]:
    tailors = [fake.first_name() for _ in range(3)]
    items = []
    for _ in range(count):
        items.append(OrderItem(
            garment_type=str(rng.choice(GARMENT_TYPES)),
            custom_type=rng.choice(CUSTOM_TYPES),
            quantity=int(rng.integers(1, 4)),
            unit_price=_round_price(float(rng.uniform(8000, 60000))),
            status=str(rng.choice(ITEM_STATUSES)),
            tailor=str(rng.choice(tailors)) if rng.random() > 0.2 else None,
        ))
    return items


def generate_custom_order(
    rng: np.random.Generator,
    fake: Faker,
    num_items: int = 3,
    num_payments: int = 2,
) -> CustomOrderRecord:
    order_date = fake.date_between(start_date="-60d", end_date="today")
    items = generate_items(rng, fake, num_items)
    total_cost = sum(item.line_total for item in items)
    material_cost = _round_price(total_cost * float(rng.uniform(0.05, 0.2)))

    payments = []
    remaining = total_cost + material_cost
    for i in range(num_payments):
        amount = _round_price(remaining * float(rng.uniform(0.2, 0.5)))
        remaining -= amount
        payments.append(Payment(
            amount=amount,
            payment_type="DEPOSIT" if i == 0 else "INSTALLMENT",
            payment_method=str(rng.choice(PAYMENT_METHODS)),
            paid_at=order_date + timedelta(days=int(rng.integers(0, 20))),
            notes=fake.sentence(nb_words=4) if rng.random() > 0.5 else None,
        ))

    return CustomOrderRecord(
        order_number=f"CMD-{order_date:%Y%m}-{rng.integers(1000, 9999)}",
        customer=generate_customer(rng, fake),
        status=str(rng.choice(ORDER_STATUSES)),
        priority=str(rng.choice(PRIORITIES)),
        order_date=order_date,
        pickup_date=order_date + timedelta(days=int(rng.integers(14, 30))),
        customer_deadline=order_date + timedelta(days=int(rng.integers(30, 45))) if rng.random() > 0.3 else None,
        items=items,
        payments=payments,
        total_cost=total_cost,
        material_cost=material_cost,
        notes=fake.paragraph(nb_sentences=2),
        created_by=fake.first_name(),
    )


def generate_production_record(
    rng: np.random.Generator,
    fake: Faker,
    num_materials: int = 4,
) -> ProductionSheetRecord:
    order_date = fake.date_between(start_date="-30d", end_date="today")
    handoff = datetime.combine(order_date, datetime.min.time()) + timedelta(hours=9)

    movements = []
    for _ in range(num_materials):
        name, unit, (low, high) = MATERIALS[int(rng.integers(0, len(MATERIALS)))]
        quantity = int(rng.integers(1, 6))
        unit_price = _round_price(float(rng.uniform(low, high)), step=50)
        movements.append(MaterialMovement(
            material_name=name,
            unit=unit,
            quantity=quantity,
            unit_price=unit_price,
            total_cost=quantity * unit_price,
            notes=fake.word() if rng.random() > 0.6 else None,
            created_at=handoff + timedelta(hours=int(rng.integers(0, 48))),
        ))

    return ProductionSheetRecord(
        order_number=f"CMD-{order_date:%Y%m}-{rng.integers(1000, 9999)}",
        customer=generate_customer(rng, fake),
        order_date=order_date,
        status="IN_PRODUCTION",
        items=generate_items(rng, fake, int(rng.integers(1, 3))),
        material_movements=movements,
        notes=fake.paragraph(nb_sentences=2),
        created_by=fake.first_name(),
    )
