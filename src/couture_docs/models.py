"""Read-only input records for the three document kinds."""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .formatting import to_date

DateValue = Union[date, datetime, str, None]


class MeasurementUnit(Enum):
    CM = "cm"
    INCHES = "inches"

    @classmethod
    def parse(cls, value: Union[str, "MeasurementUnit", None]) -> "MeasurementUnit":
        if value is None or value == "":
            return cls.CM
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"unknown measurement unit {value!r}, expected 'cm' or 'inches'") from None


def _known_keys(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the keys that are dataclass fields of cls."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}


def _as_datetime(value: DateValue) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _as_str(value: Any) -> Optional[str]:
    """Measurement values are opaque display strings; numbers are kept as written."""
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class Customer:
    name: Optional[str] = None
    phone: str = ""
    email: Optional[str] = None
    whatsapp: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    date_of_birth: Optional[date] = None
    referral_source: Optional[str] = None  # "How did you hear about us"
    photo: Optional[str] = None            # Local path or http(s) URL

    @property
    def display_name(self) -> str:
        return self.name or self.phone

    @property
    def location(self) -> str:
        if not self.city:
            return ""
        return f"{self.city}, {self.country}" if self.country else self.city

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Customer":
        values = _known_keys(cls, data)
        values["phone"] = str(values.get("phone") or "")
        values["date_of_birth"] = to_date(values.get("date_of_birth"))
        return cls(**values)


@dataclass(frozen=True)
class SleeveLengths:
    """LONGUEUR DES MANCHES."""
    short_sleeve: Optional[str] = None
    elbow_length: Optional[str] = None
    three_quarter: Optional[str] = None
    long_sleeve: Optional[str] = None

    def sub_fields(self) -> List[Tuple[str, Optional[str]]]:
        return [
            ("Manches courtes", self.short_sleeve),
            ("Niveau 3/4", self.three_quarter),
            ("Avant les coudes", self.elbow_length),
            ("Manches longues", self.long_sleeve),
        ]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SleeveLengths":
        return cls(**{k: _as_str(v) for k, v in _known_keys(cls, data).items()})


@dataclass(frozen=True)
class HemLengths:
    """Dress or skirt length options, shortest to longest."""
    before_knee: Optional[str] = None
    knee_level: Optional[str] = None
    after_knee: Optional[str] = None
    mid_calf: Optional[str] = None
    ankle: Optional[str] = None
    extra_long: Optional[str] = None

    def sub_fields(self) -> List[Tuple[str, Optional[str]]]:
        return [
            ("Avant les genoux", self.before_knee),
            ("Mi-mollets", self.mid_calf),
            ("Au niveau des genoux", self.knee_level),
            ("Niveau des chevilles", self.ankle),
            ("Apres les genoux (crayon)", self.after_knee),
            ("Tres longue", self.extra_long),
        ]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "HemLengths":
        return cls(**{k: _as_str(v) for k, v in _known_keys(cls, data).items()})


# Single-value measurements in sheet order, with their printed labels
STANDARD_MEASUREMENTS = [
    ("back", "DOS"),
    ("front_width", "CARRURE DEVANT"),
    ("back_width", "CARRURE DERRIERE"),
    ("shoulder", "EPAULE"),
    ("shoulder_to_sleeve", "EPAULE MANCHE"),
    ("chest", "POITRINE"),
    ("waist", "TOUR DE TAILLE"),
    ("waist_length", "LONGUEUR DETAILLE"),
    ("hips", "BASSIN"),
    ("arm_circumference", "TOUR DE MANCHE"),
    ("wrist", "POIGNETS"),
    ("darts", "PINCES"),
    ("total_length", "LONGUEUR TOTALE"),
    ("tunic_length", "LONGUEUR TUNIQUE"),
    ("belt", "CEINTURE"),
    ("trouser_length", "LONGUEUR PANTALON"),
    ("hem_width", "FRAPPE"),
    ("thigh", "CUISSE"),
    ("knee", "GENOUX"),
]


@dataclass(frozen=True)
class MeasurementRecord:
    measured_on: Optional[date] = None
    unit: MeasurementUnit = MeasurementUnit.CM

    # Upper body
    back: Optional[str] = None
    front_width: Optional[str] = None
    back_width: Optional[str] = None
    shoulder: Optional[str] = None
    shoulder_to_sleeve: Optional[str] = None
    chest: Optional[str] = None
    waist: Optional[str] = None
    waist_length: Optional[str] = None
    hips: Optional[str] = None

    # Arms and torso
    sleeves: SleeveLengths = field(default_factory=SleeveLengths)
    arm_circumference: Optional[str] = None
    wrist: Optional[str] = None
    darts: Optional[str] = None
    total_length: Optional[str] = None
    dress: HemLengths = field(default_factory=HemLengths)
    tunic_length: Optional[str] = None
    belt: Optional[str] = None

    # Lower body
    trouser_length: Optional[str] = None
    hem_width: Optional[str] = None
    thigh: Optional[str] = None
    knee: Optional[str] = None
    skirt: HemLengths = field(default_factory=HemLengths)

    notes: Optional[str] = None
    taken_by: Optional[str] = None

    def value_of(self, name: str) -> Optional[str]:
        return getattr(self, name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MeasurementRecord":
        values = _known_keys(cls, data)
        for name, _ in STANDARD_MEASUREMENTS:
            if name in values:
                values[name] = _as_str(values[name])
        values["measured_on"] = to_date(values.get("measured_on"))
        values["unit"] = MeasurementUnit.parse(values.get("unit"))
        values["sleeves"] = SleeveLengths.from_dict(values.get("sleeves"))
        values["dress"] = HemLengths.from_dict(values.get("dress"))
        values["skirt"] = HemLengths.from_dict(values.get("skirt"))
        return cls(**values)


@dataclass(frozen=True)
class OrderItem:
    garment_type: str
    quantity: int = 1
    unit_price: float = 0
    status: str = "PENDING"
    custom_type: Optional[str] = None
    description: Optional[str] = None
    tailor: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @property
    def display_type(self) -> str:
        if self.custom_type:
            return f"{self.garment_type} ({self.custom_type})"
        return self.garment_type

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(**_known_keys(cls, data))


@dataclass(frozen=True)
class Payment:
    amount: float
    payment_type: str = "DEPOSIT"
    payment_method: Optional[str] = None
    paid_at: Optional[date] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Payment":
        values = _known_keys(cls, data)
        values["paid_at"] = to_date(values.get("paid_at"))
        return cls(**values)


@dataclass(frozen=True)
class CustomOrderRecord:
    order_number: str
    customer: Customer
    status: str = "PENDING"
    priority: str = "NORMAL"
    order_date: Optional[date] = None
    pickup_date: Optional[date] = None
    customer_deadline: Optional[date] = None
    items: List[OrderItem] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    total_cost: float = 0
    material_cost: float = 0
    notes: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def total_paid(self) -> float:
        return sum(p.amount for p in self.payments)

    @property
    def grand_total(self) -> float:
        return self.total_cost + self.material_cost

    @property
    def balance(self) -> float:
        """Outstanding amount; positive while the customer still owes money."""
        return self.grand_total - self.total_paid

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomOrderRecord":
        values = _known_keys(cls, data)
        values["order_number"] = str(values.get("order_number", ""))
        values["customer"] = Customer.from_dict(values.get("customer") or {})
        for key in ("order_date", "pickup_date", "customer_deadline"):
            values[key] = to_date(values.get(key))
        values["items"] = [OrderItem.from_dict(i) for i in values.get("items") or []]
        values["payments"] = [Payment.from_dict(p) for p in values.get("payments") or []]
        return cls(**values)


@dataclass(frozen=True)
class MaterialMovement:
    """Material handed out for one order."""
    material_name: str
    unit: str = ""
    quantity: float = 0
    unit_price: float = 0
    total_cost: float = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MaterialMovement":
        values = _known_keys(cls, data)
        values["created_at"] = _as_datetime(values.get("created_at"))
        return cls(**values)


@dataclass(frozen=True)
class ProductionSheetRecord:
    order_number: str
    customer: Customer
    order_date: Optional[date] = None
    status: str = "PENDING"
    items: List[OrderItem] = field(default_factory=list)
    material_movements: List[MaterialMovement] = field(default_factory=list)
    notes: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def garment_summary(self) -> str:
        return ", ".join(item.display_type for item in self.items)

    @property
    def tailors(self) -> List[str]:
        """Assigned tailors, first appearance order, without duplicates."""
        seen: List[str] = []
        for item in self.items:
            if item.tailor and item.tailor not in seen:
                seen.append(item.tailor)
        return seen

    @property
    def materials_total(self) -> float:
        return sum(m.total_cost for m in self.material_movements)

    @property
    def first_handoff(self) -> Optional[datetime]:
        """When material was first handed to the tailor."""
        dates = [m.created_at for m in self.material_movements if m.created_at is not None]
        return min(dates) if dates else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductionSheetRecord":
        values = _known_keys(cls, data)
        values["order_number"] = str(values.get("order_number", ""))
        values["customer"] = Customer.from_dict(values.get("customer") or {})
        values["order_date"] = to_date(values.get("order_date"))
        values["items"] = [OrderItem.from_dict(i) for i in values.get("items") or []]
        values["material_movements"] = [
            MaterialMovement.from_dict(m) for m in values.get("material_movements") or []
        ]
        return cls(**values)
