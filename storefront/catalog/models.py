# Module: storefront/catalog/models.py
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

def to_decimal(value: Any) -> Decimal:
    """
    Prix en Decimal (str|int|float acceptés).
    - Retourne Decimal("0") si parsing impossible.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return parsed if parsed.is_finite() else Decimal("0")

def to_int(value: Any, default: int = 0) -> int:
    """Entier tronqué ("5.5" -> 5); `default` si illisible."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, OverflowError):
        return default

@dataclass(frozen=True)
class Batch:
    batch_id: Any
    batch_number: Optional[str]
    quantity_available: int
    price: Decimal
    expiry_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batchId": self.batch_id,
            "batchNumber": self.batch_number,
            "quantityAvailable": self.quantity_available,
            "price": float(self.price),
            "expiryDate": self.expiry_date,
        }

@dataclass(frozen=True)
class Offer:
    offer_id: str
    vaccine_id: Any
    name: str
    mrp: Decimal
    image_url: Optional[str]
    batch: Batch

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offerId": self.offer_id,
            "vaccineId": self.vaccine_id,
            "name": self.name,
            "mrp": float(self.mrp),
            "imageUrl": self.image_url,
            "batch": self.batch.to_dict(),
        }
