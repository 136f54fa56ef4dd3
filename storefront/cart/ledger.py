"""
Logique panier pure (pas de HTTP, pas de session).
Le ledger est la collection de lignes faisant foi, ordonnée par insertion,
unique par clé (vaccine_id, batch_id).
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from storefront.catalog.models import Batch, Offer
from storefront.errors import CapacityError

LineKey = Tuple[Any, Any]

@dataclass
class CartLine:
    vaccine_id: Any
    batch_id: Any
    name: str
    unit_price: Decimal
    batch_number: Optional[str]
    quantity: int
    quantity_available: int

    @property
    def key(self) -> LineKey:
        return (self.vaccine_id, self.batch_id)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vaccineId": self.vaccine_id,
            "batchId": self.batch_id,
            "name": self.name,
            "unitPrice": float(self.unit_price),
            "batchNumber": self.batch_number,
            "quantity": self.quantity,
            "quantityAvailable": self.quantity_available,
            "subtotal": float(self.subtotal),
        }

def _key_of(line: Any) -> LineKey:
    if isinstance(line, tuple):
        return line
    return (line.vaccine_id, line.batch_id)

# module storefront.cart.ledger
class CartLedger:
    def __init__(self):
        self._lines: List[CartLine] = []

    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, key: LineKey) -> Optional[CartLine]:
        for line in self._lines:
            if line.key == key:
                return line
        return None

    def find(self, vaccine_id: Any, batch_id: Any) -> Optional[CartLine]:
        """Recherche tolérante au type (ids reçus en str depuis une URL)."""
        for line in self._lines:
            if str(line.vaccine_id) == str(vaccine_id) and str(line.batch_id) == str(batch_id):
                return line
        return None

    def add_or_increment(self, offer: Offer, batch: Optional[Batch] = None) -> CartLine:
        """
        Ajoute une offre au panier.
        - Même (vaccin, lot) déjà présent: quantité + 1, sans plafond ici (contrôlé à la mise à jour).
        - Sinon nouvelle ligne à 1, stock disponible figé au moment de l'ajout.
        """
        batch = batch or offer.batch
        existing = self.get((offer.vaccine_id, batch.batch_id))
        if existing:
            existing.quantity += 1
            return existing
        line = CartLine(
            vaccine_id=offer.vaccine_id,
            batch_id=batch.batch_id,
            name=offer.name,
            unit_price=batch.price,
            batch_number=batch.batch_number,
            quantity=1,
            quantity_available=batch.quantity_available,
        )
        self._lines.append(line)
        return line

    def update_quantity(self, line: Any, new_quantity: int) -> Optional[CartLine]:
        """
        - new_quantity <= 0: la ligne est retirée (retourne None)
        - new_quantity > stock figé: CapacityError, ledger inchangé
        - sinon la quantité est remplacée
        """
        key = _key_of(line)
        if new_quantity <= 0:
            self.remove(key)
            return None
        current = self.get(key)
        if current is None:
            return None
        if new_quantity > current.quantity_available:
            raise CapacityError(current.quantity_available)
        current.quantity = new_quantity
        return current

    def remove(self, line: Any) -> Optional[CartLine]:
        key = _key_of(line)
        removed = self.get(key)
        self._lines = [l for l in self._lines if l.key != key]
        return removed

    def clear(self) -> None:
        self._lines = []

    def total(self) -> Decimal:
        return sum((l.subtotal for l in self._lines), Decimal("0"))

    def item_count(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [l.to_dict() for l in self._lines],
            "itemCount": self.item_count(),
            "total": float(self.total()),
        }
