"""
Désérialisation du champ `notes` d'une réservation (instantané JSON du panier).
"""
import json
from typing import Any, Dict, List, Optional, Tuple

# module storefront.bookings.notes
def extract_notes(booking: Dict[str, Any]) -> Tuple[Optional[Any], List[Dict[str, Any]]]:
    """
    Extrait (cart_id, cart_items) depuis booking["notes"].
    - Attend notes = JSON {"cartId": ..., "cartItems": [{"vaccineName": ..., ...}]}
    - Tolérant aux erreurs: retourne (None, []) si parsing JSON échoue.
    """
    raw = (booking or {}).get("notes") if isinstance(booking, dict) else None
    if isinstance(raw, dict):
        data = raw
    else:
        try:
            data = json.loads(raw) if raw else {}
        except (TypeError, ValueError):
            data = {}
    if not isinstance(data, dict):
        return None, []
    items = data.get("cartItems")
    return data.get("cartId"), (items if isinstance(items, list) else [])

def vaccine_names(booking: Dict[str, Any]) -> str:
    """Noms des vaccins de la réservation, séparés par des virgules; sinon vaccineName/vaccine; sinon N/A."""
    _, items = extract_notes(booking)
    names = [str(i.get("vaccineName")) for i in items if isinstance(i, dict) and i.get("vaccineName")]
    if names:
        return ", ".join(names)
    return booking.get("vaccineName") or booking.get("vaccine") or "N/A"
