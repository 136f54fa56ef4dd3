"""Couche service « Mes commandes »: réservations de l'utilisateur connecté."""
from typing import Any, Dict, List
import logging

from storefront.auth.service import SessionState
from storefront.errors import AuthRequired, ValidationError
from .notes import extract_notes, vaccine_names
from .repository import BookingRepository

logger = logging.getLogger(__name__)

def _has_numeric_id(booking: Dict[str, Any]) -> bool:
    try:
        return bool(int(booking.get("id")))
    except (TypeError, ValueError):
        return False

def decorate_booking(booking: Dict[str, Any]) -> Dict[str, Any]:
    cart_id, _ = extract_notes(booking)
    return {**booking, "vaccineNames": vaccine_names(booking), "cartId": cart_id}

async def list_user_orders(session: SessionState, repo: BookingRepository) -> List[Dict[str, Any]]:
    """Réservations de l'utilisateur.
    - Exige une identité et un id utilisateur (identité ou credential décodé)
    - Écarte les réservations sans id numérique non nul
    - Ajoute les noms de vaccins lus dans l'instantané `notes`
    """
    if not session.is_authenticated:
        raise AuthRequired("Please login to view your orders")
    user_id = session.resolve_user_id()
    if user_id is None:
        raise ValidationError({"userId": "No user ID found in the current session"}, message="No user ID found")
    rows = await repo.fetch_user_bookings(user_id, session.token)
    orders = [decorate_booking(b) for b in rows if isinstance(b, dict) and _has_numeric_id(b)]
    logger.info("bookings.list_user_orders user_id=%s count=%s", user_id, len(orders))
    return orders
