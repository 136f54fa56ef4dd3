from fastapi import APIRouter, Depends, Request

from storefront.auth.service import SessionState
from storefront.bookings.repository import BookingRepository
from storefront.bookings.service import list_user_orders
from storefront.errors import StorefrontError
from storefront.infra.providers import get_booking_repo
from storefront.utils.notifications import push_notification
from storefront.utils.security import get_session_state

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])

@router.get("")
async def my_orders(
    request: Request,
    session: SessionState = Depends(get_session_state),
    repo: BookingRepository = Depends(get_booking_repo),
):
    """Réservations de l'utilisateur connecté, avec les noms de vaccins du panier d'origine."""
    try:
        orders = await list_user_orders(session, repo)
    except StorefrontError as e:
        push_notification(request.session, f"Error: {e.message}", "error")
        raise
    return {"items": orders, "count": len(orders)}
