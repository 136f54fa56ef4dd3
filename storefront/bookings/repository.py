"""
Accès au service de réservation/paiement distant.
Tous les appels sont authentifiés par Bearer (credential de la session).
"""
from typing import Any, Dict, List

from storefront.config import BOOKING_SERVICE_URL
from storefront.infra.http_client import HttpClient

# module storefront.bookings.repository
class BookingRepository:
    def __init__(self, http: HttpClient, base_url: str = BOOKING_SERVICE_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def fetch_all_bookings(self, token: str) -> List[Dict[str, Any]]:
        body = await self.http.get(f"{self.base_url}/api/v1/bookings/all", token=token)
        return body.get("data") or []

    async def fetch_user_bookings(self, user_id: Any, token: str) -> List[Dict[str, Any]]:
        body = await self.http.get(f"{self.base_url}/api/v1/bookings/user/{user_id}", token=token)
        return body.get("data") or []

    async def checkout(self, checkout_request: Dict[str, Any], token: str) -> Dict[str, Any]:
        """
        POST /api/v1/cart/checkout
        - Entrée: {userId, cartItems: [{id, quantity, price, name}]}
        - Retour: {paymentUrl, bookingId}
        """
        body = await self.http.post(f"{self.base_url}/api/v1/cart/checkout", checkout_request, token=token)
        return {"paymentUrl": body.get("paymentUrl"), "bookingId": body.get("bookingId")}
