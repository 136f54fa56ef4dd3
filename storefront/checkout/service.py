"""
Cas d'usage 'checkout': orchestre session, ledger et service de réservation.
États: IDLE -> AWAITING_AUTH -> SUBMITTING -> REDIRECTING_TO_PAYMENT, plus
RECONCILING_RETURN au retour de la page de paiement externe.
Intégration paiement:
- le service de réservation crée la réservation et renvoie l'URL de paiement (lien Razorpay)
- au retour, les paramètres razorpay_* de l'URL donnent l'issue du paiement
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, MutableMapping, Optional
import logging

from storefront.auth.service import SessionState
from storefront.cart.ledger import CartLedger
from storefront.errors import ApiError, AuthRequired, StorefrontError, ValidationError
from storefront.utils.notifications import push_notification
from storefront.bookings.repository import BookingRepository

logger = logging.getLogger(__name__)

PENDING_CHECKOUT_KEY = "pendingCheckout"
PAYMENT_ID_PARAM = "razorpay_payment_id"
PAYMENT_STATUS_PARAM = "razorpay_payment_link_status"

REDIRECTING_MESSAGE = "Redirecting to payment gateway..."
PAYMENT_SUCCESS_MESSAGE = "Payment successful! Your booking has been confirmed."
PAYMENT_FAILURE_MESSAGE = "Payment was not completed."
CHECKOUT_FAILURE_MESSAGE = "Checkout failed. Please try again."

class CheckoutState(str, Enum):
    IDLE = "idle"
    AWAITING_AUTH = "awaiting_auth"
    SUBMITTING = "submitting"
    REDIRECTING_TO_PAYMENT = "redirecting_to_payment"
    RECONCILING_RETURN = "reconciling_return"

@dataclass
class CheckoutResult:
    payment_url: str
    booking_id: Optional[Any]
    message: str = REDIRECTING_MESSAGE

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "paymentUrl": self.payment_url, "bookingId": self.booking_id, "message": self.message}

@dataclass
class PaymentOutcome:
    payment_id: str
    status: Optional[str]

    @property
    def paid(self) -> bool:
        return self.status == "paid"

def build_checkout_request(session: SessionState, ledger: CartLedger) -> Dict[str, Any]:
    """
    Instantané du ledger au moment de la soumission.
    - userId: id de l'identité, sinon son email
    - cartItems: [{id: vaccine_id, quantity, price, name}]
    """
    identity = session.identity
    user_id = identity.id if identity and identity.id is not None else (identity.email if identity else None)
    return {
        "userId": user_id,
        "cartItems": [
            {"id": l.vaccine_id, "quantity": l.quantity, "price": float(l.unit_price), "name": l.name}
            for l in ledger.lines()
        ],
    }

class CheckoutOrchestrator:
    def __init__(
        self,
        session: SessionState,
        ledger: CartLedger,
        booking_repo: BookingRepository,
        storage: MutableMapping[str, Any],
    ):
        self.session = session
        self.ledger = ledger
        self.booking_repo = booking_repo
        self.storage = storage
        self.state = CheckoutState.IDLE

    async def checkout(self) -> CheckoutResult:
        """
        - Sans identité: AWAITING_AUTH, drapeau de reprise unique, AuthRequired (aucun appel réseau)
        - Panier vide: ValidationError (aucun appel réseau)
        - Succès: REDIRECTING_TO_PAYMENT, ledger vidé, URL de paiement retournée
        - Échec: retour IDLE, ledger intact, message du collaborateur remonté
        """
        if not self.session.is_authenticated:
            self.state = CheckoutState.AWAITING_AUTH
            self.storage[PENDING_CHECKOUT_KEY] = True
            raise AuthRequired()
        if self.ledger.is_empty():
            raise ValidationError({"cart": "Your cart is empty"}, message="Your cart is empty")

        self.state = CheckoutState.SUBMITTING
        checkout_request = build_checkout_request(self.session, self.ledger)
        try:
            result = await self.booking_repo.checkout(checkout_request, self.session.token)
            if not result.get("paymentUrl"):
                raise ApiError(CHECKOUT_FAILURE_MESSAGE)
        except StorefrontError as e:
            self.state = CheckoutState.IDLE
            logger.warning("checkout.failed user_id=%s msg=%s", checkout_request.get("userId"), e.message)
            push_notification(self.storage, e.message or CHECKOUT_FAILURE_MESSAGE, "error")
            raise

        self.state = CheckoutState.REDIRECTING_TO_PAYMENT
        self.ledger.clear()
        push_notification(self.storage, REDIRECTING_MESSAGE, "success")
        logger.info(
            "checkout.submitted user_id=%s items=%s booking_id=%s",
            checkout_request.get("userId"), len(checkout_request["cartItems"]), result.get("bookingId"),
        )
        return CheckoutResult(payment_url=result["paymentUrl"], booking_id=result.get("bookingId"))

    async def resume_after_login(self) -> Optional[CheckoutResult]:
        """Reprise unique après connexion: le drapeau est consommé même si la reprise échoue."""
        if not self.storage.pop(PENDING_CHECKOUT_KEY, None):
            return None
        try:
            return await self.checkout()
        except StorefrontError:
            logger.info("checkout.resume_after_login did not complete")
            return None

    def reconcile_return(self, query: Mapping[str, str]) -> Optional[PaymentOutcome]:
        """
        Retour de paiement: n'agit que si razorpay_payment_id est présent.
        - statut 'paid': ledger vidé + notification de succès
        - autre statut: notification d'échec, ledger inchangé
        Le nettoyage de l'URL (redirection vers le chemin nu) est fait par la vue.
        """
        payment_id = query.get(PAYMENT_ID_PARAM)
        if payment_id is None:
            return None
        self.state = CheckoutState.RECONCILING_RETURN
        outcome = PaymentOutcome(payment_id=payment_id, status=query.get(PAYMENT_STATUS_PARAM))
        if outcome.paid:
            self.ledger.clear()
            push_notification(self.storage, PAYMENT_SUCCESS_MESSAGE, "success")
        else:
            push_notification(self.storage, PAYMENT_FAILURE_MESSAGE, "error")
        logger.info("checkout.reconcile payment_id=%s status=%s", outcome.payment_id, outcome.status)
        self.state = CheckoutState.IDLE
        return outcome
