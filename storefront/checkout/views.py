import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from storefront.checkout.service import CheckoutOrchestrator
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import get_checkout

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api/v1/cart", tags=["Checkout API"])
web_router = APIRouter(tags=["Checkout Web"])

def wants_html(request: Request) -> bool:
    return "text/html" in (request.headers.get("accept") or "").lower()

# module storefront.checkout.views
@api_router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def checkout_cart(request: Request, orchestrator: CheckoutOrchestrator = Depends(get_checkout)):
    """
    Soumet le panier au service de réservation et renvoie l'URL de paiement.
    - Sans identité: 401 {"action": "login"} (ou redirection /auth), reprise après connexion
    - Panier vide: 422, aucun appel réseau
    - Succès: panier vidé; JSON {paymentUrl, bookingId} ou 303 vers le paiement (client HTML)
    - Échec: message du service (400/502), panier conservé
    """
    result = await orchestrator.checkout()
    if wants_html(request):
        return RedirectResponse(url=result.payment_url, status_code=HTTP_303_SEE_OTHER)
    return JSONResponse(result.to_dict())

@web_router.get("/", include_in_schema=False)
def payment_return(request: Request, orchestrator: CheckoutOrchestrator = Depends(get_checkout)):
    """
    Page d'accueil et retour de la passerelle de paiement.
    Si razorpay_payment_id est présent: rapprochement puis 303 vers le chemin nu.
    """
    outcome = orchestrator.reconcile_return(request.query_params)
    if outcome is not None:
        return RedirectResponse(url=request.url.path, status_code=HTTP_303_SEE_OTHER)
    return {
        "name": "storefront",
        "catalog": "/api/v1/catalog",
        "cart": "/api/v1/cart",
        "session": "/api/v1/session/me",
    }
