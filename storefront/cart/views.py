import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from storefront.cart.ledger import CartLedger
from storefront.catalog.service import CatalogService
from storefront.errors import CapacityError
from storefront.infra.providers import get_catalog_service
from storefront.utils.notifications import push_notification
from storefront.utils.security import get_cart, get_cart_for_update

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])

class AddItemRequest(BaseModel):
    offerId: str

class UpdateQuantityRequest(BaseModel):
    quantity: int

def _line_or_404(ledger: CartLedger, vaccine_id: str, batch_id: str):
    line = ledger.find(vaccine_id, batch_id)
    if line is None:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return line

# module storefront.cart.views
@router.get("")
def get_cart_view(ledger: CartLedger = Depends(get_cart)) -> Dict[str, Any]:
    return ledger.to_dict()

@router.get("/total")
def get_cart_total(ledger: CartLedger = Depends(get_cart)):
    return {"total": float(ledger.total()), "itemCount": ledger.item_count()}

@router.post("/items")
async def add_item(
    body: AddItemRequest,
    request: Request,
    ledger: CartLedger = Depends(get_cart_for_update),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Ajoute une offre (vaccin + lot) au panier.
    - Même couple déjà présent: quantité + 1
    - Le stock du lot est figé dans la ligne au moment de l'ajout
    """
    offer = await catalog.find_offer(body.offerId)
    if offer is None:
        raise HTTPException(status_code=404, detail="Offer not found")
    line = ledger.add_or_increment(offer)
    push_notification(request.session, f"{offer.name} ({offer.batch.batch_number}) added to cart!")
    logger.info("cart.add offer_id=%s quantity=%s", offer.offer_id, line.quantity)
    return {"line": line.to_dict(), "cart": ledger.to_dict()}

@router.patch("/items/{vaccine_id}/{batch_id}")
def update_item(
    vaccine_id: str,
    batch_id: str,
    body: UpdateQuantityRequest,
    request: Request,
    ledger: CartLedger = Depends(get_cart),
):
    """Quantité <= 0: ligne retirée; au-delà du stock figé: 409, panier inchangé."""
    line = _line_or_404(ledger, vaccine_id, batch_id)
    try:
        updated = ledger.update_quantity(line, body.quantity)
    except CapacityError as e:
        push_notification(request.session, e.message, "error")
        raise
    if updated is None:
        push_notification(request.session, f"{line.name} removed from cart")
    return {"line": updated.to_dict() if updated else None, "cart": ledger.to_dict()}

@router.delete("/items/{vaccine_id}/{batch_id}")
def remove_item(vaccine_id: str, batch_id: str, request: Request, ledger: CartLedger = Depends(get_cart)):
    line = _line_or_404(ledger, vaccine_id, batch_id)
    ledger.remove(line)
    push_notification(request.session, f"{line.name} removed from cart")
    return ledger.to_dict()

@router.delete("")
def clear_cart(ledger: CartLedger = Depends(get_cart)):
    ledger.clear()
    return ledger.to_dict()
