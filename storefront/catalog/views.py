from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from storefront.catalog import projector
from storefront.catalog.service import CatalogService
from storefront.errors import StorefrontError
from storefront.infra.providers import get_catalog_service
from storefront.utils.notifications import push_notification

router = APIRouter(prefix="/api/v1/catalog", tags=["Catalog API"])

# module storefront.catalog.views
@router.get("")
async def list_offers(
    request: Request,
    q: Optional[str] = Query(default=None),
    priceRange: Optional[str] = Query(default=None),
    availability: Optional[str] = Query(default=None),
    sortBy: Optional[str] = Query(default=None),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Offres achetables (une par couple vaccin/lot).
    - q: recherche par nom (repli local sur le dernier catalogue si le service échoue)
    - priceRange / availability / sortBy: filtres appliqués sur le résultat
    """
    try:
        offers = await catalog.search(q or "")
    except StorefrontError as e:
        push_notification(request.session, f"Failed to load vaccines: {e.message}", "error")
        raise
    offers = projector.filter_offers(offers, price_range=priceRange, availability=availability, sort_by=sortBy)
    return {"items": [o.to_dict() for o in offers], "count": len(offers)}

@router.get("/{offer_id}")
async def get_offer(offer_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    offer = await catalog.find_offer(offer_id)
    if offer is None:
        raise HTTPException(status_code=404, detail="Offer not found")
    return offer.to_dict()
