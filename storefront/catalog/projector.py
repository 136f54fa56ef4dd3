"""
Projection du catalogue: vaccins imbriqués (vaccin -> lots d'inventaire) vers une liste
plate d'offres achetables, une par couple (vaccin, lot). Logique pure (pas de HTTP).
"""
from typing import Any, Dict, Iterable, List, Optional

from .models import Batch, Offer, to_decimal, to_int

# module storefront.catalog.projector
def make_offer_id(vaccine_id: Any, batch_id: Any) -> str:
    return f"{vaccine_id}-{batch_id}"

def project(api_response: Optional[Dict[str, Any]]) -> List[Offer]:
    """
    Convertit la réponse /vaccines-with-inventory en offres.
    - Échec silencieux: [] si success est faux ou data absent (jamais d'exception).
    - Une offre par lot; un vaccin sans lot est omis (non achetable).
    - mrp: celui du vaccin, sinon le prix du lot.
    """
    if not isinstance(api_response, dict):
        return []
    if not api_response.get("success") or not api_response.get("data"):
        return []
    vaccines = api_response.get("data")
    if not isinstance(vaccines, list):
        return []

    offers: List[Offer] = []
    for vaccine in vaccines:
        if not isinstance(vaccine, dict):
            continue
        for inventory in vaccine.get("Inventories") or []:
            price = to_decimal(inventory.get("price"))
            batch = Batch(
                batch_id=inventory.get("id"),
                batch_number=inventory.get("batchNumber"),
                quantity_available=to_int(inventory.get("quantity")),
                price=price,
                expiry_date=inventory.get("expiryDate"),
            )
            offers.append(Offer(
                offer_id=make_offer_id(vaccine.get("id"), inventory.get("id")),
                vaccine_id=vaccine.get("id"),
                name=vaccine.get("name") or "",
                mrp=to_decimal(vaccine.get("mrp")) if vaccine.get("mrp") else price,
                image_url=vaccine.get("imageUrl"),
                batch=batch,
            ))
    return offers

def search_local(offers: Iterable[Offer], term: str) -> List[Offer]:
    """Repli côté boutique: recherche insensible à la casse sur le nom."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(offers)
    return [o for o in offers if needle in (o.name or "").lower()]

PRICE_RANGES = {
    "0-1000": lambda p: p <= 1000,
    "1000-3000": lambda p: 1000 < p <= 3000,
    "3000-5000": lambda p: 3000 < p <= 5000,
    "5000+": lambda p: p > 5000,
}

AVAILABILITY = {
    "inStock": lambda q: q > 10,
    "lowStock": lambda q: 0 < q <= 10,
}

def filter_offers(
    offers: Iterable[Offer],
    price_range: Optional[str] = None,
    availability: Optional[str] = None,
    sort_by: Optional[str] = None,
) -> List[Offer]:
    """
    Filtres de la page catalogue (valeurs inconnues ignorées):
    - price_range: 0-1000 | 1000-3000 | 3000-5000 | 5000+
    - availability: inStock (>10) | lowStock (1..10)
    - sort_by: priceLowToHigh | priceHighToLow | nameAZ
    """
    result = list(offers)
    if price_range in PRICE_RANGES:
        keep = PRICE_RANGES[price_range]
        result = [o for o in result if keep(o.batch.price)]
    if availability in AVAILABILITY:
        keep = AVAILABILITY[availability]
        result = [o for o in result if keep(o.batch.quantity_available)]
    if sort_by == "priceLowToHigh":
        result.sort(key=lambda o: o.batch.price)
    elif sort_by == "priceHighToLow":
        result.sort(key=lambda o: o.batch.price, reverse=True)
    elif sort_by == "nameAZ":
        result.sort(key=lambda o: (o.name or "").lower())
    return result
