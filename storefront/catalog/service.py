"""
Cas d'usage 'catalog': orchestre repository + projector et garde le dernier
instantané complet (repli de recherche, résolution d'une offre pour le panier).
"""
from typing import List, Optional
import logging

from storefront.errors import StorefrontError
from . import projector
from .models import Offer
from .repository import VaccineRepository

logger = logging.getLogger(__name__)

class CatalogService:
    def __init__(self, repo: VaccineRepository):
        self.repo = repo
        self.snapshot: List[Offer] = []

    async def load_offers(self) -> List[Offer]:
        """Recharge le catalogue complet; une erreur du collaborateur est remontée telle quelle."""
        response = await self.repo.fetch_catalog()
        self.snapshot = projector.project(response)
        logger.info("catalog.load_offers offers=%s", len(self.snapshot))
        return self.snapshot

    async def search(self, term: str) -> List[Offer]:
        """
        Recherche par nom:
        - terme vide: catalogue complet
        - sinon appel ?name=term; en cas d'échec, filtre local sur le dernier instantané
        """
        if not (term or "").strip():
            return await self.load_offers()
        try:
            response = await self.repo.fetch_catalog(name=term.strip())
            return projector.project(response)
        except StorefrontError:
            logger.warning("catalog.search failed, using local search term=%s", term)
        if not self.snapshot:
            try:
                await self.load_offers()
            except StorefrontError:
                return []
        return projector.search_local(self.snapshot, term)

    async def find_offer(self, offer_id: str) -> Optional[Offer]:
        """Résout une offre par offer_id (recharge une fois si absente de l'instantané)."""
        for offer in self.snapshot:
            if offer.offer_id == offer_id:
                return offer
        for offer in await self.load_offers():
            if offer.offer_id == offer_id:
                return offer
        return None
