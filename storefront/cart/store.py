"""
Registre en mémoire des paniers: un CartLedger par session navigateur.
L'identifiant de panier (opaque) est rangé dans le cookie de session; les paniers
ne sont ni persistés ni synchronisés entre sessions.
- Un panier n'est alloué qu'à sa première mutation (ajout); les lectures voient un panier vide
- Expiration après CART_IDLE_TTL_SECONDS d'inactivité, au plus CART_MAX_CARTS paniers
"""
from typing import MutableMapping, Any, Optional
import secrets

from cachetools import TTLCache

from storefront.config import CART_IDLE_TTL_SECONDS, CART_MAX_CARTS
from .ledger import CartLedger

CART_ID_KEY = "cartId"

class CartStore:
    def __init__(self, maxsize: int = CART_MAX_CARTS, ttl: float = CART_IDLE_TTL_SECONDS, timer=None):
        kwargs = {"timer": timer} if timer is not None else {}
        self._carts: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, **kwargs)

    def _touch(self, cart_id: str) -> Optional[CartLedger]:
        ledger = self._carts.get(cart_id)
        if ledger is not None:
            # Réinsertion: repousse l'expiration (TTL d'inactivité)
            self._carts[cart_id] = ledger
        return ledger

    def peek(self, storage: MutableMapping[str, Any]) -> CartLedger:
        """Panier existant de la session, sinon un panier vide détaché (rien n'est alloué ni écrit)."""
        cart_id = storage.get(CART_ID_KEY)
        ledger = self._touch(cart_id) if cart_id else None
        return ledger if ledger is not None else CartLedger()

    def for_session(self, storage: MutableMapping[str, Any]) -> CartLedger:
        """Panier de la session, créé (et référencé dans la session) s'il n'existe pas."""
        cart_id = storage.get(CART_ID_KEY)
        ledger = self._touch(cart_id) if cart_id else None
        if ledger is None:
            cart_id = secrets.token_urlsafe(16)
            storage[CART_ID_KEY] = cart_id
            ledger = CartLedger()
            self._carts[cart_id] = ledger
        return ledger

    def discard(self, storage: MutableMapping[str, Any]) -> None:
        cart_id = storage.pop(CART_ID_KEY, None)
        if cart_id:
            self._carts.pop(cart_id, None)

    def __len__(self) -> int:
        return len(self._carts)
