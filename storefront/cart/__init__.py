"""
Module 'cart' (feature-first): point d'entrée public.
Réunit le ledger (logique pure) et le registre des paniers par session.
"""

from .ledger import CartLedger, CartLine
from .store import CartStore, CART_ID_KEY

__all__ = [
    # ledger
    "CartLedger",
    "CartLine",
    # store
    "CartStore",
    "CART_ID_KEY",
]
