from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from storefront.admin.service import AdminService, UserLookupCache
from storefront.auth.repository import AuthRepository
from storefront.auth.service import SessionState
from storefront.bookings.repository import BookingRepository
from storefront.cart.ledger import CartLedger
from storefront.cart.store import CartStore
from storefront.catalog.repository import VaccineRepository
from storefront.checkout.service import CheckoutOrchestrator
from storefront.infra.providers import (
    get_auth_repo,
    get_booking_repo,
    get_cart_store,
    get_vaccine_repo,
)

def get_session_state(request: Request, auth_repo: AuthRepository = Depends(get_auth_repo)) -> SessionState:
    # Contexte de session explicite, réhydraté à chaque requête depuis le cookie signé
    return SessionState(request.session, auth_repo)

def require_user(session: SessionState = Depends(get_session_state)) -> SessionState:
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Please login to continue")
    return session

def require_admin(session: SessionState = Depends(require_user)) -> SessionState:
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")
    return session

def get_cart(request: Request, store: CartStore = Depends(get_cart_store)) -> CartLedger:
    # Lecture: aucun panier alloué pour une session qui n'a encore rien ajouté
    return store.peek(request.session)

def get_cart_for_update(request: Request, store: CartStore = Depends(get_cart_store)) -> CartLedger:
    return store.for_session(request.session)

def get_user_cache(request: Request) -> UserLookupCache:
    cache = getattr(request.app.state, "user_cache", None)
    if cache is None:
        cache = UserLookupCache()
        request.app.state.user_cache = cache
    return cache

def get_checkout(
    request: Request,
    session: SessionState = Depends(get_session_state),
    ledger: CartLedger = Depends(get_cart),
    booking_repo: BookingRepository = Depends(get_booking_repo),
) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(session, ledger, booking_repo, request.session)

def get_admin_service(
    session: SessionState = Depends(require_admin),
    booking_repo: BookingRepository = Depends(get_booking_repo),
    auth_repo: AuthRepository = Depends(get_auth_repo),
    vaccine_repo: VaccineRepository = Depends(get_vaccine_repo),
    cache: UserLookupCache = Depends(get_user_cache),
) -> AdminService:
    return AdminService(booking_repo, auth_repo, vaccine_repo, session.token, cache=cache)

def identity_payload(session: SessionState) -> Optional[Dict[str, Any]]:
    if not session.identity:
        return None
    return {**session.identity.to_dict(), "isAdmin": session.is_admin}
