"""
Accesseurs des ressources partagées posées sur app.state par le lifespan.
Utilisés comme dépendances FastAPI: les tests les remplacent via app.dependency_overrides.
"""
from fastapi import Request

from storefront.auth.repository import AuthRepository
from storefront.bookings.repository import BookingRepository
from storefront.cart.store import CartStore
from storefront.catalog.repository import VaccineRepository
from storefront.catalog.service import CatalogService
from storefront.infra.http_client import HttpClient

def get_http(request: Request) -> HttpClient:
    http = getattr(request.app.state, "http", None)
    if http is None:
        raise RuntimeError("HttpClient non initialisé (lifespan non démarré)")
    return http

def get_auth_repo(request: Request) -> AuthRepository:
    return AuthRepository(get_http(request))

def get_vaccine_repo(request: Request) -> VaccineRepository:
    return VaccineRepository(get_http(request))

def get_booking_repo(request: Request) -> BookingRepository:
    return BookingRepository(get_http(request))

def get_catalog_service(request: Request) -> CatalogService:
    service = getattr(request.app.state, "catalog", None)
    if service is None:
        service = CatalogService(get_vaccine_repo(request))
        request.app.state.catalog = service
    return service

def get_cart_store(request: Request) -> CartStore:
    store = getattr(request.app.state, "carts", None)
    if store is None:
        store = CartStore()
        request.app.state.carts = store
    return store
