"""
Registre central des routers (web, API v1, admin, health).
"""
from fastapi import FastAPI
from storefront.auth.views import api_router as session_api_router
from storefront.catalog.views import router as catalog_router
from storefront.cart.views import router as cart_router
from storefront.checkout.views import api_router as checkout_api_router, web_router as checkout_web_router
from storefront.bookings.views import router as orders_router
from storefront.admin.views import router as admin_router
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # Web (retour de paiement)
    app.include_router(checkout_web_router)
    # API v1 (checkout avant cart: chemins sous le même préfixe)
    app.include_router(session_api_router)
    app.include_router(catalog_router)
    app.include_router(checkout_api_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    # Admin
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
