"""
Factory d'application pour les entrypoints (storefront.asgi) et les tests.
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from typing import Optional

import httpx
from fastapi import FastAPI

from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_no_cache_middleware, register_security_middleware
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app(http_transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares (session, CORS, hosts, sécurité, no-cache)
      - gestionnaires d'exceptions, routes simples et routers
    `http_transport` remplace le transport réseau du client partagé (tests: httpx.MockTransport).
    """
    app = FastAPI(title="Vaccine Storefront", lifespan=lifespan)
    app.state.http_transport = http_transport
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
