"""
Routes simples (hors routers).
- /api/v1/notifications: lecture unique de la notification en attente
- /favicon.ico: pas de contenu (204) pour éviter des 404 dans les logs
"""
from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.status import HTTP_204_NO_CONTENT

from storefront.utils.notifications import pop_notification

def register_routes(app: FastAPI) -> None:
    @app.get("/api/v1/notifications", tags=["Notifications"])
    def next_notification(request: Request):
        return {"notification": pop_notification(request.session)}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
