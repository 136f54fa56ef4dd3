"""
Gestionnaires d'exceptions.
- Erreurs métier (StorefrontError): JSON {"detail": message} avec le code de la classe.
- AuthRequired: 401 {"detail", "action": "login"}; redirection /auth?error=... pour un client HTML.
- HTTPException 401/403: redirection HTML vers /auth hors /api/*, JSON sinon.
"""
import logging
import urllib.parse
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from storefront.errors import AuthRequired, StorefrontError, ValidationError

logger = logging.getLogger(__name__)

def _wants_html(request: Request) -> bool:
    return "text/html" in (request.headers.get("accept") or "").lower()

def _login_redirect(detail: str) -> RedirectResponse:
    msg = urllib.parse.quote_plus(detail)
    return RedirectResponse(url=f"/auth?error={msg}", status_code=HTTP_303_SEE_OTHER)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthRequired)
    async def auth_required(request: Request, exc: AuthRequired):
        if _wants_html(request):
            return _login_redirect(exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "action": "login"})

    @app.exception_handler(ValidationError)
    async def form_validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "errors": exc.errors})

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        logger.info("storefront.error path=%s type=%s msg=%s", request.url.path, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(HTTPException)
    async def html_redirect_on_auth_errors(request: Request, exc: HTTPException):
        if exc.status_code in (401, 403):
            is_api = request.url.path.startswith("/api/")
            if _wants_html(request) and not is_api:
                detail = str(getattr(exc, "detail", "")) or (
                    "Please login to continue" if exc.status_code == 401 else "Access denied"
                )
                return _login_redirect(detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
