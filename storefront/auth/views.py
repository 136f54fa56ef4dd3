from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from storefront.auth.service import SessionState
from storefront.checkout.service import CheckoutOrchestrator, PENDING_CHECKOUT_KEY
from storefront.errors import NETWORK_ERROR_MESSAGE
from storefront.utils.notifications import push_notification
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import get_checkout, get_session_state, identity_payload
from storefront.utils.validators import ensure_valid, LOGIN_RULES, REGISTER_RULES

logger = logging.getLogger(__name__)

# --- API Router (/api/v1/session) ---

api_router = APIRouter(prefix="/api/v1/session", tags=["Session API"])

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""

class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""
    mobileNumber: str = ""

def _failure_status(message: Optional[str]) -> int:
    return 502 if message == NETWORK_ERROR_MESSAGE else 401

async def _login_and_resume(
    request: Request,
    session: SessionState,
    checkout: CheckoutOrchestrator,
    email: str,
    password: str,
) -> Dict[str, Any]:
    result = await session.login(email, password)
    if not result.success:
        push_notification(request.session, result.message, "error")
        raise HTTPException(status_code=_failure_status(result.message), detail=result.message)

    # Reprise unique du checkout demandé avant la connexion
    resumed = await checkout.resume_after_login()
    return {
        "success": True,
        "user": identity_payload(session),
        "checkout": resumed.to_dict() if resumed else None,
    }

@api_router.post("/login", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
async def api_login(
    req: LoginRequest,
    request: Request,
    session: SessionState = Depends(get_session_state),
    checkout: CheckoutOrchestrator = Depends(get_checkout),
):
    """Connexion (JSON).
    - Contrôles locaux (email, mot de passe requis) avant tout appel réseau
    - Échec: message du service d'auth tel quel (401), panne réseau (502)
    - Succès: identité persistée dans la session, puis reprise du checkout en attente
    """
    ensure_valid(req.model_dump(), LOGIN_RULES)
    return await _login_and_resume(request, session, checkout, req.email, req.password)

@api_router.post("/register", dependencies=[Depends(optional_rate_limit(times=3, seconds=60))])
async def api_register(
    req: RegisterRequest,
    request: Request,
    session: SessionState = Depends(get_session_state),
    checkout: CheckoutOrchestrator = Depends(get_checkout),
):
    """Inscription puis connexion automatique avec les mêmes identifiants."""
    ensure_valid(req.model_dump(), REGISTER_RULES)
    result = await session.register(req.email, req.password, req.mobileNumber)
    if not result.success:
        push_notification(request.session, result.message, "error")
        status = 502 if result.message == NETWORK_ERROR_MESSAGE else 400
        raise HTTPException(status_code=status, detail=result.message)
    payload = await _login_and_resume(request, session, checkout, req.email, req.password)
    return {**payload, "message": result.message or "Registration successful"}

@api_router.post("/logout")
def api_logout(request: Request, session: SessionState = Depends(get_session_state)):
    session.logout()
    request.session.pop(PENDING_CHECKOUT_KEY, None)
    return {"message": "Logged out"}

@api_router.get("/me")
def api_me(session: SessionState = Depends(get_session_state)):
    return {"isAuthenticated": session.is_authenticated, "user": identity_payload(session)}
