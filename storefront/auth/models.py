from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from storefront.errors import NETWORK_ERROR_MESSAGE

logger = logging.getLogger(__name__)

# Clés persistées dans le stockage durable (cookie de session signé)
TOKEN_KEY = "token"
EMAIL_KEY = "userEmail"
MOBILE_KEY = "userMobileNumber"
USER_ID_KEY = "userId"
PERSISTED_KEYS = (TOKEN_KEY, EMAIL_KEY, MOBILE_KEY, USER_ID_KEY)

def coerce_user_id(value: Any) -> Optional[Any]:
    """Id numérique si possible ("42" -> 42), sinon la valeur telle quelle (ex: sub UUID)."""
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return text or None

@dataclass
class Identity:
    email: str
    id: Optional[Any] = None
    mobile_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email, "id": self.id, "mobileNumber": self.mobile_number}

class AuthResponse:
    def __init__(
        self,
        success: bool,
        identity: Optional[Identity] = None,
        token: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.success = success
        self.identity = identity
        self.token = token
        self.message = message

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self.identity.to_dict() if self.identity else None

def network_failure(action: str, e: Exception) -> AuthResponse:
    logger.exception(f"Erreur {action}")
    return AuthResponse(False, message=NETWORK_ERROR_MESSAGE)
