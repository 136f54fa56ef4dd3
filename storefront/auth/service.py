"""
État de session (identité + credential) et cas d'usage Auth.
- Le stockage durable est un MutableMapping (request.session en web, dict en tests).
- Réhydratation synchrone à la construction: credential + email persistés => identité.
- Persistance best-effort: une écriture qui échoue est loggée, jamais retentée.
"""
from typing import Any, MutableMapping, Optional
import logging

from storefront.config import ADMIN_EMAILS
from storefront.errors import ApiError, NetworkError
from .models import (
    AuthResponse,
    Identity,
    coerce_user_id,
    network_failure,
    TOKEN_KEY,
    EMAIL_KEY,
    MOBILE_KEY,
    USER_ID_KEY,
    PERSISTED_KEYS,
)
from .repository import AuthRepository
from .token import user_id_from_token

logger = logging.getLogger(__name__)

LOGIN_FALLBACK_ERROR = "Wrong Password or Wrong Email"
REGISTER_FALLBACK_ERROR = "Registration failed"

def is_admin_email(email: Optional[str]) -> bool:
    return bool(email) and email.strip().lower() in ADMIN_EMAILS

class SessionState:
    def __init__(self, storage: MutableMapping[str, Any], auth_repo: Optional[AuthRepository] = None):
        self.storage = storage
        self.auth_repo = auth_repo
        self.identity: Optional[Identity] = None
        self.token: Optional[str] = None
        self.rehydrate()

    # --- Lecture ---

    @property
    def is_authenticated(self) -> bool:
        return bool(self.identity and self.token)

    @property
    def is_admin(self) -> bool:
        return bool(self.identity) and is_admin_email(self.identity.email)

    def resolve_user_id(self) -> Optional[Any]:
        """Id de l'identité, sinon relu dans le credential; None bloque les lectures par id."""
        if self.identity and self.identity.id is not None:
            return self.identity.id
        return coerce_user_id(user_id_from_token(self.token))

    # --- Cycle de vie ---

    def rehydrate(self) -> None:
        token = self.storage.get(TOKEN_KEY)
        email = self.storage.get(EMAIL_KEY)
        if not token or not email:
            self.identity = None
            self.token = None
            return
        user_id = coerce_user_id(self.storage.get(USER_ID_KEY))
        if user_id is None:
            user_id = coerce_user_id(user_id_from_token(token))
        self.token = token
        self.identity = Identity(email=email, id=user_id, mobile_number=self.storage.get(MOBILE_KEY) or None)

    async def login(self, email: str, password: str) -> AuthResponse:
        """Connexion:
        - Délègue au service d'auth; en cas d'échec, son message est retourné tel quel
        - En cas de succès: credential + identité (id décodé best-effort) puis persistance
        """
        email = (email or "").strip()
        try:
            token = await self.auth_repo.sign_in(email, password)
        except ApiError as e:
            logger.info("auth.login refused email=%s", email)
            return AuthResponse(False, message=e.upstream_message or LOGIN_FALLBACK_ERROR)
        except NetworkError as e:
            return network_failure("sign_in", e)
        if not token:
            return AuthResponse(False, message=LOGIN_FALLBACK_ERROR)

        user_id = coerce_user_id(user_id_from_token(token))
        self.token = token
        self.identity = Identity(email=email, id=user_id, mobile_number=None)
        self._persist()
        if is_admin_email(email):
            logger.info("auth.login admin session opened email=%s", email)
        return AuthResponse(True, identity=self.identity, token=token)

    async def register(self, email: str, password: str, mobile_number: str) -> AuthResponse:
        """Inscription: n'émet aucun credential, l'appelant enchaîne avec login()."""
        email = (email or "").strip()
        try:
            body = await self.auth_repo.sign_up(email, password, mobile_number)
        except ApiError as e:
            return AuthResponse(False, message=e.upstream_message or REGISTER_FALLBACK_ERROR)
        except NetworkError as e:
            return network_failure("sign_up", e)
        logger.info("auth.register ok email=%s", email)
        return AuthResponse(True, message=body.get("message"))

    def logout(self) -> None:
        self.identity = None
        self.token = None
        for key in PERSISTED_KEYS:
            try:
                self.storage.pop(key, None)
            except Exception:
                logger.exception("auth.logout failed to clear key=%s", key)

    def _persist(self) -> None:
        values = {
            TOKEN_KEY: self.token,
            EMAIL_KEY: self.identity.email if self.identity else None,
            MOBILE_KEY: self.identity.mobile_number if self.identity else None,
            USER_ID_KEY: str(self.identity.id) if self.identity and self.identity.id is not None else None,
        }
        for key, value in values.items():
            try:
                if value:
                    self.storage[key] = value
                else:
                    self.storage.pop(key, None)
            except Exception:
                logger.exception("auth.persist failed key=%s", key)
