from typing import Any, Dict, Optional

from storefront.config import AUTH_SERVICE_URL
from storefront.infra.http_client import HttpClient

# --- Service d'auth distant (/api/v1/signin, /signup, /users/{id}) ---

class AuthRepository:
    """Wrapper sans état autour du service d'auth; le client HTTP est injecté."""

    def __init__(self, http: HttpClient, base_url: str = AUTH_SERVICE_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def sign_in(self, email: str, password: str) -> str:
        """Connexion: retourne le credential (champ `data` de la réponse)."""
        body = await self.http.post(f"{self.base_url}/api/v1/signin", {"email": email, "password": password})
        return body.get("data") or ""

    async def sign_up(self, email: str, password: str, mobile_number: str) -> Dict[str, Any]:
        """Inscription: aucun credential émis, seul le message du service est retourné."""
        return await self.http.post(
            f"{self.base_url}/api/v1/signup",
            {"email": email, "password": password, "mobileNumber": mobile_number},
        )

    async def get_user(self, user_id: Any, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """Profil utilisateur (admin: résolution des noms affichés)."""
        body = await self.http.get(f"{self.base_url}/api/v1/users/{user_id}", token=token)
        return body.get("data")
