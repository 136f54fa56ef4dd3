"""
Client HTTP partagé vers les services distants (auth, catalogue, réservation).
- Un seul httpx.AsyncClient par application (créé dans le lifespan), transport injectable en tests.
- Normalise les échecs: NetworkError (pas de réponse) / ApiError (réponse en échec).
- Aucun retry: toute erreur est terminale et remontée une fois.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from storefront.config import HTTP_TIMEOUT_SECONDS
from storefront.errors import ApiError, NetworkError

logger = logging.getLogger(__name__)

# module storefront.infra.http_client
class HttpClient:
    def __init__(self, client: Optional[httpx.AsyncClient] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = client or httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        token: Optional[str] = None,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Exécute un appel JSON et retourne le corps décodé (dict).
        - Bearer ajouté si `token` est fourni.
        - Non-2xx ou `success: false` => ApiError avec le `message` du collaborateur (verbatim).
        - Erreur de transport => NetworkError (message générique).
        """
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            resp = await self._client.request(method, url, headers=headers, json=json, params=params)
        except httpx.HTTPError:
            logger.exception("http_client.request transport failure method=%s url=%s", method, url)
            raise NetworkError()

        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {"data": body} if body is not None else {}

        if not resp.is_success or body.get("success") is False:
            upstream_msg = body.get("message") or body.get("error")
            msg = upstream_msg or f"HTTP {resp.status_code}: {resp.reason_phrase}"
            logger.warning("http_client.request failed method=%s url=%s status=%s msg=%s", method, url, resp.status_code, msg)
            raise ApiError(str(msg), upstream_status=resp.status_code, upstream_message=upstream_msg)
        return body

    async def get(self, url: str, token: Optional[str] = None, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("GET", url, token=token, params=params)

    async def post(self, url: str, body: Any = None, token: Optional[str] = None) -> Dict[str, Any]:
        return await self.request("POST", url, token=token, json=body)

    async def put(self, url: str, body: Any = None, token: Optional[str] = None) -> Dict[str, Any]:
        return await self.request("PUT", url, token=token, json=body)

    async def patch(self, url: str, body: Any = None, token: Optional[str] = None) -> Dict[str, Any]:
        return await self.request("PATCH", url, token=token, json=body)

    async def delete(self, url: str, token: Optional[str] = None) -> Dict[str, Any]:
        return await self.request("DELETE", url, token=token)
