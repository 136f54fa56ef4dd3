"""Outils partagés des tests: credential factice et services distants simulés."""
import base64
import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx

ADMIN_EMAIL = "admin@example.com"
USER_EMAIL = "john.doe@example.com"

def make_token(payload: Dict[str, Any]) -> str:
    """Credential au format JWT (signature factice)."""
    def seg(data: Dict[str, Any]) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    return f"{seg({'alg': 'HS256', 'typ': 'JWT'})}.{seg(payload)}.signature"

Route = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]

class FakeServices:
    """Services distants simulés (auth, catalogue, réservation) derrière un httpx.MockTransport."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.calls: List[httpx.Request] = []

    def set(self, method: str, path: str, status: int = 200, json: Any = None, handler: Optional[Callable] = None):
        self.routes[(method.upper(), path)] = handler or (status, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": f"No route {request.url.path}"})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    def calls_to(self, method: str, path: str) -> List[httpx.Request]:
        return [c for c in self.calls if c.method == method.upper() and c.url.path == path]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

def catalog_body() -> Dict[str, Any]:
    """Un vaccin, deux lots: 100 (stock 5) et 150 (stock 0)."""
    return {
        "success": True,
        "data": [
            {
                "id": 1,
                "name": "Hepatitis B",
                "imageUrl": "https://img.example/hepb.png",
                "Inventories": [
                    {"id": 10, "batchNumber": "HB-001", "quantity": 5, "price": 100, "expiryDate": "2027-01-01"},
                    {"id": 11, "batchNumber": "HB-002", "quantity": 0, "price": 150, "expiryDate": "2027-06-01"},
                ],
            },
            {"id": 2, "name": "Polio", "Inventories": []},
        ],
    }
