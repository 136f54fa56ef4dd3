"""
Accès au service catalogue distant (vaccins + lots d'inventaire).
Lecture publique; les mutations admin sont authentifiées par Bearer.
"""
from typing import Any, Dict, Optional

from storefront.config import VACCINE_SERVICE_URL
from storefront.infra.http_client import HttpClient

# module storefront.catalog.repository
class VaccineRepository:
    def __init__(self, http: HttpClient, base_url: str = VACCINE_SERVICE_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def fetch_catalog(self, name: Optional[str] = None) -> Dict[str, Any]:
        """Réponse brute {success, data: [...]} (filtrée par nom si `name`)."""
        params = {"name": name} if name else None
        return await self.http.get(f"{self.base_url}/api/v1/vaccines-with-inventory", params=params)

    async def create_vaccine(self, data: Dict[str, Any], token: str) -> Dict[str, Any]:
        body = await self.http.post(f"{self.base_url}/api/v1/vaccine", data, token=token)
        return body.get("data") or {}

    async def update_vaccine(self, vaccine_id: Any, data: Dict[str, Any], token: str) -> Dict[str, Any]:
        return await self.http.patch(f"{self.base_url}/api/v1/vaccine/{vaccine_id}", data, token=token)

    async def delete_vaccine(self, vaccine_id: Any, token: str) -> bool:
        await self.http.delete(f"{self.base_url}/api/v1/vaccine/{vaccine_id}", token=token)
        return True

    async def create_inventory(self, data: Dict[str, Any], token: str) -> Dict[str, Any]:
        body = await self.http.post(f"{self.base_url}/api/v1/inventory", data, token=token)
        return body.get("data") or {}

    async def update_inventory(self, inventory_id: Any, data: Dict[str, Any], token: str) -> Dict[str, Any]:
        return await self.http.put(f"{self.base_url}/api/v1/inventory/{inventory_id}", data, token=token)
