from typing import Optional, Union
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from storefront.admin.service import AdminService
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import get_admin_service
from storefront.utils.validators import ensure_valid, ADD_VACCINE_RULES

# module storefront.admin.views
router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])

Number = Optional[Union[int, float, str]]

class AddVaccineRequest(BaseModel):
    name: str = ""
    ageGroup: Optional[str] = None
    description: Optional[str] = None
    price: Number = None
    quantity: Number = None
    batchNumber: Optional[str] = None
    expiryDate: Optional[str] = None
    manufacturedDate: Optional[str] = None
    manufacturer: Optional[str] = None

class QuickUpdateRequest(BaseModel):
    # None: champ laissé tel quel
    name: Optional[str] = None
    price: Number = None
    quantity: Number = None

@router.get("/bookings")
async def admin_bookings(svc: AdminService = Depends(get_admin_service)):
    """Réservations groupées par jour (Today, Yesterday, puis dates décroissantes)."""
    groups = await svc.grouped_bookings()
    return {"groups": groups, "count": sum(len(g["bookings"]) for g in groups)}

@router.get("/vaccines")
async def admin_list_vaccines(svc: AdminService = Depends(get_admin_service)):
    return {"items": await svc.list_vaccines()}

@router.post("/vaccines", dependencies=[Depends(optional_rate_limit(times=20, seconds=60))])
async def admin_add_vaccine(body: AddVaccineRequest, svc: AdminService = Depends(get_admin_service)):
    data = body.model_dump()
    ensure_valid(data, ADD_VACCINE_RULES)
    created = await svc.add_vaccine(data)
    return JSONResponse({"ok": True, "item": created}, status_code=201)

@router.delete("/vaccines/{vaccine_id}")
async def admin_delete_vaccine(vaccine_id: str, svc: AdminService = Depends(get_admin_service)):
    await svc.delete_vaccine(vaccine_id)
    return {"ok": True}

@router.post("/vaccines/{vaccine_id}/quick-update", dependencies=[Depends(optional_rate_limit(times=20, seconds=60))])
async def admin_quick_update(vaccine_id: str, body: QuickUpdateRequest, svc: AdminService = Depends(get_admin_service)):
    """N'envoie au service catalogue que les champs effectivement modifiés."""
    vaccine = await svc.find_vaccine(vaccine_id)
    if vaccine is None:
        raise HTTPException(status_code=404, detail="Vaccine not found")
    updated = await svc.quick_update(vaccine, name=body.name, price=body.price, quantity=body.quantity)
    return {"ok": True, "updated": updated}
