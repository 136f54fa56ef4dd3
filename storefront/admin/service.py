# module storefront.admin.service
"""
Console admin: réservations enrichies des profils utilisateurs et gestion du catalogue.
- Les profils sont résolus en parallèle (asyncio.gather) via un cache mémoïsant
- Les mises à jour rapides n'envoient que les champs modifiés
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional
import logging

from storefront.auth.repository import AuthRepository
from storefront.bookings.repository import BookingRepository
from storefront.catalog.models import to_decimal, to_int
from storefront.catalog.repository import VaccineRepository
from storefront.bookings.notes import vaccine_names
from storefront.errors import StorefrontError
from .grouping import group_by_day

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"

def extract_user_name(user_data: Optional[Dict[str, Any]]) -> str:
    """'john.doe@x' -> 'John Doe'; sans email exploitable -> 'User <id>'; sans profil -> 'Unknown User'."""
    if not user_data:
        return UNKNOWN_USER
    email = user_data.get("email") or ""
    if "@" in email:
        local = email.split("@")[0].replace(".", " ").replace("_", " ")
        return " ".join(w[:1].upper() + w[1:] for w in local.split(" "))
    return f"User {user_data.get('id')}"

def booking_user_id(booking: Dict[str, Any]) -> Optional[Any]:
    return booking.get("userId") or booking.get("userid")

def is_odd_booking(booking: Dict[str, Any]) -> bool:
    # Filtre hérité (doublons côté service de réservation): ids pairs écartés, ids non numériques conservés
    try:
        return int(booking.get("id")) % 2 != 0
    except (TypeError, ValueError):
        return True

class UserLookupCache:
    """Cache des profils par id utilisateur; seuls les succès sont mémorisés."""

    def __init__(self):
        self._profiles: Dict[str, Dict[str, Any]] = {}

    def get(self, user_id: Any) -> Optional[Dict[str, Any]]:
        return self._profiles.get(str(user_id))

    def put(self, user_id: Any, profile: Dict[str, Any]) -> None:
        self._profiles[str(user_id)] = profile

    def __contains__(self, user_id: Any) -> bool:
        return str(user_id) in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def clear(self) -> None:
        self._profiles.clear()

def _current_price(vaccine: Dict[str, Any], inventory: Optional[Dict[str, Any]]):
    if vaccine.get("price"):
        return to_decimal(vaccine.get("price"))
    if inventory:
        return to_decimal(inventory.get("price"))
    return None

def first_inventory(vaccine: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    inventories = vaccine.get("Inventories") or []
    return inventories[0] if inventories and isinstance(inventories[0], dict) else None

class AdminService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        auth_repo: AuthRepository,
        vaccine_repo: VaccineRepository,
        token: Optional[str],
        cache: Optional[UserLookupCache] = None,
    ):
        self.booking_repo = booking_repo
        self.auth_repo = auth_repo
        self.vaccine_repo = vaccine_repo
        self.token = token
        self.cache = cache if cache is not None else UserLookupCache()

    # --- Réservations ---

    async def _fetch_profile(self, user_id: Any) -> Optional[Dict[str, Any]]:
        try:
            profile = await self.auth_repo.get_user(user_id, self.token)
        except StorefrontError:
            logger.exception("admin.user_lookup failed user_id=%s", user_id)
            return None
        if profile:
            self.cache.put(user_id, profile)
        return profile

    async def _resolve_profiles(self, user_ids: List[Any]) -> Dict[str, Optional[Dict[str, Any]]]:
        """Un seul appel par id absent du cache, tous lancés en parallèle."""
        missing = []
        for uid in user_ids:
            if uid not in self.cache and str(uid) not in {str(m) for m in missing}:
                missing.append(uid)
        fetched = await asyncio.gather(*(self._fetch_profile(uid) for uid in missing))
        profiles = {str(uid): p for uid, p in zip(missing, fetched)}
        for uid in user_ids:
            if uid in self.cache:
                profiles[str(uid)] = self.cache.get(uid)
        return profiles

    async def load_bookings(self) -> List[Dict[str, Any]]:
        """
        Toutes les réservations (filtre ids impairs), chacune avec vaccineNames et userData/userName.
        Un échec de résolution n'affecte que la réservation concernée (Unknown User).
        """
        rows = await self.booking_repo.fetch_all_bookings(self.token)
        bookings = [b for b in rows if isinstance(b, dict) and is_odd_booking(b)]
        user_ids = [booking_user_id(b) for b in bookings if booking_user_id(b)]
        profiles = await self._resolve_profiles(user_ids)

        result = []
        for booking in bookings:
            uid = booking_user_id(booking)
            row = {**booking, "vaccineNames": vaccine_names(booking)}
            if uid:
                profile = profiles.get(str(uid))
                row.update(userData=profile, userName=extract_user_name(profile))
            result.append(row)
        logger.info("admin.load_bookings total=%s kept=%s lookups=%s", len(rows), len(result), len(set(map(str, user_ids))))
        return result

    async def grouped_bookings(self, today=None) -> List[Dict[str, Any]]:
        return group_by_day(await self.load_bookings(), today=today)

    # --- Vaccins ---

    async def list_vaccines(self) -> List[Dict[str, Any]]:
        body = await self.vaccine_repo.fetch_catalog()
        data = body.get("data") or []
        return data if isinstance(data, list) else []

    async def find_vaccine(self, vaccine_id: Any) -> Optional[Dict[str, Any]]:
        for vaccine in await self.list_vaccines():
            if str(vaccine.get("id")) == str(vaccine_id):
                return vaccine
        return None

    async def add_vaccine(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Crée le vaccin puis son premier lot d'inventaire; retourne le vaccin avec Inventories=[lot]."""
        vaccine = await self.vaccine_repo.create_vaccine(
            {"name": data.get("name"), "ageGroup": data.get("ageGroup"), "description": data.get("description")},
            self.token,
        )
        inventory = await self.vaccine_repo.create_inventory(
            {
                "vaccineId": vaccine.get("id"),
                "quantity": to_int(data.get("quantity")),
                "price": float(to_decimal(data.get("price"))),
                "batchNumber": data.get("batchNumber"),
                "expiryDate": data.get("expiryDate"),
                "manufacturedDate": data.get("manufacturedDate"),
                "manufacturer": data.get("manufacturer"),
            },
            self.token,
        )
        logger.info("admin.add_vaccine id=%s inventory_id=%s", vaccine.get("id"), inventory.get("id"))
        return {**vaccine, "Inventories": [inventory]}

    async def delete_vaccine(self, vaccine_id: Any) -> bool:
        ok = await self.vaccine_repo.delete_vaccine(vaccine_id, self.token)
        logger.info("admin.delete_vaccine id=%s", vaccine_id)
        return ok

    async def quick_update(
        self,
        vaccine: Dict[str, Any],
        name: Optional[str] = None,
        price: Any = None,
        quantity: Any = None,
    ) -> List[str]:
        """
        Mise à jour rapide (None = champ non saisi):
        - nom modifié -> PATCH vaccin {name}
        - prix/quantité modifiés avec un premier lot -> PUT lot complet fusionné
        - prix modifié sans lot -> PATCH vaccin {price}
        Une valeur illisible (ou nulle) retombe sur la valeur courante.
        Les appels sont indépendants: tous sont tentés, la première erreur est ensuite levée.
        """
        vaccine_id = vaccine.get("id")
        inventory = first_inventory(vaccine)
        current_price = _current_price(vaccine, inventory)
        calls: List[Awaitable[Any]] = []
        labels: List[str] = []

        def schedule(label: str, factory: Callable[[], Awaitable[Any]]) -> None:
            labels.append(label)
            calls.append(factory())

        if name is not None and name != (vaccine.get("name") or ""):
            schedule("vaccine.name", lambda: self.vaccine_repo.update_vaccine(vaccine_id, {"name": name}, self.token))

        new_price = to_decimal(price) if price is not None else None
        if inventory:
            updates: Dict[str, Any] = {}
            if new_price is not None and new_price != current_price:
                updates["price"] = float(new_price or current_price or 0)
            current_qty = to_int(inventory.get("quantity"))
            if quantity is not None and to_int(quantity) != current_qty:
                updates["quantity"] = to_int(quantity) or current_qty
            if updates:
                full = {**inventory, **updates}
                schedule("inventory", lambda: self.vaccine_repo.update_inventory(inventory.get("id"), full, self.token))
        elif new_price is not None and new_price != current_price:
            schedule("vaccine.price", lambda: self.vaccine_repo.update_vaccine(vaccine_id, {"price": float(new_price or current_price or 0)}, self.token))

        results = await asyncio.gather(*calls, return_exceptions=True)
        errors = [r for r in results if isinstance(r, BaseException)]
        logger.info("admin.quick_update id=%s calls=%s failed=%s", vaccine_id, labels, len(errors))
        if errors:
            raise errors[0]
        return labels
