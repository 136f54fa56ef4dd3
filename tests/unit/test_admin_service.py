import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.admin.service import AdminService, UserLookupCache, extract_user_name, is_odd_booking
from storefront.errors import ApiError, NetworkError

def _service(bookings=None, users=None, cache=None):
    booking_repo = MagicMock(fetch_all_bookings=AsyncMock(return_value=bookings or []))
    users = users or {}

    async def get_user(user_id, token):
        await asyncio.sleep(0)
        value = users.get(str(user_id))
        if isinstance(value, Exception):
            raise value
        return value

    auth_repo = MagicMock(get_user=AsyncMock(side_effect=get_user))
    vaccine_repo = MagicMock(
        update_vaccine=AsyncMock(return_value={"success": True}),
        update_inventory=AsyncMock(return_value={"success": True}),
        create_vaccine=AsyncMock(return_value={"id": 5, "name": "MMR"}),
        create_inventory=AsyncMock(return_value={"id": 50, "vaccineId": 5}),
        delete_vaccine=AsyncMock(return_value=True),
        fetch_catalog=AsyncMock(return_value={"success": True, "data": [{"id": 5, "name": "MMR"}]}),
    )
    return AdminService(booking_repo, auth_repo, vaccine_repo, "tok", cache=cache), auth_repo, vaccine_repo

@pytest.mark.asyncio
async def test_keeps_only_odd_ids():
    svc, _, _ = _service(bookings=[{"id": i} for i in range(1, 6)])
    assert [b["id"] for b in await svc.load_bookings()] == [1, 3, 5]

def test_odd_filter_keeps_non_numeric_ids():
    assert is_odd_booking({"id": "abc"})
    assert not is_odd_booking({"id": "4"})

@pytest.mark.asyncio
async def test_one_lookup_per_user_id():
    bookings = [{"id": 1, "userId": 7}, {"id": 3, "userId": 7}, {"id": 5, "userid": 8}]
    svc, auth_repo, _ = _service(bookings, users={"7": {"id": 7, "email": "jane_roe@x.io"}, "8": {"id": 8}})
    rows = await svc.load_bookings()
    assert auth_repo.get_user.await_count == 2
    assert [r["userName"] for r in rows] == ["Jane Roe", "Jane Roe", "User 8"]

    await svc.load_bookings()
    assert auth_repo.get_user.await_count == 2

@pytest.mark.asyncio
async def test_failed_lookup_only_affects_its_booking():
    bookings = [{"id": 1, "userId": 7}, {"id": 3, "userId": 9}, {"id": 5}]
    svc, _, _ = _service(bookings, users={"7": NetworkError(), "9": {"id": 9, "email": "bob@x.io"}})
    rows = await svc.load_bookings()
    assert rows[0]["userName"] == "Unknown User"
    assert rows[0]["userData"] is None
    assert rows[1]["userName"] == "Bob"
    assert "userName" not in rows[2]
    assert 7 not in svc.cache

@pytest.mark.asyncio
async def test_bookings_carry_vaccine_names():
    bookings = [
        {"id": 1, "userId": 7, "notes": '{"cartItems": [{"vaccineName": "Polio"}, {"vaccineName": "MMR"}]}'},
        {"id": 3, "vaccineName": "Hepatitis B"},
        {"id": 5, "notes": "not json"},
    ]
    svc, _, _ = _service(bookings, users={"7": {"id": 7}})
    rows = await svc.load_bookings()
    assert [r["vaccineNames"] for r in rows] == ["Polio, MMR", "Hepatitis B", "N/A"]

def test_cache_is_keyed_by_string_id():
    cache = UserLookupCache()
    cache.put(3, {"id": 3})
    assert "3" in cache and cache.get("3") == {"id": 3}
    cache.clear()
    assert len(cache) == 0

@pytest.mark.parametrize("data,expected", [
    ({"email": "john.doe@x.com"}, "John Doe"),
    ({"email": "mary_ann.lee@x.com", "id": 1}, "Mary Ann Lee"),
    ({"id": 12}, "User 12"),
    (None, "Unknown User"),
])
def test_extract_user_name(data, expected):
    assert extract_user_name(data) == expected

VACCINE = {
    "id": 5,
    "name": "MMR",
    "Inventories": [{"id": 50, "vaccineId": 5, "price": 200, "quantity": 10, "batchNumber": "M-1"}],
}

@pytest.mark.asyncio
async def test_quick_update_only_changed_fields():
    svc, _, repo = _service()
    assert await svc.quick_update(VACCINE, name="MMR", price="200", quantity="10") == []
    repo.update_vaccine.assert_not_awaited()
    repo.update_inventory.assert_not_awaited()

@pytest.mark.asyncio
async def test_quick_update_name_and_inventory():
    svc, _, repo = _service()
    updated = await svc.quick_update(VACCINE, name="MMR II", price="250", quantity="12")
    assert updated == ["vaccine.name", "inventory"]
    repo.update_vaccine.assert_awaited_once_with(5, {"name": "MMR II"}, "tok")
    repo.update_inventory.assert_awaited_once_with(
        50, {"id": 50, "vaccineId": 5, "price": 250.0, "quantity": 12, "batchNumber": "M-1"}, "tok"
    )

@pytest.mark.asyncio
async def test_quick_update_unparseable_quantity_falls_back():
    svc, _, repo = _service()
    await svc.quick_update(VACCINE, quantity="lots")
    sent = repo.update_inventory.await_args.args[1]
    assert sent["quantity"] == 10

@pytest.mark.asyncio
async def test_quick_update_truncates_decimal_quantity():
    svc, _, repo = _service()
    await svc.quick_update(VACCINE, quantity="5.5")
    assert repo.update_inventory.await_args.args[1]["quantity"] == 5

@pytest.mark.asyncio
async def test_quick_update_price_without_inventory_patches_vaccine():
    svc, _, repo = _service()
    await svc.quick_update({"id": 6, "name": "BCG", "price": 80}, price="95.5")
    repo.update_vaccine.assert_awaited_once_with(6, {"price": 95.5}, "tok")
    repo.update_inventory.assert_not_awaited()

@pytest.mark.asyncio
async def test_quick_update_attempts_every_call_before_raising():
    svc, _, repo = _service()
    repo.update_vaccine.side_effect = ApiError("Name taken")
    with pytest.raises(ApiError):
        await svc.quick_update(VACCINE, name="Other", quantity=3)
    repo.update_inventory.assert_awaited_once()

@pytest.mark.asyncio
async def test_add_vaccine_creates_vaccine_then_inventory():
    svc, _, repo = _service()
    created = await svc.add_vaccine({
        "name": "MMR", "ageGroup": "Children", "description": "d",
        "price": "199.5", "quantity": "20", "batchNumber": "M-2",
        "expiryDate": "2027-01-01", "manufacturedDate": "2026-01-01", "manufacturer": "Acme",
    })
    repo.create_vaccine.assert_awaited_once_with({"name": "MMR", "ageGroup": "Children", "description": "d"}, "tok")
    inventory = repo.create_inventory.await_args.args[0]
    assert inventory["vaccineId"] == 5
    assert inventory["quantity"] == 20 and inventory["price"] == 199.5
    assert created["Inventories"] == [{"id": 50, "vaccineId": 5}]

@pytest.mark.asyncio
async def test_find_and_delete_vaccine():
    svc, _, repo = _service()
    assert (await svc.find_vaccine("5"))["name"] == "MMR"
    assert await svc.find_vaccine(99) is None
    assert await svc.delete_vaccine(5) is True
    repo.delete_vaccine.assert_awaited_once_with(5, "tok")
