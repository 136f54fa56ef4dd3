import pytest

from storefront.errors import ValidationError
from storefront.utils.validators import (
    REGISTER_RULES,
    ensure_valid,
    validate_email,
    validate_form,
    validate_phone,
)

@pytest.mark.parametrize("email,ok", [
    ("a@b.co", True),
    ("john.doe@example.com", True),
    ("a b@c.d", False),
    ("a@b", False),
    ("", False),
    # points et tirets mal placés
    ("a@b..com", False),
    ("a..b@c.com", False),
    ("a@-b.com", False),
    (".a@b.com", False),
])
def test_validate_email(email, ok):
    assert validate_email(email) is ok

@pytest.mark.parametrize("phone,ok", [("+1 (555) 123-4567", True), ("0123456789", True), ("12345", False), ("abc1234567", False)])
def test_validate_phone(phone, ok):
    assert validate_phone(phone) is ok

def test_form_messages():
    errors = validate_form({"email": "nope", "password": "123", "mobileNumber": ""}, REGISTER_RULES)
    assert errors == {
        "email": "Please enter a valid email address",
        "password": "password must be at least 6 characters",
        "mobileNumber": "mobileNumber is required",
    }

def test_max_length():
    errors = validate_form({"name": "x" * 5}, {"name": {"maxLength": 3}})
    assert errors == {"name": "name must be no more than 3 characters"}

def test_ensure_valid_raises_with_field_errors():
    with pytest.raises(ValidationError) as exc:
        ensure_valid({"email": "   "}, {"email": {"required": True}})
    assert exc.value.errors == {"email": "email is required"}
    ensure_valid({"email": "a@b.co"}, {"email": {"required": True, "email": True}})
