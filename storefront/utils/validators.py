import re
from typing import Any, Dict, Mapping

from email_validator import EmailNotValidError, validate_email as _check_email

from storefront.errors import ValidationError

PHONE_RE = re.compile(r"^[+]?[\d\s\-()]{10,}$")

LOGIN_RULES = {
    "email": {"required": True, "email": True},
    "password": {"required": True},
}

REGISTER_RULES = {
    "email": {"required": True, "email": True},
    "password": {"required": True, "minLength": 6},
    "mobileNumber": {"required": True, "phone": True},
}

ADD_VACCINE_RULES = {
    "name": {"required": True, "maxLength": 100},
    "price": {"required": True},
    "quantity": {"required": True},
    "batchNumber": {"required": True},
}

def validate_email(v: Any) -> bool:
    # Syntaxe seulement (pas de requête DNS): même contrôle que EmailStr
    try:
        _check_email(str(v or ""), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True

def validate_phone(v: Any) -> bool:
    return bool(PHONE_RE.match(str(v or "")))

def validate_required(v: Any) -> bool:
    return v is not None and len(str(v).strip()) > 0

def validate_form(data: Mapping[str, Any], rules: Mapping[str, Mapping[str, Any]]) -> Dict[str, str]:
    """Premier échec par champ, dans l'ordre required, email, phone, minLength, maxLength."""
    errors: Dict[str, str] = {}
    for field, rule in rules.items():
        value = data.get(field)
        if rule.get("required") and not validate_required(value):
            errors[field] = f"{field} is required"
            continue
        if not value:
            continue
        if rule.get("email") and not validate_email(value):
            errors[field] = "Please enter a valid email address"
        elif rule.get("phone") and not validate_phone(value):
            errors[field] = "Please enter a valid phone number"
        elif rule.get("minLength") and len(str(value)) < rule["minLength"]:
            errors[field] = f"{field} must be at least {rule['minLength']} characters"
        elif rule.get("maxLength") and len(str(value)) > rule["maxLength"]:
            errors[field] = f"{field} must be no more than {rule['maxLength']} characters"
    return errors

def ensure_valid(data: Mapping[str, Any], rules: Mapping[str, Mapping[str, Any]]) -> None:
    errors = validate_form(data, rules)
    if errors:
        raise ValidationError(errors)
