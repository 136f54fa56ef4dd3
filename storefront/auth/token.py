"""
Décodage best-effort du credential (JWT) émis par le service d'auth.
Aucune vérification de signature: on lit seulement l'identifiant utilisateur
dans le segment central (base64 JSON) pour les appels indexés par id.
"""
import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Optional, Union

ID_FIELDS = ("id", "userId", "user_id", "sub")

@dataclass(frozen=True)
class Decoded:
    user_id: Any

@dataclass(frozen=True)
class Malformed:
    reason: str

@dataclass(frozen=True)
class Missing:
    pass

DecodeResult = Union[Decoded, Malformed, Missing]

def _b64decode(segment: str) -> bytes:
    # Les JWT utilisent base64url sans padding
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))

def decode_user_id(token: Optional[str]) -> DecodeResult:
    """
    - Missing: pas de token, ou payload sans aucun champ id/userId/user_id/sub
    - Malformed: pas trois segments, base64 ou JSON invalide
    - Decoded: premier champ présent dans l'ordre ID_FIELDS
    """
    if not token:
        return Missing()
    parts = token.split(".")
    if len(parts) != 3:
        return Malformed("expected three dot-separated segments")
    try:
        payload = json.loads(_b64decode(parts[1]))
    except (binascii.Error, ValueError, UnicodeDecodeError):
        return Malformed("payload is not base64-encoded JSON")
    if not isinstance(payload, dict):
        return Malformed("payload is not a JSON object")
    for field in ID_FIELDS:
        value = payload.get(field)
        if value not in (None, ""):
            return Decoded(value)
    return Missing()

def user_id_from_token(token: Optional[str]) -> Optional[Any]:
    result = decode_user_id(token)
    return result.user_id if isinstance(result, Decoded) else None
