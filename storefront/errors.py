"""
Taxonomie des erreurs de la boutique.
Toutes les erreurs sont terminales pour l'opération qui les lève (aucun retry)
et sont rendues en JSON {"detail": ...} par les handlers de app_setup.exceptions.
"""
from typing import Dict, Optional

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."

class StorefrontError(Exception):
    """Base commune; `status_code` sert au rendu HTTP."""
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

class NetworkError(StorefrontError):
    """Échec de transport (pas de réponse): message générique, jamais retenté."""
    status_code = 502

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message)

class ApiError(StorefrontError):
    """Réponse reçue mais en échec: le message du collaborateur est repris tel quel."""
    status_code = 400

    def __init__(self, message: str, upstream_status: Optional[int] = None, upstream_message: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_message = upstream_message

class ValidationError(StorefrontError):
    """Contrôles locaux de formulaire, levés avant tout appel réseau."""
    status_code = 422

    def __init__(self, errors: Dict[str, str], message: str = "Invalid form data"):
        super().__init__(message)
        self.errors = dict(errors)

class CapacityError(StorefrontError):
    """Quantité demandée supérieure au stock snapshotté de la ligne."""
    status_code = 409

    def __init__(self, available: int):
        super().__init__(f"Only {available} items available")
        self.available = available

class AuthRequired(StorefrontError):
    """Pas une panne: branche vers l'invite de connexion (checkout sans identité)."""
    status_code = 401

    def __init__(self, message: str = "Please login to proceed to checkout"):
        super().__init__(message)
