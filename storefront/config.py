# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose les URLs des trois services distants (auth, catalogue, réservation)
- Normalise les réglages session/cookies, CORS/hosts et le timeout HTTP
- Liste des emails administrateurs (contrôle d'accès à la console admin)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _service_url(*names: str, default: str) -> str:
    """
    Première variable renseignée parmi `names`, préfixée en http:// si le schéma manque
    et sans slash final (les chemins /api/v1/... sont concaténés tels quels).
    """
    raw = ""
    for name in names:
        raw = _clean_env(os.getenv(name) or "")
        if raw:
            break
    url = raw or default
    if not url.startswith("http"):
        url = "http://" + url
    return url.rstrip("/")

# Services distants (collaborateurs HTTP/JSON)
AUTH_SERVICE_URL = _service_url("AUTH_SERVICE_URL", "VITE_USER_AUTH_SERVICE", default="http://localhost:3000")
VACCINE_SERVICE_URL = _service_url("VACCINE_SERVICE_URL", "VITE_VACCINE_SEARCH_SERVICE", default="http://localhost:4000")
BOOKING_SERVICE_URL = _service_url("BOOKING_SERVICE_URL", "VITE_VACCINE_BOOKING_SERVICE", default="http://localhost:5000")

# Timeout des appels sortants (secondes); aucun retry n'est tenté
HTTP_TIMEOUT_SECONDS = float(_clean_env(os.getenv("HTTP_TIMEOUT_SECONDS") or "") or 10)

# Accès admin: comparaison d'email (logique provisoire héritée, cf. DESIGN.md)
ADMIN_EMAILS = [e.strip().lower() for e in os.getenv("ADMIN_EMAILS", os.getenv("ADMIN_EMAIL", "admin@example.com")).split(",") if e.strip()]

# Session (cookie signé qui porte les clés persistées) et sécurité
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "") or "replace_me_with_a_long_random_secret"
SESSION_COOKIE_NAME = _clean_env(os.getenv("SESSION_COOKIE_NAME") or "") or "vx_session"
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Paniers en mémoire: expiration après inactivité et plafond global
CART_IDLE_TTL_SECONDS = int(_clean_env(os.getenv("CART_IDLE_TTL_SECONDS") or "") or 86400)
CART_MAX_CARTS = int(_clean_env(os.getenv("CART_MAX_CARTS") or "") or 10000)
