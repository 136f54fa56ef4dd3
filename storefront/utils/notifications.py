from typing import Any, Dict, MutableMapping, Optional

NOTIFICATION_KEY = "notification"
DISMISS_AFTER_MS = 3000

def push_notification(storage: MutableMapping[str, Any], message: str, type_: str = "success") -> None:
    """Une seule notification en attente par session; la dernière remplace la précédente."""
    storage[NOTIFICATION_KEY] = {"message": message, "type": type_}

def pop_notification(storage: MutableMapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Lecture unique: la notification est retirée de la session dès qu'elle est servie."""
    notification = storage.pop(NOTIFICATION_KEY, None)
    if not notification:
        return None
    return {**notification, "dismissAfterMs": DISMISS_AFTER_MS}
