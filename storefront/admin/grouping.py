"""
Regroupement des réservations par jour de création (console admin).
Logique pure: les dates sont ramenées à l'heure locale avant comparaison.
"""
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

TODAY_LABEL = "Today"
YESTERDAY_LABEL = "Yesterday"
UNKNOWN_DATE_LABEL = "Unknown Date"

def parse_created_at(value: Any) -> Optional[datetime]:
    """ISO 8601 (suffixe Z accepté) -> datetime locale naïve; None si absent ou illisible."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed

def format_day(d: date) -> str:
    # ex: "Monday, October 13, 2026"
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"

def day_label(created: Optional[datetime], today: date) -> str:
    if created is None:
        return UNKNOWN_DATE_LABEL
    d = created.date()
    if d == today:
        return TODAY_LABEL
    if d == today - timedelta(days=1):
        return YESTERDAY_LABEL
    return format_day(d)

def _parse_label(label: str) -> Optional[date]:
    try:
        return datetime.strptime(label, "%A, %B %d, %Y").date()
    except ValueError:
        return None

def _bucket_order(label: str, today: date) -> Tuple[int, int, str]:
    if label == TODAY_LABEL:
        return (0, 0, "")
    if label == YESTERDAY_LABEL:
        return (1, 0, "")
    parsed = _parse_label(label)
    if parsed is not None:
        return (2, -parsed.toordinal(), "")
    # libellé illisible: ordre lexical, après les dates
    return (3, 0, label)

def group_by_day(bookings: List[Dict[str, Any]], today: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Groupes [{label, bookings}] ordonnés: Today, Yesterday, puis dates décroissantes,
    Unknown Date en dernier. Dans un groupe, la plus récente d'abord.
    """
    today = today or date.today()
    buckets: Dict[str, List[Tuple[Optional[datetime], Dict[str, Any]]]] = {}
    for booking in bookings:
        created = parse_created_at(booking.get("createdAt"))
        buckets.setdefault(day_label(created, today), []).append((created, booking))

    groups = []
    for label in sorted(buckets, key=lambda l: _bucket_order(l, today)):
        entries = buckets[label]
        entries.sort(key=lambda e: e[0] or datetime.min, reverse=True)
        groups.append({"label": label, "bookings": [b for _, b in entries]})
    return groups
