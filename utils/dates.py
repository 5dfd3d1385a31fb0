# utils/dates.py
from datetime import datetime, timedelta


def start_of_today() -> datetime:
    """Midnight UTC; timestamps are stored in UTC."""
    return datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)


def days_ago(days: int) -> datetime:
    return start_of_today() - timedelta(days=days)
