from datetime import timedelta

from models.base import utcnow


def future(days: float = 7) -> str:
    return (utcnow() + timedelta(days=days)).isoformat()


def past(days: float = 1) -> str:
    return (utcnow() - timedelta(days=days)).isoformat()


def today() -> str:
    return utcnow().date().isoformat()
