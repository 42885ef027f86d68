"""Conversions for the notification ``date`` column.

Dates are stored as naive ``DATETIME`` values expressed in the application
timezone (``APP_TIMEZONE``) and handed back to callers as aware datetimes.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from notifyhub.config import get_settings
from notifyhub.domain.exceptions import ConfigurationError


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the IANA zone named by the ``APP_TIMEZONE`` setting."""

    tz_name = get_settings().app_timezone.strip() or "UTC"
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            f"Unknown application timezone '{tz_name}'",
            details={"app_timezone": tz_name},
        ) from exc


def stored_now() -> datetime:
    """Return the current time in the stored (naive, app-local) form."""

    return datetime.now(tz=get_app_timezone()).replace(tzinfo=None)


def to_stored_date(value: datetime | None) -> datetime:
    """Return ``value`` as a naive app-local datetime, or now when missing.

    Naive input is taken to be app-local already.
    """

    if value is None:
        return stored_now()
    if value.tzinfo is None:
        return value
    return value.astimezone(get_app_timezone()).replace(tzinfo=None)


def from_stored_date(value: datetime | None) -> datetime | None:
    """Attach the application timezone to a stored date."""

    if value is None:
        return None
    return value.replace(tzinfo=get_app_timezone())
