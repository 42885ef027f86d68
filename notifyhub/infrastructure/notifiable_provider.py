"""Look up live notifiable instances from their identifier values."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Session

from notifyhub.domain.entities import NotifiableDescriptor

logger = logging.getLogger(__name__)


class NotifiableProvider(Protocol):
    """Return the live instance described by ``descriptor`` and ``values``."""

    def find(self, descriptor: NotifiableDescriptor, values: Mapping[str, Any]) -> object | None:
        ...


class SqlAlchemyNotifiableProvider:
    """Fetch notifiables that are SQLAlchemy mapped classes."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, descriptor: NotifiableDescriptor, values: Mapping[str, Any]) -> object | None:
        try:
            mapper = sa_inspect(descriptor.cls)
        except NoInspectionAvailable:
            logger.warning(
                "Notifiable '%s' (%s) is not a mapped class; it cannot be looked up",
                descriptor.name,
                descriptor.class_path,
            )
            return None

        criteria = {
            field: _coerce(mapper, field, value) for field, value in values.items()
        }
        return self.session.query(descriptor.cls).filter_by(**criteria).first()


def _coerce(mapper: Any, field: str, value: Any) -> Any:
    """Convert ``value`` to the Python type of the mapped column ``field``."""

    if not isinstance(value, str):
        return value
    column = mapper.columns.get(field)
    if column is None:
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is str:
        return value
    if python_type is bool:
        return value.strip().lower() in {"1", "true", "yes"}
    try:
        return python_type(value)
    except (TypeError, ValueError):
        return value


__all__ = ["NotifiableProvider", "SqlAlchemyNotifiableProvider"]
