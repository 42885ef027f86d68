"""Registry of the domain classes that can receive notifications.

Classes are registered either with the :func:`notifiable` decorator or from a
JSON file named by the ``NOTIFIABLES_FILE`` setting::

    {
        "notifiables": {
            "user": {"class": "myapp.models:UserModel", "identifiers": ["id"]}
        }
    }

When ``identifiers`` is omitted for a SQLAlchemy mapped class, the primary key
attribute names of the mapper are used.
"""

from __future__ import annotations

import importlib
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from notifyhub.domain.entities import NotifiableDescriptor, class_path
from notifyhub.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


class NotifiableDiscovery:
    """Hold the notifiable descriptors known to the application."""

    def __init__(self, config_path: Path | str | None = None) -> None:
        self._config_path = Path(config_path) if config_path else None
        self._descriptors: dict[str, NotifiableDescriptor] = {}
        self._loaded = self._config_path is None

    def configure(self, config_path: Path | str | None) -> None:
        """Point the registry at a notifiables file, loaded on next access."""

        self._config_path = Path(config_path) if config_path else None
        self._loaded = self._config_path is None

    def register(
        self,
        cls: type,
        *,
        name: str,
        identifiers: Iterable[str] | None = None,
    ) -> NotifiableDescriptor:
        """Register ``cls`` under ``name`` and return its descriptor."""

        name = (name or "").strip()
        if not name:
            raise ConfigurationError(f"Notifiable {class_path(cls)} needs a name")

        fields = tuple(identifiers) if identifiers is not None else _primary_key_names(cls)
        if not fields:
            raise ConfigurationError(
                f"Notifiable '{name}' declares no identifier fields",
                details={"name": name, "class": class_path(cls)},
            )

        existing = self._descriptors.get(name)
        if existing is not None and existing.cls is not cls:
            raise ConfigurationError(
                f"Notifiable name '{name}' is already registered for {existing.class_path}",
                details={"name": name, "class": class_path(cls)},
            )

        descriptor = NotifiableDescriptor(name=name, cls=cls, identifiers=fields)
        self._descriptors[name] = descriptor
        logger.debug(
            "Registered notifiable '%s' for %s identified by %s",
            name,
            descriptor.class_path,
            ", ".join(fields),
        )
        return descriptor

    def notifiable(
        self, name: str, *, identifiers: Iterable[str] | None = None
    ) -> Callable[[T], T]:
        """Class decorator registering the decorated class under ``name``."""

        def decorator(cls: T) -> T:
            self.register(cls, name=name, identifiers=identifiers)
            return cls

        return decorator

    def get_notifiables(self) -> Mapping[str, NotifiableDescriptor]:
        """Return every registered descriptor keyed by name."""

        self._ensure_loaded()
        return MappingProxyType(self._descriptors)

    def get_notifiable_name(self, notifiable: object) -> str | None:
        """Return the registered name for the type of ``notifiable``."""

        descriptor = self.find_by_type(type(notifiable))
        return descriptor.name if descriptor else None

    def find_by_type(self, cls: type) -> NotifiableDescriptor | None:
        """Return the descriptor of ``cls``, falling back to its base classes."""

        by_class = {descriptor.cls: descriptor for descriptor in self.get_notifiables().values()}
        for candidate in cls.__mro__:
            descriptor = by_class.get(candidate)
            if descriptor is not None:
                return descriptor
        return None

    def find_by_class_path(self, path: str) -> NotifiableDescriptor | None:
        for descriptor in self.get_notifiables().values():
            if descriptor.class_path == path:
                return descriptor
        return None

    def load_file(self, path: Path | str) -> None:
        """Register every notifiable declared in the JSON file at ``path``."""

        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(
                f"Unable to read the notifiables file {path}: {exc}",
                details={"path": str(path)},
            ) from exc

        entries = raw.get("notifiables") if isinstance(raw, dict) else None
        if not isinstance(entries, dict):
            raise ConfigurationError(
                f"The notifiables file {path} must contain a 'notifiables' mapping",
                details={"path": str(path)},
            )

        for name, entry in entries.items():
            if not isinstance(entry, dict) or not entry.get("class"):
                raise ConfigurationError(
                    f"Notifiable '{name}' must declare a 'class'",
                    details={"path": str(path), "name": name},
                )
            identifiers = entry.get("identifiers")
            if identifiers is not None and (
                not isinstance(identifiers, list)
                or not all(isinstance(item, str) for item in identifiers)
            ):
                raise ConfigurationError(
                    f"Identifiers of notifiable '{name}' must be a list of field names",
                    details={"path": str(path), "name": name},
                )
            self.register(_import_class(entry["class"]), name=name, identifiers=identifiers)

        logger.info("Loaded %d notifiable(s) from %s", len(entries), path)

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if self._config_path is not None:
            self.load_file(self._config_path)
        self._loaded = True


def _import_class(path: str) -> type:
    """Import ``module:Qualname`` (or ``module.Qualname``) and return the class."""

    module_name, separator, qualname = path.partition(":")
    if not separator:
        module_name, _, qualname = path.rpartition(".")
    if not module_name or not qualname:
        raise ConfigurationError(f"Invalid notifiable class path '{path}'")

    try:
        target: Any = importlib.import_module(module_name)
        for part in qualname.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(
            f"Unable to import notifiable class '{path}': {exc}",
            details={"class": path},
        ) from exc

    if not isinstance(target, type):
        raise ConfigurationError(f"'{path}' is not a class", details={"class": path})
    return target


def _primary_key_names(cls: type) -> tuple[str, ...]:
    try:
        mapper = sa_inspect(cls)
    except NoInspectionAvailable:
        return ()
    return tuple(mapper.get_property_by_column(column).key for column in mapper.primary_key)


notifiable_discovery = NotifiableDiscovery()


def notifiable(name: str, *, identifiers: Iterable[str] | None = None) -> Callable[[T], T]:
    """Register a class with the shared :data:`notifiable_discovery`."""

    return notifiable_discovery.notifiable(name, identifiers=identifiers)


__all__ = [
    "NotifiableDiscovery",
    "notifiable",
    "notifiable_discovery",
]
