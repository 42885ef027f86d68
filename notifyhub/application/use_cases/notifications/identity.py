"""Map notifiable objects to stable directory keys."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Final

from notifyhub.domain.entities import NotifiableDescriptor
from notifyhub.domain.exceptions import NotFoundError
from notifyhub.infrastructure.discovery import NotifiableDiscovery

KEY_SEPARATOR: Final[str] = "-"
_ESCAPE: Final[str] = "\\"


def join_key(values: Iterable[Any]) -> str:
    """Join stringified ``values`` with :data:`KEY_SEPARATOR`.

    Backslashes and separators inside a value are escaped, so ``("a-b", "c")``
    and ``("a", "b-c")`` never produce the same key. Values without either
    character are joined unchanged.
    """

    return KEY_SEPARATOR.join(_escape(str(value)) for value in values)


def split_key(key: str) -> list[str]:
    """Split a key produced by :func:`join_key` back into its values."""

    values: list[str] = []
    current: list[str] = []
    escaped = False
    for char in key:
        if escaped:
            current.append(char)
            escaped = False
        elif char == _ESCAPE:
            escaped = True
        elif char == KEY_SEPARATOR:
            values.append("".join(current))
            current = []
        else:
            current.append(char)
    if escaped:
        current.append(_ESCAPE)
    values.append("".join(current))
    return values


def _escape(value: str) -> str:
    return value.replace(_ESCAPE, _ESCAPE * 2).replace(KEY_SEPARATOR, _ESCAPE + KEY_SEPARATOR)


class IdentityResolver:
    """Resolve notifiables against the registry held by a discovery."""

    def __init__(self, discovery: NotifiableDiscovery) -> None:
        self.discovery = discovery

    def list_descriptors(self) -> Mapping[str, NotifiableDescriptor]:
        return self.discovery.get_notifiables()

    def describe(self, name: str) -> NotifiableDescriptor:
        descriptor = self.list_descriptors().get(name)
        if descriptor is None:
            raise NotFoundError(f"Notifiable '{name}' not found", details={"name": name})
        return descriptor

    def name_of(self, notifiable: object) -> str | None:
        """Return the registered name of ``notifiable`` or ``None``."""

        return self.discovery.get_notifiable_name(notifiable)

    def descriptor_for(self, notifiable: object) -> NotifiableDescriptor:
        descriptor = self.discovery.find_by_type(type(notifiable))
        if descriptor is None:
            cls = type(notifiable)
            raise NotFoundError(
                f"{cls.__module__}.{cls.__qualname__} is not a registered notifiable",
                details={"class": f"{cls.__module__}:{cls.__qualname__}"},
            )
        return descriptor

    def descriptor_for_class(self, class_name: str) -> NotifiableDescriptor:
        descriptor = self.discovery.find_by_class_path(class_name)
        if descriptor is None:
            raise NotFoundError(
                f"Unable to find the notifiable registered for {class_name}",
                details={"class": class_name},
            )
        return descriptor

    def class_name_of(self, notifiable: object) -> str:
        return self.descriptor_for(notifiable).class_path

    def resolve_key(self, notifiable: object) -> str:
        """Return the directory key of ``notifiable``.

        The key is made of the identifier values in registry order, so
        reordering ``identifiers`` orphans the directory rows stored before.
        """

        descriptor = self.descriptor_for(notifiable)
        return join_key(descriptor.identifier_values(notifiable))

    def identity_of(self, notifiable: object) -> tuple[str, str]:
        """Return ``(key, class_name)`` for ``notifiable``."""

        descriptor = self.descriptor_for(notifiable)
        return join_key(descriptor.identifier_values(notifiable)), descriptor.class_path

    @staticmethod
    def parse_key(key: str) -> list[str]:
        return split_key(key)


__all__ = ["IdentityResolver", "KEY_SEPARATOR", "join_key", "split_key"]
