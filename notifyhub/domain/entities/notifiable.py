"""Domain entities describing notifiable kinds and their directory entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable


def class_path(cls: type) -> str:
    """Return the ``module:qualname`` path used to store ``cls``."""

    return f"{cls.__module__}:{cls.__qualname__}"


@dataclass(frozen=True)
class NotifiableDescriptor:
    """Registry entry describing how to identify one kind of notifiable.

    ``accessors`` is built once from ``identifiers`` so that identifier values
    are read through a fixed table instead of looking up attribute names on
    every call. The order of ``identifiers`` is part of the stored key.
    """

    name: str
    cls: type
    identifiers: tuple[str, ...]
    accessors: tuple[Callable[[Any], Any], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self.identifiers:
            raise ValueError(f"Notifiable '{self.name}' declares no identifiers")
        object.__setattr__(
            self, "accessors", tuple(attrgetter(name) for name in self.identifiers)
        )

    @property
    def class_path(self) -> str:
        return class_path(self.cls)

    def identifier_values(self, notifiable: object) -> list[Any]:
        """Return the identifier values of ``notifiable`` in registry order."""

        return [accessor(notifiable) for accessor in self.accessors]


@dataclass
class NotifiableEntity:
    """Stored, identity-resolved representation of one notifiable instance."""

    id: int | None
    identifier: str
    class_name: str


__all__ = ["NotifiableDescriptor", "NotifiableEntity", "class_path"]
