"""Fetch-or-create access to the notifiable directory."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notifyhub.domain.entities import NotifiableEntity
from notifyhub.domain.exceptions import NotFoundError
from notifyhub.infrastructure.notifiable_provider import NotifiableProvider
from notifyhub.infrastructure.repositories import NotifiableRepository

from .identity import IdentityResolver

logger = logging.getLogger(__name__)


class NotifiableDirectory:
    """Keep one directory row per notifiable instance."""

    def __init__(
        self,
        session: Session,
        resolver: IdentityResolver,
        provider: NotifiableProvider,
    ) -> None:
        self.session = session
        self.resolver = resolver
        self.provider = provider
        self.repository = NotifiableRepository(session)

    def find(self, notifiable: object) -> NotifiableEntity | None:
        """Return the directory row of ``notifiable`` without creating it."""

        identifier, class_name = self.resolver.identity_of(notifiable)
        return self.repository.get_by_identifier(identifier=identifier, class_name=class_name)

    def get_or_create(self, notifiable: object, *, commit: bool = True) -> NotifiableEntity:
        """Return the directory row of ``notifiable``, inserting it if needed.

        A new row is committed straight away when ``commit`` is true. When a
        concurrent request inserted the same row first, the unique constraint
        fails inside a savepoint and the existing row is returned instead.
        """

        identifier, class_name = self.resolver.identity_of(notifiable)
        entity = self.repository.get_by_identifier(identifier=identifier, class_name=class_name)
        if entity is not None:
            return entity

        try:
            entity = self.repository.create(identifier=identifier, class_name=class_name)
        except IntegrityError:
            entity = self.repository.get_by_identifier(
                identifier=identifier, class_name=class_name
            )
            if entity is None:
                raise
            logger.info(
                "Directory entry %s/%s was created concurrently; using entry %s",
                class_name,
                identifier,
                entity.id,
            )
            return entity

        logger.debug("Created directory entry %s for %s/%s", entity.id, class_name, identifier)
        if commit:
            self.session.commit()
        return entity

    def get_by_id(self, entity_id: int) -> NotifiableEntity | None:
        return self.repository.get(entity_id)

    def reverse_resolve(self, entity: NotifiableEntity) -> object | None:
        """Return the live notifiable stored as ``entity``, if it still exists."""

        descriptor = self.resolver.descriptor_for_class(entity.class_name)
        values = self.resolver.parse_key(entity.identifier)
        if len(values) != len(descriptor.identifiers):
            logger.warning(
                "Directory entry %s has %d identifier value(s) but '%s' declares %d",
                entity.id,
                len(values),
                descriptor.name,
                len(descriptor.identifiers),
            )
            return None
        return self.provider.find(descriptor, dict(zip(descriptor.identifiers, values)))

    def resolve_reference(self, name: str, identifiers: Mapping[str, Any]) -> object:
        """Return the live notifiable registered as ``name`` with ``identifiers``."""

        descriptor = self.resolver.describe(name)
        missing = [field for field in descriptor.identifiers if field not in identifiers]
        if missing:
            raise ValueError(
                f"Missing identifier(s) for notifiable '{name}': {', '.join(missing)}"
            )
        values = {field: identifiers[field] for field in descriptor.identifiers}
        notifiable = self.provider.find(descriptor, values)
        if notifiable is None:
            raise NotFoundError(
                f"Notifiable '{name}' with identifiers {values} not found",
                details={"name": name, "identifiers": values},
            )
        return notifiable


__all__ = ["NotifiableDirectory"]
