"""Pydantic models describing notifiables and directory entries."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class NotifiableReference(BaseModel):
    """Registered notifiable name plus the values of its identifier fields."""

    name: str = Field(..., min_length=1)
    identifiers: dict[str, Any] = Field(default_factory=dict)


class NotifiableDescriptorRead(BaseModel):
    name: str
    class_name: str
    identifiers: list[str]


class NotifiableEntityRead(BaseModel):
    """Directory entry, with the live notifiable it resolves to when available."""

    id: int
    identifier: str
    class_name: str
    notifiable: NotifiableReference | None = None


__all__ = [
    "NotifiableDescriptorRead",
    "NotifiableEntityRead",
    "NotifiableReference",
]
