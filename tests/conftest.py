"""Shared fixtures: an in-memory database and a registry of test notifiables."""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notifyhub.application.use_cases.notifications import NotificationManager
from notifyhub.domain.entities import NotificationEvents
from notifyhub.infrastructure import models  # noqa: F401  # register ORM tables
from notifyhub.infrastructure.database import Base
from notifyhub.infrastructure.discovery import NotifiableDiscovery
from notifyhub.infrastructure.notifications import NotificationEventDispatcher


class AccountModel(Base):
    """Notifiable identified by its integer primary key."""

    __tablename__ = "test_account"

    id = Column(Integer, primary_key=True)
    email = Column(String(120), nullable=False)

    def __repr__(self) -> str:
        return f"AccountModel(id={self.id!r})"


class TeamModel(Base):
    """Notifiable identified by two string columns."""

    __tablename__ = "test_team"

    organization = Column(String(50), primary_key=True)
    slug = Column(String(50), primary_key=True)


@pytest.fixture()
def engine():
    """Return a fresh in-memory SQLite engine with every table created."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session(engine):
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    with factory() as session:
        yield session


@pytest.fixture()
def discovery() -> NotifiableDiscovery:
    discovery = NotifiableDiscovery()
    discovery.register(AccountModel, name="user")
    discovery.register(TeamModel, name="team", identifiers=("organization", "slug"))
    return discovery


@pytest.fixture()
def dispatcher() -> NotificationEventDispatcher:
    return NotificationEventDispatcher()


@pytest.fixture()
def received(dispatcher) -> list:
    """Collect every ``(topic, event)`` published on ``dispatcher``."""

    events: list = []

    def collect(topic, event):
        events.append((topic, event))

    for topic in NotificationEvents.ALL:
        dispatcher.subscribe(topic, collect)
    return events


@pytest.fixture()
def manager(session, discovery, dispatcher) -> NotificationManager:
    return NotificationManager(session, discovery=discovery, dispatcher=dispatcher)


@pytest.fixture()
def make_account(session):
    """Persist and return an ``AccountModel``."""

    def factory(account_id: int | None = None, email: str = "user@example.com") -> AccountModel:
        account = AccountModel(id=account_id, email=email)
        session.add(account)
        session.commit()
        return account

    return factory


@pytest.fixture()
def make_team(session):
    """Persist and return a ``TeamModel``."""

    def factory(organization: str, slug: str) -> TeamModel:
        team = TeamModel(organization=organization, slug=slug)
        session.add(team)
        session.commit()
        return team

    return factory
