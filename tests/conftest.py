"""Pytest configuration and fixtures."""
import asyncio
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from fastapi.websockets import WebSocketState

from sos_relay.config import Settings
from sos_relay.errors import UpstreamFailure
from sos_relay.fanout import ChannelRegistry
from sos_relay.main import create_app
from sos_relay.pipelines.intake import IntakeService
from sos_relay.services.database import Database
from sos_relay.services.report_store import ReportStore
from sos_relay.utils.audit import clear_audit_log


class FrozenClock:
    """Store clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeChannel:
    """Stands in for a dashboard WebSocket."""

    def __init__(self, fail: bool = False, gate: asyncio.Event | None = None):
        self.messages: list[dict] = []
        self.fail = fail
        self.gate = gate
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    def close(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED

    async def send_json(self, message: dict) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise RuntimeError("socket closed")
        self.messages.append(message)


class FakeStorage:
    """Object storage that hands out predictable URLs."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploaded: list = []

    async def upload(self, incoming) -> str:
        if self.fail:
            raise UpstreamFailure("File upload failed")
        self.uploaded.append(incoming)
        return f"https://media.example/{incoming.filename}"


@pytest.fixture(autouse=True)
def _clean_audit_log():
    clear_audit_log()
    yield
    clear_audit_log()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def db():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.close()


@pytest.fixture
def store(db, clock):
    return ReportStore(db, clock=clock)


@pytest.fixture
def delayed_store(db, clock):
    return ReportStore(db, visibility_delay_seconds=300, clock=clock)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def make_intake(store, storage):
    """Build an IntakeService inside a running loop with its own registry."""

    def _make(**kwargs) -> IntakeService:
        params = {"store": store, "storage": storage, "fanout": ChannelRegistry()}
        params.update(kwargs)
        return IntakeService(**params)

    return _make


@pytest.fixture
def make_client(tmp_path):
    clients = []

    def _make(**overrides) -> TestClient:
        params = {"database_url": "sqlite://", "upload_dir": str(tmp_path / "uploads")}
        params.update(overrides)
        client = TestClient(create_app(Settings(**params)))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()
