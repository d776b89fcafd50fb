"""Pytest configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from banknoti.catalog import CatalogSnapshot
from banknoti.models import Transaction, TransactionType
from banknoti.storage import InMemoryStore

GROUP_ID = "family-1"
BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from a developer's real config."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    monkeypatch.delenv("BANKNOTI_ID_TOKEN", raising=False)


@pytest.fixture
def store() -> InMemoryStore:
    """Return an empty in-memory document store."""
    return InMemoryStore()


@pytest.fixture
def catalog() -> CatalogSnapshot:
    """Return the default catalog snapshot."""
    return CatalogSnapshot.default()


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Return a factory for transactions offset from a fixed base time."""

    def factory(
        tx_id: str,
        amount: int = 12345,
        bank_id: str = "kb_kookmin",
        seconds: float = 0,
        **fields: Any,
    ) -> Transaction:
        fields.setdefault("type", TransactionType.EXPENSE)
        return Transaction(
            id=tx_id,
            group_id=GROUP_ID,
            amount=amount,
            bank_id=bank_id,
            transaction_date=BASE_TIME + timedelta(seconds=seconds),
            **fields,
        )

    return factory
