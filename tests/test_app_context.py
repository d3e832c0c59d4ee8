import logging

import pytest

from order_ledger import app as app_module
from order_ledger.app import get_app_context
from order_ledger.config import LedgerSettings, Settings


@pytest.fixture
def clean_context(monkeypatch):
    monkeypatch.setattr(app_module, "get_logger", logging.getLogger)
    get_app_context.cache_clear()
    yield
    context = get_app_context()
    context.ledger.close()
    get_app_context.cache_clear()


def _settings(path: str, seed: bool) -> Settings:
    return Settings(ledger=LedgerSettings(sqlite_path=path, seed_sample_data=seed))


def test_app_context_wires_components(monkeypatch, ledger_path, clean_context):
    monkeypatch.setattr(app_module, "load_settings", lambda: _settings(ledger_path, False))

    context = get_app_context()

    assert context.store is not None
    assert context.scanner.list_all() == []
    assert get_app_context() is context


def test_app_context_seeds_empty_ledger_once(monkeypatch, ledger_path, clean_context):
    monkeypatch.setattr(app_module, "load_settings", lambda: _settings(ledger_path, True))

    first = get_app_context()
    assert [result.key for result in first.scanner.list_all()] == [
        "logis_ordr_1",
        "logis_ordr_2",
    ]
    first.ledger.close()
    get_app_context.cache_clear()

    second = get_app_context()
    assert len(second.history.history("logis_ordr_1")) == 1
