import pytest

from logroller.config import ENV_OVERRIDES


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)
