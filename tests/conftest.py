import pytest

from docbot.commands import router


@pytest.fixture(autouse=True)
def _clean_router(tmp_path, monkeypatch):
    """Keep request logs out of the repo and start every test with no commands."""
    monkeypatch.setattr(router, "_LOG_PATH", str(tmp_path / "docbot.log"))
    router.reset()
    yield
    router.reset()
