"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import threading  # noqa: E402
from typing import Any, Iterator  # noqa: E402

import pytest  # noqa: E402
import requests  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from locsync.backend.app import create_app  # noqa: E402
from locsync.backend.app.context import LocalizationContext, build_context  # noqa: E402
from locsync.backend.config import AppSettings, load_settings  # noqa: E402
from locsync.backend.services import InMemoryPreferenceStore  # noqa: E402

SAMPLE_CSV = (
    "Key,Type,Desc,English [en],Spanish [es],French [fr]\n"
    "MENU_PLAY,Text,,Play,Jugar,Jouer\n"
    "MENU_QUIT,Text,,Quit,Salir,\n"
)


def make_response(body: bytes | str, *, status: int = 200, url: str = "") -> requests.Response:
    """Build a real ``requests.Response`` carrying ``body``."""

    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    response.url = url
    response.reason = "OK" if status < 400 else "Error"
    return response


class FakeHTTPSession:
    """Stand-in for ``requests.Session`` returning queued responses."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._queue: list[requests.Response | Exception] = []
        self.started = threading.Event()
        self.release: threading.Event | None = None

    def queue(self, item: requests.Response | Exception | str, *, status: int = 200) -> None:
        if isinstance(item, str):
            item = make_response(item, status=status)
        self._queue.append(item)

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"url": url, **kwargs})
        self.started.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if not self._queue:
            raise requests.ConnectionError("no response queued")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        item.url = url
        return item


@pytest.fixture()
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture()
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "localization.csv"


@pytest.fixture()
def settings(cache_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    """Settings pointing the cache into a temporary directory."""

    for variable in ("LOCSYNC_CONFIG", "LOCSYNC_TABLE_ID", "LOCSYNC_GRID_ID"):
        monkeypatch.delenv(variable, raising=False)

    return load_settings(
        overrides={
            "sync": {
                "source": {
                    "table_id": "T1",
                    "grid_id": "G1",
                    "cache_path": str(cache_path),
                },
                "startup_delay_seconds": 0,
            },
            "session": {"default_language": "English", "preferences_path": None},
        }
    )


@pytest.fixture()
def fake_http() -> FakeHTTPSession:
    return FakeHTTPSession()


@pytest.fixture()
def preferences() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture()
def context(
    settings: AppSettings,
    fake_http: FakeHTTPSession,
    preferences: InMemoryPreferenceStore,
) -> Iterator[LocalizationContext]:
    """Service graph wired to the fake HTTP session."""

    context = build_context(settings, http_session=fake_http, preferences=preferences)
    yield context
    context.close()


@pytest.fixture()
def app(context: LocalizationContext) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(context=context)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
