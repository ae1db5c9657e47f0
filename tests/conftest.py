"""Shared pytest fixtures for the ArtPivot test suite."""

from pathlib import Path
from types import SimpleNamespace

import pytest

from artpivot.extractors.classifier import FieldClassifier
from artpivot.settings import get_settings
from artpivot.storage.database import Database

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def handout_text() -> str:
    """Return the text of the sample lecture handout fixture."""
    return (FIXTURES_DIR / "greek_art_handout.txt").read_text(encoding="utf-8")


@pytest.fixture
def classifier() -> FieldClassifier:
    """Return a classifier loaded from config/classifier.yaml."""
    return FieldClassifier.from_yaml()


@pytest.fixture
def in_memory_db():
    """Return a Database instance backed by an in-memory SQLite database."""
    db = Database(":memory:")
    db.create_tables()
    return db


@pytest.fixture
def file_db(tmp_path):
    """Return a Database backed by a temp file (safe across threads)."""
    db = Database(tmp_path / "test.db")
    db.create_tables()
    return db


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Settings pointing at tmp_path, with Cloudinary unset."""
    for var in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "settings.db"))
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


class FakeCompletions:
    """Stands in for ``client.chat.completions`` of the OpenAI SDK."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_fake_openai(content=None, error=None):
    completions = FakeCompletions(content=content, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def fake_openai():
    """Factory for fake OpenAI clients: ``fake_openai(content=..., error=...)``."""
    return make_fake_openai
