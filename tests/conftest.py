"""Pytest fixtures: fake Gemini clients and a Flask test client. No test touches the network."""

import io
import struct
import zlib
from types import SimpleNamespace

import pytest
from PIL import Image


class FakeModels:
    """Stands in for genai.Client().models.

    behaviours maps a model name to either a text (returned as response.text),
    an exception instance (raised), or a ready-made response object.
    """

    def __init__(self, behaviours=None, listed=None, list_error=None):
        self.behaviours = behaviours or {}
        self.listed = listed or []
        self.list_error = list_error
        self.calls = []
        self.list_calls = 0

    def list(self):
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return iter(self.listed)

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        behaviour = self.behaviours.get(model, RuntimeError(f"404 NOT_FOUND. models/{model} is not found"))
        if isinstance(behaviour, BaseException):
            raise behaviour
        if isinstance(behaviour, str):
            return SimpleNamespace(text=behaviour, prompt_feedback=None, candidates=[])
        return behaviour


class FakeClient:
    def __init__(self, **kwargs):
        self.models = FakeModels(**kwargs)

    @property
    def calls(self):
        return self.models.calls

    @property
    def attempted(self):
        return [call["model"] for call in self.models.calls]


def _listed_model(name, actions=("generateContent", "countTokens")):
    return SimpleNamespace(name=f"models/{name}", supported_actions=list(actions))


@pytest.fixture
def listed_model():
    """Builds a model entry as returned by client.models.list()."""
    return _listed_model


@pytest.fixture
def fake_client_factory():
    return FakeClient


@pytest.fixture
def png_bytes():
    """A tiny valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def _png_chunk(chunk_type, data):
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", zlib.crc32(chunk_type + data))


@pytest.fixture
def oversized_png_bytes():
    """A PNG header claiming 20000x20000 pixels, enough to trip Pillow's decompression bomb check."""
    header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IEND", b"")


@pytest.fixture
def heic_bytes():
    """The start of an iPhone HEIC file, which Pillow cannot open without a plugin."""
    return struct.pack(">I", 24) + b"ftypheic" + b"\x00\x00\x00\x00" + b"mif1heic"


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


@pytest.fixture
def install_client(monkeypatch):
    """Makes outfit_analyzer build the given fake client instead of a real genai.Client."""
    from ai.src import outfit_analyzer

    built = []

    def _install(client):
        def _build(key):
            built.append(key)
            return client

        monkeypatch.setattr(outfit_analyzer, "_build_client", _build)
        return built

    return _install


@pytest.fixture
def flask_client():
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
