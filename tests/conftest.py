"""Shared fixtures: isolated upload dir, injectable Config, stubbed provider HTTP."""
import os

import pytest
import requests
from fastapi.testclient import TestClient

from app import app
from config import Config, get_config

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 256


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class ProviderStub:
    """Records outbound calls and replays queued responses."""

    def __init__(self):
        self.post_calls = []
        self.get_calls = []
        self.post_responses = []
        self.get_responses = []

    def _next(self, queue):
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        self.post_calls.append((url, kwargs))
        if not self.post_responses:
            raise AssertionError(f"Unexpected POST to {url}")
        return self._next(self.post_responses)

    def get(self, url, **kwargs):
        self.get_calls.append((url, kwargs))
        if not self.get_responses:
            raise AssertionError(f"Unexpected GET to {url}")
        return self._next(self.get_responses)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def make_config(upload_dir):
    def _make(**overrides):
        values = {
            "upload_dir": str(upload_dir),
            "openai_api_key": "sk-test",
            "replicate_api_token": "r8-test",
            "replicate_poll_interval_seconds": 0,
            "replicate_timeout_seconds": 5,
        }
        values.update(overrides)
        return Config(**values)
    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def use_config():
    """Install a Config for the app under test."""
    def _use(cfg):
        app.dependency_overrides[get_config] = lambda: cfg
        return cfg
    yield _use
    app.dependency_overrides.pop(get_config, None)


@pytest.fixture
def client(config, use_config):
    use_config(config)
    return TestClient(app)


@pytest.fixture
def provider(monkeypatch):
    stub = ProviderStub()
    monkeypatch.setattr(requests, "post", stub.post)
    monkeypatch.setattr(requests, "get", stub.get)
    return stub


def image_part(name="photo.jpg", data=JPEG_BYTES, content_type="image/jpeg"):
    return ("images", (name, data, content_type))


def leftover_files(directory):
    if not os.path.isdir(directory):
        return []
    return os.listdir(directory)
