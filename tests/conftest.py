"""
Pytest fixtures for provider tests.
"""

import json
import logging

import httpx
import pytest

from cloudflare_images.config import ProviderConfig
from cloudflare_images.models import FileRecord
from cloudflare_images.storage.cloudflare import CloudflareImagesProvider


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real credentials and .env files out of the tests."""
    for key in (
        "CLOUDFLARE_IMAGES_ACCESS_TOKEN",
        "CLOUDFLARE_IMAGES_ACCOUNT_ID",
        "CLOUDFLARE_IMAGES_IMAGES_DOMAIN",
        "CLOUDFLARE_IMAGES_REQUIRE_SIGNED_URLS",
        "CLOUDFLARE_IMAGES_API_BASE_URL",
        "CLOUDFLARE_IMAGES_REQUEST_TIMEOUT",
        "CLOUDFLARE_IMAGES_CONFIG_PATH",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def test_config() -> ProviderConfig:
    """Create a test configuration with the default delivery domain."""
    return ProviderConfig(access_token="test-token", account_id="test-account")


@pytest.fixture
def image_record() -> FileRecord:
    """A buffer-backed JPEG as handed over by the host."""
    return FileRecord(
        name="cat.jpg",
        size=2048,
        mime="image/jpeg",
        hash="cat_1a2b3c",
        ext=".jpg",
        buffer=b"\xff\xd8\xff\xe0" + b"\x00" * 100,
    )


@pytest.fixture
def upload_response_body() -> dict:
    """Successful upload response from the Images API."""
    return {
        "success": True,
        "errors": [],
        "messages": [],
        "result": {
            "id": "abc123",
            "filename": "cat.jpg",
            "uploaded": "2024-01-01T00:00:00.000Z",
            "requireSignedURLs": False,
            "variants": ["https://imagedelivery.net/hash/abc123/public"],
        },
    }


class RecordingTransport:
    """httpx mock transport that records requests and replays a fixed response."""

    def __init__(self, status_code: int = 200, json_body=None, text: str = ""):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.json_body is not None:
            return httpx.Response(self.status_code, content=json.dumps(self.json_body).encode())
        return httpx.Response(self.status_code, text=self.text)


@pytest.fixture
def make_provider(test_config):
    """Build a provider whose HTTP client replays the given response."""

    def _make(status_code: int = 200, json_body=None, text: str = "", config=None):
        transport = RecordingTransport(status_code, json_body, text)
        client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        provider = CloudflareImagesProvider(config or test_config, client=client)
        return provider, transport

    return _make
