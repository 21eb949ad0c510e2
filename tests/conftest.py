"""Shared fixtures for the udagram service tests."""

import io

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from udagram.image_filter.config import Settings as FilterSettings
from udagram.image_filter.main import build_app
from udagram.users_service.api import create_users_app
from udagram.users_service.config import Settings as UsersSettings
from udagram.users_service.store import InMemoryUserStore

IMAGE_HOST = "http://images.test"


def _png_bytes(size=(640, 480), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _truncated_jpeg_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.effect_noise((640, 480), 64).save(buffer, format="JPEG", quality=90)
    data = buffer.getvalue()
    return data[: len(data) // 2]


def _fake_image_host(request: httpx.Request) -> httpx.Response:
    """Serve a handful of canned responses for outbound image fetches."""
    path = request.url.path
    if path == "/cat.png":
        return httpx.Response(200, content=_png_bytes(), headers={"Content-Type": "image/png"})
    if path == "/redirect.png":
        return httpx.Response(302, headers={"Location": f"{IMAGE_HOST}/cat.png"})
    if path == "/not-an-image.png":
        return httpx.Response(200, content=b"definitely not an image")
    if path == "/huge.png":
        # Over the limit set by the small_pixel_limit fixture
        return httpx.Response(200, content=_png_bytes(size=(1000, 1000)))
    if path == "/truncated.jpg":
        return httpx.Response(200, content=_truncated_jpeg_bytes())
    if path == "/down.png":
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.Response(404, content=b"not found")


@pytest.fixture
def image_transport():
    return httpx.MockTransport(_fake_image_host)


@pytest.fixture
def small_pixel_limit(monkeypatch):
    """Lower Pillow's decompression bomb limit; errors start above twice this."""
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100_000)


@pytest.fixture
def filter_settings(tmp_path):
    return FilterSettings(filter_tmp_dir=tmp_path / "filtered")


@pytest.fixture
def filter_client(filter_settings, image_transport):
    return TestClient(build_app(filter_settings, transport=image_transport))


@pytest.fixture
def users_settings():
    # Minimum bcrypt cost keeps the suite fast.
    return UsersSettings(jwt_secret="test-secret", bcrypt_rounds=4, database_url=None)


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def users_app(users_settings, user_store):
    return create_users_app(users_settings, store=user_store)


@pytest.fixture
def users_client(users_app):
    with TestClient(users_app) as client:
        yield client
