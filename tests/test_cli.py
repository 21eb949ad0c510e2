"""Tests for the command-line clients, driven against in-process apps."""

import asyncio

import httpx
from PIL import Image

from udagram.image_filter import client as filter_client_cli
from udagram.users_service import cli


def test_register_login_verify(users_app, capsys):
    transport = httpx.ASGITransport(app=users_app)
    url = "http://testserver"

    assert asyncio.run(cli.register(url, "alice@example.com", "StrongPassw0rd!", transport=transport)) == 0
    out = capsys.readouterr().out
    assert "User registered successfully!" in out
    token = out.split("Token: ")[1].split()[0]

    assert asyncio.run(cli.verify(url, token, transport=transport)) == 0
    assert "Token is valid" in capsys.readouterr().out

    assert asyncio.run(cli.login(url, "alice@example.com", "StrongPassw0rd!", transport=transport)) == 0
    assert "Logged in as alice@example.com" in capsys.readouterr().out


def test_register_twice_and_bad_login(users_app, capsys):
    transport = httpx.ASGITransport(app=users_app)
    url = "http://testserver"

    asyncio.run(cli.register(url, "alice@example.com", "pw", transport=transport))
    assert asyncio.run(cli.register(url, "alice@example.com", "pw", transport=transport)) == 1
    assert "User may already exist" in capsys.readouterr().err

    assert asyncio.run(cli.login(url, "alice@example.com", "wrong", transport=transport)) == 1
    assert "Invalid email or password" in capsys.readouterr().err

    assert asyncio.run(cli.verify(url, "not-a-jwt", transport=transport)) == 1
    assert "Failed to authenticate." in capsys.readouterr().err


def test_main_without_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_filter_client_saves_image(filter_settings, image_transport, tmp_path, capsys):
    from udagram.image_filter.main import build_app

    app = build_app(filter_settings, transport=image_transport)
    output = tmp_path / "out.jpg"

    code = asyncio.run(
        filter_client_cli.download_filtered(
            "http://testserver",
            "http://images.test/cat.png",
            output,
            transport=httpx.ASGITransport(app=app),
        )
    )

    assert code == 0
    with Image.open(output) as img:
        assert img.size == (256, 256)
    assert "Saved filtered image" in capsys.readouterr().out


def test_filter_client_reports_failure(filter_settings, image_transport, tmp_path, capsys):
    from udagram.image_filter.main import build_app

    app = build_app(filter_settings, transport=image_transport)

    code = asyncio.run(
        filter_client_cli.download_filtered(
            "http://testserver",
            "http://images.test/down.png",
            tmp_path / "out.jpg",
            transport=httpx.ASGITransport(app=app),
        )
    )

    assert code == 1
    assert "Request failed (500)" in capsys.readouterr().err
