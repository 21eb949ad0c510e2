"""Utilities for building stateless udagram services."""

import asyncio
import os
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask


async def fetch_url_bytes(
    url: str,
    *,
    timeout: float | None = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    """
    Download the body of an http(s) URL.

    Raises httpx.HTTPError on transport failures and non-2xx responses.
    """

    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    ) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.content


async def run_blocking(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Run a blocking function in a thread pool to avoid blocking the event loop.
    """

    return await asyncio.to_thread(func, *args, **kwargs)


def delete_local_files(files: Iterable[str | os.PathLike]) -> None:
    """Delete files on the local disk, e.g. temporary artifacts of a request."""
    for file in files:
        Path(file).unlink(missing_ok=True)


def render_file(path: str | os.PathLike, *, delete_after: bool = False) -> FileResponse:
    """
    Stream a local file back to the caller.

    The media type is guessed from the file name. With delete_after the file
    is removed once the body has been sent.
    """

    background = BackgroundTask(delete_local_files, [path]) if delete_after else None
    return FileResponse(path, background=background)


__all__ = ["fetch_url_bytes", "run_blocking", "render_file", "delete_local_files"]
