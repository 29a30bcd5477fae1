# File: tests/helpers.py
"""Local aiohttp test servers shared by the network tests."""
from __future__ import annotations

from collections.abc import AsyncIterator

from aiohttp import web

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def html(text: str) -> web.Response:
    return web.Response(text=text, content_type="text/html")


def png(data: bytes = PNG_BYTES) -> web.Response:
    return web.Response(body=data, content_type="image/png")
