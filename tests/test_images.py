# File: tests/test_images.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import ClientSession, ClientTimeout, web

from crawl_scout.crawler.errors import FetchError
from crawl_scout.crawler.images import ImageDownloader, image_file_name, sanitize_file_name
from helpers import PNG_BYTES, png, serve_app


def test_sanitize_file_name():
    assert sanitize_file_name("photo.jpg?size=large") == "photo.jpg"
    assert sanitize_file_name("photo.jpg") == "photo.jpg"
    assert sanitize_file_name("a?b?c") == "a"


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://example.com/img/photo.jpg?size=large", "photo.jpg"),
        ("http://example.com/img/photo.jpg", "photo.jpg"),
        ("http://example.com/img/dir/", "dir"),
        ("http://example.com/..", None),
        ("http://example.com/?x=1", None),
    ],
)
def test_image_file_name(url, expected):
    assert image_file_name(url) == expected


# --------------------------------------------------------------------------- #
#                               Image server                                  #
# --------------------------------------------------------------------------- #


@pytest_asyncio.fixture
async def image_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def photo(_):
        return png()

    async def other_photo(_):
        return png(b"other")

    async def missing(_):
        return web.Response(status=404)

    async def slow(_):
        await asyncio.sleep(1.5)
        return png()

    app.router.add_get("/a/photo.png", photo)
    app.router.add_get("/b/photo.png", other_photo)
    app.router.add_get("/pic.jpg", photo)
    app.router.add_get("/missing.png", missing)
    app.router.add_get("/slow.png", slow)

    async for url in serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_download_all_writes_files(image_server: str, tmp_path):
    target = tmp_path / "images" / "nested"
    async with ClientSession() as session:
        saved = await ImageDownloader(session).download_all(
            [f"{image_server}/a/photo.png", f"{image_server}/pic.jpg?size=large"], target
        )

    assert saved == [target / "photo.png", target / "pic.jpg"]
    assert (target / "photo.png").read_bytes() == PNG_BYTES
    assert (target / "pic.jpg").read_bytes() == PNG_BYTES


@pytest.mark.asyncio()
async def test_failures_are_skipped(image_server: str, tmp_path):
    async with ClientSession(timeout=ClientTimeout(total=0.5)) as session:
        saved = await ImageDownloader(session).download_all(
            [
                f"{image_server}/missing.png",
                f"{image_server}/slow.png",
                "http://localhost:1/refused.png",
                "not-a-url/x.png",
                f"{image_server}/pic.jpg",
            ],
            tmp_path,
        )

    assert saved == [tmp_path / "pic.jpg"]
    assert not (tmp_path / "missing.png").exists()
    assert not (tmp_path / "slow.png").exists()


@pytest.mark.asyncio()
async def test_same_name_overwrites(image_server: str, tmp_path):
    (tmp_path / "photo.png").write_bytes(b"stale")
    async with ClientSession() as session:
        downloader = ImageDownloader(session, concurrency=1)
        await downloader.download_all([f"{image_server}/a/photo.png"], tmp_path)
        await downloader.download_all([f"{image_server}/b/photo.png"], tmp_path)

    assert (tmp_path / "photo.png").read_bytes() == b"other"


@pytest.mark.asyncio()
async def test_file_error_is_skipped(image_server: str, tmp_path):
    # a directory with the target name makes the write fail
    (tmp_path / "photo.png").mkdir()
    async with ClientSession() as session:
        saved = await ImageDownloader(session).download_all(
            [f"{image_server}/a/photo.png", f"{image_server}/pic.jpg"], tmp_path
        )

    assert saved == [tmp_path / "pic.jpg"]


@pytest.mark.asyncio()
async def test_unusable_directory(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    async with ClientSession() as session:
        saved = await ImageDownloader(session).download_all(["http://localhost:1/a.png"], blocker / "sub")
    assert saved == []


@pytest.mark.asyncio()
async def test_fetch_raises_fetch_error(image_server: str):
    async with ClientSession() as session:
        with pytest.raises(FetchError) as info:
            await ImageDownloader(session).fetch(f"{image_server}/missing.png")
    assert info.value.reason == "HTTP 404"


@pytest.mark.asyncio()
async def test_file_write_runs_off_the_event_loop(image_server: str, tmp_path, monkeypatch):
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        offloaded.append(func)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
    async with ClientSession() as session:
        saved = await ImageDownloader(session).download_all([f"{image_server}/pic.jpg"], tmp_path)

    assert saved == [tmp_path / "pic.jpg"]
    assert sum(getattr(f, "__name__", "") == "write_bytes" for f in offloaded) == 1
