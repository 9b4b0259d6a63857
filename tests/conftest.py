"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import gzip
import io
import tarfile
import tempfile
from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from emojitar.fetch.base import PayloadFetcher
from emojitar.models.archive import FetchResult
from emojitar.models.config import ArchiverConfig
from emojitar.models.emoji import EmojiRef

FIXED_MTIME = 1_700_000_000


class StubFetcher(PayloadFetcher):
    """Serves payloads from a dict keyed by CDN filename.

    ``delays`` holds per-filename sleeps so tests can force a completion
    order; ``failures`` holds filenames answered with a non-OK result.
    """

    def __init__(
        self,
        payloads: dict[str, bytes],
        delays: dict[str, float] | None = None,
        failures: dict[str, FetchResult] | None = None,
    ) -> None:
        self.payloads = payloads
        self.delays = delays or {}
        self.failures = failures or {}
        self.requested: list[str] = []
        self.closed = False

    async def fetch(self, ref: EmojiRef) -> FetchResult:
        filename = f"{ref.id}.{ref.ext}"
        self.requested.append(filename)
        await asyncio.sleep(self.delays.get(filename, 0))
        if filename in self.failures:
            return self.failures[filename]
        if filename not in self.payloads:
            return FetchResult.failed("HTTP 404", status_code=404)
        return FetchResult.ok(self.payloads[filename])

    async def close(self) -> None:
        self.closed = True


def read_archive(data: bytes) -> dict[str, bytes | None]:
    """Decompress and parse an archive into {name: payload or None for dirs}."""
    entries: dict[str, bytes | None] = {}
    with tarfile.open(fileobj=io.BytesIO(gzip.decompress(data)), mode="r:") as tar:
        for member in tar:
            if member.isdir():
                entries[member.name + "/"] = None
            else:
                entries[member.name] = tar.extractfile(member).read()
    return entries


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_clock() -> Callable[[], float]:
    return lambda: FIXED_MTIME


@pytest.fixture
def sample_text() -> str:
    return "<:foo:111> text <a:bar:222>"


@pytest.fixture
def sample_payloads() -> dict[str, bytes]:
    return {
        "111.png": b"\x89PNG" + bytes(range(6)),
        "222.gif": b"GIF89a" + bytes(range(14)),
    }


@pytest.fixture
def stub_fetcher(sample_payloads) -> StubFetcher:
    return StubFetcher(sample_payloads)


@pytest.fixture
def archive_reader() -> Callable[[bytes], dict[str, bytes | None]]:
    return read_archive


@pytest.fixture
def stub_fetcher_factory() -> type[StubFetcher]:
    return StubFetcher


@pytest.fixture
def mock_cdn_transport(sample_payloads) -> httpx.MockTransport:
    """CDN that serves ``sample_payloads`` and 404s everything else."""

    def handler(request: httpx.Request) -> httpx.Response:
        filename = request.url.path.rsplit("/", 1)[-1]
        if filename in sample_payloads:
            return httpx.Response(200, content=sample_payloads[filename])
        return httpx.Response(404, content=b"not found")

    return httpx.MockTransport(handler)


@pytest.fixture
def archiver_config() -> ArchiverConfig:
    return ArchiverConfig()


@pytest.fixture
def fastapi_app(stub_fetcher, fixed_clock) -> FastAPI:
    """FastAPI app with the emojitar router and a stubbed CDN."""
    from emojitar.api import create_router
    from emojitar.archiver import EmojiArchiver

    archiver = EmojiArchiver(
        ArchiverConfig(on_failure="raise"), fetcher=stub_fetcher, clock=fixed_clock
    )
    app = FastAPI()
    app.include_router(create_router(archiver))
    return app


@pytest.fixture
def api_client(fastapi_app: FastAPI) -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(fastapi_app)


# Markers for test categories
def pytest_configure(config):
    config.addinivalue_line("markers", "mock: tests using mocked HTTP responses")
    config.addinivalue_line("markers", "slow: slow running tests")
