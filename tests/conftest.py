import copy

import httpx
import pytest
import pytest_asyncio

from cms_admin.backends.http import HttpCmsBackend
from cms_admin.backends.memory import InMemoryCmsBackend
from cms_admin.core.config import Settings
from cms_admin.main import create_app
from cms_admin.services.http_client import CmsHttpClient
from cms_admin.services.query_cache import QueryCache

from fake_cms import build_fake_cms


CONTENT_TYPES = {
    "author": {
        "displayName": "Author",
        "fields": [
            {"name": "email", "type": "email"},
            {"name": "fullName", "type": "string"},
            {"name": "name", "type": "string"},
            {"name": "age", "type": "number"},
        ],
    },
    "note": {
        "displayName": "Note",
        "fields": [{"name": "bio", "type": "text"}, {"name": "pinned", "type": "boolean"}],
    },
}

ENTRIES = {
    "author": [
        {"id": 1, "name": "Ada Lovelace", "email": "ada@example.com", "age": 36, "createdAt": "2024-01-01"},
        {"id": 2, "name": "Alan Turing", "email": "alan@example.com", "age": 41, "tags": ["math"]},
        {"id": "3", "name": "Grace Hopper", "email": "grace@example.com", "meta": {"team": "navy"}},
    ],
    "note": [
        {"id": "n1", "bio": "first"},
    ],
}

MEDIA = [
    {"id": 10, "name": "logo.png", "url": "https://blob.example/10-logo.png", "type": "image/png", "size": 2048},
    {"id": 11, "name": "terms.pdf", "url": "https://blob.example/11-terms.pdf", "type": "application/pdf", "size": 5_000_000},
]


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(
        backend="memory",
        upload_progress_tick_seconds=0.01,
        upload_auto_close_seconds=0.0,
        telemetry_enabled=False,
    )


@pytest.fixture
def memory_backend() -> InMemoryCmsBackend:
    return InMemoryCmsBackend(
        content_types=copy.deepcopy(CONTENT_TYPES),
        entries=copy.deepcopy(ENTRIES),
        media=copy.deepcopy(MEDIA),
    )


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture
def fake_cms():
    return build_fake_cms(content_types=CONTENT_TYPES, entries=ENTRIES, media=MEDIA)


@pytest_asyncio.fixture
async def http_backend(fake_cms):
    """
    HttpCmsBackend talking to the fake CMS in-process.
    """
    client = CmsHttpClient(
        base_url="http://cms.test",
        bearer_token="tok_test",
        transport=httpx.ASGITransport(app=fake_cms),
    )
    backend = HttpCmsBackend(client)
    try:
        yield backend
    finally:
        await backend.aclose()


@pytest.fixture
def console_app(memory_backend, fast_settings):
    return create_app(settings=fast_settings, backend=memory_backend)


@pytest_asyncio.fixture
async def console(console_app):
    """
    Console API client backed by the in-memory CMS.
    """
    transport = httpx.ASGITransport(app=console_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
