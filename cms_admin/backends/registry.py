from __future__ import annotations

from cms_admin.backends.base import CmsBackend
from cms_admin.backends.http import HttpCmsBackend
from cms_admin.backends.memory import InMemoryCmsBackend
from cms_admin.core.config import Settings
from cms_admin.services.http_client import CmsHttpClient


def _http(settings: Settings) -> CmsBackend:
    client = CmsHttpClient(
        base_url=settings.cms_base_url,
        timeout_seconds=settings.http_timeout_seconds,
        bearer_token=settings.cms_api_token.get_secret_value() or None,
    )
    return HttpCmsBackend(client)


def _memory(settings: Settings) -> CmsBackend:
    return InMemoryCmsBackend()


BACKENDS = {
    "http": _http,
    "memory": _memory,
}

def build_backend(settings: Settings) -> CmsBackend:
    if settings.backend not in BACKENDS:
        raise KeyError(f"Unknown CMS backend: {settings.backend}")
    return BACKENDS[settings.backend](settings)
