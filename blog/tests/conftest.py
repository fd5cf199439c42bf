"""Shared fixtures for blog tests."""

from datetime import date

import pytest

from blog.services.build.builder import DocumentTimestamps


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from blog.config import get_settings

    get_settings.cache_clear()

    # 2. HTTP client singleton
    import blog.services.http_client as http_mod

    http_mod._client = None


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    """Settings pointing content and output at a temporary directory."""
    from blog.config import Settings, get_settings

    test_settings = Settings(
        content_dir=tmp_path / "content" / "posts",
        output_dir=tmp_path / "data",
        data_base_url="http://test/blog/data",
    )

    get_settings.cache_clear()
    monkeypatch.setattr("blog.config.get_settings", lambda: test_settings)

    # Modules that did `from blog.config import get_settings` hold their own
    # binding, which the monkeypatch above does not affect
    for mod_path in [
        "blog.services.build.builder",
        "blog.services.build.orchestrator",
        "blog.services.http_client",
        "blog.client.pages",
        "blog.main",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def timestamps():
    return DocumentTimestamps(created=date(2024, 1, 1), modified=date(2024, 1, 2))

