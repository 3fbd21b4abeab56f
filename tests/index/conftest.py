"""Shared fixtures for index tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from tfindex.index import Index


@pytest.fixture
def index_source() -> Callable[..., Index]:
    """Index one source string into a fresh Index."""

    def _index(source: str, path: str = "main.tf", **kwargs: object) -> Index:
        index = Index()
        error = index.collect_bytes(source, path, **kwargs)  # type: ignore[arg-type]
        assert error is None, f"unexpected syntax error: {error}"
        return index

    return _index
