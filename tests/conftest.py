from __future__ import annotations

import pytest


@pytest.fixture
def anyio_backend() -> str:
    # Session manager single-flight relies on asyncio tasks
    return "asyncio"
