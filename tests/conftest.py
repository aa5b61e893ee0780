import pytest


@pytest.fixture
def anyio_backend():
    # the pipeline is built on asyncio primitives (gather, Lock)
    return "asyncio"
