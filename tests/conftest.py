import pytest


@pytest.fixture
def anyio_backend():
    # The project is built on stdlib asyncio (see DESIGN.md); pin the anyio
    # plugin to it rather than every backend that happens to be installed.
    return "asyncio"
