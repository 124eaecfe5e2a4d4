import pytest

from keypager import disable_tracing
from keypager.backends.connection import _clients, _databases


@pytest.fixture(autouse=True)
def reset_state():
    """Reset observability state and the connection registry between tests."""
    yield
    disable_tracing()
    _clients.clear()
    _databases.clear()
