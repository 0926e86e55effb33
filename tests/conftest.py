import logging
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from unittest.mock import patch
import os


# Set test environment variables before imports
os.environ['ENV_FILE'] = '.env.test-missing'
os.environ['ETHERSCAN_API_KEY'] = ''
os.environ['ETHEREUM_API_KEY'] = 'test-ethereum'
os.environ['BASE_API_KEY'] = 'test-base'
os.environ['SONIC_API_KEY'] = ''
os.environ['DEFAULT_EXPLORER_NETWORK'] = 'ethereum'

from core.environment.config import ExplorerCredentials  # noqa: E402
from explorer.networks import Network, NETWORK_CONFIGS  # noqa: E402
from explorer.services import ExplorerService  # noqa: E402


class FakeResponse:
    """Stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, payload, status: int = 200):
        self.payload = payload
        self.status = status

    async def json(self, content_type=None):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    def __init__(self, api: "FakeExplorerAPI"):
        self.api = api

    def get(self, url, params=None):
        return self.api.handle(url, dict(params or {}))

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeExplorerAPI:
    """
    In-memory explorer API keyed by (network, action).

    Records every request so tests can assert on query parameters or on the
    absence of any HTTP call.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], object] = {}
        self.calls: list[tuple[str, dict]] = []

    def respond(self, network: Network, action: str, payload, status: int = 200):
        self.routes[(NETWORK_CONFIGS[network].api_url, action)] = (payload, status)

    def fail(self, network: Network, action: str, error: Exception):
        self.routes[(NETWORK_CONFIGS[network].api_url, action)] = error

    def handle(self, url: str, params: dict) -> FakeResponse:
        self.calls.append((url, params))
        route = self.routes.get((url, params.get("action")))
        if route is None:
            raise AssertionError(f"Unexpected explorer request: {url} {params}")
        if isinstance(route, Exception):
            raise route
        payload, status = route
        return FakeResponse(payload, status)

    def session(self, *args, **kwargs) -> FakeSession:
        return FakeSession(self)


@pytest.fixture
def explorer_api():
    """Patch aiohttp sessions with an in-memory explorer API."""
    api = FakeExplorerAPI()
    with patch("aiohttp.ClientSession", side_effect=api.session):
        yield api


@pytest.fixture
def credentials() -> ExplorerCredentials:
    return ExplorerCredentials(api_keys={
        Network.ETHEREUM: "eth-key",
        Network.SONIC: "",
        Network.BASE: "base-key"
    })


@pytest.fixture
def service(credentials) -> ExplorerService:
    return ExplorerService(
        credentials=credentials,
        default_network=Network.ETHEREUM,
        logger=logging.getLogger("explorer_tools.tests")
    )


@pytest_asyncio.fixture
async def client():
    """
    Fixture for async test client.

    Yields
    ------
    AsyncClient
        Async HTTP client for testing
    """
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
