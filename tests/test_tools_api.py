import aiohttp
import pytest
from httpx import AsyncClient

from explorer.networks import Network


ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def ok(result) -> dict:
    return {"status": "1", "message": "OK", "result": result}


async def call(client: AsyncClient, name: str, **arguments):
    return await client.post("/api/tools/call", json={"name": name, "arguments": arguments})


class TestServiceEndpoints:

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        """
        Test root endpoint returns correct application information.

        Parameters
        ----------
        client : AsyncClient
            Test client fixture
        """
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Blockchain Explorer Tool Service"
        assert data["endpoints"]["tools"] == "/api/tools"
        assert data["endpoints"]["call"] == "/api/tools/call"

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestToolCatalogue:

    @pytest.mark.asyncio
    async def test_lists_all_tools(self, client: AsyncClient):
        response = await client.get("/api/tools")
        assert response.status_code == 200
        names = [tool["name"] for tool in response.json()["tools"]]
        assert names == [
            "check-balance",
            "get-transactions",
            "get-token-transfers",
            "get-contract-abi",
            "get-gas-prices",
            "get-ens-name",
            "list-supported-networks",
        ]

    @pytest.mark.asyncio
    async def test_input_schema(self, client: AsyncClient):
        response = await client.get("/api/tools")
        tools = {tool["name"]: tool for tool in response.json()["tools"]}

        schema = tools["get-transactions"]["input_schema"]
        assert schema["required"] == ["address"]
        assert schema["properties"]["address"]["pattern"] == "^0x[a-fA-F0-9]{40}$"
        assert schema["properties"]["limit"]["minimum"] == 1
        assert schema["properties"]["limit"]["maximum"] == 100
        assert schema["properties"]["limit"]["default"] == 10
        assert "required" not in tools["get-gas-prices"]["input_schema"]


class TestToolCalls:
    """
    Tool calls through the HTTP façade with the explorer API faked.
    """

    @pytest.mark.asyncio
    async def test_check_balance(self, client: AsyncClient, explorer_api):
        explorer_api.respond(Network.ETHEREUM, "balance", ok("1230000000000000000"))

        response = await call(client, "check-balance", address=ADDRESS.lower())

        assert response.status_code == 200
        data = response.json()
        assert data["is_error"] is False
        assert data["content"][0]["type"] == "text"
        assert data["content"][0]["text"] == (
            f"Address: {ADDRESS}\n"
            "Balance: 1.23 ETH\n"
            "Network: ethereum"
        )
        assert explorer_api.calls[0][1]["apikey"] == "test-ethereum"

    @pytest.mark.asyncio
    async def test_get_transactions(self, client: AsyncClient, explorer_api):
        explorer_api.respond(Network.BASE, "txlist", ok([{
            "hash": "0xabc",
            "from": ADDRESS.lower(),
            "to": "",
            "value": "0",
            "timeStamp": "1700000000",
            "blockNumber": "123",
        }]))

        response = await call(client, "get-transactions", address=ADDRESS, limit=5, network="base")

        assert response.status_code == 200
        text = response.json()["content"][0]["text"]
        assert text.startswith(f"Recent transactions for {ADDRESS} on base network:")
        assert "Block 123 (2023-11-14 22:13:20 UTC):" in text
        assert "To: Contract Creation" in text
        assert "Value: 0 ETH" in text
        assert explorer_api.calls[0][1]["offset"] == 5

    @pytest.mark.asyncio
    async def test_get_transactions_empty(self, client: AsyncClient, explorer_api):
        explorer_api.respond(
            Network.ETHEREUM, "txlist",
            {"status": "0", "message": "No transactions found", "result": []}
        )

        response = await call(client, "get-transactions", address=ADDRESS)

        assert response.status_code == 200
        assert response.json()["content"][0]["text"] == (
            f"No transactions found for {ADDRESS} on ethereum network"
        )
        assert explorer_api.calls[0][1]["offset"] == 10

    @pytest.mark.asyncio
    async def test_get_token_transfers(self, client: AsyncClient, explorer_api):
        explorer_api.respond(Network.ETHEREUM, "tokentx", ok([{
            "contractAddress": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
            "tokenName": "USD Coin",
            "tokenSymbol": "USDC",
            "tokenDecimal": "6",
            "from": ADDRESS.lower(),
            "to": "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359",
            "value": "2500000",
            "timeStamp": "1700000000",
            "blockNumber": "18580000",
        }]))

        response = await call(client, "get-token-transfers", address=ADDRESS)

        text = response.json()["content"][0]["text"]
        assert "Token: USD Coin (USDC)" in text
        assert "Value: 2.5" in text
        assert "Contract: 0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48" in text

    @pytest.mark.asyncio
    async def test_get_contract_abi(self, client: AsyncClient, explorer_api):
        explorer_api.respond(Network.ETHEREUM, "getabi", ok("[]"))

        response = await call(client, "get-contract-abi", address=ADDRESS)

        assert response.json()["content"][0]["text"] == (
            f"Contract ABI for {ADDRESS} on ethereum network:\n\n[]"
        )

    @pytest.mark.asyncio
    async def test_get_gas_prices(self, client: AsyncClient, explorer_api):
        explorer_api.respond(Network.BASE, "gasoracle", ok({
            "SafeGasPrice": "0.01", "ProposeGasPrice": "0.02", "FastGasPrice": "0.05"
        }))

        response = await call(client, "get-gas-prices", network="base")

        assert response.json()["content"][0]["text"] == (
            "Current Gas Prices on base network:\n"
            "Safe Low: 0.01 Gwei\n"
            "Standard: 0.02 Gwei\n"
            "Fast: 0.05 Gwei"
        )

    @pytest.mark.asyncio
    async def test_get_ens_name_not_supported(self, client: AsyncClient, explorer_api):
        response = await call(client, "get-ens-name", address=ADDRESS, network="base")

        assert response.status_code == 200
        assert response.json()["content"][0]["text"] == (
            "ENS is only available on Ethereum mainnet. Requested network: base"
        )
        assert explorer_api.calls == []

    @pytest.mark.asyncio
    async def test_list_supported_networks(self, client: AsyncClient):
        response = await call(client, "list-supported-networks")

        assert response.json()["content"][0]["text"] == (
            "Supported blockchain networks:\n"
            "- Ethereum: ETH\n"
            "- Base: ETH"
        )


class TestToolErrors:

    @pytest.mark.asyncio
    async def test_unknown_tool(self, client: AsyncClient):
        response = await call(client, "send-transaction")
        assert response.status_code == 404
        assert response.json()["message"] == "Unknown tool: send-transaction"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [
        {},
        {"address": "invalid_address"},
        {"address": "0x123"},
        {"address": ADDRESS, "network": "bitcoin"},
        {"address": ADDRESS, "limit": 0},
        {"address": ADDRESS, "limit": 101},
        {"address": ADDRESS, "unexpected": True},
    ])
    async def test_invalid_arguments(self, client: AsyncClient, explorer_api, arguments):
        response = await client.post(
            "/api/tools/call",
            json={"name": "get-transactions", "arguments": arguments}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["status"] == "error"
        assert data["message"].startswith("Invalid input: ")
        assert explorer_api.calls == []

    @pytest.mark.asyncio
    async def test_bad_checksum_is_tool_error(self, client: AsyncClient, explorer_api):
        response = await call(
            client, "check-balance", address="0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_error"] is True
        assert "checksum" in data["content"][0]["text"]
        assert explorer_api.calls == []

    @pytest.mark.asyncio
    async def test_network_unavailable(self, client: AsyncClient, explorer_api):
        response = await call(client, "check-balance", address=ADDRESS, network="sonic")

        assert response.status_code == 200
        data = response.json()
        assert data["is_error"] is True
        assert data["content"][0]["type"] == "text"
        assert data["content"][0]["text"] == (
            'Network "sonic" is not supported or missing API key. '
            "Available networks: ethereum, base"
        )
        assert explorer_api.calls == []

    @pytest.mark.asyncio
    async def test_upstream_error(self, client: AsyncClient, explorer_api):
        explorer_api.respond(
            Network.ETHEREUM, "gasoracle",
            {"status": "0", "message": "NOTOK", "result": "Invalid API Key"}
        )

        response = await call(client, "get-gas-prices")

        assert response.status_code == 200
        data = response.json()
        assert data["is_error"] is True
        assert data["content"][0]["text"] == "Failed to get gas prices: NOTOK"

    @pytest.mark.asyncio
    async def test_transport_error(self, client: AsyncClient, explorer_api):
        explorer_api.fail(Network.BASE, "txlist", aiohttp.ClientConnectionError("connection refused"))

        response = await call(client, "get-transactions", address=ADDRESS, network="base")

        assert response.status_code == 200
        data = response.json()
        assert data["is_error"] is True
        assert "connection refused" in data["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_missing_tool_name(self, client: AsyncClient):
        response = await client.post("/api/tools/call", json={"arguments": {}})
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "name"
