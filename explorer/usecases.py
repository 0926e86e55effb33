from datetime import datetime, timezone
from pydantic import ValidationError

from core.exceptions import (
    InvalidAddressException,
    InvalidArgumentsException,
    NetworkUnavailableException,
    NotFoundException,
    UpstreamException
)
from explorer.entities import ENSLookupStatus
from explorer.schemas import (
    AddressArguments,
    EmptyArguments,
    HistoryArguments,
    NetworkArguments,
    TextContent,
    ToolCallResponse,
    ToolDescription,
    ToolListResponse
)
from explorer.services import ExplorerService
from explorer.tools import TOOLS, TOOLS_BY_NAME


def _format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


class CheckBalanceUseCase:
    """
    Use case for checking the native balance of an address.

    Parameters
    ----------
    explorer_service : ExplorerService
        Explorer service instance
    """

    def __init__(self, explorer_service: ExplorerService):
        self.explorer_service = explorer_service

    async def __call__(self, arguments: AddressArguments) -> str:
        balance = await self.explorer_service.get_balance(
            address=arguments.address,
            network=arguments.network
        )
        return (
            f"Address: {balance.address}\n"
            f"Balance: {balance.balance} {balance.currency_symbol}\n"
            f"Network: {balance.network.value}"
        )


class GetTransactionsUseCase:
    """
    Use case for listing recent transactions of an address.

    Parameters
    ----------
    explorer_service : ExplorerService
        Explorer service instance
    """

    def __init__(self, explorer_service: ExplorerService):
        self.explorer_service = explorer_service

    async def __call__(self, arguments: HistoryArguments) -> str:
        """
        Execute use case.

        Parameters
        ----------
        arguments : HistoryArguments
            Address, limit and network

        Returns
        -------
        str
            Transactions rendered one block per transaction
        """
        network = self.explorer_service.resolve_network(arguments.network)
        transactions = await self.explorer_service.get_transactions(
            address=arguments.address,
            limit=arguments.limit,
            network=network
        )
        if not transactions:
            return f"No transactions found for {arguments.address} on {network.value} network"

        currency_symbol = self.explorer_service.get_network_config(network).currency_symbol
        formatted = "\n".join(
            f"Block {tx.block_number} ({_format_timestamp(tx.timestamp)}):\n"
            f"Hash: {tx.hash}\n"
            f"From: {tx.from_address}\n"
            f"To: {tx.to_address}\n"
            f"Value: {tx.value} {currency_symbol}\n"
            f"---"
            for tx in transactions
        )
        return f"Recent transactions for {arguments.address} on {network.value} network:\n\n{formatted}"


class GetTokenTransfersUseCase:
    """
    Use case for listing recent token transfers of an address.

    Parameters
    ----------
    explorer_service : ExplorerService
        Explorer service instance
    """

    def __init__(self, explorer_service: ExplorerService):
        self.explorer_service = explorer_service

    async def __call__(self, arguments: HistoryArguments) -> str:
        network = self.explorer_service.resolve_network(arguments.network)
        transfers = await self.explorer_service.get_token_transfers(
            address=arguments.address,
            limit=arguments.limit,
            network=network
        )
        if not transfers:
            return f"No token transfers found for {arguments.address} on {network.value} network"

        formatted = "\n".join(
            f"Block {transfer.block_number} ({_format_timestamp(transfer.timestamp)}):\n"
            f"Token: {transfer.token_name} ({transfer.token_symbol})\n"
            f"From: {transfer.from_address}\n"
            f"To: {transfer.to_address}\n"
            f"Value: {transfer.value}\n"
            f"Contract: {transfer.token_address}\n"
            f"---"
            for transfer in transfers
        )
        return f"Recent token transfers for {arguments.address} on {network.value} network:\n\n{formatted}"


class GetContractABIUseCase:
    """
    Use case for fetching a contract ABI.

    Parameters
    ----------
    explorer_service : ExplorerService
        Explorer service instance
    """

    def __init__(self, explorer_service: ExplorerService):
        self.explorer_service = explorer_service

    async def __call__(self, arguments: AddressArguments) -> str:
        network = self.explorer_service.resolve_network(arguments.network)
        abi = await self.explorer_service.get_contract_abi(
            address=arguments.address,
            network=network
        )
        return f"Contract ABI for {arguments.address} on {network.value} network:\n\n{abi}"


class GetGasPricesUseCase:
    def __init__(self, explorer_service: ExplorerService):
        self.explorer_service = explorer_service

    async def __call__(self, arguments: NetworkArguments) -> str:
        prices = await self.explorer_service.get_gas_oracle(network=arguments.network)
        return (
            f"Current Gas Prices on {prices.network.value} network:\n"
            f"Safe Low: {prices.safe_gwei} Gwei\n"
            f"Standard: {prices.propose_gwei} Gwei\n"
            f"Fast: {prices.fast_gwei} Gwei"
        )


class GetENSNameUseCase:
    """
    Use case for reverse resolving an address to its ENS name.

    Parameters
    ----------
    explorer_service : ExplorerService
        Explorer service instance
    """

    def __init__(self, explorer_service: ExplorerService):
        self.explorer_service = explorer_service

    async def __call__(self, arguments: AddressArguments) -> str:
        result = await self.explorer_service.get_ens_name(
            address=arguments.address,
            network=arguments.network
        )
        if result.status == ENSLookupStatus.NOT_SUPPORTED:
            return f"ENS is only available on Ethereum mainnet. Requested network: {result.network.value}"
        if result.status == ENSLookupStatus.NOT_FOUND:
            return f"No ENS name found for {arguments.address}"
        return f"ENS name for {arguments.address}: {result.name}"


class ListSupportedNetworksUseCase:
    """
    Use case for listing networks that have a usable API key.

    Parameters
    ----------
    explorer_service : ExplorerService
        Explorer service instance
    """

    def __init__(self, explorer_service: ExplorerService):
        self.explorer_service = explorer_service

    async def __call__(self, arguments: EmptyArguments) -> str:
        details = "\n".join(
            f"- {network.value.capitalize()}: "
            f"{self.explorer_service.get_network_config(network).currency_symbol}"
            for network in self.explorer_service.available_networks()
        )
        return f"Supported blockchain networks:\n{details}"


class ListToolsUseCase:
    """
    Use case for describing the tool catalogue.
    """

    async def __call__(self) -> ToolListResponse:
        """
        Execute use case.

        Returns
        -------
        ToolListResponse
            Tools with their JSON input schemas
        """
        return ToolListResponse(
            tools=[
                ToolDescription(
                    name=tool.name,
                    description=tool.description,
                    input_schema=tool.arguments.model_json_schema()
                )
                for tool in TOOLS
            ]
        )


class CallToolUseCase:
    """
    Use case for dispatching a tool call to its use case.

    Parameters
    ----------
    check_balance : CheckBalanceUseCase
    get_transactions : GetTransactionsUseCase
    get_token_transfers : GetTokenTransfersUseCase
    get_contract_abi : GetContractABIUseCase
    get_gas_prices : GetGasPricesUseCase
    get_ens_name : GetENSNameUseCase
    list_supported_networks : ListSupportedNetworksUseCase
    """

    def __init__(
        self,
        check_balance: CheckBalanceUseCase,
        get_transactions: GetTransactionsUseCase,
        get_token_transfers: GetTokenTransfersUseCase,
        get_contract_abi: GetContractABIUseCase,
        get_gas_prices: GetGasPricesUseCase,
        get_ens_name: GetENSNameUseCase,
        list_supported_networks: ListSupportedNetworksUseCase
    ):
        self.handlers = {
            "check-balance": check_balance,
            "get-transactions": get_transactions,
            "get-token-transfers": get_token_transfers,
            "get-contract-abi": get_contract_abi,
            "get-gas-prices": get_gas_prices,
            "get-ens-name": get_ens_name,
            "list-supported-networks": list_supported_networks,
        }

    async def __call__(self, name: str, arguments: dict) -> ToolCallResponse:
        """
        Execute use case.

        Parameters
        ----------
        name : str
            Tool name
        arguments : dict
            Raw tool arguments

        Returns
        -------
        ToolCallResponse
            Rendered tool result

        Raises
        ------
        NotFoundException
            If the tool does not exist
        InvalidArgumentsException
            If the arguments do not match the tool input schema

        Notes
        -----
        Failures while executing a valid call (bad checksum, unusable
        network, explorer or transport error) are returned as
        ``is_error=True`` content rather than raised.
        """
        tool = TOOLS_BY_NAME.get(name)
        if tool is None:
            raise NotFoundException(f"Unknown tool: {name}")

        try:
            parsed = tool.arguments.model_validate(arguments)
        except ValidationError as e:
            messages = ", ".join(error["msg"] for error in e.errors())
            raise InvalidArgumentsException(f"Invalid input: {messages}")

        try:
            text = await self.handlers[name](parsed)
        except (
            InvalidAddressException,
            NetworkUnavailableException,
            UpstreamException
        ) as e:
            return ToolCallResponse(content=[TextContent(text=e.message)], is_error=True)
        return ToolCallResponse(content=[TextContent(text=text)])
