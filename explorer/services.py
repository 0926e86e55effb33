import asyncio
import logging
import re
from decimal import Decimal, localcontext
from typing import Any

import aiohttp
from ens.exceptions import ENSException
from web3 import AsyncWeb3, Web3
from web3.exceptions import Web3Exception

from core.environment.config import ExplorerCredentials
from core.exceptions import (
    ConfigurationException,
    InvalidAddressException,
    NetworkUnavailableException,
    TransportException,
    UpstreamException
)
from explorer.entities import (
    CONTRACT_CREATION,
    BalanceEntity,
    ENSLookupStatus,
    ENSNameEntity,
    GasPriceEntity,
    TokenTransferEntity,
    TransactionEntity
)
from explorer.networks import Network, NetworkConfig, config_for


ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
UNSIGNED_INT_PATTERN = re.compile(r"^[0-9]+$")
UNSIGNED_DECIMAL_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)?$")

MAX_BLOCK = 99999999


def canonicalize_address(address: str) -> str:
    """
    Convert an address to its EIP-55 checksummed form.

    Parameters
    ----------
    address : str
        0x-prefixed 40 hex digit address, any casing

    Returns
    -------
    str
        Checksummed address

    Raises
    ------
    InvalidAddressException
        If the address is malformed or its mixed casing fails the checksum
    """
    if not isinstance(address, str) or not ADDRESS_PATTERN.match(address):
        raise InvalidAddressException(f"Invalid address: {address}")
    if not Web3.is_address(address):
        raise InvalidAddressException(f"Invalid address checksum: {address}")
    return Web3.to_checksum_address(address)


def format_units(value: int, decimals: int) -> str:
    """
    Format an atomic unit amount as a plain decimal string.

    Parameters
    ----------
    value : int
        Amount in atomic units
    decimals : int
        Number of decimals of the currency or token

    Returns
    -------
    str
        Decimal string without trailing zeros, e.g. ``"0.5"``
    """
    with localcontext() as ctx:
        ctx.prec = 100
        return _plain_decimal(Decimal(value).scaleb(-decimals))


def format_ether(value: int) -> str:
    """
    Format a Wei amount in native currency units (18 decimals).

    Parameters
    ----------
    value : int
        Amount in Wei

    Returns
    -------
    str
        Decimal string without trailing zeros, e.g. ``"1.5"``
    """
    return _plain_decimal(Web3.from_wei(value, "ether"))


def _plain_decimal(amount: Decimal | int) -> str:
    text = format(Decimal(amount), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def parse_decimal(row: dict[str, Any], field: str, operation: str) -> str:
    """
    Validate a non-negative decimal field of an explorer response row.

    Parameters
    ----------
    row : dict[str, Any]
        Upstream row
    field : str
        Field name
    operation : str
        Operation name used in the error message

    Returns
    -------
    str
        The value as decimal text, e.g. ``"12.5"``

    Raises
    ------
    UpstreamException
        If the field is missing or not a plain decimal number
    """
    raw = row.get(field)
    text = str(raw).strip() if isinstance(raw, (str, int, float)) and not isinstance(raw, bool) else ""
    if not UNSIGNED_DECIMAL_PATTERN.match(text):
        raise UpstreamException(
            f"Failed to {operation}: malformed '{field}' value {raw!r}",
            upstream_message=f"malformed '{field}' value"
        )
    return text


def parse_uint(row: dict[str, Any], field: str, operation: str) -> int:
    """
    Parse an unsigned integer field of an explorer response row.

    Parameters
    ----------
    row : dict[str, Any]
        Upstream row
    field : str
        Field name
    operation : str
        Operation name used in the error message

    Returns
    -------
    int
        Parsed value

    Raises
    ------
    UpstreamException
        If the field is missing or not a base-10 unsigned integer
    """
    raw = row.get(field)
    text = str(raw).strip() if isinstance(raw, (str, int)) and not isinstance(raw, bool) else ""
    if not UNSIGNED_INT_PATTERN.match(text):
        raise UpstreamException(
            f"Failed to {operation}: malformed '{field}' value {raw!r}",
            upstream_message=f"malformed '{field}' value"
        )
    return int(text)


class ExplorerService:
    """
    Client for Etherscan-family explorer APIs across supported networks.

    Parameters
    ----------
    credentials : ExplorerCredentials
        Per-network API keys
    default_network : Network
        Network used when an operation does not name one
    logger : logging.Logger
        Logger instance
    ens_clients : dict[Network, AsyncWeb3] | None
        Web3 clients for networks that support ENS reverse lookup
    timeout : float
        Explorer request timeout in seconds
    """

    def __init__(
        self,
        credentials: ExplorerCredentials,
        default_network: Network,
        logger: logging.Logger,
        ens_clients: dict[Network, AsyncWeb3] | None = None,
        timeout: float = 30.0
    ):
        self.credentials = credentials
        self.default_network = Network(default_network)
        self.logger = logger
        self.ens_clients = ens_clients or {}
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def resolve_network(self, network: Network | str | None = None) -> Network:
        """
        Resolve the network of an operation: explicit argument, else default.

        Parameters
        ----------
        network : Network | str | None
            Requested network

        Returns
        -------
        Network
            Resolved network
        """
        if network is None:
            return self.default_network
        config_for(network)
        return Network(network)

    def get_network_config(self, network: Network | str | None = None) -> NetworkConfig:
        return config_for(self.resolve_network(network))

    def is_usable(self, network: Network | str | None = None) -> bool:
        return self.credentials.is_usable(self.resolve_network(network))

    def available_networks(self) -> list[Network]:
        return self.credentials.usable_networks()

    def _require_usable(self, network: Network) -> None:
        if not self.credentials.is_usable(network):
            available = [n.value for n in self.available_networks()]
            raise NetworkUnavailableException(
                f'Network "{network.value}" is not supported or missing API key. '
                f'Available networks: {", ".join(available)}',
                available_networks=available
            )

    async def _query(
        self,
        network: Network,
        operation: str,
        params: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Perform a single GET against the explorer API of a network.

        Parameters
        ----------
        network : Network
            Resolved network
        operation : str
            Operation name used in log and error messages
        params : dict[str, Any]
            Query parameters without the API key

        Returns
        -------
        dict[str, Any]
            Decoded JSON payload

        Raises
        ------
        TransportException
            If the request fails, times out or returns a non-JSON body
        UpstreamException
            If the payload is not a JSON object
        """
        config = config_for(network)
        query = {**params, "apikey": self.credentials.api_key_for(network)}

        self.logger.info(
            f"{operation} on {network.value}: module={params['module']} action={params['action']}"
        )

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(config.api_url, params=query) as response:
                    if response.status != 200:
                        raise TransportException(
                            f"Failed to {operation}: HTTP {response.status}",
                            upstream_message=f"HTTP {response.status}"
                        )
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.logger.warning(f"{operation} on {network.value} failed: {e!r}")
            raise TransportException(
                f"Failed to {operation}: {str(e) or type(e).__name__}",
                upstream_message=str(e)
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamException(
                f"Failed to {operation}: unexpected response",
                upstream_message="unexpected response"
            )
        return payload

    def _fail(self, payload: dict[str, Any], operation: str, subject: str) -> UpstreamException:
        upstream_message = payload.get("message") or f"Failed to fetch {subject}"
        self.logger.warning(
            f"{operation} rejected by explorer: {upstream_message} ({payload.get('result')!r})"
        )
        return UpstreamException(
            f"Failed to {operation}: {upstream_message}",
            upstream_message=upstream_message
        )

    def _result(self, payload: dict[str, Any], operation: str, subject: str) -> Any:
        result = payload.get("result")
        if payload.get("status") != "1" or result is None or result == "":
            raise self._fail(payload, operation, subject)
        return result

    def _rows(self, payload: dict[str, Any], operation: str, subject: str) -> list[dict[str, Any]]:
        result = payload.get("result")
        if payload.get("status") != "1":
            # Explorers report "no records" as status 0 with an empty list
            if result == []:
                return []
            raise self._fail(payload, operation, subject)
        if not isinstance(result, list):
            raise self._fail(payload, operation, subject)
        return result

    async def get_balance(
        self,
        address: str,
        network: Network | str | None = None
    ) -> BalanceEntity:
        """
        Get native currency balance of an address.

        Parameters
        ----------
        address : str
            Account address
        network : Network | str | None
            Network name, default network when omitted

        Returns
        -------
        BalanceEntity
            Balance entity
        """
        operation = "get balance"
        selected = self.resolve_network(network)
        checksum_address = canonicalize_address(address)
        self._require_usable(selected)

        payload = await self._query(selected, operation, {
            "module": "account",
            "action": "balance",
            "address": checksum_address,
            "tag": "latest"
        })
        self._result(payload, operation, "balance")
        balance_wei = parse_uint(payload, "result", operation)

        return BalanceEntity(
            address=checksum_address,
            balance_wei=balance_wei,
            balance=format_ether(balance_wei),
            currency_symbol=config_for(selected).currency_symbol,
            network=selected
        )

    async def get_transactions(
        self,
        address: str,
        limit: int = 10,
        network: Network | str | None = None
    ) -> list[TransactionEntity]:
        """
        Get most recent normal transactions of an address.

        Parameters
        ----------
        address : str
            Account address
        limit : int
            Maximum number of transactions, validated by the caller
        network : Network | str | None
            Network name, default network when omitted

        Returns
        -------
        list[TransactionEntity]
            Transactions, most recent first
        """
        operation = "get transaction history"
        selected = self.resolve_network(network)
        checksum_address = canonicalize_address(address)
        self._require_usable(selected)

        payload = await self._query(selected, operation, {
            "module": "account",
            "action": "txlist",
            "address": checksum_address,
            "startblock": 0,
            "endblock": MAX_BLOCK,
            "page": 1,
            "offset": limit,
            "sort": "desc"
        })
        rows = self._rows(payload, operation, "transactions")[:limit]

        return [
            TransactionEntity(
                hash=row.get("hash") or "",
                from_address=row.get("from") or "",
                to_address=row.get("to") or CONTRACT_CREATION,
                value=format_ether(parse_uint(row, "value", operation)),
                timestamp=parse_uint(row, "timeStamp", operation),
                block_number=parse_uint(row, "blockNumber", operation)
            )
            for row in rows
        ]

    async def get_token_transfers(
        self,
        address: str,
        limit: int = 10,
        network: Network | str | None = None
    ) -> list[TokenTransferEntity]:
        """
        Get most recent ERC-20 token transfers of an address.

        Parameters
        ----------
        address : str
            Account address
        limit : int
            Maximum number of transfers, validated by the caller
        network : Network | str | None
            Network name, default network when omitted

        Returns
        -------
        list[TokenTransferEntity]
            Token transfers, most recent first
        """
        operation = "get token transfers"
        selected = self.resolve_network(network)
        checksum_address = canonicalize_address(address)
        self._require_usable(selected)

        payload = await self._query(selected, operation, {
            "module": "account",
            "action": "tokentx",
            "address": checksum_address,
            "startblock": 0,
            "endblock": MAX_BLOCK,
            "page": 1,
            "offset": limit,
            "sort": "desc"
        })
        rows = self._rows(payload, operation, "token transfers")[:limit]

        transfers = []
        for row in rows:
            decimals = parse_uint(row, "tokenDecimal", operation)
            transfers.append(
                TokenTransferEntity(
                    token_address=row.get("contractAddress") or "",
                    token_name=row.get("tokenName") or "",
                    token_symbol=row.get("tokenSymbol") or "",
                    from_address=row.get("from") or "",
                    to_address=row.get("to") or "",
                    value=format_units(parse_uint(row, "value", operation), decimals),
                    timestamp=parse_uint(row, "timeStamp", operation),
                    block_number=parse_uint(row, "blockNumber", operation)
                )
            )
        return transfers

    async def get_contract_abi(
        self,
        address: str,
        network: Network | str | None = None
    ) -> str:
        """
        Get the verified ABI of a contract as raw JSON text.

        Parameters
        ----------
        address : str
            Contract address
        network : Network | str | None
            Network name, default network when omitted

        Returns
        -------
        str
            ABI JSON text as returned by the explorer
        """
        operation = "get contract ABI"
        selected = self.resolve_network(network)
        checksum_address = canonicalize_address(address)
        self._require_usable(selected)

        payload = await self._query(selected, operation, {
            "module": "contract",
            "action": "getabi",
            "address": checksum_address
        })
        abi = self._result(payload, operation, "contract ABI")
        if not isinstance(abi, str):
            raise self._fail(payload, operation, "contract ABI")
        return abi

    async def get_gas_oracle(self, network: Network | str | None = None) -> GasPriceEntity:
        """
        Get current gas prices. Every call queries the explorer.

        Parameters
        ----------
        network : Network | str | None
            Network name, default network when omitted

        Returns
        -------
        GasPriceEntity
            Safe, proposed and fast gas prices in Gwei
        """
        operation = "get gas prices"
        selected = self.resolve_network(network)
        self._require_usable(selected)

        payload = await self._query(selected, operation, {
            "module": "gastracker",
            "action": "gasoracle"
        })
        result = self._result(payload, operation, "gas prices")
        if not isinstance(result, dict):
            raise self._fail(payload, operation, "gas prices")

        return GasPriceEntity(
            safe_gwei=parse_decimal(result, "SafeGasPrice", operation),
            propose_gwei=parse_decimal(result, "ProposeGasPrice", operation),
            fast_gwei=parse_decimal(result, "FastGasPrice", operation),
            last_block=parse_uint(result, "LastBlock", operation) if "LastBlock" in result else None,
            suggest_base_fee=(
                parse_decimal(result, "suggestBaseFee", operation)
                if result.get("suggestBaseFee") is not None else None
            ),
            network=selected
        )

    async def get_ens_name(
        self,
        address: str,
        network: Network | str | None = None
    ) -> ENSNameEntity:
        """
        Reverse resolve an address to its primary ENS name.

        Networks without ENS support return ``not_supported`` without any
        validation or network call.

        Parameters
        ----------
        address : str
            Account address
        network : Network | str | None
            Network name, default network when omitted

        Returns
        -------
        ENSNameEntity
            Lookup outcome
        """
        operation = "get ENS name"
        selected = self.resolve_network(network)

        if not config_for(selected).supports_ens:
            return ENSNameEntity(
                status=ENSLookupStatus.NOT_SUPPORTED,
                address=address,
                network=selected
            )

        checksum_address = canonicalize_address(address)
        self._require_usable(selected)

        web3 = self.ens_clients.get(selected)
        if web3 is None:
            raise ConfigurationException(f"No ENS client configured for {selected.value}")

        self.logger.info(f"{operation} on {selected.value}: {checksum_address}")
        try:
            name = await web3.ens.name(checksum_address)
        except (
            Web3Exception,
            ENSException,
            aiohttp.ClientError,
            asyncio.TimeoutError,
            OSError,
            ValueError
        ) as e:
            self.logger.warning(f"{operation} on {selected.value} failed: {e!r}")
            raise TransportException(
                f"Failed to {operation}: {e}",
                upstream_message=str(e)
            ) from e

        if not name:
            return ENSNameEntity(
                status=ENSLookupStatus.NOT_FOUND,
                address=checksum_address,
                network=selected
            )
        return ENSNameEntity(
            status=ENSLookupStatus.FOUND,
            address=checksum_address,
            network=selected,
            name=name
        )
