from dataclasses import dataclass

from pydantic import BaseModel

from explorer.schemas import (
    AddressArguments,
    EmptyArguments,
    HistoryArguments,
    NetworkArguments
)


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    name: str
    description: str
    arguments: type[BaseModel]


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="check-balance",
        description="Check the balance of an address on any supported blockchain network",
        arguments=AddressArguments
    ),
    ToolDefinition(
        name="get-transactions",
        description="Get recent transactions for an address on any supported blockchain network",
        arguments=HistoryArguments
    ),
    ToolDefinition(
        name="get-token-transfers",
        description="Get token transfers for an address on any supported blockchain network",
        arguments=HistoryArguments
    ),
    ToolDefinition(
        name="get-contract-abi",
        description="Get the ABI for a smart contract on any supported blockchain network",
        arguments=AddressArguments
    ),
    ToolDefinition(
        name="get-gas-prices",
        description="Get current gas prices on any supported blockchain network in Gwei",
        arguments=NetworkArguments
    ),
    ToolDefinition(
        name="get-ens-name",
        description="Get the ENS name for an address (Ethereum mainnet only)",
        arguments=AddressArguments
    ),
    ToolDefinition(
        name="list-supported-networks",
        description="List all supported blockchain networks",
        arguments=EmptyArguments
    ),
)

TOOLS_BY_NAME: dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}
