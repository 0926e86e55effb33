from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Literal

from explorer.networks import Network
from explorer.services import ADDRESS_PATTERN


NETWORK_DESCRIPTION = (
    "Blockchain network to query (ethereum, sonic, or base). "
    "Defaults to the configured default network if not specified."
)


class NetworkArguments(BaseModel):
    """
    Arguments of tools that only take a network.

    Attributes
    ----------
    network : Network | None
        Network to query (optional, defaults to the configured network)
    """
    network: Network | None = Field(default=None, description=NETWORK_DESCRIPTION)

    model_config = ConfigDict(extra="forbid")


class AddressArguments(NetworkArguments):
    """
    Arguments of tools that query a single address.

    Attributes
    ----------
    address : str
        0x-prefixed address
    network : Network | None
        Network to query (optional, defaults to the configured network)
    """
    address: str = Field(
        ...,
        description="Blockchain address (0x format)",
        json_schema_extra={"pattern": ADDRESS_PATTERN.pattern}
    )

    @field_validator('address')
    @classmethod
    def validate_address(cls, v: str) -> str:
        if not ADDRESS_PATTERN.match(v):
            raise ValueError('Invalid Ethereum address format')
        return v


class HistoryArguments(AddressArguments):
    """
    Arguments of tools that list recent activity of an address.

    Attributes
    ----------
    limit : int
        Number of records to return (1-100, default 10)
    """
    limit: int = Field(default=10, ge=1, le=100, description="Number of records to return (max 100)")


class EmptyArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ToolCallRequest(BaseModel):
    """
    Request schema for invoking a tool.

    Attributes
    ----------
    name : str
        Tool name
    arguments : dict[str, Any]
        Tool arguments, validated against the tool input schema
    """
    name: str = Field(..., description="Tool name")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallResponse(BaseModel):
    """
    Response schema for a tool invocation.

    Attributes
    ----------
    content : list[TextContent]
        Rendered result
    is_error : bool
        Whether the tool reported a failure
    """
    content: list[TextContent]
    is_error: bool = False


class ToolDescription(BaseModel):
    """
    Response schema for a single tool of the catalogue.

    Attributes
    ----------
    name : str
        Tool name
    description : str
        Human readable description
    input_schema : dict[str, Any]
        JSON schema of the tool arguments
    """
    name: str
    description: str
    input_schema: dict[str, Any]


class ToolListResponse(BaseModel):
    tools: list[ToolDescription]
