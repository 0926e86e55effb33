from fastapi import APIRouter
from dishka.integrations.fastapi import inject
from dishka import FromComponent
from typing import Annotated
from explorer.schemas import (
    ToolCallRequest,
    ToolCallResponse,
    ToolListResponse
)
from explorer.usecases import CallToolUseCase, ListToolsUseCase

router = APIRouter(
    prefix="/api/tools",
    tags=["Tools"]
)


@router.get("", response_model=ToolListResponse)
@inject
async def list_tools(
    use_case: Annotated[
        ListToolsUseCase, FromComponent("explorer")
    ]
) -> ToolListResponse:
    """
    List available tools with their input schemas.

    Parameters
    ----------
    use_case : ListToolsUseCase
        Use case for describing the tool catalogue

    Returns
    -------
    ToolListResponse
        Tool catalogue
    """
    return await use_case()


@router.post("/call", response_model=ToolCallResponse)
@inject
async def call_tool(
    request: ToolCallRequest,
    use_case: Annotated[
        CallToolUseCase, FromComponent("explorer")
    ]
) -> ToolCallResponse:
    """
    Invoke a tool by name.

    Parameters
    ----------
    request : ToolCallRequest
        Request with tool name and arguments
    use_case : CallToolUseCase
        Use case for dispatching tool calls

    Returns
    -------
    ToolCallResponse
        Rendered tool result
    """
    return await use_case(
        name=request.name,
        arguments=request.arguments
    )
