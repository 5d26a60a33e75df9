"""Swap execution endpoints.

The request is mapped onto the orchestrator; the outcome is returned
as {success, txHash} or {success: false, message | error}.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from swingswap.api.contracts import SwapRequest, SwapResponse
from swingswap.swap.orchestrator import SwapOrchestrator

router = APIRouter()

_orchestrator: Optional[SwapOrchestrator] = None


def get_orchestrator() -> SwapOrchestrator:
    """Get or create the orchestrator instance."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = SwapOrchestrator()
    return _orchestrator


async def _execute(request: SwapRequest, orchestrator: SwapOrchestrator) -> JSONResponse:
    result = await orchestrator.execute_swap(request.to_params())
    status_code = 500 if result.error is not None else 200
    return JSONResponse(status_code=status_code, content=result.to_dict())


@router.post("/uniswap", response_model=SwapResponse, response_model_exclude_none=True)
async def execute_swap(
    request: SwapRequest,
    orchestrator: SwapOrchestrator = Depends(get_orchestrator),
):
    """Quote, approve if needed, and execute a swap or bridge.

    Signs with the server-held key of the source chain family.
    """
    return await _execute(request, orchestrator)


@router.post("/api/v1/swap", response_model=SwapResponse, response_model_exclude_none=True)
async def execute_swap_v1(
    request: SwapRequest,
    orchestrator: SwapOrchestrator = Depends(get_orchestrator),
):
    """Alias of /uniswap."""
    return await _execute(request, orchestrator)
