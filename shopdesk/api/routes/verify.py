"""Public sale verification endpoint."""

from fastapi import APIRouter, Depends

from shopdesk.api.dependencies import get_verify_sale_use_case
from shopdesk.application.dto.responses import ErrorResponse, VerifySaleResponse
from shopdesk.application.use_cases import VerifySaleUseCase

router = APIRouter(prefix="/api/verify", tags=["verify"])


@router.get(
    "/{sale_id}",
    response_model=VerifySaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def verify_sale(
    sale_id: str,
    use_case: VerifySaleUseCase = Depends(get_verify_sale_use_case),
) -> VerifySaleResponse:
    """Read-only priced view of a sale."""
    result = await use_case.execute(sale_id)
    return use_case.to_response(result)
