"""Admin gate endpoint.

Lets the presentation layer check the shared passphrase before it shows
catalog-editing controls.
"""

import structlog
from fastapi import APIRouter, HTTPException, Response, status

from ordersheet.api.schemas import AdminVerifyRequest, ErrorResponse
from ordersheet.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/verify",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}},
    summary="Check admin passphrase",
)
async def verify_passphrase(request: AdminVerifyRequest) -> Response:
    """Check the admin passphrase.

    Raises:
        HTTPException: If the passphrase does not match.
    """
    if request.passphrase != settings.admin_passphrase:
        logger.warning("Admin passphrase rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error_code": "INVALID_PASSPHRASE",
                "message": "Invalid admin passphrase",
            },
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
