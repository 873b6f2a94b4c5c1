"""Public product search endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ordersheet.api.products import get_service, products_to_response
from ordersheet.api.schemas import ProductsListResponse
from ordersheet.application.order_desk_service import OrderDeskService

router = APIRouter(tags=["Search"])


@router.get(
    "/search",
    response_model=ProductsListResponse,
    summary="Search products",
    description=(
        "Every whitespace-separated keyword must appear in the code, name, "
        "name2 or size code. A blank query returns the whole catalog."
    ),
)
async def search(
    service: Annotated[OrderDeskService, Depends(get_service)],
    q: Annotated[str, Query(description="Search keywords")] = "",
) -> ProductsListResponse:
    """Search the catalog."""
    return products_to_response(await service.search(q))
