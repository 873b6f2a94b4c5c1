"""Selection API endpoints.

Per-session selection lists and order sheet export.
"""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ordersheet.api.products import get_service
from ordersheet.api.schemas import (
    ErrorResponse,
    OrderExportRequest,
    SelectionAddRequest,
    SelectionQuantityRequest,
    SelectionResponse,
)
from ordersheet.application.order_desk_service import OrderDeskService
from ordersheet.domain.exceptions import (
    CustomerInfoError,
    EmptySelectionError,
    InvalidQuantityError,
    ProductNotFoundError,
)
from ordersheet.export.order_sheet import CustomerInfo, order_sheet_filename

router = APIRouter(prefix="/selections", tags=["Selections"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def request_to_customer(request: OrderExportRequest) -> CustomerInfo:
    """Convert export request to customer info."""
    customer = CustomerInfo(
        company=request.company,
        contact=request.contact,
        phone=request.phone,
        email=request.email,
        delivery_date=request.delivery_date,
    )
    if request.order_date is not None:
        customer.order_date = request.order_date
    return customer


def selected_not_found(session_id: str, product_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error_code": "ITEM_NOT_FOUND",
            "message": f"Product {product_id} is not in selection {session_id}",
        },
    )


@router.get(
    "/{session_id}",
    response_model=SelectionResponse,
    summary="Get selection",
)
async def get_selection(
    session_id: str,
    service: Annotated[OrderDeskService, Depends(get_service)],
    sort: Annotated[str | None, Query(description="Use 'size' to order by size code")] = None,
) -> SelectionResponse:
    """Get a session's selection, empty if none was started."""
    return SelectionResponse.from_selection(
        service.get_selection(session_id),
        sort_by_size=sort == "size",
    )


@router.delete(
    "/{session_id}",
    response_model=SelectionResponse,
    summary="Clear selection",
)
async def clear_selection(
    session_id: str,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> SelectionResponse:
    """Remove every product from a session's selection."""
    service.clear_selection(session_id)
    return SelectionResponse.from_selection(service.get_selection(session_id))


@router.post(
    "/{session_id}/items",
    response_model=SelectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Add product to selection",
    description="Adding a product that is already selected adds to its quantity.",
)
async def add_item(
    session_id: str,
    request: SelectionAddRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> SelectionResponse:
    """Add a product to a session's selection.

    Raises:
        HTTPException: If the product does not exist or quantity is below 1.
    """
    try:
        await service.add_to_selection(session_id, request.product_id, request.quantity)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error_code": "PRODUCT_NOT_FOUND", "message": e.message},
        ) from e
    except InvalidQuantityError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error_code": "INVALID_QUANTITY", "message": e.message},
        ) from e

    return SelectionResponse.from_selection(service.get_selection(session_id))


@router.patch(
    "/{session_id}/items/{product_id}",
    response_model=SelectionResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Set selected quantity",
    description="Quantities below 1 are rejected and the previous quantity is kept.",
)
async def set_item_quantity(
    session_id: str,
    product_id: int,
    request: SelectionQuantityRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> SelectionResponse:
    """Replace a selected product's quantity.

    Raises:
        HTTPException: If the product is not selected or quantity is below 1.
    """
    selection = service.get_selection(session_id)
    if selection.get(product_id) is None:
        raise selected_not_found(session_id, product_id)

    if not service.set_selection_quantity(session_id, product_id, request.quantity):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error_code": "INVALID_QUANTITY",
                "message": f"Quantity must be at least 1, kept {selection.get(product_id).quantity}",
            },
        )
    return SelectionResponse.from_selection(selection)


@router.delete(
    "/{session_id}/items/{product_id}",
    response_model=SelectionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Remove product from selection",
)
async def remove_item(
    session_id: str,
    product_id: int,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> SelectionResponse:
    """Remove a product from a session's selection.

    Raises:
        HTTPException: If the product is not selected.
    """
    if not service.remove_from_selection(session_id, product_id):
        raise selected_not_found(session_id, product_id)
    return SelectionResponse.from_selection(service.get_selection(session_id))


@router.post(
    "/{session_id}/export",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}},
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Export order sheet",
    description="Download the selection as an .xlsx order sheet.",
)
async def export_order(
    session_id: str,
    request: OrderExportRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> Response:
    """Export a session's selection.

    Raises:
        HTTPException: If company or contact is blank, or the selection is empty.
    """
    customer = request_to_customer(request)
    try:
        content = service.export_order(session_id, customer, sort_by_size=request.sort_by_size)
    except CustomerInfoError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error_code": "CUSTOMER_INFO_REQUIRED",
                "message": e.message,
                "details": [
                    {"field": name, "message": "Required"}
                    for name in e.details["missing_fields"]
                ],
            },
        ) from e
    except EmptySelectionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error_code": "EMPTY_SELECTION", "message": e.message},
        ) from e

    filename = order_sheet_filename(customer)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )
