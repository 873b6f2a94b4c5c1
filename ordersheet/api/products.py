"""Product catalog API endpoints.

Reads are public; every other method needs the admin passphrase (see
``AdminPassphraseMiddleware``).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ordersheet.api.schemas import (
    BulkAddResponse,
    DeleteResponse,
    ErrorResponse,
    ProductBulkCreateRequest,
    ProductCreateRequest,
    ProductCreatedResponse,
    ProductDeleteRequest,
    ProductImageRequest,
    ProductSchema,
    ProductsListResponse,
    ProductUpdateRequest,
)
from ordersheet.application.order_desk_service import (
    OrderDeskService,
    get_order_desk_service,
)
from ordersheet.catalog.models import Product, has_required_fields
from ordersheet.catalog.search import search_products
from ordersheet.catalog.service import BulkAddResult
from ordersheet.domain.exceptions import CatalogImportError

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service() -> OrderDeskService:
    """Get order desk service."""
    return get_order_desk_service()


# ============================================================================
# Converters
# ============================================================================


def products_to_response(products: list[Product]) -> ProductsListResponse:
    """Convert products to list response."""
    return ProductsListResponse(
        items=[ProductSchema.from_product(p) for p in products],
        total=len(products),
    )


def bulk_result_to_response(result: BulkAddResult) -> BulkAddResponse:
    """Convert bulk add result to response schema."""
    return BulkAddResponse(
        added_count=result.added_count,
        duplicate_codes=result.duplicate_codes,
        products=[ProductSchema.from_product(p) for p in result.added_products],
    )


def not_found(product_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error_code": "PRODUCT_NOT_FOUND",
            "message": f"Product not found: {product_id}",
        },
    )


def duplicate_code(code: str | None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error_code": "DUPLICATE_CODE",
            "message": f"Product code already exists: {code}",
        },
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductsListResponse,
    summary="List products",
    description="List the catalog, optionally filtered by keywords.",
)
async def list_products(
    service: Annotated[OrderDeskService, Depends(get_service)],
    q: Annotated[str | None, Query(description="Keyword filter")] = None,
) -> ProductsListResponse:
    """List all products, filtered by ``q`` when given."""
    products = await service.list_products()
    return products_to_response(search_products(q, products))


@router.get(
    "/{product_id}",
    response_model=ProductSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    product_id: int,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> ProductSchema:
    """Get a product by ID.

    Raises:
        HTTPException: If product not found.
    """
    product = await service.get_product(product_id)
    if product is None:
        raise not_found(product_id)
    return ProductSchema.from_product(product)


@router.post(
    "",
    response_model=ProductCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Create product",
)
async def create_product(
    request: ProductCreateRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> ProductCreatedResponse:
    """Create a product.

    Raises:
        HTTPException: If the code is already taken.
    """
    if not await service.create_product(request.to_draft()):
        raise duplicate_code(request.code)
    return ProductCreatedResponse(created=True)


@router.post(
    "/bulk",
    response_model=BulkAddResponse,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Create many products",
    description="Create products in order. Duplicate codes are skipped and reported.",
)
async def create_products(
    request: ProductBulkCreateRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> BulkAddResponse:
    """Create a batch of products."""
    result = await service.create_products([p.to_draft() for p in request.products])
    return bulk_result_to_response(result)


@router.post(
    "/import",
    response_model=BulkAddResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Import products from a spreadsheet",
    description=(
        "Upload an .xlsx file as the request body. Legacy .xls workbooks are "
        "not supported. The first row is a header; columns 1-4 are code, "
        "name, name2 and size code."
    ),
)
async def import_products(
    request: Request,
    service: Annotated[OrderDeskService, Depends(get_service)],
    filename: Annotated[str | None, Query(description="Original file name")] = None,
) -> BulkAddResponse:
    """Import products from an uploaded workbook.

    Raises:
        HTTPException: If the file is unreadable or has no valid rows.
    """
    data = await request.body()
    try:
        result = await service.import_products(data, filename=filename)
    except CatalogImportError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error_code": "IMPORT_FAILED",
                "message": e.message,
                "details": [{"field": "file", "message": e.details["reason"]}],
            },
        ) from e
    return bulk_result_to_response(result)


@router.post(
    "/delete",
    response_model=DeleteResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Delete several products",
)
async def delete_products(
    request: ProductDeleteRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> DeleteResponse:
    """Delete products by id. Unknown ids are ignored."""
    return DeleteResponse(deleted=await service.delete_products(request.ids))


@router.patch(
    "/{product_id}",
    response_model=ProductSchema,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Update product",
)
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> ProductSchema:
    """Update a product's fields.

    Raises:
        HTTPException: If the product is missing, the merged product lacks
            required fields, or the code collides with another product.
    """
    product = await service.get_product(product_id)
    if product is None:
        raise not_found(product_id)

    patch = request.to_patch()
    merged = patch.apply(product)
    if not has_required_fields(merged.code, merged.name, merged.name2):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error_code": "INVALID_PRODUCT",
                "message": (
                    "A product needs a code and a name, "
                    "or a name and a name2 when it has no code"
                ),
            },
        )

    if not await service.update_product(product_id, patch):
        # Removed after the lookup above
        if await service.get_product(product_id) is None:
            raise not_found(product_id)
        raise duplicate_code(patch.code)

    updated = await service.get_product(product_id)
    if updated is None:
        raise not_found(product_id)
    return ProductSchema.from_product(updated)


@router.put(
    "/{product_id}/image",
    response_model=ProductSchema,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Replace product image",
)
async def update_product_image(
    product_id: int,
    request: ProductImageRequest,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> ProductSchema:
    """Replace a product's image.

    Raises:
        HTTPException: If product not found.
    """
    if not await service.update_product_image(product_id, request.image_url):
        raise not_found(product_id)

    updated = await service.get_product(product_id)
    if updated is None:
        raise not_found(product_id)
    return ProductSchema.from_product(updated)


@router.delete(
    "/{product_id}",
    response_model=DeleteResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: int,
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> DeleteResponse:
    """Delete a product. Deleting a missing product is not an error."""
    return DeleteResponse(deleted=await service.delete_product(product_id))


@router.delete(
    "",
    response_model=DeleteResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Delete all products",
)
async def delete_all_products(
    service: Annotated[OrderDeskService, Depends(get_service)],
) -> DeleteResponse:
    """Clear the catalog."""
    return DeleteResponse(deleted=await service.delete_all_products())
