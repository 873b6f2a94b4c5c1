"""API schemas for the order desk API.

Pydantic models for request/response validation and serialization.
"""

from pydantic import BaseModel, Field, model_validator

from ordersheet.catalog.models import Product, ProductDraft, ProductPatch, has_required_fields
from ordersheet.domain.selection import SelectedProduct, SelectionWorkingSet


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Product Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """A catalog product."""

    id: int = Field(..., description="Product identifier")
    code: str = Field(..., description="Product code, may be empty")
    name: str = Field(..., description="Product name")
    name2: str = Field(default="", description="Secondary product name")
    size_code: str = Field(default="", description="Size code")
    image_url: str = Field(default="", description="Image data URI or URL")

    @classmethod
    def from_product(cls, product: Product) -> "ProductSchema":
        return cls(
            id=product.id,
            code=product.code,
            name=product.name,
            name2=product.name2,
            size_code=product.size_code,
            image_url=product.image_url,
        )


class ProductsListResponse(BaseModel):
    """List of products."""

    items: list[ProductSchema] = Field(..., description="Products in catalog order")
    total: int = Field(..., description="Number of products returned")


class ProductCreateRequest(BaseModel):
    """Request to create a product.

    Needs a code and a name, or, without a code, a name and a name2.
    """

    code: str = Field(default="", max_length=100, description="Product code")
    name: str = Field(default="", max_length=500, description="Product name")
    name2: str = Field(default="", max_length=500, description="Secondary product name")
    size_code: str = Field(default="", max_length=50, description="Size code")

    @model_validator(mode="after")
    def check_required_fields(self) -> "ProductCreateRequest":
        if not has_required_fields(self.code, self.name, self.name2):
            raise ValueError(
                "A product needs a code and a name, or a name and a name2 when it has no code"
            )
        return self

    def to_draft(self) -> ProductDraft:
        return ProductDraft(
            code=self.code,
            name=self.name,
            name2=self.name2,
            size_code=self.size_code,
        )


class ProductBulkCreateRequest(BaseModel):
    """Request to create many products at once."""

    products: list[ProductCreateRequest] = Field(
        ..., min_length=1, description="Products in import order"
    )


class ProductUpdateRequest(BaseModel):
    """Partial product update. Omitted fields keep their value."""

    code: str | None = Field(default=None, max_length=100)
    name: str | None = Field(default=None, max_length=500)
    name2: str | None = Field(default=None, max_length=500)
    size_code: str | None = Field(default=None, max_length=50)

    def to_patch(self) -> ProductPatch:
        return ProductPatch(
            code=self.code,
            name=self.name,
            name2=self.name2,
            size_code=self.size_code,
        )


class ProductImageRequest(BaseModel):
    """Request to replace a product image."""

    image_url: str = Field(..., description="Image data URI or URL; empty to clear")


class ProductDeleteRequest(BaseModel):
    """Request to delete several products."""

    ids: list[int] = Field(..., description="Product ids to delete")


class ProductCreatedResponse(BaseModel):
    """Response for a created product."""

    created: bool = Field(..., description="Whether the product was created")


class BulkAddResponse(BaseModel):
    """Result of a bulk create or import."""

    added_count: int = Field(..., description="Number of products created")
    duplicate_codes: list[str] = Field(
        default_factory=list, description="Codes skipped as duplicates"
    )
    products: list[ProductSchema] = Field(
        default_factory=list, description="Products created"
    )


class DeleteResponse(BaseModel):
    """Result of a delete."""

    deleted: bool = Field(..., description="Whether anything was removed")


# ============================================================================
# Admin Schemas
# ============================================================================


class AdminVerifyRequest(BaseModel):
    """Request to check the admin passphrase."""

    passphrase: str


# ============================================================================
# Selection Schemas
# ============================================================================


class SelectedProductSchema(ProductSchema):
    """A selected product with its quantity."""

    quantity: int = Field(..., ge=1, description="Units ordered")

    @classmethod
    def from_selected(cls, item: SelectedProduct) -> "SelectedProductSchema":
        product = item.product
        return cls(
            id=product.id,
            code=product.code,
            name=product.name,
            name2=product.name2,
            size_code=product.size_code,
            image_url=product.image_url,
            quantity=item.quantity,
        )


class SelectionResponse(BaseModel):
    """A session's selection."""

    session_id: str
    items: list[SelectedProductSchema]
    item_count: int
    total_quantity: int

    @classmethod
    def from_selection(
        cls,
        selection: SelectionWorkingSet,
        sort_by_size: bool = False,
    ) -> "SelectionResponse":
        items = selection.sorted_by_size() if sort_by_size else selection.items
        return cls(
            session_id=selection.session_id,
            items=[SelectedProductSchema.from_selected(item) for item in items],
            item_count=len(selection),
            total_quantity=selection.total_quantity,
        )


class SelectionAddRequest(BaseModel):
    """Request to add a product to a selection."""

    product_id: int = Field(..., description="Catalog product id")
    quantity: int = Field(default=1, description="Units to add")


class SelectionQuantityRequest(BaseModel):
    """Request to replace a selected product's quantity."""

    quantity: int = Field(..., description="New quantity, at least 1")


class OrderExportRequest(BaseModel):
    """Customer details for an order sheet export."""

    company: str = Field(..., description="Company name (required)")
    contact: str = Field(..., description="Contact person (required)")
    phone: str = ""
    email: str = ""
    order_date: str | None = Field(default=None, description="Defaults to today")
    delivery_date: str = ""
    sort_by_size: bool = Field(default=False, description="Order rows by size code")
