"""Catalog data model.

Products, drafts submitted for creation, partial patches, and the
persisted catalog record.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any


def normalize_code(code: str | None) -> str:
    """Return the identity key for a product code.

    Codes that differ only by case or surrounding whitespace are the same
    identity. An empty result means the product has no code and is exempt
    from uniqueness.
    """
    return (code or "").strip().lower()


def has_required_fields(code: str, name: str, name2: str | None) -> bool:
    """Check the product construction precondition.

    A product needs either a code and a name, or, without a code,
    both a name and a secondary name.
    """
    code = (code or "").strip()
    name = (name or "").strip()
    name2 = (name2 or "").strip()
    if code:
        return bool(name)
    return bool(name and name2)


@dataclass
class Product:
    """Product record in the catalog.

    Attributes:
        id: Store-assigned identifier, immutable and unique.
        code: Product code, possibly empty.
        name: Product name.
        name2: Secondary label.
        size_code: Size code (e.g. "M", "S10", "FREE").
        image_url: Data URI or external URL of the product image.
    """

    id: int
    code: str
    name: str
    name2: str = ""
    size_code: str = ""
    image_url: str = ""

    @property
    def code_key(self) -> str:
        """Case-insensitive identity key for this product's code."""
        return normalize_code(self.code)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dictionary form."""
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "name2": self.name2,
            "sizeCode": self.size_code,
            "imageUrl": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a product from its persisted dictionary form.

        Raises:
            TypeError: If ``data`` is not a mapping.
        """
        if not isinstance(data, dict):
            raise TypeError(f"product entry must be an object, got {type(data).__name__}")
        return cls(
            id=int(data["id"]),
            code=_text(data.get("code")),
            name=_text(data.get("name")),
            name2=_text(data.get("name2")),
            size_code=_text(data.get("sizeCode")),
            image_url=_text(data.get("imageUrl")),
        )


@dataclass
class ProductDraft:
    """Un-identified product payload submitted for creation."""

    code: str = ""
    name: str = ""
    name2: str = ""
    size_code: str = ""

    @property
    def code_key(self) -> str:
        return normalize_code(self.code)

    def is_valid(self) -> bool:
        """Whether this draft satisfies the construction precondition."""
        return has_required_fields(self.code, self.name, self.name2)

    def to_product(self, product_id: int) -> Product:
        """Materialize the draft with an id and an empty image."""
        return Product(
            id=product_id,
            code=self.code,
            name=self.name,
            name2=self.name2,
            size_code=self.size_code,
            image_url="",
        )


@dataclass
class ProductPatch:
    """Partial update for a product. ``None`` fields are left unchanged."""

    code: str | None = None
    name: str | None = None
    name2: str | None = None
    size_code: str | None = None
    image_url: str | None = None

    def changes(self) -> dict[str, str]:
        """Fields present in this patch."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def apply(self, product: Product) -> Product:
        """Return a copy of ``product`` with the patched fields overwritten."""
        return replace(product, **self.changes())


@dataclass
class CatalogState:
    """Persisted catalog record: all products plus the id generator."""

    products: list[Product] = field(default_factory=list)
    next_id: int = 1

    @classmethod
    def initial(cls, products: list[Product] | None = None) -> "CatalogState":
        """Create the first record, with ``next_id`` above every seeded id."""
        seeded = list(products or [])
        next_id = max((p.id for p in seeded), default=0) + 1
        return cls(products=seeded, next_id=next_id)

    def allocate_id(self) -> int:
        """Issue the next id and advance the generator."""
        product_id = self.next_id
        self.next_id += 1
        return product_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "products": [p.to_dict() for p in self.products],
            "nextId": self.next_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogState":
        if not isinstance(data, dict):
            raise TypeError(f"catalog record must be an object, got {type(data).__name__}")
        items = data.get("products") or []
        if not isinstance(items, list):
            raise TypeError(f"products must be a list, got {type(items).__name__}")
        products = [Product.from_dict(item) for item in items]
        next_id = int(data.get("nextId", 0))
        # Never issue an id that is already taken
        next_id = max(next_id, max((p.id for p in products), default=0) + 1)
        return cls(products=products, next_id=next_id)


def _text(value: Any) -> str:
    return "" if value is None else str(value)
