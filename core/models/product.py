# =============================================================================
# core/models/product.py - Product Schemas
# =============================================================================
# These models define the API contract for product operations:
# - ProductCreate: Input for creating a product (no id yet)
# - ProductUpdate: Full replacement of every mutable field
# - Product: A stored product as returned to clients
# - CategoryTemplate: Preset price/description for a category
#
# JSON uses camelCase (paymentLink, createdAt); Python uses snake_case.
# =============================================================================

from datetime import datetime
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_PRODUCT_IMAGES = 5
NAME_MAX_LENGTH = 200
PRICE_MAX_LENGTH = 100
CATEGORY_MAX_LENGTH = 100

STARTER_PACKAGE = "Starter Package"
PRO_PACKAGE = "Pro Package"
DEFAULT_CATEGORY = STARTER_PACKAGE


class CategoryTemplate(BaseModel):
    """Preset values applied when an admin picks a known category."""

    model_config = ConfigDict(frozen=True)

    category: str
    price: str
    description: str


# Selecting one of these categories overwrites the form's price and description.
CATEGORY_TEMPLATES: dict[str, CategoryTemplate] = {
    STARTER_PACKAGE: CategoryTemplate(
        category=STARTER_PACKAGE,
        price="$497",
        description="""Starter Package ($497)

(For Beginners Ready To Launch Their First AI Model whilst skipping the AI Creation Phase)

What You Get:

• A Custom Built Pre-made AI Model LoRa - (So that you can plug and play and start generating images of your model immediately)
• A Basic ComfyUI Workflow - (So that you can skip the platform setup and plug in your LoRa Immediately)
• A Basic ComfyUI Workflow Video Guide - (So you know how to use the Lora to create content)

This Package Is Perfect For:

• People who are just starting out in their AI Model journey and would like to skip the trial and error phase of designing and creating their first model
• People who have completed The AI Model Method $47 course and would like to take their AI Model business to the next level immediately
• Those who are struggling to generate consistent ultra realistic content
• Those who want to fast track the process and have an extremely high quality AI Model within the next couple minutes""",
    ),
    PRO_PACKAGE: CategoryTemplate(
        category=PRO_PACKAGE,
        price="$997",
        description="""Pro Package ($997)

(For Serious AI Model Creators Ready To Monetise)

What You Get:

EVERYTHING IN 'STARTER PACKAGE', PLUS:

• 15 Pre-made Instagram Posts - (So that you can start marketing immediately)
• 15 Fanvue Free Wall Posts - (So that you have a Fanvue worth subscribing to today)
• 1 Fanvue Profile Picture - (Designed for conversions)
• 1 Fanvue Banner Image - (A 5 image collage designed for conversion)
• 1 Image ready to turn into a Fanvue Intro Video - (To help boost your discoverability and conversions)

Bonuses:

• Intermediate ComfyUI Workflow + Upscaler - (So that you can develop content on the most advanced AI platform with ease)
• Video Tutorial Guide
• SFW Prompt Guide

This Package Is Perfect For:

• Creators who understand the basics and are ready to establish a profitable AI Model presence
• Those who want a head start getting their AI Model business up and running from DAY 1
• Creators looking to implement a world class level AI Model into their business""",
    ),
}


def get_category_template(category: str) -> CategoryTemplate | None:
    """Return the preset for a category, or None if it isn't a known one."""
    return CATEGORY_TEMPLATES.get(category)


def is_http_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProductFields(_CamelModel):
    """
    Mutable product fields, validated the same way for create and update.

    Example:
        {
            "name": "Luna - Fashion Influencer",
            "description": "Starter Package ($497) ...",
            "price": "$497",
            "category": "Starter Package",
            "paymentLink": "https://buy.stripe.com/abc",
            "images": ["https://.../product-1700000000000-a1b2c3d4.jpg"]
        }
    """

    name: str = Field(..., max_length=NAME_MAX_LENGTH, description="Display name")

    description: str = Field(..., description="Long-form description")

    # Free text on purpose: "$497", "From $299", "Contact us"
    price: str = Field(..., max_length=PRICE_MAX_LENGTH, description="Price as shown to buyers")

    category: str = Field(
        default=DEFAULT_CATEGORY,
        max_length=CATEGORY_MAX_LENGTH,
        description="Product category, e.g. 'Starter Package'"
    )

    payment_link: str = Field(..., description="Absolute http(s) checkout URL")

    # Order matters: the first image is the main image
    images: list[str] = Field(
        ...,
        min_length=1,
        max_length=MAX_PRODUCT_IMAGES,
        description="Ordered image URLs, first is the main image"
    )

    @field_validator("name", "description", "price")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("payment_link")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        value = value.strip()
        if not is_http_url(value):
            raise ValueError("must be a valid URL (e.g., http://... or https://...)")
        return value

    @field_validator("images")
    @classmethod
    def _urls_not_blank(cls, value: list[str]) -> list[str]:
        if any(not url.strip() for url in value):
            raise ValueError("image URLs must not be blank")
        return value


class ProductCreate(ProductFields):
    """Schema for creating a product. The store assigns the id."""


class ProductUpdate(ProductFields):
    """Schema for updating a product. Every mutable field is replaced."""


class Product(_CamelModel):
    """
    A stored product as returned by the API.

    Built from a `products` row joined with its `product_images` rows.
    """

    id: str = Field(..., description="Store-assigned identifier")
    name: str
    description: str
    price: str
    category: str
    payment_link: str
    images: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict) -> "Product":
        """
        Build a Product from a Supabase row.

        `product_images` rows are sorted by image_order so the first URL is
        always the main image, regardless of the order Postgres returns them.
        """
        image_rows = sorted(
            row.get("product_images") or [],
            key=lambda image: image.get("image_order", 0),
        )
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            description=row.get("description") or "",
            price=row.get("price") or "",
            category=row.get("category") or DEFAULT_CATEGORY,
            payment_link=row.get("payment_link") or "",
            images=[image["image_url"] for image in image_rows],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    @property
    def main_image(self) -> str | None:
        return self.images[0] if self.images else None


class ProductList(BaseModel):
    """Schema for listing products (newest first)."""

    products: list[Product] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
