"""API schemas for the Catalog API.

Pydantic models for request/response validation and serialization.
Request bodies only check types; field rules and their localized messages
live in the domain validation layer.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    """Response model readable from ORM objects and dataclasses."""

    model_config = ConfigDict(from_attributes=True)


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


class SuccessResponse(BaseModel):
    """Acknowledgement of a mutation without payload."""

    success: bool = True


# ============================================================================
# Taxonomy Schemas
# ============================================================================


class FamilyCreateRequest(BaseModel):
    """Request to create or rename a family."""

    name: str = Field(..., description="Family name (2-100 characters)")


class CategoryCreateRequest(BaseModel):
    """Request to create a category."""

    name: str = Field(..., description="Category name (2-100 characters)")
    family_id: int = Field(..., description="Parent family")


class CategoryUpdateRequest(BaseModel):
    """Request to rename a category. ``family_id`` is accepted and ignored."""

    name: str = Field(..., description="New name")
    family_id: int | None = Field(default=None, description="Ignored; categories never move")


class SubcategoryCreateRequest(BaseModel):
    """Request to create a subcategory."""

    name: str = Field(..., description="Subcategory name (2-100 characters)")
    category_id: int = Field(..., description="Parent category")


class SubcategoryUpdateRequest(BaseModel):
    """Request to rename a subcategory. ``category_id`` is accepted and ignored."""

    name: str = Field(..., description="New name")
    category_id: int | None = Field(default=None, description="Ignored; subcategories never move")


class SubcategorySchema(ORMModel):
    """Subcategory."""

    id: int
    name: str
    category_id: int


class CategorySchema(ORMModel):
    """Category without children."""

    id: int
    name: str
    family_id: int


class FamilySchema(ORMModel):
    """Family without children."""

    id: int
    name: str


class CategoryTreeSchema(CategorySchema):
    """Category with its subcategories."""

    subcategories: list[SubcategorySchema] = Field(default_factory=list)


class FamilyTreeSchema(FamilySchema):
    """Family with its categories and their subcategories."""

    categories: list[CategoryTreeSchema] = Field(default_factory=list)


# ============================================================================
# Option Schemas
# ============================================================================


class OptionCreateRequest(BaseModel):
    """Request to create or rename an option."""

    name: str = Field(..., description="Option name (2-50 characters)")


class FeatureCreateRequest(BaseModel):
    """Request to create a feature."""

    value: str = Field(..., description="Feature value (1-50 characters)")
    option_id: int = Field(..., description="Owning option")


class FeatureUpdateRequest(BaseModel):
    """Request to change a feature's value. ``option_id`` is accepted and ignored."""

    value: str = Field(..., description="New value")
    option_id: int | None = Field(default=None, description="Ignored; features never move")


class FeatureSchema(ORMModel):
    """Feature."""

    id: int
    value: str
    option_id: int


class OptionSchema(ORMModel):
    """Option without features."""

    id: int
    name: str


class OptionWithFeaturesSchema(OptionSchema):
    """Option with its features ordered by value."""

    features: list[FeatureSchema] = Field(default_factory=list)


# ============================================================================
# Product Schemas (admin)
# ============================================================================


class ProductBasicInfoRequest(BaseModel):
    """Product row fields."""

    name: str
    sku: str
    price: float
    detail: str | None = None
    image_path: str | None = None
    subcategory_id: int


class VariantRequest(BaseModel):
    """One variant: a feature combination with optional price and stock."""

    feature_ids: list[int] = Field(default_factory=list)
    price: float | None = None
    stock: int | None = None


class ProductCreateRequest(BaseModel):
    """Request to create a product with its options and variants."""

    basic_info: ProductBasicInfoRequest
    selected_options: list[int] = Field(default_factory=list)
    variants: list[VariantRequest] = Field(default_factory=list)


class VariantGenerateRequest(BaseModel):
    """Request to pre-populate one variant per feature combination."""

    selected_options: list[int] = Field(default_factory=list, description="Options in order")
    base_price: float = Field(..., gt=0, description="Price of every generated variant")
    existing_count: int = Field(
        default=0, ge=0, description="Variants already drafted; must be 0 to generate"
    )


class VariantDraftSchema(ORMModel):
    """Generated variant draft."""

    feature_ids: list[int]
    price: float
    stock: int


class VariantDraftsResponse(BaseModel):
    """Generated variant drafts."""

    variants: list[VariantDraftSchema]
    count: int


class VariantFeatureSchema(BaseModel):
    """Feature of a variant, with the name of its option."""

    id: int
    value: str
    option_id: int
    option_name: str | None = None


class VariantSchema(BaseModel):
    """Stored variant."""

    id: int
    price: float | None
    stock: int
    features: list[VariantFeatureSchema] = Field(default_factory=list)


class ProductListItemSchema(BaseModel):
    """Admin product table row."""

    id: int
    name: str
    sku: str
    price: float
    subcategory_id: int
    subcategory: SubcategorySchema | None = None
    variant_count: int
    total_stock: int
    created_at: datetime


class ProductDetailSchema(BaseModel):
    """Product with taxonomy chain, options and variants."""

    id: int
    name: str
    slug: str
    sku: str
    price: float
    detail: str | None = None
    image_path: str | None = None
    subcategory_id: int
    subcategory: SubcategorySchema | None = None
    category: CategorySchema | None = None
    family: FamilySchema | None = None
    options: list[OptionWithFeaturesSchema] = Field(default_factory=list)
    variants: list[VariantSchema] = Field(default_factory=list)
    created_at: datetime | None = None


# ============================================================================
# Storefront Schemas
# ============================================================================


class ProductSummarySchema(ORMModel):
    """Product card of the public listing."""

    id: int
    name: str
    slug: str
    sku: str
    price: float
    detail: str | None = None
    image_path: str | None = None
    subcategory_id: int
    subcategory_name: str | None = None
    category_id: int | None = None
    category_name: str | None = None
    family_id: int | None = None
    family_name: str | None = None
    variant_count: int
    min_price: float
    max_price: float
    has_stock: bool


class ProductPageResponse(BaseModel):
    """One page of the public listing."""

    items: list[ProductSummarySchema]
    offset: int
    limit: int
    has_more: bool = Field(..., description="Whether a full page was returned")
    next_offset: int | None = None
    title: str
    description: str


class ProductCountResponse(BaseModel):
    """Number of products matching a filter."""

    count: int


class PriceRangeSchema(ORMModel):
    """Inclusive price interval."""

    min: float
    max: float


class FiltersResponse(BaseModel):
    """Filter panel data."""

    families: list[FamilyTreeSchema]
    price_range: PriceRangeSchema


class SeoSchema(BaseModel):
    """SEO metadata of a page."""

    title: str
    description: str
    canonical_url: str
    json_ld: dict[str, Any]


class PublicProductResponse(BaseModel):
    """Public product detail page."""

    product: ProductDetailSchema
    summary: ProductSummarySchema
    seo: SeoSchema


# ============================================================================
# User Schemas
# ============================================================================


class UserCreateRequest(BaseModel):
    """Request to provision a user."""

    email: str
    password: str
    confirm_password: str
    full_name: str
    avatar_url: str | None = None


class ProfileUpdateRequest(BaseModel):
    """Request to update a profile."""

    full_name: str | None = None
    avatar_url: str | None = None


class ProfileSchema(ORMModel):
    """Profile row."""

    id: str
    full_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None


class UserSchema(ORMModel):
    """User: auth identity joined with its profile."""

    id: str
    email: str
    created_at: str
    profile: ProfileSchema


class UserCreatedResponse(BaseModel):
    """Id of a provisioned user."""

    user_id: str


# ============================================================================
# Session Schemas
# ============================================================================


class LoginRequest(BaseModel):
    """Password login."""

    email: str
    password: str


class AuthUserSchema(ORMModel):
    """Auth service identity."""

    id: str
    email: str
    created_at: str | None = None


class SessionResponse(ORMModel):
    """Tokens issued by a password login."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str
    user: AuthUserSchema


class MeResponse(BaseModel):
    """Current user and profile."""

    user: AuthUserSchema
    profile: ProfileSchema | None = None


# ============================================================================
# Dashboard Schemas
# ============================================================================


class OverviewStatsSchema(ORMModel):
    """Catalog-wide counters."""

    total_products: int
    total_variants: int
    total_stock: int
    total_inventory_value: float
    total_families: int
    total_categories: int
    low_stock_count: int
    out_of_stock_count: int


class TopProductSchema(ORMModel):
    """Product ranked by stock."""

    id: int
    name: str
    sku: str
    price: float
    total_stock: int
    variant_count: int


class CategoryStatsSchema(ORMModel):
    """Per-category statistics."""

    category_name: str
    product_count: int
    total_stock: int
    average_price: float


class FamilyStatsSchema(ORMModel):
    """Per-family statistics."""

    family_name: str
    category_count: int
    product_count: int
    total_value: float


class DashboardStatsResponse(ORMModel):
    """Dashboard home statistics."""

    overview: OverviewStatsSchema
    top_products: list[TopProductSchema]
    categories: list[CategoryStatsSchema]
    families: list[FamilyStatsSchema]
