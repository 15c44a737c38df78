"""Input validation for catalog and user mutations.

Each mutation validates its input before touching the database. Only the
first failing field is reported, with a localized message, through
:class:`InputValidationError`.
"""

import re
from typing import Any, TypeVar
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_core import PydanticCustomError

from catalog_api.domain.exceptions import InputValidationError

M = TypeVar("M", bound=BaseModel)

MAX_PRICE = 999_999.99
SKU_PATTERN = re.compile(r"^[A-Z0-9\-_]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _fail(code: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(code, message)


def _check_length(
    value: str,
    *,
    max_len: int,
    min_len: int = 1,
    subject: str = "El nombre",
    required: str = "El nombre es requerido",
) -> str:
    value = value.strip()
    if not value:
        raise _fail("required", required)
    if len(value) < min_len:
        raise _fail("too_short", f"{subject} debe tener al menos {min_len} caracteres")
    if len(value) > max_len:
        raise _fail("too_long", f"{subject} no puede exceder {max_len} caracteres")
    return value


def _check_positive_id(value: int, message: str) -> int:
    if value <= 0:
        raise _fail("not_positive", message)
    return value


def _check_price(value: float) -> float:
    if value <= 0:
        raise _fail("not_positive", "El precio debe ser mayor a 0")
    if value > MAX_PRICE:
        raise _fail("too_big", "El precio no puede exceder 999,999.99")
    return value


def _check_url(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise _fail("invalid_url", "Debe ser una URL válida")
    return value


class _Input(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ============================================================================
# Taxonomy
# ============================================================================


class FamilyInput(_Input):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_length(v, min_len=2, max_len=100)


class CategoryInput(_Input):
    name: str
    family_id: int

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_length(v, min_len=2, max_len=100)

    @field_validator("family_id")
    @classmethod
    def _family(cls, v: int) -> int:
        return _check_positive_id(v, "Debe seleccionar una familia")


class SubcategoryInput(_Input):
    name: str
    category_id: int

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_length(v, min_len=2, max_len=100)

    @field_validator("category_id")
    @classmethod
    def _category(cls, v: int) -> int:
        return _check_positive_id(v, "Debe seleccionar una categoría")


class OptionInput(_Input):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_length(v, min_len=2, max_len=50)


class FeatureInput(_Input):
    value: str
    option_id: int

    @field_validator("value")
    @classmethod
    def _value(cls, v: str) -> str:
        return _check_length(
            v,
            min_len=1,
            max_len=50,
            subject="El valor",
            required="El valor es requerido",
        )

    @field_validator("option_id")
    @classmethod
    def _option(cls, v: int) -> int:
        return _check_positive_id(v, "Debe seleccionar una opción")


# ============================================================================
# Products
# ============================================================================


class ProductBasicInfoInput(_Input):
    """Step 1 of product creation: the product row itself."""

    name: str
    sku: str
    price: float
    detail: str | None = None
    image_path: str | None = None
    subcategory_id: int

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_length(v, min_len=2, max_len=200)

    @field_validator("sku")
    @classmethod
    def _sku(cls, v: str) -> str:
        v = _check_length(v, max_len=50, subject="El SKU", required="El SKU es requerido")
        if not SKU_PATTERN.match(v):
            raise _fail(
                "invalid_sku",
                "El SKU solo puede contener letras mayúsculas, números, guiones y guiones bajos",
            )
        return v

    @field_validator("price")
    @classmethod
    def _price(cls, v: float) -> float:
        return _check_price(v)

    @field_validator("detail")
    @classmethod
    def _detail(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 1000:
            raise _fail("too_long", "Los detalles no pueden exceder 1000 caracteres")
        return v or None

    @field_validator("image_path")
    @classmethod
    def _image(cls, v: str | None) -> str | None:
        return _check_url(v)

    @field_validator("subcategory_id")
    @classmethod
    def _subcategory(cls, v: int) -> int:
        return _check_positive_id(v, "Debe seleccionar una subcategoría")


class VariantInput(_Input):
    """One variant row: a feature combination with optional price/stock."""

    feature_ids: list[int]
    price: float | None = None
    stock: int | None = Field(default=None, strict=True)

    @field_validator("feature_ids")
    @classmethod
    def _features(cls, v: list[int]) -> list[int]:
        if not v:
            raise _fail("too_short", "Debe seleccionar al menos una característica")
        for feature_id in v:
            _check_positive_id(feature_id, "Característica inválida")
        return v

    @field_validator("price")
    @classmethod
    def _price(cls, v: float | None) -> float | None:
        return None if v is None else _check_price(v)

    @field_validator("stock")
    @classmethod
    def _stock(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise _fail("negative", "El stock no puede ser negativo")
        return v


class ProductCreationInput(_Input):
    """Complete product aggregate: basic info, options and variants."""

    basic_info: ProductBasicInfoInput
    selected_options: list[int] = Field(default_factory=list)
    variants: list[VariantInput]

    @field_validator("selected_options")
    @classmethod
    def _options(cls, v: list[int]) -> list[int]:
        for option_id in v:
            _check_positive_id(option_id, "Opción inválida")
        return list(dict.fromkeys(v))

    @field_validator("variants")
    @classmethod
    def _variants(cls, v: list[VariantInput]) -> list[VariantInput]:
        if not v:
            raise _fail("too_short", "Debe crear al menos una variante")
        return v


# ============================================================================
# Users
# ============================================================================


class CreateUserInput(_Input):
    email: str
    password: str
    confirm_password: str
    full_name: str
    avatar_url: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise _fail("required", "El email es requerido")
        if not EMAIL_PATTERN.match(v):
            raise _fail("invalid_email", "Email inválido")
        return v.lower()

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise _fail("required", "La contraseña es requerida")
        if len(v) < 8:
            raise _fail("too_short", "La contraseña debe tener al menos 8 caracteres")
        if not PASSWORD_PATTERN.match(v):
            raise _fail(
                "weak_password",
                "La contraseña debe contener al menos una mayúscula, una minúscula y un número",
            )
        return v

    @field_validator("confirm_password")
    @classmethod
    def _confirm(cls, v: str) -> str:
        if not v:
            raise _fail("required", "Debes confirmar la contraseña")
        return v

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, v: str) -> str:
        return _check_length(
            v,
            min_len=2,
            max_len=100,
            required="El nombre completo es requerido",
        )

    @field_validator("avatar_url")
    @classmethod
    def _avatar(cls, v: str | None) -> str | None:
        return _check_url(v)

    @model_validator(mode="after")
    def _passwords_match(self) -> "CreateUserInput":
        if self.password != self.confirm_password:
            raise _fail("password_mismatch", "Las contraseñas no coinciden")
        return self


class UpdateProfileInput(_Input):
    full_name: str | None = None
    avatar_url: str | None = None

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _check_length(v, min_len=2, max_len=100)

    @field_validator("avatar_url")
    @classmethod
    def _avatar(cls, v: str | None) -> str | None:
        return _check_url(v)


class LoginInput(_Input):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise _fail("invalid_email", "Email inválido")
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise _fail("required", "La contraseña es requerida")
        return v


# ============================================================================
# Entry point
# ============================================================================


def validate_input(model: type[M], data: dict[str, Any]) -> M:
    """Validate ``data`` against ``model``.

    Returns:
        The validated model instance.

    Raises:
        InputValidationError: With the first failing field's message.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise InputValidationError(first["msg"], field=field) from e
