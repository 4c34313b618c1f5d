"""
API request and response models for Stockroom REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
products/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models are the schema gate: a body that fails here never reaches the
stores. Response models carry the wire names the browser client reads
(_id, user, createdAt, updatedAt) via field aliases; FastAPI
serializes response_model output by alias.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from auth.models import User
from products.models import Product

# bcrypt refuses passwords longer than 72 bytes (UTF-8 encoded).
_MAX_PASSWORD_BYTES = 72

# Largest price NUMERIC(12, 2) can hold.
_MAX_PRICE = 9_999_999_999.99

# Identity fields are stripped; passwords are taken exactly as submitted.
_Stripped = Annotated[str, StringConstraints(strip_whitespace=True)]

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/v1/auth/signup.

    Minimum password length is a Settings value, so it is checked in
    auth.accounts.signup() rather than here. The upper bound is counted in
    bytes because that is what bcrypt limits.
    """

    name: _Stripped = Field(min_length=1, max_length=255)
    email: _Stripped = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=_MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > _MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {_MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/auth/login.

    No byte check here: an over-long password simply fails verification.
    """

    email: _Stripped = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=_MAX_PASSWORD_BYTES)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of an account. Never includes the password hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(alias="_id")
    name: str
    email: str
    created_at: str = Field(alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


class AuthResponse(BaseModel):
    """Response for signup and login."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    token: str
    user: UserOut


class MeResponse(BaseModel):
    """Response for GET /api/v1/auth/me."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    user: UserOut


# ---------------------------------------------------------------------------
# Products -- request models
# ---------------------------------------------------------------------------


def _round_price(value: float) -> float:
    return round(value, 2)


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise coerce to 1.0/0.0.
    if isinstance(value, bool):
        raise ValueError("must be a number")
    return value


class ProductCreate(BaseModel):
    """Request body for POST /api/v1/products.

    All four fields are required. Ownership comes from the token, so any
    user/owner/_id keys in the body are dropped (extra="ignore").
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=5000)
    category: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0, le=_MAX_PRICE, allow_inf_nan=False)

    @field_validator("price", mode="before")
    @classmethod
    def price_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value)

    @field_validator("price")
    @classmethod
    def two_decimals(cls, value: float) -> float:
        return _round_price(value)


class ProductUpdate(BaseModel):
    """Request body for PUT /api/v1/products/{id}.

    Every field is optional; only fields present in the body are applied
    (route uses model_dump(exclude_unset=True)). Explicit nulls are treated
    as absent. Identifier and owner keys are ignored.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[float] = Field(default=None, ge=0, le=_MAX_PRICE, allow_inf_nan=False)

    @field_validator("price", mode="before")
    @classmethod
    def price_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value)

    @field_validator("price")
    @classmethod
    def two_decimals(cls, value: Optional[float]) -> Optional[float]:
        return None if value is None else _round_price(value)

    def changes(self) -> dict:
        """Fields the caller actually supplied, minus explicit nulls."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


# ---------------------------------------------------------------------------
# Products -- response models
# ---------------------------------------------------------------------------


class ProductOut(BaseModel):
    """Wire form of a product."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(alias="_id")
    name: str
    description: str
    category: str
    price: float
    owner_id: int = Field(alias="user")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        """Factory Method -- the mapping lives next to the output model."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category=product.category,
            price=product.price,
            owner_id=product.owner_id,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    data: list[ProductOut]


class ProductResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: Optional[str] = None
    data: ProductOut


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """Success envelope with no payload (e.g. DELETE)."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    message: str


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
