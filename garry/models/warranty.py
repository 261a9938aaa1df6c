"""
Warranty API Models

Pydantic models for the resources exchanged with the Garry auth and
warranty services.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from garry.i18n import AppLocale, category_name


class WarrantyStatus(str, Enum):
    """Derived warranty status, recomputed on every display."""
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"


class WarrantyCategory(str, Enum):
    """Product categories known to the warranty service."""
    ELECTRONICS = "electronics"
    APPLIANCES = "appliances"
    FURNITURE = "furniture"
    CLOTHING = "clothing"
    AUTOMOTIVE = "automotive"
    SPORTS = "sports"
    OTHER = "other"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "WarrantyCategory":
        """Map a raw category string, unknown values become OTHER."""
        for category in cls:
            if category.value == value:
                return category
        return cls.OTHER

    @property
    def default_warranty_months(self) -> int:
        return DEFAULT_WARRANTY_MONTHS[self]

    def display_name(self, locale: Union[str, AppLocale, None] = None) -> str:
        return category_name(self.value, locale)


DEFAULT_WARRANTY_MONTHS = {
    WarrantyCategory.ELECTRONICS: 24,
    WarrantyCategory.APPLIANCES: 24,
    WarrantyCategory.FURNITURE: 24,
    WarrantyCategory.CLOTHING: 6,
    WarrantyCategory.AUTOMOTIVE: 24,
    WarrantyCategory.SPORTS: 12,
    WarrantyCategory.OTHER: 24,
}


class ApiModel(BaseModel):
    """Base model for API payloads: unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict without unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class User(ApiModel):
    id: str
    email: str
    name: str
    email_verified: bool = False


class AuthResponse(ApiModel):
    """Token pair returned by login, register and refresh."""
    access_token: str
    refresh_token: str
    expires_in: int
    user: Optional[User] = None


class LoginRequest(ApiModel):
    email: str
    password: str


class RegisterRequest(ApiModel):
    email: str
    password: str
    name: str


class RefreshRequest(ApiModel):
    refresh_token: str


class Warranty(ApiModel):
    """
    Warranty resource as served by the API.

    Dates stay ISO-8601 strings; the compute service parses them when a
    status or a display value is needed.
    """
    id: str
    user_id: str
    product_name: str
    brand: Optional[str] = None
    category: WarrantyCategory = WarrantyCategory.OTHER
    purchase_date: str
    warranty_end_date: str
    warranty_months: int = Field(gt=0)
    store: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> WarrantyCategory:
        if isinstance(value, WarrantyCategory):
            return value
        return WarrantyCategory.from_value(value)


class CreateWarrantyRequest(ApiModel):
    product_name: str = Field(min_length=1)
    brand: Optional[str] = None
    category: WarrantyCategory = WarrantyCategory.OTHER
    purchase_date: str
    warranty_months: Optional[int] = Field(default=None, gt=0)
    store: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


class UpdateWarrantyRequest(ApiModel):
    """Partial update, only the fields that are set are sent."""
    product_name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[WarrantyCategory] = None
    purchase_date: Optional[str] = None
    warranty_months: Optional[int] = Field(default=None, gt=0)
    store: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


class WarrantyListResponse(ApiModel):
    warranties: List[Warranty] = Field(default_factory=list)
    total: int = 0


class Stats(ApiModel):
    """
    Warranty counters.

    The warranty service names these total/active/expired/expiring_soon;
    the clients use the *_warranties names. Both are accepted.
    """
    total_warranties: int = Field(
        default=0, validation_alias=AliasChoices("total_warranties", "total")
    )
    active_warranties: int = Field(
        default=0, validation_alias=AliasChoices("active_warranties", "active")
    )
    expired_warranties: int = Field(
        default=0, validation_alias=AliasChoices("expired_warranties", "expired")
    )
    expiring_soon_warranties: int = Field(
        default=0, validation_alias=AliasChoices("expiring_soon_warranties", "expiring_soon")
    )


class CategoryInfo(ApiModel):
    id: str
    name: str
    name_fr: Optional[str] = None
    default_warranty_months: int

    @classmethod
    def from_category(cls, category: WarrantyCategory) -> "CategoryInfo":
        return cls(
            id=category.value,
            name=category.display_name(AppLocale.ENGLISH),
            name_fr=category.display_name(AppLocale.FRENCH),
            default_warranty_months=category.default_warranty_months,
        )


class ErrorResponse(ApiModel):
    message: str
    error: Optional[str] = None
