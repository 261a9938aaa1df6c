"""Models Package - API resources and derived warranty status."""

from .warranty import (
    AuthResponse,
    CategoryInfo,
    CreateWarrantyRequest,
    ErrorResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    Stats,
    UpdateWarrantyRequest,
    User,
    Warranty,
    WarrantyCategory,
    WarrantyListResponse,
    WarrantyStatus,
)

__all__ = [
    "AuthResponse",
    "CategoryInfo",
    "CreateWarrantyRequest",
    "ErrorResponse",
    "LoginRequest",
    "RefreshRequest",
    "RegisterRequest",
    "Stats",
    "UpdateWarrantyRequest",
    "User",
    "Warranty",
    "WarrantyCategory",
    "WarrantyListResponse",
    "WarrantyStatus",
]
