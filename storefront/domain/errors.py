# storefront/domain/errors.py
"""
Bledy domenowe.
Kazdy rodzaj bledu ma staly `code`, warstwa http mapuje go na status.
Tylko Conflict nadaje sie do ponowienia calej operacji.
"""


class StorefrontError(Exception):
    code = "internal"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFound(StorefrontError, LookupError):
    code = "not_found"

    def __init__(self, resource: str, key, message: str | None = None):
        super().__init__(message or f"{resource} {key} not found")
        self.resource = resource
        self.key = key


class InvalidArgument(StorefrontError, ValueError):
    code = "invalid_argument"


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class Conflict(StorefrontError, RuntimeError):
    code = "conflict"
    retryable = True


class InternalError(StorefrontError):
    code = "internal"
