# storefront/api/errors.py
from fastapi import HTTPException

from storefront.domain.errors import (
    Conflict,
    InsufficientStock,
    InvalidArgument,
    NotFound,
    StorefrontError,
)

_STATUS = {
    NotFound: 404,
    InvalidArgument: 400,
    InsufficientStock: 409,
    Conflict: 409,
}


def to_http(e: StorefrontError) -> HTTPException:
    status = 500
    for kind, code in _STATUS.items():
        if isinstance(e, kind):
            status = code
            break

    detail = {"code": e.code, "message": str(e)}
    if isinstance(e, InsufficientStock):
        detail["product_id"] = e.product_id
    return HTTPException(status_code=status, detail=detail)
