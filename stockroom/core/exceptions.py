"""
Domain errors raised by the service layer.

Services never build HTTP responses; they raise one of these and the handler
registered in ``stockroom.main`` turns it into a JSON body with the matching
status code.
"""
from typing import Any, Dict, List, Optional


class StockroomError(Exception):
    """Base class for errors surfaced directly to the caller."""

    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        body = {"detail": self.message, "error": self.code}
        body.update(self.context)
        return body


class NotFoundError(StockroomError):
    status_code = 404
    code = "not_found"


class ConflictError(StockroomError):
    status_code = 409
    code = "conflict"


class InvalidOperationError(StockroomError):
    status_code = 400
    code = "invalid_operation"


class InsufficientStockError(InvalidOperationError):
    code = "insufficient_stock"

    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}, Requested: {requested}",
            product_id=product_id,
            product_name=product_name,
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class RequestValidationFailed(StockroomError):
    """Boundary validation failure carrying one entry per offending field."""

    status_code = 422
    code = "validation_error"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message or "Invalid request parameters", errors=errors)
        self.errors = errors
