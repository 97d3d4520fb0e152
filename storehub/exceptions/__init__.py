"""Custom exceptions for the StoreHub application."""

class StoreHubError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(StoreHubError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(StoreHubError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class DiscountConfigurationError(StoreHubError):
    """Raised when the discount setup itself is broken (not a single bad promotion)."""
    def __init__(self, message, payload=None):
        super().__init__(message, 500, payload)

class UnknownDiscountTypeError(DiscountConfigurationError):
    """Raised when a discount references a type tag nobody registered."""
    def __init__(self, tag, discount=None):
        self.tag = tag
        self.discount = discount
        handle = getattr(discount, 'handle', None)
        if handle:
            message = f"Discount '{handle}' uses unregistered discount type '{tag}'"
        else:
            message = f"Unregistered discount type '{tag}'"
        super().__init__(message, payload={'type': tag, 'discount': handle})

class InvalidDiscountDataError(BusinessLogicError):
    """Raised by a discount type when its data payload is missing or malformed."""
    def __init__(self, discount, key, reason="is missing"):
        self.discount = discount
        self.key = key
        handle = getattr(discount, 'handle', None) or '<unsaved>'
        message = f"Discount '{handle}': data key '{key}' {reason}"
        super().__init__(message, status_code=422, payload={'discount': handle, 'key': key})
