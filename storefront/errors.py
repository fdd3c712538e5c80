"""
Common error constants and exceptions.

Centralized error messages to avoid string duplication. None of the
exceptions below escape a cart mutation: the persistence adapter logs
them and degrades to an empty or unchanged cart.
"""

# Storage errors
ERROR_STORAGE_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_UNKNOWN_BACKEND = "Unknown cart storage backend"

# Persisted cart errors
ERROR_CART_NOT_A_LIST = "Stored cart is not a list of line items"
ERROR_RECORD_NOT_A_DICT = "Stored line item is not an object"
ERROR_RECORD_BAD_QUANTITY = "Stored line item has a non-positive quantity"

# Config errors
ERROR_INVALID_INTEGER = "Expected an integer"


class StorefrontError(Exception):
    """Base class for storefront errors."""


class ConfigurationError(StorefrontError):
    """Raised when an environment variable holds an invalid value."""


class StorageUnavailableError(StorefrontError):
    """Raised when the durable cart slot cannot be reached or configured."""


class CartRecordError(StorefrontError):
    """Raised when a persisted line item cannot be decoded."""
