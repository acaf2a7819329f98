"""
Custom Exception Hierarchy - Domain-specific error types

Provides clear, typed exceptions for different failure modes across the system.
All custom exceptions inherit from ReleaseWatchError for easy catching.

Design Philosophy:
- Exceptions are data: Include context for debugging
- Fail explicitly: Better to raise specific exception than generic
- Catch specifically: Handler can distinguish error types
- Log contextually: Exception attributes enable rich logging
"""

from typing import Optional, Dict, Any


class ReleaseWatchError(Exception):
    """Base exception for all releasewatch errors

    All custom exceptions inherit from this, enabling:
    - Catch all releasewatch errors with single except clause
    - Distinguish our errors from library errors
    - Check if error is retryable via is_retryable property
    """

    # Default: errors are not retryable (permanent failure)
    _retryable: bool = False

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """True for transient failures (network, timeouts), False for permanent ones"""
        return self._retryable

    def __str__(self):
        base_msg = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


# ========== Database Errors ==========


class DatabaseError(ReleaseWatchError):
    """Database operation failures

    Examples:
    - Query errors
    - Transaction rollbacks
    - Data integrity violations
    """
    pass


class DatabaseConnectionError(DatabaseError):
    """Failed to establish or maintain database connection"""
    _retryable = True


class DataIntegrityError(DatabaseError):
    """Data integrity constraint violation

    Examples:
    - Unique constraint violations
    - Check constraint failures
    """

    def __init__(self, message: str, table: Optional[str] = None, constraint: Optional[str] = None):
        self.table = table
        self.constraint = constraint
        context = {}
        if table:
            context['table'] = table
        if constraint:
            context['constraint'] = constraint
        super().__init__(message, context)


class DuplicateUpdateError(DataIntegrityError):
    """Insert lost a race: a record with this unique_id already exists

    Not fatal. The reconciler re-reads the stored record and continues
    down the update path.
    """

    def __init__(self, unique_id: str):
        self.unique_id = unique_id
        super().__init__(
            f"Update {unique_id} already exists",
            table="updates",
            constraint="updates_unique_id_key",
        )
        self.context['unique_id'] = unique_id


# ========== Vendor Errors ==========


class VendorError(ReleaseWatchError):
    """Vendor extractor failures

    Includes context about which vendor failed.
    """

    def __init__(
        self,
        message: str,
        vendor: str,
        original_error: Optional[Exception] = None
    ):
        self.vendor = vendor
        self.original_error = original_error

        context = {'vendor': vendor}
        if original_error:
            context['original_error'] = str(original_error)

        super().__init__(message, context)


class VendorHTTPError(VendorError):
    """HTTP request to a vendor documentation site failed

    Retryable for 5xx, timeouts and connection errors.
    Not retryable for 4xx.
    """

    def __init__(
        self,
        message: str,
        vendor: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.url = url

        super().__init__(message, vendor=vendor)
        if status_code:
            self.context['status_code'] = status_code
        if url:
            self.context['url'] = url

    @property
    def is_retryable(self) -> bool:
        """5xx errors and timeouts are retryable, 4xx are not"""
        if self.status_code is None:
            # No status code = network/timeout error
            return True
        return self.status_code >= 500


class VendorParsingError(VendorError):
    """Failed to parse a vendor document

    Examples:
    - Malformed RSS index
    - Expected element not found
    """

    def __init__(
        self,
        message: str,
        vendor: str,
        url: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.url = url
        super().__init__(message, vendor=vendor, original_error=original_error)
        if url:
            self.context['url'] = url


# ========== Configuration Errors ==========


class ConfigurationError(ReleaseWatchError):
    """Configuration or environment errors

    Examples:
    - Unknown extractor key in RELEASEWATCH_EXTRACTORS
    - Invalid configuration value
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        context = {}
        if config_key:
            context['config_key'] = config_key
        super().__init__(message, context)


# ========== Validation Errors ==========


class ValidationError(ReleaseWatchError):
    """Data validation failures

    Examples:
    - Malformed unique_id
    - Missing required field
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        self.field = field
        self.value = value

        context = {}
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)

        super().__init__(message, context)
