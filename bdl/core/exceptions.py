"""
BDL Exception Hierarchy

Centralized exception classes for the BDL site.
Services raise these; the command line reports them once and exits.
"""
from typing import Optional, Any


class BDLError(Exception):
    """
    Base exception for all BDL errors.

    All custom exceptions should inherit from this class so that callers
    can report any failure with a single handler.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """
        Initialize BDLError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class StoreError(BDLError):
    """
    Hosted store errors.

    Raised when a request to the store fails (HTTP error, network error,
    undecodable response).
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
        table: Optional[str] = None,
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize StoreError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
            status_code: HTTP status code if applicable
            table: The table being queried
            url: The URL that failed
            original_error: The original exception that caused this error
        """
        super().__init__(message, details)
        self.status_code = status_code
        self.table = table
        self.url = url
        self.original_error = original_error

    def __str__(self) -> str:
        base = super().__str__()
        parts = [base]
        if self.status_code:
            parts.append(f"Status: {self.status_code}")
        if self.table:
            parts.append(f"Table: {self.table}")
        if self.url:
            parts.append(f"URL: {self.url}")
        if self.original_error:
            parts.append(f"Caused by: {type(self.original_error).__name__}: {self.original_error}")
        return " | ".join(parts) if len(parts) > 1 else base


class NotFoundError(BDLError):
    """Raised when a requested row does not exist."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        table: Optional[str] = None,
        key: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.table = table
        self.key = key

    def __str__(self) -> str:
        base = super().__str__()
        parts = [base]
        if self.table:
            parts.append(f"Table: {self.table}")
        if self.key:
            parts.append(f"Key: {self.key}")
        return " | ".join(parts) if len(parts) > 1 else base


class ValidationError(BDLError):
    """
    Data validation errors.

    Raised when input data (form fields, role strings, vote values)
    fails validation.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
    ):
        """
        Initialize ValidationError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
            field_name: The field that failed validation
            field_value: The value that failed validation
        """
        super().__init__(message, details)
        self.field_name = field_name
        self.field_value = field_value

    def __str__(self) -> str:
        base = super().__str__()
        parts = [base]
        if self.field_name:
            parts.append(f"Field: {self.field_name}")
        if self.field_value is not None:
            parts.append(f"Value: {self.field_value}")
        return " | ".join(parts) if len(parts) > 1 else base


class PermissionDeniedError(BDLError):
    """Raised when the current session is not allowed to perform an action."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        action: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.action = action
        self.user_id = user_id

    def __str__(self) -> str:
        base = super().__str__()
        parts = [base]
        if self.action:
            parts.append(f"Action: {self.action}")
        if self.user_id:
            parts.append(f"User: {self.user_id}")
        return " | ".join(parts) if len(parts) > 1 else base


class ConfigurationError(BDLError):
    """
    Configuration errors.

    Raised when configuration is missing or invalid.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        config_key: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.config_key = config_key

    def __str__(self) -> str:
        base = super().__str__()
        if self.config_key:
            return f"{base} | Key: {self.config_key}"
        return base
