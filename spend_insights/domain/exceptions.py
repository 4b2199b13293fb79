"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TransactionStoreError(DomainException):
    """Transaction store is unavailable or returned unusable rows"""

    pass


class ProviderError(DomainException):
    """Text-generation provider failed (network, timeout, status, envelope)"""

    pass


class ExtractionError(DomainException):
    """Provider reply held no usable JSON payload of the expected shape"""

    pass


class RateLimitExceeded(DomainException):
    """Caller exhausted its request budget for the current window"""

    def __init__(self, operation: str, retry_after_seconds: float):
        super().__init__(f"Rate limit exceeded for {operation}")
        self.operation = operation
        self.retry_after_seconds = retry_after_seconds
