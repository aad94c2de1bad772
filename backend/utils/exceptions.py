"""Domain exceptions.

Each exception carries a machine readable ``error_code``, a ``user_message``
safe to show to clients and an optional ``context`` dict. The HTTP status
mapping lives in ``backend.utils.error_handlers``.
"""


class AppException(Exception):
    def __init__(self, error_code: str, user_message: str, technical_message: str = None, context: dict = None):
        super().__init__(technical_message or user_message)
        self.error_code = error_code
        self.user_message = user_message
        self.context = context or {}


class NotFoundException(AppException):
    def __init__(self, entity_name: str, identifier):
        super().__init__(
            "NOT_FOUND",
            f"{entity_name} not found",
            f"{entity_name} with identifier '{identifier}' was not found",
            {"entityName": entity_name, "identifier": identifier},
        )


class UnauthorizedException(AppException):
    def __init__(self, reason: str = "Access denied", technical_message: str = None, context: dict = None):
        super().__init__("UNAUTHORIZED", reason, technical_message, context)


class ConflictException(AppException):
    def __init__(self, resource: str, reason: str, technical_message: str = None, context: dict = None):
        super().__init__(
            "CONFLICT",
            f"Conflict with {resource}: {reason}",
            technical_message,
            context or {"resource": resource, "reason": reason},
        )


class BusinessRuleViolationException(AppException):
    def __init__(self, rule: str, user_message: str, technical_message: str = None, context: dict = None):
        super().__init__(f"BUSINESS_RULE_{rule.upper()}", user_message, technical_message, context)


class RateLimitException(AppException):
    def __init__(self, retry_after_seconds: int = 60):
        super().__init__(
            "RATE_LIMIT_EXCEEDED",
            "Too many requests. Please try again later.",
            f"Rate limit exceeded. Retry after {retry_after_seconds} seconds",
            {"retryAfterSeconds": retry_after_seconds},
        )
        self.retry_after_seconds = retry_after_seconds


class ExternalServiceException(AppException):
    def __init__(
        self,
        service_name: str,
        user_message: str = "External service temporarily unavailable",
        technical_message: str = None,
        context: dict = None,
    ):
        super().__init__(
            "EXTERNAL_SERVICE_ERROR",
            user_message,
            technical_message,
            context or {"serviceName": service_name},
        )
        self.service_name = service_name
