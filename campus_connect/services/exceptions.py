from campus_connect.services.error_codes import ErrorCode


class ServiceError(Exception):
    default_code = ErrorCode.INTERNAL
    default_message = "Internal server error"

    def __init__(self, code: ErrorCode | str | None = None, message: str | None = None) -> None:
        code = code or self.default_code
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(ServiceError):
    default_code = ErrorCode.UNAUTHORIZED
    default_message = "Unauthorized"


class PermissionDeniedError(ServiceError):
    default_code = ErrorCode.FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    default_code = ErrorCode.NOT_FOUND
    default_message = "Not found"


class ConflictError(ServiceError):
    default_code = ErrorCode.CONFLICT
    default_message = "Conflict"


class ValidationError(ServiceError):
    default_code = ErrorCode.INVALID_INPUT
    default_message = "Invalid input"
