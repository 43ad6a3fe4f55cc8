class AppError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message=None, code=None):
        self.message = message or "Internal server error"
        if code:
            self.code = code
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message="Unauthorized", code=None):
        super().__init__(message, code)


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message="Forbidden", code=None):
        super().__init__(message, code)


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message="Not found", code=None):
        super().__init__(message, code)


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class AlreadyRegisteredError(ConflictError):
    code = "ALREADY_REGISTERED"

    def __init__(self, message="Already registered for this event"):
        super().__init__(message)


class EventFullError(ConflictError):
    code = "EVENT_FULL"

    def __init__(self, message="Event is full"):
        super().__init__(message)


class DuplicateScanError(ConflictError):
    code = "DUPLICATE_SCAN"

    def __init__(self, message="Attendance already marked for this registration"):
        super().__init__(message)


class ServerError(AppError):
    status_code = 500
    code = "INTERNAL_ERROR"
