"""Typed application errors. Only the handlers in tlearn.main turn them into responses."""


class AppError(Exception):
    status_code = 500
    detail = "internal_error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class BadRequestError(AppError):
    status_code = 400
    detail = "bad_request"


class UnauthorizedError(AppError):
    """Missing, malformed, expired or unrecognized credential.

    Carries no cause: every rejection looks the same to the client.
    """

    status_code = 401
    detail = "unauthorized"

    def __init__(self):
        super().__init__()


class ForbiddenError(AppError):
    status_code = 403
    detail = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    detail = "not_found"


class ConflictError(AppError):
    status_code = 409
    detail = "conflict"


class InternalError(AppError):
    """Store, hashing or decode failure. The client only ever sees `internal_error`."""

    status_code = 500
    detail = "internal_error"

    def __init__(self, message: str = "internal_error"):
        # message is for server-side logs; detail stays fixed
        super().__init__()
        self.args = (message,)
