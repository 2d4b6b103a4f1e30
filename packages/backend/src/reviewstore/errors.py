"""Error hierarchy shared by services and the HTTP layer.

Learn: Every failure a caller can recover from is a subclass of
ReviewStoreError with a stable machine-readable `code` and the HTTP status
the API maps it to. Callers branch on the class (or `code`), never on the
message text. Messages are public: they must not carry SQL, hash or token
internals.
"""


class ReviewStoreError(Exception):
    """Base class for all service-level failures."""

    code = "internal_error"
    http_status = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class ValidationFailedError(ReviewStoreError):
    """A required field is missing or malformed."""

    code = "validation_error"
    http_status = 400
    default_message = "Invalid request"


class UnauthenticatedError(ReviewStoreError):
    """No usable identity: missing, malformed, forged or stale token, or bad credentials.

    Always carries the same message so callers cannot tell the cases apart.
    """

    code = "unauthenticated"
    http_status = 401
    default_message = "Not authenticated"


class ForbiddenError(ReviewStoreError):
    """Valid identity, but not the owner of the resource."""

    code = "forbidden"
    http_status = 403
    default_message = "Forbidden"


class NotFoundError(ReviewStoreError):
    code = "not_found"
    http_status = 404
    default_message = "Not found"


class ConflictError(ReviewStoreError):
    """A uniqueness constraint rejected the write."""

    code = "conflict"
    http_status = 409
    default_message = "Conflict"


class DuplicateUsernameError(ConflictError):
    code = "duplicate_username"
    default_message = "Username already taken"


class DuplicateCommentError(ConflictError):
    code = "duplicate_comment"
    default_message = "You have already commented on this review"


class DuplicateItemError(ConflictError):
    code = "duplicate_item"
    default_message = "An item with this title already exists"


class InternalError(ReviewStoreError):
    """Storage or other unexpected fault. The message stays generic."""
