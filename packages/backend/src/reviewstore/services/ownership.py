"""Owner check shared by the review and comment services."""

import uuid

import structlog

from reviewstore.errors import ForbiddenError

logger = structlog.get_logger()


def ensure_owner(owner_id: uuid.UUID, caller_id: uuid.UUID, *, resource: str, resource_id) -> None:
    """Raise ForbiddenError unless the caller owns the resource.

    caller_id must come from the resolved token, never from a request body.
    """
    if owner_id != caller_id:
        logger.info(
            "ownership.denied",
            resource=resource,
            resource_id=str(resource_id),
            caller_id=str(caller_id),
        )
        raise ForbiddenError(f"You can only modify your own {resource}")
