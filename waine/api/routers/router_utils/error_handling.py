"""
Service error handling utilities.

Decorator that turns domain exceptions into HTTPExceptions carrying the
structured failure object ``{"kind": ..., "detail": ...}``. Internal
tracebacks are logged, never returned.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from waine.core.exceptions import WaineException
from waine.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

INTERNAL_ERROR = {"kind": "internal_error", "detail": "Internal server error"}


def handle_service_errors(func: F) -> F:
    """
    Decorator to map service errors onto HTTP responses.

    - Client errors (4xx kinds) are logged as warnings
    - Upstream/server errors are logged with traceback
    - Unknown exceptions become a generic internal error
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except WaineException as e:
            if e.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
                logger.warning(
                    "Request rejected",
                    extra={"kind": e.kind, "error": str(e)},
                )
            else:
                log_exception_with_context(logger, "Service error", e, kind=e.kind)
            raise HTTPException(status_code=e.status_code, detail=e.to_payload()) from e

        except Exception as e:
            log_exception_with_context(logger, "Unexpected error", e, endpoint=func.__name__)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=INTERNAL_ERROR,
            ) from e

    return wrapper  # type: ignore
