# foodiefind/app/routers/common.py
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from foodiefind.app.domain.errors import (
    InfluencerAlreadyExistsError,
    InfluencerNotFoundError,
    ProcessingError,
    RestaurantNotFoundError,
    UserLinkExistsError,
    VideoAlreadyExistsError,
    VideoAlreadyProcessedError,
    VideoNotFoundError,
)
from foodiefind.services.errors import (
    InvalidURLError,
    PrivateOrUnavailableError,
    RateLimitedError,
    ServiceError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (VideoNotFoundError, status.HTTP_404_NOT_FOUND),
    (RestaurantNotFoundError, status.HTTP_404_NOT_FOUND),
    (InfluencerNotFoundError, status.HTTP_404_NOT_FOUND),
    (PrivateOrUnavailableError, status.HTTP_404_NOT_FOUND),
    (VideoAlreadyProcessedError, status.HTTP_409_CONFLICT),
    (VideoAlreadyExistsError, status.HTTP_409_CONFLICT),
    (InfluencerAlreadyExistsError, status.HTTP_409_CONFLICT),
    (UserLinkExistsError, status.HTTP_409_CONFLICT),
    (InvalidURLError, status.HTTP_400_BAD_REQUEST),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
)


def to_http_exception(error: ProcessingError | ServiceError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))

    logger.error("Request failed: %s", error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
