"""
Request/response logging middleware.
"""

import time
from fastapi import Request
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)


async def log_requests(request: Request, call_next):
    """Log method, URL, status and duration of every request."""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url}")
    logger.debug(f"Headers: {dict(request.headers)}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} - {process_time:.3f}s")
    response.headers["X-Process-Time"] = f"{process_time:.3f}"

    return response
