from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from contextvars import ContextVar

import logging
import uuid

# Request ID of the request currently being served, read by the log filter
request_id_context: ContextVar[str] = ContextVar("request_id", default="N/A")

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    @classmethod
    def request_id_context(cls):
        return request_id_context

    async def dispatch(self, request: Request, call_next):

        # Shortened for readability in logs
        new_request_id = str(uuid.uuid4())[:8]
        token = request_id_context.set(new_request_id)

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = new_request_id
            logger.debug("%s %s -> %d", request.method, request.url.path, response.status_code)

        except Exception:
            logger.exception("Unhandled error during %s %s.", request.method, request.url.path)
            raise

        finally:
            # Reset so the id never leaks into the next request on this worker
            request_id_context.reset(token)

        return response
