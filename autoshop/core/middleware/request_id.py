import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware

from autoshop.core.logging import LOGGER_NAME, request_id_ctx_var


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request_id (echoed from the client or generated) and log completion.

    The tenant header, when the caller sends one, is copied onto the
    completion log so locked-feature traffic can be grouped per workshop.
    """

    def __init__(self, app, header_name: str = "x-request-id", tenant_header: str = "x-tenant-id"):
        super().__init__(app)
        self.header_name = header_name
        self.tenant_header = tenant_header

    async def dispatch(self, request, call_next):
        rid = request.headers.get(self.header_name) or str(uuid4())
        request.state.request_id = rid
        token = request_id_ctx_var.set(rid)

        start = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[self.header_name] = rid
            logging.getLogger(LOGGER_NAME).info(
                "request.complete",
                extra={
                    "request_id": rid,
                    "tenant_id": request.headers.get(self.tenant_header),
                    "path": request.url.path,
                    "method": request.method,
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 1),
                },
            )
            return response
        finally:
            request_id_ctx_var.reset(token)
