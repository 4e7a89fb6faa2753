"""ASGI middleware for request limits."""

import logging

from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

TOO_LARGE_MESSAGE = "request entity too large"


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_body_bytes``.

    A declared Content-Length is checked up front. Bodies without one
    (chunked uploads) are counted as they are received, and reading past
    the limit raises a 413 from inside the request handler.
    """

    def __init__(self, app, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope['type'] != 'http':
            await self.app(scope, receive, send)
            return

        headers = dict(scope['headers'])
        content_length = headers.get(b'content-length')
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                response = JSONResponse(status_code=400, content={"error": "invalid content-length"})
                await response(scope, receive, send)
                return
            if declared > self.max_body_bytes:
                logger.warning(f"Rejected {scope['method']} {scope['path']}: body of {declared} bytes")
                response = JSONResponse(status_code=413, content={"error": TOO_LARGE_MESSAGE})
                await response(scope, receive, send)
                return

        received = 0

        async def receive_with_limit():
            nonlocal received
            message = await receive()
            if message['type'] == 'http.request':
                received += len(message.get('body', b''))
                if received > self.max_body_bytes:
                    logger.warning(f"Rejected {scope['method']} {scope['path']}: body over {self.max_body_bytes} bytes")
                    raise StarletteHTTPException(status_code=413, detail=TOO_LARGE_MESSAGE)
            return message

        await self.app(scope, receive_with_limit, send)
