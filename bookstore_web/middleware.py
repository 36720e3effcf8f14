"""
Request logging middleware.

Raw ASGI (no BaseHTTPMiddleware) so the request body can be read once for
logging and then replayed to the app unchanged. Bodies of POST/PUT/PATCH
requests are logged as JSON with every ``password`` field redacted; bodies
that are not JSON are only logged by size.
"""

import json
from typing import Any, List

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from bookstore.utils.logger import get_logger

logger = get_logger(__name__)

BODY_METHODS = {"POST", "PUT", "PATCH"}
REDACTED = "[REDACTED]"
SENSITIVE_KEYS = {"password"}


def redact(value: Any) -> Any:
    """Copy of ``value`` with every key named ``password`` replaced by ``[REDACTED]``."""
    if isinstance(value, dict):
        return {
            k: (REDACTED if k in SENSITIVE_KEYS else redact(v))
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


class RequestLoggingMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        path = scope.get("path", "")
        client = scope.get("client")
        logger.info("Request", method=method, path=path, ip=client[0] if client else None)

        if method not in BODY_METHODS:
            await self.app(scope, receive, send)
            return

        chunks: List[bytes] = []
        disconnect: Message = {}
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                disconnect = message
                break
            chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                break
        body = b"".join(chunks)
        self._log_body(method, path, body)

        sent = False

        async def replay() -> Message:
            nonlocal sent
            if not sent:
                sent = True
                if disconnect:
                    return disconnect
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    def _log_body(method: str, path: str, body: bytes) -> None:
        if not body:
            return
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, ValueError):
            logger.info("Request body", method=method, path=path, body_bytes=len(body))
            return
        logger.info("Request body", method=method, path=path, body=redact(payload))
