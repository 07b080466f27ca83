"""
Binds tenant and operator identity from request headers into the request
context read by the persistence handlers.
"""
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from docbase.utils.context import (
    ACCOUNT_KEY,
    MERCHANT_KEY,
    NAMESPACE_KEY,
    OPERATOR_KEY,
    bind_request_context,
    reset_request_context,
)

# Header name -> context key
IDENTITY_HEADERS = {
    "x-account-id": ACCOUNT_KEY,
    "x-merchant-id": MERCHANT_KEY,
    "x-namespace": NAMESPACE_KEY,
    "x-operator": OPERATOR_KEY,
}


class RequestContextMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        values = {
            key: headers[header]
            for header, key in IDENTITY_HEADERS.items()
            if header in headers
        }

        token = bind_request_context(values)
        try:
            await self.app(scope, receive, send)
        finally:
            reset_request_context(token)
