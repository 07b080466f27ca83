"""
Request-scoped identity values.

The API binds the tenant and operator identity of every request into a
context variable; the persistence layer reads it back when stamping audit
fields.
"""
import logging
from contextvars import ContextVar, Token
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

ACCOUNT_KEY = "ACCOUNT_KEY"
MERCHANT_KEY = "MERCHANT_KEY"
NAMESPACE_KEY = "NAME_SPACE_KEY"
OPERATOR_KEY = "OPERATOR_KEY"

_request_context: ContextVar[Optional[Mapping[str, Any]]] = ContextVar(
    "docbase_request_context", default=None
)


def bind_request_context(values: Mapping[str, Any]) -> Token:
    """Bind values for the current request and return a token for resetting them"""
    return _request_context.set(dict(values))


def reset_request_context(token: Token) -> None:
    _request_context.reset(token)


def get_request_context() -> Mapping[str, Any]:
    """Return the values bound for the current request, empty when none are bound"""
    values = _request_context.get()
    if values is None:
        return {}
    return values


def get_value_from_ctx(ctx: Optional[Mapping[str, Any]], key: str) -> str:
    """
    Read a string value out of a request context.

    Args:
        ctx: Mapping of request-scoped values
        key: Key to look up, usually one of the *_KEY constants

    Returns:
        str: The value, or an empty string when it is missing or not a string
    """
    value = ctx.get(key) if ctx is not None else None

    if isinstance(value, str):
        logger.debug(f"value retrieved from context: {key}={value}")
        return value

    logger.warning(f"Value not found or not of type string: {key}")
    return ""
