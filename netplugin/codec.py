"""Request decoding and response envelopes for the plugin protocol.

The daemon distinguishes two failure channels:

- a malformed request is answered with 400 and a plain-text reason
- a driver failure is answered with 500 and ``{"Err": "<message>"}``

Successful calls return the JSON-encoded response model, or ``{}`` for calls
that carry no payload.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from aiohttp import web
from pydantic import ValidationError

from netplugin.schemas import ErrorResponse, PluginMessage

logger = logging.getLogger(__name__)

PLUGIN_CONTENT_TYPE = "application/vnd.docker.plugins.v1.2+json"

ENCODE_ERROR_TEXT = "Could not JSON encode response"

M = TypeVar("M", bound=PluginMessage)


async def decode_request(request: web.Request, model: type[M]) -> M:
    """Parse the request body into ``model``.

    Raises:
        web.HTTPBadRequest: If the body is not valid JSON or does not fit
            the model. Handlers let this propagate so the driver is never
            called.
    """
    body = await request.read()
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        logger.warning(
            f"Rejected {request.path} payload: {e.error_count()} error(s)",
            extra={"path": request.path, "errors": e.errors(include_url=False)},
        )
        raise web.HTTPBadRequest(text=f"Unable to decode JSON payload: {e}")


def _json_response(payload: Any, status: int = 200) -> web.Response:
    return web.Response(
        text=json.dumps(payload),
        status=status,
        content_type=PLUGIN_CONTENT_TYPE,
    )


def encode_response(
    result: Any,
    model: type[PluginMessage],
    fields: tuple[str, ...] | None = None,
) -> web.Response:
    """Encode a driver result as ``model``.

    Drivers may return the model itself or anything it validates from (a
    dict of wire or attribute names). With ``fields``, a single value or a
    tuple is first mapped onto those attribute names. A result that cannot
    be coerced or serialized yields a generic 500.
    """
    try:
        if fields is not None:
            values = (result,) if len(fields) == 1 else tuple(result)
            result = dict(zip(fields, values, strict=True))
        if not isinstance(result, model):
            result = model.model_validate(result)
        payload = result.model_dump(mode="json", by_alias=True, exclude_none=True)
        return _json_response(payload)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to encode {model.__name__}: {e}")
        return web.Response(status=500, text=ENCODE_ERROR_TEXT)


def empty_response() -> web.Response:
    """Success for calls with no payload."""
    return _json_response({})


def error_response(message: str) -> web.Response:
    """Driver failure envelope."""
    payload = ErrorResponse(err=message).model_dump(by_alias=True)
    return _json_response(payload, status=500)
