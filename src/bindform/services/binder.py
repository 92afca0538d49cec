# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the binder unit so this responsibility stays isolated, testable, and easy to evolve.

The binder looks at a request's ``Content-Type`` and picks exactly one codec:

1. no content type -> URL-encoded data from the query string (body untouched)
2. unparseable content type -> InvalidMimeTypeError
3. application/json, application/*+json -> JSON body
4. application/x-www-form-urlencoded -> URL-encoded body
5. application/xml, application/*+xml -> XML body
6. anything else -> InvalidMimeTypeError

Branches whose codec is disabled in ``BindConfig`` are skipped.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional, Type, TypeVar

from starlette.requests import Request

from bindform.core.config import DEFAULT_CONFIG, BindConfig
from bindform.core.mime import APPLICATION, JSON, WWW_FORM_URLENCODED, XML, parse_mime
from bindform.models.result import BindResult
from bindform.services.body import read_body
from bindform.services.codecs import decode_json, decode_urlencoded, decode_xml
from bindform.services.exceptions import BindError, InvalidMimeTypeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Codec(str, enum.Enum):
    QUERY = "query"
    JSON = "json"
    URLENCODED = "urlencoded"
    XML = "xml"


def header_content_type(request: Request) -> str:
    """Return the content type header, or "" when missing or not visible ASCII."""
    raw = request.headers.get("content-type")
    if raw is None:
        return ""
    if not all(c == "\t" or " " <= c <= "~" for c in raw):
        return ""
    return raw


def select_codec(content_type: str, config: BindConfig = DEFAULT_CONFIG) -> Codec:
    """Pick the codec for a content type. Raises InvalidMimeTypeError."""
    if config.urlencoded and not content_type:
        return Codec.QUERY

    mime = parse_mime(content_type)

    if config.json and mime.matches(APPLICATION, JSON):
        return Codec.JSON
    if config.urlencoded and mime.matches(APPLICATION, WWW_FORM_URLENCODED):
        return Codec.URLENCODED
    if config.xml and mime.matches(APPLICATION, XML):
        return Codec.XML

    raise InvalidMimeTypeError()


async def _bind(request: Request, shape: Any, config: BindConfig) -> Any:
    codec = select_codec(header_content_type(request), config)
    logger.debug("binding %s %s via %s", request.method, request.url.path, codec.value)

    if codec is Codec.QUERY:
        return decode_urlencoded(request.url.query, shape)

    body = await read_body(request, config.body_limit)

    if codec is Codec.JSON:
        return decode_json(body, shape)
    if codec is Codec.URLENCODED:
        try:
            query = body.decode("utf-8")
        except UnicodeDecodeError:
            query = ""
        return decode_urlencoded(query, shape)
    return decode_xml(body, shape)


async def bind_request(
    request: Request, shape: Type[T], config: Optional[BindConfig] = None
) -> BindResult[T]:
    """Bind the request payload to ``shape``.

    Never raises for client input: every failure comes back as
    ``BindResult.err`` carrying a BindError.
    """
    try:
        value = await _bind(request, shape, config or DEFAULT_CONFIG)
    except BindError as exc:
        logger.debug(
            "bind failed for %s %s: %s", request.method, request.url.path, exc
        )
        return BindResult.err(exc)
    return BindResult.ok(value)
