# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Buffers a request body into memory under a size limit."""

from __future__ import annotations

from typing import Optional

from starlette.requests import ClientDisconnect, Request

from bindform.services.exceptions import BodyReadError


class BodyLimitExceeded(Exception):
    def __str__(self) -> str:
        return "length limit exceeded"


async def read_body(request: Request, limit: Optional[int]) -> bytes:
    """Read the full body once. Raises BodyReadError on any transport problem."""
    if limit is not None:
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                too_large = int(declared) > limit
            except ValueError:
                raise BodyReadError("invalid content-length header") from None
            if too_large:
                raise BodyReadError(BodyLimitExceeded())

    chunks: list[bytes] = []
    total = 0
    try:
        async for chunk in request.stream():
            total += len(chunk)
            if limit is not None and total > limit:
                raise BodyReadError(BodyLimitExceeded())
            chunks.append(chunk)
    except ClientDisconnect as exc:
        raise BodyReadError("client disconnected") from exc
    except RuntimeError as exc:
        # starlette raises RuntimeError("Stream consumed") on a second read
        raise BodyReadError(exc) from exc

    body = b"".join(chunks)
    # prime Starlette's body cache: the stream is now consumed, and
    # Request.body()/json() return this cached value instead of re-reading
    request._body = body
    return body
