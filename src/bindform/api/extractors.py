# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""FastAPI dependencies that bind a request body to a target shape.

Usage::

    @app.post("/greet")
    async def greet(human: Human = Depends(BindForm(Human))):
        ...

    @app.post("/try_greet")
    async def try_greet(result: BindResult[Human] = Depends(TryBindForm(Human))):
        ...

``BindForm`` rejects with a 400 ``text/plain`` response before the handler
runs; ``TryBindForm`` hands the ``BindResult`` to the handler untouched.
Call ``install_bind_handlers(app)`` once so rejections render as plain text.
"""

import logging
from typing import Generic, Optional, Type, TypeVar

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response

from bindform.api.http_responses import error_text
from bindform.core.config import BindConfig
from bindform.models.result import BindResult
from bindform.services.binder import bind_request
from bindform.services.exceptions import BindError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BindFormRejection(HTTPException):
    """Raised by BindForm when binding fails.

    Without ``install_bind_handlers`` FastAPI still answers 400, with its
    default JSON error body.
    """

    def __init__(self, error: BindError):
        super().__init__(status_code=error.status_code, detail=str(error))
        self.error = error

    def into_response(self) -> Response:
        return error_text(str(self.error), status_code=self.status_code)


class TryBindForm(Generic[T]):
    """Dependency returning the BindResult; never rejects."""

    def __init__(self, shape: Type[T], config: Optional[BindConfig] = None):
        self.shape = shape
        self.config = config

    async def __call__(self, request: Request) -> BindResult[T]:
        return await bind_request(request, self.shape, self.config)


class BindForm(Generic[T]):
    """Dependency returning the bound value; rejects with 400 on any BindError."""

    def __init__(self, shape: Type[T], config: Optional[BindConfig] = None):
        self.shape = shape
        self.config = config

    async def __call__(self, request: Request) -> T:
        result = await bind_request(request, self.shape, self.config)
        if result.error is not None:
            raise BindFormRejection(result.error)
        return result.value  # type: ignore[return-value]


async def _bind_rejection_handler(
    request: Request, exc: BindFormRejection
) -> Response:
    logger.info(
        "rejected %s %s: %s", request.method, request.url.path, exc.error
    )
    return exc.into_response()


def install_bind_handlers(app: FastAPI) -> None:
    """Register the plain-text rendering of BindFormRejection on ``app``."""
    app.add_exception_handler(BindFormRejection, _bind_rejection_handler)  # type: ignore[arg-type]
