# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Bind error hierarchy.

Purpose: Classify every way binding a request body can fail. The binder
returns these as values inside a ``BindResult``; the fail-fast extractor turns
them into a 400 response. The text of each error is what the client sees.
"""

from __future__ import annotations


class BindError(Exception):
    """Base bind error that carries an HTTP-equivalent status code.

    ``inner`` holds the underlying codec or transport error, if any.
    """

    default_status_code: int = 400
    kind: str = "bind error"

    def __init__(self, inner: object | None = None):
        self.inner = inner
        self.detail = self.kind if inner is None else f"{self.kind}: {inner}"
        self.status_code = self.default_status_code
        super().__init__(self.detail)
        self._frozen = True

    def __str__(self) -> str:
        return self.detail

    def __reduce__(self):
        return (type(self), (self.inner,))

    def __setattr__(self, name: str, value: object) -> None:
        # dunder slots (__traceback__, __context__, __notes__, ...) stay writable
        # for the interpreter and contextlib
        if self.__dict__.get("_frozen") and not name.startswith("__"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)


class InvalidMimeTypeError(BindError):
    """Content type is unparseable, unknown, or names a disabled codec."""

    kind = "invalid mime type"


class BodyReadError(BindError):
    """Raised when the request body could not be buffered."""

    kind = "body read error"


class JsonError(BindError):
    """Raised for a malformed JSON payload."""

    kind = "json error"


class UrlEncodedError(BindError):
    """Raised for a malformed URL-encoded payload (body or query string)."""

    kind = "urlencoded error"


class XmlError(BindError):
    """Raised for a malformed XML payload."""

    kind = "xml error"
