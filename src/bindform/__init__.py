# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Bind XML, JSON, URL-encoded or query-string form data in FastAPI."""

from bindform.api.extractors import (
    BindForm,
    BindFormRejection,
    TryBindForm,
    install_bind_handlers,
)
from bindform.core.config import BindConfig, load_bind_config
from bindform.core.mime import MimeType, parse_mime
from bindform.models.result import BindResult
from bindform.services.binder import Codec, bind_request, select_codec
from bindform.services.exceptions import (
    BindError,
    BodyReadError,
    InvalidMimeTypeError,
    JsonError,
    UrlEncodedError,
    XmlError,
)

__all__ = [
    "BindConfig",
    "BindError",
    "BindForm",
    "BindFormRejection",
    "BindResult",
    "BodyReadError",
    "Codec",
    "InvalidMimeTypeError",
    "JsonError",
    "MimeType",
    "TryBindForm",
    "UrlEncodedError",
    "XmlError",
    "bind_request",
    "install_bind_handlers",
    "load_bind_config",
    "parse_mime",
    "select_codec",
]
