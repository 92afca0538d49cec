# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the mime unit so this responsibility stays isolated, testable, and easy to evolve.

Parses ``Content-Type`` values of the form ``type/subtype[+suffix][; k=v]*``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from bindform.services.exceptions import InvalidMimeTypeError

APPLICATION = "application"
JSON = "json"
XML = "xml"
WWW_FORM_URLENCODED = "x-www-form-urlencoded"

# RFC 7230 tchar
_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'

_MIME_RE = re.compile(rf"^({_TOKEN})/({_TOKEN})((?:\s*;\s*{_TOKEN}=(?:{_TOKEN}|{_QUOTED}))*)\s*;?$")
_PARAM_RE = re.compile(rf"\s*;\s*({_TOKEN})=({_TOKEN}|{_QUOTED})")
_UNESCAPE_RE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class MimeType:
    type: str
    subtype: str
    suffix: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def essence(self) -> str:
        """Return ``type/subtype[+suffix]`` without parameters."""
        if self.suffix:
            return f"{self.type}/{self.subtype}+{self.suffix}"
        return f"{self.type}/{self.subtype}"

    def matches(self, type_: str, name: str) -> bool:
        """True when the top-level type is ``type_`` and the subtype or suffix is ``name``."""
        return self.type == type_ and (self.subtype == name or self.suffix == name)

    def __str__(self) -> str:
        rendered = self.essence
        for key, value in self.params.items():
            rendered += f"; {key}={value}"
        return rendered


def parse_mime(value: str) -> MimeType:
    """Parse a content type header value.

    Raises InvalidMimeTypeError when the value is not a well-formed MIME type.
    """
    match = _MIME_RE.match(value.strip())
    if match is None:
        raise InvalidMimeTypeError()

    type_ = match.group(1).lower()
    full_subtype = match.group(2).lower()
    subtype, plus, suffix = full_subtype.rpartition("+")
    if not plus:
        subtype, suffix = full_subtype, ""
    if not subtype or (plus and not suffix):
        raise InvalidMimeTypeError()

    params: Dict[str, str] = {}
    for key, raw in _PARAM_RE.findall(match.group(3)):
        if raw.startswith('"'):
            raw = _UNESCAPE_RE.sub(r"\1", raw[1:-1])
        params[key.lower()] = raw

    return MimeType(type=type_, subtype=subtype, suffix=suffix or None, params=params)
