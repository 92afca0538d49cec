# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the codecs unit so this responsibility stays isolated, testable, and easy to evolve.

Each decoder turns a raw payload into a value of the target shape through a
pydantic ``TypeAdapter`` and raises the matching ``BindError`` subclass on
failure. The wrapped inner error is a ``CodecError`` whose text mirrors the
first problem found, e.g. ``missing field `age```.
"""

from __future__ import annotations

import functools
import xml.etree.ElementTree as ET
from typing import Any, Dict
from urllib.parse import parse_qsl

from pydantic import TypeAdapter, ValidationError

from bindform.services.exceptions import JsonError, UrlEncodedError, XmlError

TEXT_KEY = "$value"


class CodecError(ValueError):
    """Codec-level failure wrapped by JsonError / UrlEncodedError / XmlError."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


@functools.lru_cache(maxsize=256)
def adapter_for(shape: Any) -> TypeAdapter:
    """Return a cached TypeAdapter for the target shape."""
    return TypeAdapter(shape)


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def describe_validation_error(exc: ValidationError) -> str:
    """Render the first validation problem in a compact, client facing form."""
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    kind = first.get("type", "")
    loc = tuple(first.get("loc", ()))
    msg = first.get("msg", "")

    if kind == "json_invalid":
        return first.get("ctx", {}).get("error") or msg
    if kind == "missing" and loc:
        return f"missing field `{_field_path(loc)}`"
    if kind == "extra_forbidden" and loc:
        return f"unknown field `{_field_path(loc)}`"
    if loc:
        return f"invalid value for field `{_field_path(loc)}`: {msg}"
    return msg


def _validation_failure(exc: ValidationError) -> CodecError:
    return CodecError(describe_validation_error(exc), exc)


# --------------- JSON ---------------


def decode_json(payload: bytes, shape: Any) -> Any:
    """Decode a JSON payload into ``shape``. Raises JsonError.

    Strict mode: JSON types must match the target (no `true` for an int).
    """
    try:
        return adapter_for(shape).validate_json(payload, strict=True)
    except ValidationError as exc:
        raise JsonError(_validation_failure(exc)) from exc


# --------------- URL-encoded ---------------


def parse_form(query: str) -> Dict[str, Any]:
    """Split URL-encoded form data into a mapping.

    A key seen once maps to its string value; a repeated key maps to the list
    of all its values in order. Escapes that are not valid UTF-8 decode to
    U+FFFD.
    """
    form: Dict[str, Any] = {}
    for key, value in parse_qsl(query, keep_blank_values=True, errors="replace"):
        if key in form:
            existing = form[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                form[key] = [existing, value]
        else:
            form[key] = value
    return form


def decode_urlencoded(query: str, shape: Any) -> Any:
    """Decode URL-encoded form data into ``shape``. Raises UrlEncodedError."""
    try:
        form = parse_form(query)
    except ValueError as exc:
        raise UrlEncodedError(CodecError(str(exc), exc)) from exc
    try:
        return adapter_for(shape).validate_python(form)
    except ValidationError as exc:
        raise UrlEncodedError(_validation_failure(exc)) from exc


# --------------- XML ---------------


def _element_value(elem: ET.Element) -> Any:
    """Convert an element into a string (leaf) or a mapping (branch)."""
    children = list(elem)
    if not children and not elem.attrib:
        return (elem.text or "").strip()

    node: Dict[str, Any] = dict(elem.attrib)
    for child in children:
        value = _element_value(child)
        if child.tag in node:
            existing = node[child.tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                node[child.tag] = [existing, value]
        else:
            node[child.tag] = value

    text = (elem.text or "").strip()
    if text:
        node[TEXT_KEY] = text
    return node


def xml_to_mapping(payload: bytes) -> Dict[str, Any]:
    """Parse an XML document; the root element name is ignored."""
    root = ET.fromstring(payload)
    children = list(root)
    if not children and not root.attrib:
        text = (root.text or "").strip()
        return {TEXT_KEY: text} if text else {}
    return _element_value(root)


def decode_xml(payload: bytes, shape: Any) -> Any:
    """Decode an XML payload into ``shape``. Raises XmlError."""
    try:
        data = xml_to_mapping(payload)
    except ET.ParseError as exc:
        raise XmlError(CodecError(str(exc), exc)) from exc
    try:
        return adapter_for(shape).validate_python(data)
    except ValidationError as exc:
        raise XmlError(_validation_failure(exc)) from exc
