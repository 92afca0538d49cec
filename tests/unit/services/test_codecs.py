# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Covers the JSON, URL-encoded and XML decoders and their error text."""

from typing import Optional
from unittest import TestCase

from pydantic import BaseModel, ConfigDict

from bindform.services.codecs import (
    decode_json,
    decode_urlencoded,
    decode_xml,
    parse_form,
    xml_to_mapping,
)
from bindform.services.exceptions import JsonError, UrlEncodedError, XmlError


class Human(BaseModel):
    name: str
    age: int


class StrictHuman(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    age: int


class Address(BaseModel):
    city: str
    zip: Optional[str] = None


class Person(BaseModel):
    name: str
    tags: list[str] = []
    address: Optional[Address] = None


class JsonCodecTest(TestCase):
    def test_decodes_valid_payload(self):
        human = decode_json(b'{"name":"John","age":32}', Human)
        self.assertEqual(human, Human(name="John", age=32))

    def test_missing_field_message(self):
        with self.assertRaises(JsonError) as ctx:
            decode_json(b'{"name":"John"}', Human)
        self.assertEqual(str(ctx.exception), "json error: missing field `age`")
        self.assertIsNotNone(ctx.exception.inner)

    def test_malformed_json(self):
        with self.assertRaises(JsonError) as ctx:
            decode_json(b"{not-json", Human)
        self.assertTrue(str(ctx.exception).startswith("json error: "))

    def test_unknown_field_when_forbidden(self):
        with self.assertRaises(JsonError) as ctx:
            decode_json(b'{"name":"John","age":1,"pet":"cat"}', StrictHuman)
        self.assertIn("unknown field `pet`", str(ctx.exception))

    def test_invalid_value_names_the_field(self):
        with self.assertRaises(JsonError) as ctx:
            decode_json(b'{"name":"John","age":"old"}', Human)
        self.assertIn("invalid value for field `age`", str(ctx.exception))

    def test_json_types_must_match_exactly(self):
        for payload in (b'{"name":"a","age":true}', b'{"name":"a","age":"32"}'):
            with self.subTest(payload=payload):
                with self.assertRaises(JsonError) as ctx:
                    decode_json(payload, Human)
                self.assertIn("invalid value for field `age`", str(ctx.exception))

    def test_any_pydantic_shape(self):
        self.assertEqual(decode_json(b"[1, 2, 3]", list[int]), [1, 2, 3])


class UrlEncodedCodecTest(TestCase):
    def test_parse_form_single_and_repeated_keys(self):
        form = parse_form("name=John+Doe&tags=a&tags=b&tags=c&empty=")
        self.assertEqual(form["name"], "John Doe")
        self.assertEqual(form["tags"], ["a", "b", "c"])
        self.assertEqual(form["empty"], "")

    def test_decodes_with_lax_coercion(self):
        human = decode_urlencoded("name=John&age=32", Human)
        self.assertEqual(human, Human(name="John", age=32))

    def test_repeated_keys_fill_list_fields(self):
        person = decode_urlencoded("name=Ann&tags=x&tags=y", Person)
        self.assertEqual(person.tags, ["x", "y"])

    def test_missing_field_message(self):
        with self.assertRaises(UrlEncodedError) as ctx:
            decode_urlencoded("name=John", Human)
        self.assertEqual(str(ctx.exception), "urlencoded error: missing field `age`")

    def test_empty_payload_fails_for_required_fields(self):
        with self.assertRaises(UrlEncodedError) as ctx:
            decode_urlencoded("", Human)
        self.assertIn("missing field `name`", str(ctx.exception))

    def test_invalid_utf8_escapes_decode_to_replacement_char(self):
        human = decode_urlencoded("name=%FF&age=3", Human)
        self.assertEqual(human, Human(name="\ufffd", age=3))


class XmlCodecTest(TestCase):
    def test_decodes_document_ignoring_root_name(self):
        payload = (
            b'<?xml version="1.0" encoding="UTF-8"?>\n'
            b"<Human>\n  <name>John</name>\n  <age>32</age>\n</Human>"
        )
        self.assertEqual(decode_xml(payload, Human), Human(name="John", age=32))

    def test_nested_repeated_and_attributes(self):
        payload = (
            b'<Person name="Ann">'
            b"<tags>x</tags><tags>y</tags>"
            b'<address zip="1000"><city>Oslo</city></address>'
            b"</Person>"
        )
        self.assertEqual(
            xml_to_mapping(payload),
            {
                "name": "Ann",
                "tags": ["x", "y"],
                "address": {"zip": "1000", "city": "Oslo"},
            },
        )
        person = decode_xml(payload, Person)
        self.assertEqual(person.address, Address(city="Oslo", zip="1000"))

    def test_text_only_root(self):
        self.assertEqual(xml_to_mapping(b"<Root>hi</Root>"), {"$value": "hi"})
        self.assertEqual(xml_to_mapping(b"<Root/>"), {})

    def test_malformed_xml(self):
        with self.assertRaises(XmlError) as ctx:
            decode_xml(b"<Human><name>John</Human>", Human)
        self.assertTrue(str(ctx.exception).startswith("xml error: "))

    def test_missing_field_message(self):
        with self.assertRaises(XmlError) as ctx:
            decode_xml(b"<Human><name>John</name></Human>", Human)
        self.assertEqual(str(ctx.exception), "xml error: missing field `age`")
