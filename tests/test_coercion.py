#!/usr/bin/env python3


# part of the Beckon software package
# Copyright 2023 by Larry Hastings
# All rights reserved.
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included
# in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
# IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
# DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
# TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
# OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.

import datetime
import decimal
import enum
import fractions
import math
from pathlib import Path
import typing
import unittest

import beckon
from beckon import coercion
from beckon.coercion import coerce, int8, int16, int32, int64, float32, char


class Mood(enum.Enum):
    HAPPY = 1
    Grumpy = 2


class Celsius:
    def __init__(self, s: str):
        self.degrees = float(s)

class TwoArgs:
    def __init__(self, a, b):
        pass

class NeedsInt:
    def __init__(self, i: int):
        pass

class Fahrenheit(Celsius):
    pass


class PrimitiveTests(unittest.TestCase):

    def test_ints(self):
        self.assertEqual(coerce(int, "33"), 33)
        self.assertEqual(coerce(int, "-5"), -5)
        self.assertEqual(coerce(int, "+5"), 5)
        self.assertEqual(coerce(int, "123456789012345678901234567890"), 123456789012345678901234567890)

    def test_bad_ints(self):
        for token in ("", "ten", "1.0", " 1", "1 ", "1_000", "0x10"):
            with self.subTest(token=token):
                with self.assertRaises(beckon.ParseError):
                    coerce(int, token)

    def test_sized_ints(self):
        self.assertEqual(coerce(int8, "127"), 127)
        self.assertEqual(coerce(int8, "-128"), -128)
        self.assertEqual(coerce(int16, "-32768"), -32768)
        self.assertEqual(coerce(int32, "2147483647"), 2147483647)
        self.assertEqual(coerce(int64, "-9223372036854775808"), -9223372036854775808)
        self.assertIs(type(coerce(int8, "1")), int)
        for t, token in ((int8, "128"), (int16, "32768"), (int32, "-2147483649"), (int64, "9223372036854775808")):
            with self.subTest(type=t, token=token):
                with self.assertRaises(beckon.ParseError) as cm:
                    coerce(t, token)
                self.assertEqual(cm.exception.type_name, t.__name__)

    def test_floats(self):
        self.assertEqual(coerce(float, "1.5"), 1.5)
        self.assertEqual(coerce(float, "-.5"), -0.5)
        self.assertEqual(coerce(float, "3"), 3.0)
        self.assertEqual(coerce(float, "1e3"), 1000.0)
        self.assertTrue(math.isinf(coerce(float, "inf")))
        self.assertTrue(math.isnan(coerce(float, "nan")))
        for token in ("", "1.5.5", "one", " 1.5", "1_0.0"):
            with self.subTest(token=token):
                with self.assertRaises(beckon.ParseError):
                    coerce(float, token)

    def test_float32(self):
        self.assertEqual(coerce(float32, "0.5"), 0.5)
        self.assertNotEqual(coerce(float32, "0.1"), 0.1)
        self.assertAlmostEqual(coerce(float32, "0.1"), 0.1, places=6)
        with self.assertRaises(beckon.ParseError):
            coerce(float32, "1e300")

    def test_complex(self):
        self.assertEqual(coerce(complex, "1+2j"), complex(1, 2))
        with self.assertRaises(beckon.ParseError):
            coerce(complex, "1+2k")

    def test_bool(self):
        self.assertIs(coerce(bool, "true"), True)
        self.assertIs(coerce(bool, "false"), False)
        for token in ("True", "FALSE", "1", "0", "yes", ""):
            with self.subTest(token=token):
                with self.assertRaises(beckon.ParseError):
                    coerce(bool, token)

    def test_char(self):
        self.assertEqual(coerce(char, "x"), "x")
        for token in ("", "xy"):
            with self.subTest(token=token):
                with self.assertRaises(beckon.ParseError):
                    coerce(char, token)

    def test_str(self):
        self.assertEqual(coerce(str, ""), "")
        self.assertEqual(coerce(str, "  spaces  "), "  spaces  ")
        self.assertEqual(coerce(typing.Any, "x"), "x")

    def test_null(self):
        self.assertIsNone(coerce(int, "null", nullable=True))
        self.assertIsNone(coerce(str, "null", nullable=True))
        self.assertEqual(coerce(str, "null"), "null")
        self.assertEqual(coerce(str, "NULL", nullable=True), "NULL")
        with self.assertRaises(beckon.ParseError):
            coerce(int, "null")

    def test_parse_error_message(self):
        with self.assertRaises(beckon.ParseError) as cm:
            coerce(int, "abc")
        self.assertEqual(cm.exception.reason, "Invalid value 'abc', must be int.")
        self.assertEqual(cm.exception.token, "abc")


class EnumTests(unittest.TestCase):

    def test_case_insensitive(self):
        self.assertIs(coerce(Mood, "happy"), Mood.HAPPY)
        self.assertIs(coerce(Mood, "HAPPY"), Mood.HAPPY)
        self.assertIs(coerce(Mood, "grumpy"), Mood.Grumpy)

    def test_unknown(self):
        with self.assertRaises(beckon.UnknownEnumValue) as cm:
            coerce(Mood, "sad")
        self.assertIn("happy, grumpy", cm.exception.reason)

    def test_value_isnt_a_name(self):
        with self.assertRaises(beckon.UnknownEnumValue):
            coerce(Mood, "1")


class StringConstructorTests(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(coerce(Path, "a/b.txt"), Path("a/b.txt"))
        self.assertEqual(coerce(decimal.Decimal, "1.10"), decimal.Decimal("1.10"))
        self.assertEqual(coerce(datetime.date, "2023-04-05"), datetime.date(2023, 4, 5))
        self.assertEqual(coerce(datetime.datetime, "2023-04-05T06:07:08"), datetime.datetime(2023, 4, 5, 6, 7, 8))

    def test_default_converters_reject_bad_input(self):
        for t, token in (
            (datetime.date, "yesterday"),
            (datetime.date, "2024-13-01"),
            (datetime.datetime, "noon"),
            (decimal.Decimal, "abc"),
            (fractions.Fraction, "one half"),
            (fractions.Fraction, "1/0"),
            ):
            with self.subTest(type=t, token=token):
                with self.assertRaises(beckon.ParseError) as cm:
                    coerce(t, token)
                self.assertEqual(cm.exception.token, token)
                self.assertTrue(cm.exception.reason.startswith(f"Invalid value {token!r}, must be {t.__name__}"), cm.exception.reason)

    def test_application_constructor_exceptions_propagate(self):
        def parse(s):
            raise ValueError("nope")
        registry = coercion.ConverterRegistry(parent=coercion.default_registry)
        registry.register(datetime.date, parse)
        with self.assertRaises(ValueError):
            coerce(datetime.date, "2024-01-01", registry=registry)

    def test_inferred_string_constructor(self):
        self.assertEqual(coerce(Celsius, "21.5").degrees, 21.5)
        self.assertIs(coercion.string_constructor(Celsius), Celsius)

    def test_no_string_constructor(self):
        for t in (TwoArgs, NeedsInt):
            with self.subTest(type=t):
                self.assertIsNone(coercion.string_constructor(t))
                with self.assertRaises(beckon.NoStringConstructor) as cm:
                    coerce(t, "x")
                self.assertEqual(cm.exception.reason, f"Found no string constructor for {t.__qualname__}.")


class RegistryTests(unittest.TestCase):

    def test_register_and_lookup(self):
        registry = coercion.ConverterRegistry(parent=coercion.default_registry)
        registry.register(NeedsInt, lambda s: ("needs int", s))
        self.assertEqual(coerce(NeedsInt, "3", registry=registry), ("needs int", "3"))
        # the parent is still consulted
        self.assertEqual(coerce(Path, "x", registry=registry), Path("x"))

    def test_subclasses_use_base_converter(self):
        registry = coercion.ConverterRegistry()
        registry.register(Celsius, lambda s: "converted")
        self.assertEqual(coerce(Fahrenheit, "3", registry=registry), "converted")

    def test_registered_beats_constructor(self):
        registry = coercion.ConverterRegistry()
        registry.register(Celsius, lambda s: "registered")
        self.assertEqual(coerce(Celsius, "1", registry=registry), "registered")

    def test_child_doesnt_change_parent(self):
        registry = coercion.ConverterRegistry(parent=coercion.default_registry)
        registry.register(TwoArgs, lambda s: s)
        self.assertIsNone(coercion.default_registry.lookup(TwoArgs))

    def test_bad_registrations(self):
        registry = coercion.ConverterRegistry()
        with self.assertRaises(beckon.ConfigurationError):
            registry.register(typing.Optional[int], int)
        with self.assertRaises(beckon.ConfigurationError):
            registry.register(Celsius, "not callable")


if __name__ == "__main__":
    unittest.main()
