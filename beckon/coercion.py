# please leave this copyright notice in binary distributions.
license = """
beckon/coercion.py
part of the Beckon software package
Copyright 2023 by Larry Hastings
All rights reserved.

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included
in all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""

import builtins
import datetime
import decimal
import enum
import fractions
import inspect
import pathlib
import re
import struct
import typing

from .errors import ConfigurationError, ParseError, UnknownEnumValue, NoStringConstructor


##
## Sized primitive types.
##
## Python's int is unbounded and its float is a C double.
## When you want the command-line to reject out-of-range
## values, annotate with one of these instead.  They're
## real subclasses, so int8 is-a int, but coerce() always
## hands you back a plain int / float / str.
##

class int8(int):
    "An 8-bit signed integer."
    bits = 8

class int16(int):
    "A 16-bit signed integer."
    bits = 16

class int32(int):
    "A 32-bit signed integer."
    bits = 32

class int64(int):
    "A 64-bit signed integer."
    bits = 64

class float32(float):
    "A single-precision float."
    pass

class char(str):
    "A string of exactly one character."
    pass


# no whitespace, no '_' separators, ASCII digits only.
_integer_re = re.compile(r"[+-]?[0-9]+", re.ASCII)
_float_re = re.compile(r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)", re.ASCII | re.IGNORECASE)


def _integer_parser(type_name, bits=None):
    if bits:
        limit = 1 << (bits - 1)
        minimum = -limit
        maximum = limit - 1

    def parse(token):
        if not _integer_re.fullmatch(token):
            raise ParseError(token, type_name)
        value = int(token)
        if bits and not (minimum <= value <= maximum):
            raise ParseError(token, type_name, f"must be {minimum} <= value <= {maximum}")
        return value
    return parse


def _parse_float(token):
    if not _float_re.fullmatch(token):
        raise ParseError(token, "float")
    return float(token)

def _parse_float32(token):
    if not _float_re.fullmatch(token):
        raise ParseError(token, "float32")
    try:
        # round-trip through an IEEE single; standard size checks the range.
        return struct.unpack("<f", struct.pack("<f", float(token)))[0]
    except OverflowError:
        raise ParseError(token, "float32", "out of range") from None

def _parse_complex(token):
    if token != token.strip() or "_" in token:
        raise ParseError(token, "complex")
    try:
        return complex(token)
    except ValueError:
        raise ParseError(token, "complex") from None

def _parse_bool(token):
    if token == "true":
        return True
    if token == "false":
        return False
    raise ParseError(token, "bool", "use true or false")

def _parse_char(token):
    if len(token) != 1:
        raise ParseError(token, "char", "must be exactly one character")
    return token

def _parse_str(token):
    return token


primitive_parsers = {
    int: _integer_parser("int"),
    int8: _integer_parser("int8", 8),
    int16: _integer_parser("int16", 16),
    int32: _integer_parser("int32", 32),
    int64: _integer_parser("int64", 64),
    float: _parse_float,
    float32: _parse_float32,
    complex: _parse_complex,
    bool: _parse_bool,
    char: _parse_char,
    str: _parse_str,
    object: _parse_str,
    typing.Any: _parse_str,
    }

def is_primitive(type):
    try:
        return type in primitive_parsers
    except TypeError:
        # unhashable annotation
        return False


class ConverterRegistry:
    """
    Maps a type to a function that builds an instance
    of that type from a single string.

    Lookups walk the type's MRO, so registering a base
    class covers its subclasses too.  If a registry has
    a parent, the parent is consulted after the registry
    itself.  Registries are populated at startup and only
    read while processing a command-line.
    """

    def __init__(self, parent=None):
        self.parent = parent
        self.converters = {}

    def __repr__(self):
        return f"<{self.__class__.__name__} {len(self.converters)} converters parent={self.parent!r}>"

    def register(self, type, converter):
        if not isinstance(type, builtins.type):
            raise ConfigurationError(f"can only register converters for classes, not {type!r}")
        if not callable(converter):
            raise ConfigurationError(f"converter for {type.__name__} must be callable, not {converter!r}")
        self.converters[type] = converter
        return converter

    def lookup(self, type):
        registry = self
        while registry:
            for cls in getattr(type, "__mro__", (type,)):
                converter = registry.converters.get(cls)
                if converter:
                    return converter
            registry = registry.parent
        return None


def _library_converter(type_name, converter):
    """
    Wraps a standard library constructor so malformed
    input raises ParseError instead of ValueError
    (or decimal.InvalidOperation, an ArithmeticError).
    """
    def convert(token):
        try:
            return converter(token)
        except ValueError as e:
            raise ParseError(token, type_name, str(e) or None) from None
        except ArithmeticError:
            raise ParseError(token, type_name) from None
    convert.__name__ = f"convert_{type_name}"
    return convert


default_registry = ConverterRegistry()
default_registry.register(pathlib.Path, pathlib.Path)
default_registry.register(pathlib.PurePath, pathlib.PurePath)
default_registry.register(decimal.Decimal, _library_converter("Decimal", decimal.Decimal))
default_registry.register(fractions.Fraction, _library_converter("Fraction", fractions.Fraction))
default_registry.register(datetime.datetime, _library_converter("datetime", datetime.datetime.fromisoformat))
default_registry.register(datetime.date, _library_converter("date", datetime.date.fromisoformat))


def string_constructor(type):
    """
    Returns type itself if calling type(s) with a single
    string looks legal, otherwise None.

    "Looks legal" means: the constructor signature accepts
    exactly one positional argument, and that argument is
    either unannotated or annotated as str.
    """
    if not isinstance(type, builtins.type):
        return None
    try:
        signature = inspect.signature(type)
    except (TypeError, ValueError):
        return None
    try:
        bound = signature.bind("")
    except TypeError:
        return None
    for name, value in bound.arguments.items():
        annotation = signature.parameters[name].annotation
        if annotation not in (inspect.Parameter.empty, str, "str"):
            return None
    return type


def _coerce_enum(type, token):
    folded = token.casefold()
    for name, member in type.__members__.items():
        if name.casefold() == folded:
            return member
    raise UnknownEnumValue(token, type)


def coerce(type, token, *, nullable=False, registry=None):
    """
    Converts token (a str from the command-line) into
    an instance of type.

    If nullable is true, the literal token "null" is
    converted to None before anything else is tried.

    Primitive types (see primitive_parsers) are parsed
    strictly and raise ParseError on malformed input.
    Enums match their member names case-insensitively.
    Anything else is built with a string constructor:
    first one registered in registry (or default_registry),
    then the type itself if its constructor takes a single
    string.  The converters in default_registry raise
    ParseError on malformed input.  Exceptions raised by
    application constructors propagate, except for
    UsageError subclasses which are bad input like any other.
    """
    if nullable and (token == "null"):
        return None

    if is_primitive(type):
        return primitive_parsers[type](token)

    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return _coerce_enum(type, token)

    registry = registry or default_registry
    converter = registry.lookup(type) or string_constructor(type)
    if not converter:
        raise NoStringConstructor(type)
    return converter(token)
