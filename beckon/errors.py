# please leave this copyright notice in binary distributions.
license = """
beckon/errors.py
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


class BeckonBaseException(Exception):
    pass

class ConfigurationError(BeckonBaseException):
    """
    Raised when the Beckon API is used improperly.
    """
    pass


class UsageError(BeckonBaseException):
    """
    Raised when Beckon processes an invalid command-line.

    reason is a human-readable explanation, suitable
    for printing above the help text.
    """
    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class UnknownOption(UsageError):
    def __init__(self, option, *, scope="Parameter"):
        self.option = option
        super().__init__(f"{scope} with name '{option}' not found.")

class MissingValue(UsageError):
    def __init__(self, option):
        self.option = option
        super().__init__(f"No value provided for parameter '{option}'.")

class MissingRequired(UsageError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"'{name}' is required, but wasn't provided.")

class TooManyArguments(UsageError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"More arguments provided than the function can receive (at {token!r}).")

class NoVarargSlot(UsageError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"Can't use {token!r}: no variadic parameter, and named parameters have already been used.")

class ParseError(UsageError):
    def __init__(self, token, type_name, detail=None):
        self.token = token
        self.type_name = type_name
        reason = f"Invalid value {token!r}, must be {type_name}"
        if detail:
            reason = f"{reason} ({detail})"
        super().__init__(reason + ".")

class UnknownEnumValue(UsageError):
    def __init__(self, token, enum_type):
        self.token = token
        self.enum_type = enum_type
        names = ", ".join(name.lower() for name in enum_type.__members__)
        super().__init__(f"Invalid value {token!r} for {enum_type.__name__}, should be one of: {names}.")

class NoStringConstructor(UsageError):
    def __init__(self, type):
        self.type = type
        name = getattr(type, "__qualname__", None) or repr(type)
        super().__init__(f"Found no string constructor for {name}.")

class UnknownCommand(UsageError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown command '{name}'.")


class HelpRequested(BeckonBaseException):
    """
    Not really an error.  Raised by bind() when the only
    argument is a help marker like "--help"; the caller
    prints the help and abandons the command.
    """
    pass


class WrongArgumentsError(BeckonBaseException):
    """
    The single "bad arguments" signal.  By the time this
    is raised, help text explaining the problem has already
    been printed.  Beckon.main() catches it and returns quietly.
    """
    pass


__all__ = (
    "BeckonBaseException",
    "ConfigurationError",
    "UsageError",
    "UnknownOption",
    "MissingValue",
    "MissingRequired",
    "TooManyArguments",
    "NoVarargSlot",
    "ParseError",
    "UnknownEnumValue",
    "NoStringConstructor",
    "UnknownCommand",
    "HelpRequested",
    "WrongArgumentsError",
    )
