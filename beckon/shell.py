# please leave this copyright notice in binary distributions.
license = """
beckon/shell.py
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

import re

from .errors import WrongArgumentsError


escapes = {
    "n": "\n",
    " ": " ",
    "b": "\b",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "'": "'",
    '"': '"',
    }

_escape_re = re.compile(r"\\(.)", re.DOTALL)

def unescape(s):
    """
    Replaces the escape sequences in the escapes table.
    Unknown escapes (e.g. "\\q") are left alone,
    backslash and all.
    """
    def replace(match):
        c = match.group(1)
        return escapes.get(c, match.group(0))
    return _escape_re.sub(replace, s)


def split(line):
    """
    Splits a line of interactive input into command-line
    arguments.

    Whitespace separates arguments, except inside a span
    of double-quotes.  A double-quote always ends the
    current argument, then toggles quoting.  A backslash
    prevents the next character from being treated as
    whitespace or a quote; escape sequences are replaced
    once the argument has been split off.  Blank arguments
    are dropped.

    This is a single left-to-right pass; unlike shlex.split()
    it never raises on an unterminated quote.
    """
    results = []
    start = 0
    in_quote = False

    def split_here(end):
        part = line[start:end]
        if part.strip():
            results.append(unescape(part))

    i = 0
    length = len(line)
    while i < length:
        c = line[i]
        if c == '"':
            split_here(i)
            start = i + 1
            in_quote = not in_quote
        elif c.isspace():
            if not in_quote:
                split_here(i)
                start = i + 1
        elif c == "\\":
            i += 1
        i += 1
    split_here(length)
    return results


def interact(app):
    """
    Runs the interactive shell for a Beckon app.

    Reads lines from input() until end-of-input, or
    until the user types "exit" or "quit".  A blank line
    or "help" prints the list of commands.  Anything else
    is split and processed as a command-line, with the
    setup command skipped and interactive mode off, so a
    bad line just prints help and we keep going.
    """
    print("Entering interactive mode:")
    while True:
        print()
        try:
            line = input(app.prompt)
        except EOFError:
            return
        if (not line.strip()) or (line == "help"):
            app.help(setup=False)
            continue
        if line in ("exit", "quit"):
            return
        arguments = split(line)
        try:
            result = app.process(arguments, interactive=False, setup=False)
        except WrongArgumentsError:
            continue
        if result is not None:
            print(result)
