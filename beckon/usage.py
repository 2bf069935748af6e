# please leave this copyright notice in binary distributions.
license = """
beckon/usage.py
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

##
## Usage text for commands.
##
## Everything in here is a pure function of the Command
## and Parameter objects: it returns a string, and the
## caller decides whether (and where) to print it.
##

import inspect
import textwrap
import typing


def type_name(t):
    if t is inspect.Parameter.empty:
        return "Any"
    if t is None or t is type(None):
        return "None"
    if t is typing.Any:
        return "Any"
    if isinstance(t, str):
        # unresolvable string annotation
        return t
    name = getattr(t, "__name__", None)
    if name and isinstance(t, type):
        return name
    return str(t).replace("typing.", "")


def parameter_type_string(parameter):
    s = type_name(parameter.type)
    if parameter.nullable:
        s += "?"
    return s


def parameter_summary(parameter):
    """
    The terse form used inside a command summary:
        name: type
        name: type = ...      (optional)
        name: type...         (variadic)
    """
    if parameter.variadic:
        return f"{parameter.name}: {parameter_type_string(parameter)}..."
    s = f"{parameter.name}: {parameter_type_string(parameter)}"
    if parameter.optional:
        s += " = ..."
    return s


def option_string(parameter):
    s = f"--{parameter.name} <{parameter_type_string(parameter)}>"
    if parameter.variadic:
        return s + "..."
    if parameter.optional:
        s += " (optional)"
    return s


def _wrap(text, indent, max_columns):
    prefix = " " * indent
    width = max(max_columns, indent + 20)
    paragraphs = []
    for paragraph in text.split("\n\n"):
        paragraph = paragraph.strip()
        if paragraph:
            paragraphs.append(textwrap.fill(paragraph, width=width, initial_indent=prefix, subsequent_indent=prefix))
    return paragraphs


def parameter_lines(parameter, *, indent=4, max_columns=80):
    lines = [option_string(parameter)]
    for text in (parameter.description, parameter.documentation):
        if text:
            lines.extend(_wrap(text, indent, max_columns))
    return lines


def command_summary(command):
    parameters = ", ".join(parameter_summary(p) for p in command.parameters)
    s = f"{command.name}({parameters}): {type_name(command.return_type)}"
    if command.description:
        s += f" - {command.description}"
    return s


def render(command, *, error=None, indent=4, max_columns=80):
    """
    Full help for a single command: an optional error
    message, the command's name and its descriptions,
    then one entry per parameter.
    """
    lines = []
    if error:
        lines.append(error)
        lines.append("")
    lines.append(command.name)
    if command.description:
        lines.append(command.description)
    if command.documentation:
        lines.extend(_wrap(command.documentation, 0, max_columns))
    for parameter in command.parameters:
        lines.extend(parameter_lines(parameter, indent=indent, max_columns=max_columns))
    return "\n".join(lines)


def render_all(commands, setup=None, *, error=None, indent=4, max_columns=80):
    """
    Help for the whole program.  Lists the global options
    (the parameters of the setup command), but only if
    there are any, followed by a one-line summary of every
    available command.
    """
    lines = []
    if error:
        lines.append(error)
        lines.append("")
    if setup and setup.parameters:
        lines.append("Global options:")
        for parameter in setup.parameters:
            lines.extend(parameter_lines(parameter, indent=indent, max_columns=max_columns))
        lines.append("")
    lines.append("Available commands:")
    for command in commands:
        lines.append(command_summary(command))
    return "\n".join(lines)
