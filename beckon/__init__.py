#!/usr/bin/env python3

"Give your functions a command-line.  Beckon turns plain Python functions into subcommands."
__version__ = "0.1.0"


# please leave this copyright notice in binary distributions.
license = """
beckon/__init__.py
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


import big.all as big
from big.itertools import PushbackIterator
import builtins
import collections
import functools
import inspect
import sys
import types
import typing

from . import coercion
from . import shell
from . import usage
from .coercion import int8, int16, int32, int64, float32, char, ConverterRegistry, coerce
from .errors import *


POSITIONAL_ONLY = inspect.Parameter.POSITIONAL_ONLY
POSITIONAL_OR_KEYWORD = inspect.Parameter.POSITIONAL_OR_KEYWORD
VAR_POSITIONAL = inspect.Parameter.VAR_POSITIONAL
KEYWORD_ONLY = inspect.Parameter.KEYWORD_ONLY
VAR_KEYWORD = inspect.Parameter.VAR_KEYWORD
empty = inspect.Parameter.empty

NoneType = type(None)
# new in 3.10
UnionType = getattr(types, "UnionType", None)


def is_help_marker(s):
    """
    Deliberately loose: "-help", "--help", and "--h-help"
    all count.  So does "-superhelp".
    """
    return s.startswith("-") and s.endswith("help")


def dereference_annotated(annotation):
    """
    Strips typing.Annotated.  Returns (annotation, texts),
    where texts is the list of str metadata, which Beckon
    uses as the description and documentation.
    """
    if typing.get_origin(annotation) is typing.Annotated:
        annotation, *metadata = typing.get_args(annotation)
        return annotation, [m for m in metadata if isinstance(m, str)]
    return annotation, []


def analyze_annotation(annotation):
    """
    Returns (type, nullable, texts).

    Optional[X] and X | None become (X, True, ...).
    Annotated is stripped on either side of the Optional.
    """
    annotation, texts = dereference_annotated(annotation)
    nullable = False
    origin = typing.get_origin(annotation)
    if (origin is typing.Union) or (UnionType and (origin is UnionType)):
        args = typing.get_args(annotation)
        not_none = [a for a in args if a is not NoneType]
        nullable = len(not_none) != len(args)
        if len(not_none) == 1:
            annotation, more_texts = dereference_annotated(not_none[0])
            texts = texts or more_texts
    return annotation, nullable, texts


def split_docstring(doc):
    """
    The first paragraph of a docstring is the description,
    the rest is the documentation.  Either may be None.
    """
    if not doc:
        return None, None
    doc = inspect.cleandoc(doc)
    first, _, rest = doc.partition("\n\n")
    description = " ".join(line.strip() for line in first.splitlines()) or None
    return description, (rest.strip() or None)


def unbound_callable(callable):
    """
    Unbinds a callable.
    If the callable is bound to an object (a "method"),
    returns the unbound callable.  Otherwise returns callable.
    """
    return callable.__func__ if isinstance(callable, types.MethodType) else callable


def _type_hints(callable):
    if isinstance(callable, functools.partial):
        callable = callable.func
    if isinstance(callable, type):
        callable = callable.__init__
    try:
        return typing.get_type_hints(callable, include_extras=True)
    except (NameError, TypeError, AttributeError):
        # string annotations we can't resolve.
        # fall back to the raw annotations from the signature.
        return {}


class Parameter:
    """
    Describes one parameter of a command.

    type is the declared type; for the variadic parameter
    (*args) it's the type of each element.  index is the
    slot the parameter fills with positional arguments,
    or None for keyword-only parameters, which can only
    be set with "--name value".
    """

    def __init__(self, name, type=str, *, index=None, default=empty, nullable=False, variadic=False, description=None, documentation=None):
        self.name = name
        self.type = type
        self.index = index
        self.default = default
        self.optional = default is not empty
        self.nullable = nullable
        self.variadic = variadic
        self.description = description
        self.documentation = documentation

    def __repr__(self):
        flags = [f for f, value in (("optional", self.optional), ("nullable", self.nullable), ("variadic", self.variadic)) if value]
        flags = (" " + " ".join(flags)) if flags else ""
        return f"<{self.__class__.__name__} {self.name}: {usage.type_name(self.type)} index={self.index}{flags}>"

    @property
    def is_flag(self):
        return (self.type is bool) and (not self.variadic)

    def is_flag_shorthand(self, value):
        """
        Would "--name" followed by value set this parameter
        to True without consuming value?

        Only for boolean parameters.  value may be None
        (no more arguments), another option, or anything
        else that isn't literally "true" or "false".
        """
        return self.is_flag and (value not in ("true", "false"))


class Command:
    """
    Describes one callable we can run from the command-line:
    its name, its parameters (in order), and its docs.

    Built once from the callable's signature, then never
    changed.  invoke() actually calls the callable.
    """

    def __init__(self, callable, *, name=None, description=None, documentation=None, parameter_texts=None):
        if not builtins.callable(callable):
            raise ConfigurationError(f"{callable!r} is not callable")
        self.callable = callable
        self.name = name or getattr(callable, "__name__", None)
        if not self.name:
            raise ConfigurationError(f"{callable!r} has no __name__, you must specify a name")

        doc = callable.func.__doc__ if isinstance(callable, functools.partial) else callable.__doc__
        doc_description, doc_documentation = split_docstring(doc)
        self.description = description or doc_description
        self.documentation = documentation or doc_documentation

        parameter_texts = parameter_texts or {}
        signature = inspect.signature(callable)
        hints = _type_hints(callable)

        unknown = set(parameter_texts) - set(signature.parameters)
        if unknown:
            raise ConfigurationError(f"{self.name}: no parameter named {', '.join(sorted(unknown))}")

        self.return_type = hints.get("return", signature.return_annotation)

        self.parameters = []
        self.variadic = None
        index = 0
        for p in signature.parameters.values():
            if p.kind == VAR_KEYWORD:
                continue

            annotation = hints.get(p.name, p.annotation)
            t, nullable, texts = analyze_annotation(annotation)
            if isinstance(t, str):
                raise ConfigurationError(f"{self.name}: can't resolve annotation {t!r} for parameter {p.name!r}")
            if t is empty:
                if (p.default is not empty) and (p.default is not None):
                    t = type(p.default)
                else:
                    t = str
            if p.default is None:
                nullable = True

            texts = list(parameter_texts.get(p.name, ())) or texts
            description = texts[0] if texts else None
            documentation = texts[1] if len(texts) > 1 else None

            if p.kind == KEYWORD_ONLY:
                parameter_index = None
            else:
                parameter_index = index
                index += 1

            parameter = Parameter(p.name, t,
                index=parameter_index,
                default=p.default,
                nullable=nullable,
                variadic=p.kind == VAR_POSITIONAL,
                description=description,
                documentation=documentation,
                )
            self.parameters.append(parameter)
            if parameter.variadic:
                self.variadic = parameter

        # "--file_name" and "--file-name" both work.
        self.options = {}
        for parameter in self.parameters:
            self.options[parameter.name] = parameter
        for parameter in self.parameters:
            self.options.setdefault(parameter.name.replace("_", "-"), parameter)

        self.positionals = {p.index: p for p in self.parameters if p.index is not None}

    def __repr__(self):
        return f"<{self.__class__.__name__} {usage.command_summary(self)}>"

    def option(self, name):
        return self.options.get(name)

    def positional(self, index):
        return self.positionals.get(index)

    def invoke(self, bound):
        """
        Calls the callable with the arguments in bound,
        a dict mapping parameter names to values (from bind()).

        Optional parameters missing from bound get their
        default from Python, unless a later positional
        argument forces us to pass them explicitly, in which
        case we pass their declared default.
        """
        positionals = [p for p in self.parameters if (p.index is not None) and (not p.variadic)]
        extras = bound.get(self.variadic.name, []) if self.variadic else []

        if extras:
            last = len(positionals)
        else:
            last = 0
            for i, p in enumerate(positionals, 1):
                if p.name in bound:
                    last = i

        args = []
        for p in positionals[:last]:
            args.append(bound[p.name] if p.name in bound else p.default)
        args.extend(extras)

        kwargs = {}
        for p in self.parameters:
            if (p.index is None) and (p.name in bound):
                kwargs[p.name] = bound[p.name]

        return self.callable(*args, **kwargs)


def bind(command, arguments, *, registry=None, log=None):
    """
    Maps command-line arguments onto the parameters of
    command.  Returns a dict of parameter name to value,
    suitable for passing to command.invoke().

    The rules:

    * If the only argument is a help marker like "--help",
      raises HelpRequested.

    * "--name value" sets the parameter "name".  If "name"
      is variadic, each use appends.  If "name" is a bool,
      "--name" by itself means True; it only consumes the
      next argument if that's "true" or "false".

    * Other arguments are positional.  They fill the
      parameters in order, then spill into the variadic
      parameter (if any).  But once you've used
      "--name value", positional arguments can only go
      to the variadic parameter.

    * Afterwards, a missing variadic parameter is an empty
      list, a missing optional parameter is left for Python
      to fill in, and anything else missing is an error.

    Errors raise UsageError subclasses.
    """
    if log is None:
        log = big.Log()
    arguments = list(arguments)

    if (len(arguments) == 1) and is_help_marker(arguments[0]):
        log(f"help requested for {command.name}")
        raise HelpRequested(arguments[0])

    bound = {}

    def store(parameter, s):
        value = coerce(parameter.type, s, nullable=parameter.nullable, registry=registry)
        if parameter.variadic:
            bound.setdefault(parameter.name, []).append(value)
        else:
            bound[parameter.name] = value
        log(f"{parameter.name} <- {value!r}")

    log.enter(f"bind {command.name}")
    try:
        used_named = False
        positional_count = 0
        iterator = PushbackIterator(arguments)

        for a in iterator:
            if a.startswith("--"):
                option = a[2:]
                parameter = command.option(option)
                if not parameter:
                    raise UnknownOption(option)
                value = next(iterator, None)
                if parameter.is_flag_shorthand(value):
                    if value is not None:
                        iterator.push(value)
                    bound[parameter.name] = True
                    log(f"{parameter.name} <- True (flag)")
                    continue
                if value is None:
                    raise MissingValue(option)
                store(parameter, value)
                used_named = True
                continue

            if used_named:
                parameter = command.variadic
                if not parameter:
                    raise NoVarargSlot(a)
            else:
                parameter = command.positional(positional_count) or command.variadic
                if not parameter:
                    raise TooManyArguments(a)
                positional_count += 1
            store(parameter, a)

        for parameter in command.parameters:
            if parameter.name in bound:
                continue
            if parameter.variadic:
                bound[parameter.name] = []
            elif not parameter.optional:
                raise MissingRequired(parameter.name)
    finally:
        log.exit()

    return bound


def no_setup():
    pass


class Beckon:
    """
    A Beckon object holds a set of commands, plus an
    optional setup function that handles global options,
    and runs command-lines against them.

    Commands are turned into Command objects the first
    time a command-line is processed.  After that you
    can't register any more commands.
    """

    def __init__(self,
        *,
        # if true, a command-line with no command (or an unknown
        # command and nothing else) starts the interactive shell.
        interactive=True,

        # printed before each line read in the interactive shell.
        prompt="> ",

        # if set to a non-empty string, a lone "--version" prints it.
        version=None,

        usage_max_columns=80,
        usage_indent_definitions=4,

        # print the event log after each command-line.
        log_events=False,
        ):
        self.interactive = interactive
        self.prompt = prompt
        self.version = version
        self.usage_max_columns = usage_max_columns
        self.usage_indent_definitions = usage_indent_definitions
        self.log_events = log_events

        self.registry = ConverterRegistry(parent=coercion.default_registry)

        # self.fn_database[callable] = {parameter_name: (description, documentation)}
        self.fn_database = collections.defaultdict(dict)

        # name -> (callable, description, documentation)
        self.registered = {}
        self._global = None

        # output of analyze()
        self.commands = None
        self.setup = None
        self.no_setup = None

    def __repr__(self):
        names = list(self.commands or self.registered)
        return f"<{self.__class__.__name__} commands={names!r}>"

    def _check_not_analyzed(self, what):
        if self.commands is not None:
            raise ConfigurationError(f"can't add {what} after processing a command-line")

    def command(self, name=None, *, description=None, documentation=None):
        def command(callable):
            assert callable and builtins.callable(callable)
            self._check_not_analyzed("commands")
            key = name or getattr(callable, "__name__", None)
            if not key:
                raise ConfigurationError(f"{callable!r} has no __name__, you must specify a name")
            if key in self.registered:
                raise ConfigurationError(f"there's already a command named {key!r}")
            self.registered[key] = (callable, description, documentation)
            return callable
        return command

    def global_command(self):
        def global_command(callable):
            assert callable and builtins.callable(callable)
            self._check_not_analyzed("a global command")
            self._global = callable
            return callable
        return global_command

    def parameter(self, name, *, description=None, documentation=None):
        """
        Decorator for command functions.  Attaches a description
        (and optionally longer documentation) to the parameter
        called name, for use in help text.
        """
        texts = [t for t in (description, documentation) if t]
        def parameter(callable):
            self.fn_database[unbound_callable(callable)][name] = texts
            return callable
        return parameter

    def converter(self, type):
        """
        Decorator.  Registers a function that builds an
        instance of type from a single string.
        """
        def converter(callable):
            return self.registry.register(type, callable)
        return converter

    def map_to_command(self, callable, *, name=None, description=None, documentation=None):
        return Command(callable,
            name=name,
            description=description,
            documentation=documentation,
            parameter_texts=self.fn_database.get(unbound_callable(callable)),
            )

    def analyze(self, processor=None):
        if self.commands is None:
            if processor:
                processor.log("analyze commands")
            commands = {}
            for name, (callable, description, documentation) in self.registered.items():
                commands[name] = self.map_to_command(callable, name=name, description=description, documentation=documentation)
            self.setup = self.map_to_command(self._global or no_setup)
            self.no_setup = Command(no_setup)
            self.commands = commands
        return self.commands, self.setup

    def usage(self, *, command=None, error=None, setup=True):
        self.analyze()
        kwargs = dict(error=error, indent=self.usage_indent_definitions, max_columns=self.usage_max_columns)
        if command:
            return usage.render(command, **kwargs)
        return usage.render_all(self.commands.values(), self.setup if setup else None, **kwargs)

    def help(self, *, command=None, error=None, setup=True):
        print(self.usage(command=command, error=error, setup=setup))

    def processor(self):
        return Processor(self)

    def process(self, args=None, *, interactive=None, setup=True):
        """
        Processes a command-line and returns the result of
        the command.  args defaults to sys.argv[1:].

        Raises WrongArgumentsError if the command-line is bad
        (after printing help explaining why).  Returns None
        if we ran the interactive shell.

        If setup is false, the global command isn't run and
        global options aren't accepted.
        """
        if args is None:
            args = sys.argv[1:]
        if interactive is None:
            interactive = self.interactive
        processor = self.processor()
        try:
            return processor(args, interactive=interactive, setup=setup)
        finally:
            if self.log_events:
                processor.log.print()

    def main(self, args=None):
        """
        Like process(), but prints the result (unless it's None),
        and bad command-lines return quietly; the help text
        already explained what went wrong.
        """
        try:
            result = self.process(args)
        except WrongArgumentsError:
            return
        if result is not None:
            print(result)

    def call(self, callable, args=None):
        """
        Runs a single callable against a command-line,
        no command name needed.
        """
        if args is None:
            args = sys.argv[1:]
        command = self.map_to_command(callable)
        return self.processor().call(command, args)


class Processor:
    """
    The state for processing one command-line: the
    arguments (a PushbackIterator, which is our cursor)
    and the event log.
    """

    def __init__(self, app):
        self.app = app
        self.reset()

    def reset(self):
        self.iterator = None
        self.command = None
        self.result = None
        self.log = big.Log()

    def error(self, error, *, command=None, setup=True):
        """
        Prints help explaining error, then raises
        WrongArgumentsError.  Command help if we know
        which command, otherwise help for everything.
        """
        reason = getattr(error, "reason", None)
        self.log(f"error {reason!r}")
        self.app.help(command=command, error=reason, setup=setup)
        raise WrongArgumentsError(reason or "help requested") from error

    def global_arguments(self, setup):
        """
        Consumes the leading "--option [value]" arguments,
        which belong to the setup command.  Stops at (and
        pushes back) the first argument that isn't an option.
        """
        arguments = []
        iterator = self.iterator
        for a in iterator:
            if not a.startswith("--"):
                iterator.push(a)
                break
            option = a[2:]
            parameter = setup.option(option)
            if not parameter:
                raise UnknownOption(option, scope="Global parameter")
            arguments.append(a)
            value = next(iterator, None)
            if value is None:
                # let bind() complain, if it wants to.
                break
            if parameter.is_flag_shorthand(value):
                iterator.push(value)
            else:
                arguments.append(value)
        return arguments

    def call(self, command, arguments):
        try:
            bound = bind(command, arguments, registry=self.app.registry, log=self.log)
        except (HelpRequested, UsageError) as e:
            self.error(e, command=command)
        self.log(f"invoke {command.name}")
        return command.invoke(bound)

    def __call__(self, sequence, *, interactive=False, setup=True):
        self.reset()
        self.log("process start")
        app = self.app

        commands, setup_command = app.analyze(self)
        if not setup:
            setup_command = app.no_setup

        sequence = list(sequence)
        if (len(sequence) == 1) and is_help_marker(sequence[0]):
            self.log("help requested")
            app.help(setup=setup)
            raise WrongArgumentsError("help requested")

        if app.version and (sequence == ["--version"]):
            print(app.version)
            return None

        self.iterator = iterator = PushbackIterator(sequence)

        self.log.enter("global options")
        try:
            arguments = self.global_arguments(setup_command)
            bound = bind(setup_command, arguments, registry=app.registry, log=self.log)
        except (HelpRequested, UsageError) as e:
            self.error(e, setup=setup)
        finally:
            self.log.exit()

        # always run setup, even with no global options.
        self.log(f"setup {setup_command.name}")
        setup_command.invoke(bound)

        if not iterator:
            if interactive:
                self.log("no command, entering interactive shell")
                shell.interact(app)
                return None
            self.error(UsageError("No command specified."), setup=setup)

        name = next(iterator)
        command = commands.get(name)
        if not command:
            e = UnknownCommand(name)
            if interactive and not iterator:
                self.log(f"unknown command {name!r}, entering interactive shell")
                print(e.reason)
                shell.interact(app)
                return None
            self.error(e, setup=setup)

        self.command = command
        result = self.result = self.call(command, list(iterator))
        self.log("process complete")
        return result


def _app(functions, setup, interactive):
    app = Beckon(interactive=interactive)
    for function in functions:
        app.command()(function)
    if setup:
        app.global_command()(setup)
    return app

def cli(args, *functions, setup=None, interactive=True):
    """
    Exposes functions as subcommands, processes args
    (a list of str, e.g. sys.argv[1:]), and prints the result.
    """
    _app(functions, setup, interactive).main(args)

def cli_returning(args, functions, *, setup=None, interactive=True):
    """
    Like cli(), but returns the result instead of printing it,
    and raises WrongArgumentsError on a bad command-line.
    """
    return _app(functions, setup, interactive).process(args)

def cli_call(callable, args):
    """
    Calls callable with arguments parsed from args.
    Raises WrongArgumentsError on a bad command-line.
    """
    return Beckon().call(callable, args)
