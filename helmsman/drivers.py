"""
Helmsman driver (binding state machine).

A Driver parses one argument vector against a component and invokes the
selected operation:

    Start ─> SelectOperation ─> ArgumentLoop ─> completion check ─> Invoke

1. Start: no tokens, or a blank first token -> command_name_required.
2. SelectOperation: the first token names the operation (name or short name,
   any case). Unknown -> invalid_command_name(name).
3. ArgumentLoop, one token at a time:
   a. a zero-parameter operation with tokens left -> invalid_argument_count;
   b. a switch binds to the parameter it names; unknown -> invalid_argument_name;
   c. anything else is positional: it takes the parameter under the cursor,
      or the trailing catch-all once the cursor ran past every parameter;
      nothing left -> invalid_switch_format(token);
   d. an empty value means "true" for a boolean, otherwise the next token is
      taken as the value; none left -> invalid_argument_count;
   e. the value is converted to the parameter's element type; failure ->
      invalid_argument_value(parameter, text);
   f. the catch-all appends, any other parameter is set and satisfied.
4. A required parameter left unsatisfied -> invalid_argument_count.
5. The operation is called with one value per parameter in declaration order.
   An exception it raises is reported through exception(method, cause).

Switches are always tried before positional interpretation, and the
positional cursor only moves on positional tokens: a parameter bound by a
switch is not skipped by the cursor, and a later positional token rebinds it.

Every user-input failure is reported exactly once and turns into a False
return. Programmer errors (a None component, a malformed component class, a
writer that is not a UsageWriter) raise.
"""
import asyncio
import inspect
import sys
from collections import deque
from collections.abc import Iterable

from .conversions import DefaultValueConverter, ValueConverter
from .descriptors import describe
from .switches import Switch
from .usage import DefaultUsageWriter, UsageWriter
from .utils import *


class ParameterSlot:
    """
    The value bound so far to one parameter during a binding session.

    Optional parameters start satisfied with their default, the catch-all
    starts satisfied and empty, required parameters start unsatisfied.
    """

    def __init__(self, parameter, /):
        self.parameter = parameter
        if parameter.variadic:
            self.value = []
            self.satisfied = True
        elif parameter.optional:
            self.value = parameter.default
            self.satisfied = True
        else:
            self.value = Unset
            self.satisfied = False

    def commit(self, value, /):
        if self.parameter.variadic:
            self.value.append(value)
        else:
            self.value = value
        self.satisfied = True

    def __repr__(self):
        return f"parameter-slot({self.parameter.name}={self.value!r}, satisfied={self.satisfied})"


class BindingSession:
    """
    Transient state of one process() call.

    Owned by exactly one call and discarded when it returns.
    """

    def __init__(self, tokens, /):
        self.tokens = deque(tokens)
        self.method = None
        self.slots = {}
        self.cursor = 0

    def select(self, method, /):
        self.method = method
        self.slots = {parameter: ParameterSlot(parameter) for parameter in method.parameters}
        self.cursor = 0

    def positional(self):
        """
        Return the parameter the next positional token binds to, or None.

        The cursor stops on the catch-all, which keeps taking tokens.
        """
        parameters = self.method.parameters
        if self.cursor < len(parameters):
            parameter = parameters[self.cursor]
            if not parameter.variadic:
                self.cursor += 1
            return parameter
        if parameters and parameters[-1].variadic:
            return parameters[-1]
        return None

    @property
    def satisfied(self):
        return all(slot.satisfied for slot in self.slots.values())

    def arguments(self):
        """One value per parameter, in declaration order."""
        return [
            tuple(slot.value) if slot.parameter.variadic else slot.value
            for slot in self.slots.values()
        ]


def _tokenize(arguments):
    if arguments is Unset:
        return sys.argv[1:]
    if arguments is None:
        return []
    if isinstance(arguments, str) or not isinstance(arguments, Iterable):
        raise TypeError("process() argument must be an iterable of strings")
    tokens = []
    for token in arguments:
        if token is None:
            token = ""
        if not isinstance(token, str):
            raise TypeError("process() argument must be an iterable of strings")
        tokens.append(token)
    return tokens


def _cause(error):
    """Collapse single-member exception groups down to their only member."""
    while isinstance(error, BaseExceptionGroup) and len(error.exceptions) == 1:
        error = error.exceptions[0]
    return error


async def _complete(awaitable):
    return await awaitable


def _run(awaitable):
    """
    Drive awaitable to completion on a fresh event loop.

    When asyncio.run refuses (a loop is already running in this thread) the
    coroutines are closed, so they are neither left pending nor reported as
    never awaited.
    """
    coroutine = _complete(awaitable)
    try:
        return asyncio.run(coroutine)
    finally:
        coroutine.close()
        if inspect.iscoroutine(awaitable):
            awaitable.close()


class Driver:
    """
    Parses argument vectors against one component instance.

    Parameters
    - component: the object whose operations are exposed (not a class, not None).
    - writer: Unset | UsageWriter (defaults to a DefaultUsageWriter).
    - converter: Unset | ValueConverter (defaults to a DefaultValueConverter).
    - strict: reject collection-typed parameters other than *args.
    """

    def __init__(self, component, /, writer=Unset, converter=Unset, *, strict=True):
        if component is None:
            raise TypeError("Driver() argument must be a component, not None")
        if isinstance(component, type):
            raise TypeError(f"Driver() argument must be a component instance, not the class {component.__name__!r}")

        self._component = component
        self._descriptor = describe(component, strict=strict)

        if writer is Unset:
            writer = DefaultUsageWriter(self._descriptor)
        if not isinstance(writer, UsageWriter):
            raise TypeError("Driver() writer must be a UsageWriter")
        self._writer = writer

        if converter is Unset:
            converter = DefaultValueConverter()
        if not isinstance(converter, ValueConverter):
            raise TypeError("Driver() converter must be a ValueConverter")
        self._converter = converter

    component = mirror("component")
    descriptor = mirror("descriptor")
    writer = mirror("writer")
    converter = mirror("converter")

    def usage(self):
        self._writer.usage()

    def process(self, arguments=Unset, /):
        """
        Parse arguments, bind them and invoke the selected operation.

        Parameters
        - arguments:
          • Unset: read tokens from sys.argv[1:].
          • None: no tokens at all.
          • Iterable[str]: the tokens, used as they are (no shell splitting).

        Returns
        - True when the operation ran and returned normally, False after
          exactly one diagnostic was reported.

        Async operations are run with asyncio.run, so they need a caller with
        no running event loop; otherwise the RuntimeError is reported through
        writer.exception and the operation never starts.
        """
        session = BindingSession(_tokenize(arguments))
        return self._select(session) and self._bind(session) and self._invoke(session)

    def _select(self, session):
        if not session.tokens or not session.tokens[0].strip():
            self._writer.command_name_required()
            return False

        name = session.tokens.popleft()
        if (method := self._descriptor.getmethod(name)) is None:
            self._writer.invalid_command_name(name)
            return False

        session.select(method)
        return True

    def _bind(self, session):
        method = session.method

        while session.tokens:
            if not method.parameters:
                self._writer.invalid_argument_count(method)
                return False

            token = session.tokens.popleft()
            if (switch := Switch.tryparse(token)) is not None:
                if (parameter := method.getparameter(switch.name)) is None:
                    self._writer.invalid_argument_name(method, switch.name)
                    return False
                value = switch.value
            else:
                if (parameter := session.positional()) is None:
                    self._writer.invalid_switch_format(token)
                    return False
                value = token

            if not value and parameter.boolean:
                session.slots[parameter].commit(True)
                continue

            if not value:
                if not session.tokens:
                    self._writer.invalid_argument_count(method)
                    return False
                value = session.tokens.popleft()

            if not (conversion := self._converter.tryconvert(value, parameter.element)):
                self._writer.invalid_argument_value(parameter, value)
                return False
            session.slots[parameter].commit(conversion.value)

        if not session.satisfied:
            self._writer.invalid_argument_count(method)
            return False

        return True

    def _invoke(self, session):
        method = session.method
        try:
            result = method.invoke(self._component, session.arguments())
            if inspect.isawaitable(result):
                _run(result)
        except Exception as error:
            self._writer.exception(method, _cause(error))
            return False
        return True


def invoke(component, arguments=Unset, /):
    """
    One-shot convenience: Driver(component).process(arguments).
    """
    return Driver(component).process(arguments)


__all__ = (
    "ParameterSlot",
    "BindingSession",
    "Driver",
    "invoke",
)
