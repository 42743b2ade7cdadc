"""
Helmsman usage and diagnostics.

The driver never formats text. It reports what went wrong through one of the
UsageWriter notifications, always with structured arguments:

    command_name_required()
    invalid_command_name(name)
    invalid_argument_count(method)
    invalid_switch_format(token)
    invalid_argument_name(method, name)
    invalid_argument_value(parameter, value)
    exception(method, error)

and usage() prints the full help on demand.

DefaultUsageWriter
- Builds the matching UsageFault (see faults) for each notification and keeps
  it in .faults, in reporting order.
- Unless deferred, prints with rich to stderr:
  • the component header: description and version, then the copyright line
    (read from __version__ / __copyright__ of the component's module);
  • the fault itself;
  • the usage of the offending operation, or of every operation when the
    operation is unknown.

Signature layout

    commit[ci] <--path[-p]> <--message[-m]> [--force-]
      - Record changes to the repository.
           --path:        file or directory to commit
           --message:     log message
           --force[+|-]:  skip the pre-commit checks

Customization
- Define a mapping named __styles__ in __main__ to override palette entries,
  and __prog__ to override the program name shown in fault headers.
- colorful=False drops every style; fancy=True wraps output in a panel.
"""
import copy
import difflib
import sys
from abc import ABC, abstractmethod
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .descriptors import ComponentDescriptor, MethodDescriptor, ParameterDescriptor, describe
from .faults import *
from .utils import *


class UsageWriter(ABC):
    """
    Receiver of every diagnostic the driver can produce.

    Each notification is made exactly once per failed call, and nothing is
    reported on success.
    """

    @abstractmethod
    def usage(self):
        """Print the usage of every operation."""

    @abstractmethod
    def exception(self, method, error, /):
        """The invoked operation raised error."""

    @abstractmethod
    def command_name_required(self):
        """No operation name was given."""

    @abstractmethod
    def invalid_command_name(self, name, /):
        """name does not select any operation."""

    @abstractmethod
    def invalid_argument_count(self, method, /):
        """Too many, too few, or a dangling switch without its value."""

    @abstractmethod
    def invalid_switch_format(self, token, /):
        """A positional token with no parameter left to take it."""

    @abstractmethod
    def invalid_argument_name(self, method, name, /):
        """A switch naming no parameter of method."""

    @abstractmethod
    def invalid_argument_value(self, parameter, value, /):
        """value could not be converted for parameter."""


def _typename(object, /):
    return getattr(object, "__name__", None) or str(object)


class DefaultUsageWriter(UsageWriter):
    """
    Rich console implementation of UsageWriter.

    Parameters
    - component: ComponentDescriptor, or a component class/instance to describe.
    - console: Unset | rich Console (defaults to a stderr console).
    - colorful: bool, apply the palette.
    - fancy: bool, wrap output in a panel.
    - deferred: bool, only collect faults (nothing is printed).
    """

    def __init__(self, component, /, console=Unset, *, colorful=True, fancy=False, deferred=False):
        if component is None:
            raise TypeError("DefaultUsageWriter() argument must be a component, not None")
        if not isinstance(component, ComponentDescriptor):
            component = describe(component)
        if console is not Unset and not isinstance(console, Console):
            raise TypeError("DefaultUsageWriter() console must be a rich Console")
        self._component = component
        self._console = coalesce(console, Console(stderr=True))
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._deferred = bool(deferred)
        self._faults = []

    component = mirror("component")
    console = mirror("console")
    colorful = mirror("colorful")
    fancy = mirror("fancy")
    deferred = mirror("deferred")
    faults = mirror("faults")

    # --- notifications ---

    def usage(self):
        if not self._deferred:
            self._print(self._header(), *map(self._method, self._component.methods))

    def exception(self, method, error, /):
        if not isinstance(error, BaseException):
            raise TypeError("exception() second argument must be an exception")
        detail = str(error) or type(error).__name__
        self._report(InvocationError(
            f"'{method.name}' failed: {detail}",
            hint=getdoc(FaultCode.INVOCATION_EXCEPTION) or f"raised {type(error).__name__}",
            method=method,
            exception=error,
        ), method)

    def command_name_required(self):
        names = ", ".join(method.name for method in self._component.methods)
        self._report(CommandNameRequiredError(
            "a command name is required",
            hint=f"choose one of: {names}" if names else "this component exposes no commands",
        ))

    def invalid_command_name(self, name, /):
        candidates = [name for method in self._component.methods for name in method.names]
        self._report(InvalidCommandNameError(
            f"'{name}' is not a known command",
            hint=self._suggest(name, candidates, prefix="") or "the available commands are listed below",
            name=name,
        ))

    def invalid_argument_count(self, method, /):
        self._report(InvalidArgumentCountError(
            f"wrong number of arguments for '{method.name}'",
            hint="compare the arguments with the usage below",
            method=method,
        ), method)

    def invalid_switch_format(self, token, /):
        self._report(InvalidSwitchFormatError(
            f"cannot tell which argument '{token}' belongs to",
            hint="name it explicitly, as in --name=value",
            token=token,
        ))

    def invalid_argument_name(self, method, name, /):
        candidates = [name for parameter in method.parameters for name in parameter.names]
        self._report(InvalidArgumentNameError(
            f"'{method.name}' has no argument named '{name}'",
            hint=self._suggest(name, candidates, prefix="--") or f"'{method.name}' takes the arguments listed below",
            method=method,
            name=name,
        ), method)

    def invalid_argument_value(self, parameter, value, /):
        self._report(InvalidArgumentValueError(
            f"'{value}' is not a valid {_typename(parameter.element)} for '--{parameter.name}'",
            hint=f"the {ordinal(parameter.position + 1)} argument of '{parameter.method.name}' expects {_typename(parameter.element)}",
            method=parameter.method,
            parameter=parameter,
            value=value,
        ), parameter.method)

    # --- internals ---

    @staticmethod
    def _suggest(name, candidates, /, *, prefix):
        if matches := difflib.get_close_matches(str(name).casefold(), [x.casefold() for x in candidates], n=1):
            original = next(x for x in candidates if x.casefold() == matches[0])
            return f"did you mean '{prefix}{original}'?"
        return None

    def _report(self, fault, method=Unset, /):
        fault = copy.replace(fault, prog=self._component.name.lower(), colorful=self._colorful, fancy=self._fancy)
        self._faults.append(fault)
        if self._deferred:
            return
        if method is Unset:
            self._print(self._header(), fault, *map(self._method, self._component.methods))
        else:
            self._print(self._header(), fault, self._method(method))

    def _styles(self):
        return defaultdict(str, {
            "description": "bold #FFFFFF",  # Pure white product line
            "version": "#36C5F0",  # Sky-blue version
            "copyright": "#737373",  # Dim footer gray

            "command-name": "bold #FF4D94",  # Magenta-pink commands
            "short-name": "#FF4D94 dim",
            "required": "bold #FFD600",  # Amber for required arguments
            "optional": "#00E6FF",  # Cyan for optional arguments
            "default": "italic #A3A3A3",
            "method-description": "#9CA3AF",
            "parameter-name": "bold #00E6FF",
            "parameter-description": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

    def _text(self, fragment, style=""):
        if not fragment:
            return Text("")
        if not self._colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), self._styles()[style])

    def _header(self):
        module = sys.modules.get(self._component.type.__module__)
        description = self._component.description or self._component.name
        version = getattr(module, "__version__", None)
        copyright = getattr(module, "__copyright__", None)

        header = self._text(description, "description")
        if version:
            header.append(" - ").append_text(self._text(f"v{version}", "version"))
        if copyright:
            header.append("\n").append_text(self._text(copyright, "copyright"))
        return header.append("\n")

    def _name(self, descriptor):
        if isinstance(descriptor, ParameterDescriptor):
            name = self._text(f"--{descriptor.name}", "parameter-name")
            short = f"[-{descriptor.shortname}]" if descriptor.shortname else ""
        else:
            name = self._text(descriptor.name, "command-name")
            short = f"[{descriptor.shortname}]" if descriptor.shortname else ""
        return Text.assemble(name, self._text(short, "short-name"))

    def _signature(self, parameter):
        if parameter.variadic:
            return Text.assemble("[", self._name(parameter), " ...]")
        if not parameter.optional:
            return Text.assemble(self._text("<", "required"), self._name(parameter), self._text(">", "required"))
        if parameter.boolean:
            default = "+" if parameter.default else "-"
        elif parameter.default is None:
            return Text.assemble("[", self._name(parameter), "]")
        else:
            default = f"={parameter.default}"
        return Text.assemble("[", self._name(parameter), self._text(default, "default"), "]")

    def _method(self, method):
        width = self._console.width - 4 * self._fancy

        section = self._name(method)
        for parameter in method.parameters:
            section.append(" ").append_text(self._signature(parameter))

        if method.description:
            section.append("\n  - ").append_text(self._text(method.description, "method-description"))

        if method.parameters:
            labels = [
                parameter.name + ("[+|-]" if parameter.boolean else "")
                for parameter in method.parameters
            ]
            widest = max(map(len, labels))
            indent = 7 + 2 + widest + 3
            for parameter, label in zip(method.parameters, labels):
                section.append("\n       ")
                section.append_text(self._text(f"--{label}", "parameter-name"))
                section.append(":".ljust(1 + widest - len(label)) + "  ")
                if not parameter.description:
                    continue
                wrapped = self._text(parameter.description, "parameter-description").wrap(
                    self._console, max(width - indent, 16)
                )
                for index, line in enumerate(wrapped):
                    if index:
                        section.append("\n" + " " * indent)
                    section.append_text(line)

        return section.append("\n")

    def _print(self, *renders):
        renderable = Group(*renders)
        if self._fancy:
            renderable = Panel(renderable, title=self._component.name, title_align="left")
        self._console.print(renderable)


__all__ = (
    "UsageWriter",
    "DefaultUsageWriter",
)
