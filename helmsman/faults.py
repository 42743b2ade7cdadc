"""
Helmsman faults (programmer errors, usage faults) and rendering.

Scope
- DefinitionError and subclasses: raised while a component is being described.
  They signal a bug in the component definition and are never caught by the
  driver.
- FaultCode: canonical, stable numeric identifiers for every user-facing
  usage fault.
- UsageFault and subclasses: structured records of what went wrong with the
  user's input (or with the invoked operation). They are not raised by the
  driver; the usage writer builds, records and renders them.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class DefinitionError(TypeError):
    """
    Base class for malformed component definitions.

    Raised at describe time, before any argument vector is looked at.
    """


class DuplicateOperationError(DefinitionError):
    """Two exposed operations resolve to the same name or short name."""


class DuplicateParameterError(DefinitionError):
    """Two parameters of one operation resolve to the same name or short name."""


class UnsupportedParameterError(DefinitionError):
    """A parameter kind or type that cannot be bound from a command line."""


class FaultCode(IntEnum):
    """
    canonical fault codes used by the driver (stable identifiers).

    grouping (by high-level domain)
    - selection (2110x)
      • COMMAND_NAME_REQUIRED, INVALID_COMMAND_NAME
    - binding (2111x)
      • INVALID_ARGUMENT_COUNT, INVALID_SWITCH_FORMAT, INVALID_ARGUMENT_NAME,
        INVALID_ARGUMENT_VALUE
    - invocation (2113x)
      • INVOCATION_EXCEPTION

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- selection faults (2110x) ---
    COMMAND_NAME_REQUIRED  = 21101
    INVALID_COMMAND_NAME   = 21102

    # --- binding faults (2111x) ---
    INVALID_ARGUMENT_COUNT = 21111
    INVALID_SWITCH_FORMAT  = 21112
    INVALID_ARGUMENT_NAME  = 21113
    INVALID_ARGUMENT_VALUE = 21114

    # --- invocation faults (2113x) ---
    INVOCATION_EXCEPTION   = 21131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class UsageFault(Exception):
    """
    A user-facing fault reported through a usage writer.

    The message is a single lowercased sentence. Everything else (code, title,
    hint, program name and the structured context such as method, parameter,
    token or value) travels in the read-only options mapping.

    Rendering options
    - colorful: apply the palette (default True).
    - fancy: wrap the fault in a panel (default False).
    - prog: program name shown in the header (a __prog__ in __main__ wins).
    """
    __code__ = Unset
    __title__ = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", coalesce(type(self).__title__, "usage fault"))

    @property
    def hint(self):
        return self.options.get("hint")

    def __getattr__(self, name):
        # Structured context (method, parameter, token, ...) is read from the options.
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "helmsman")), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandNameRequiredError(UsageFault):
    __code__ = FaultCode.COMMAND_NAME_REQUIRED
    __title__ = "command name required"


class InvalidCommandNameError(UsageFault):
    __code__ = FaultCode.INVALID_COMMAND_NAME
    __title__ = "invalid command name"


class InvalidArgumentCountError(UsageFault):
    __code__ = FaultCode.INVALID_ARGUMENT_COUNT
    __title__ = "invalid argument count"


class InvalidSwitchFormatError(UsageFault):
    __code__ = FaultCode.INVALID_SWITCH_FORMAT
    __title__ = "invalid switch format"


class InvalidArgumentNameError(UsageFault):
    __code__ = FaultCode.INVALID_ARGUMENT_NAME
    __title__ = "invalid argument name"


class InvalidArgumentValueError(UsageFault):
    __code__ = FaultCode.INVALID_ARGUMENT_VALUE
    __title__ = "invalid argument value"


class InvocationError(UsageFault):
    __code__ = FaultCode.INVOCATION_EXCEPTION
    __title__ = "command failed"


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "DefinitionError",
    "DuplicateOperationError",
    "DuplicateParameterError",
    "UnsupportedParameterError",
    "FaultCode",
    "UsageFault",
    "CommandNameRequiredError",
    "InvalidCommandNameError",
    "InvalidArgumentCountError",
    "InvalidSwitchFormatError",
    "InvalidArgumentNameError",
    "InvalidArgumentValueError",
    "InvocationError",
    "getdoc",
)
