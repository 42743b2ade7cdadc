r"""
Helmsman switch grammar.

A switch is a named command-line token. Two grammars are recognized and tried
in this order; the first structural match wins:

- slash form:  /name   /name:value   /name=value   /name+   /name-
- dash form:   -name   --name   -name:value   --name=value   --flag+   --flag-

The name is one or more word characters (\w) that must follow the prefix
directly. Whatever follows the name is either a ':'/'=' separator and the value,
or a value glued on directly that starts with neither whitespace nor another
word character (this is how "--flag-" and "--flag+" carry their value).

Tokens that do not fit either grammar are not switches and the driver treats
them as positional values. In particular whitespace after the prefix or inside
the name rejects the whole token:

    >>> Switch.tryparse("/name value") is None
    True
    >>> Switch.tryparse("-- name=value") is None
    True
    >>> Switch.tryparse("--path=program.cs")
    path('program.cs')
    >>> Switch.tryparse("/verbose-").value
    '-'
"""
import re
from typing import NamedTuple

_SLASHED = re.compile(r"/(?P<name>\w+)(?:[:=](?P<value>.*)|(?P<tail>[^\w\s:=].*))?", re.DOTALL)
_DASHED = re.compile(r"--?(?P<name>\w+)(?:[:=](?P<value>.*)|(?P<tail>[^\w\s:=].*))?", re.DOTALL)


class Switch(NamedTuple):
    """
    A token decomposed into a switch name and its (possibly empty) value.
    """
    name: str
    value: str = ""

    @property
    def has_value(self):
        return len(self.value) > 0

    def __repr__(self):
        return f"{self.name}({self.value!r})"

    @classmethod
    def tryparse(cls, token, /):
        """
        Decompose one token into a switch, or return None when it is not one.

        None, empty and all-whitespace tokens are never switches. Any other
        non-string token is a caller bug and raises TypeError.
        """
        if token is None:
            return None
        if not isinstance(token, str):
            raise TypeError(f"tryparse() argument must be a string or None, not {type(token).__name__}")
        if not token.strip():
            return None
        for pattern in (_SLASHED, _DASHED):
            if match := pattern.fullmatch(token):
                return cls(match["name"], match["value"] or match["tail"] or "")
        return None


__all__ = (
    "Switch",
)
