"""Provide common functions and types for mapping between objects and XML."""
import io
import textwrap
from typing import Optional, List, NoReturn


class XmlExactError(Exception):
    """Signal any failure of the mapping engine."""


class ParseError(XmlExactError):
    """Signal that the XML text could not be turned into an object."""


class DefinitionError(XmlExactError):
    """Signal that a definition could not be inferred or interpreted."""


class ValidationError(XmlExactError):
    """Signal that a value violates the constraints declared in the definition."""


class Error:
    """
    Represent an unexpected input in the inference of a definition.

    The errors are nested through ``underlying`` so that the report shows where
    in the schema the problem originated.
    """

    def __init__(
        self,
        message: str,
        underlying: Optional[List["Error"]] = None,
    ) -> None:
        self.message = message
        self.underlying = underlying

    def __repr__(self) -> str:
        return f"Error(message={self.message!r}, underlying={self.underlying!r})"


def error_message(error: Error) -> str:
    """Render the ``error`` and its underlying errors as an indented report."""
    if error.underlying is None or len(error.underlying) == 0:
        return error.message

    writer = io.StringIO()
    writer.write(f"{error.message}\n")
    for i, underlying_error in enumerate(error.underlying):
        if i > 0:
            writer.write("\n")
        writer.write(textwrap.indent(error_message(underlying_error), "  "))

    return writer.getvalue()


def assert_never(value: NoReturn) -> NoReturn:
    """
    Signal to mypy to perform an exhaustive matching.

    Please see the following page for more details:
    https://hakibenita.com/python-mypy-exhaustive-checking
    """
    assert False, f"Unhandled value: {value} ({type(value).__name__})"


def reindent(text: str, indention: str) -> str:
    """
    Indent every line of ``text`` by ``indention``, including the empty ones.

    >>> reindent("<a>\\n  <b/>\\n</a>", "  ")
    '  <a>\\n    <b/>\\n  </a>'
    """
    return "\n".join(indention + line for line in text.split("\n"))


def dedent_block(text: str) -> str:
    """
    Remove the surrounding blank lines and the common indention of ``text``.

    >>> dedent_block("\\n    <a>\\n      <b/>\\n    </a>\\n  ")
    '<a>\\n  <b/>\\n</a>'
    """
    lines = text.split("\n")
    while len(lines) > 0 and lines[0].strip() == "":
        lines.pop(0)
    while len(lines) > 0 and lines[-1].strip() == "":
        lines.pop()

    return textwrap.dedent("\n".join(lines))
