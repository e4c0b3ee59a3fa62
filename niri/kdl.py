"""A parser for KDL documents, the format of the configuration file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

Value = Union[str, int, float, bool, None]

_SPACES = frozenset(
    "\t \xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u202f\u205f\u3000\ufeff"
)
_NEWLINES = frozenset("\r\n\x85\x0c\u2028\u2029")
_NON_IDENTIFIER = frozenset('\\/(){}<>;[]=,"')
_DIGITS = frozenset("0123456789")
_KEYWORDS: dict[str, Value] = {"true": True, "false": False, "null": None}
_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "/": "/",
    '"': '"',
    "b": "\b",
    "f": "\f",
}

_RADIX_NUMBERS = (
    (re.compile(r"([+-]?)0x([0-9a-fA-F][0-9a-fA-F_]*)"), 16),
    (re.compile(r"([+-]?)0o([0-7][0-7_]*)"), 8),
    (re.compile(r"([+-]?)0b([01][01_]*)"), 2),
)
_DECIMAL = re.compile(r"[+-]?[0-9][0-9_]*(\.[0-9][0-9_]*)?([eE][+-]?[0-9][0-9_]*)?")


class ConfigError(ValueError):
    """The configuration could not be parsed or has an invalid value."""

    def __init__(
        self, message: str, line: int | None = None, column: int | None = None
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        location = f"{line}:{column}: " if line is not None else ""
        super().__init__(f"{location}{message}")


@dataclass
class KdlNode:
    """A node with its arguments, properties and children."""

    name: str
    arguments: list[Value] = field(default_factory=list)
    properties: dict[str, Value] = field(default_factory=dict)
    children: list[KdlNode] = field(default_factory=list)
    type_name: str | None = None
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


def _is_identifier_char(c: str) -> bool:
    return bool(c) and c not in _NON_IDENTIFIER and c not in _SPACES and c not in _NEWLINES


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _at(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def _location(self, pos: int) -> tuple[int, int]:
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return line, column

    def _error(self, message: str, pos: int | None = None) -> ConfigError:
        line, column = self._location(self.pos if pos is None else pos)
        return ConfigError(message, line, column)

    # Whitespace and comments.

    def _skip_newline(self) -> None:
        if self._at("\r\n"):
            self.pos += 2
        elif self._peek() and self._peek() in _NEWLINES:
            self.pos += 1

    def _skip_line_comment(self) -> None:
        while self._peek() and self._peek() not in _NEWLINES:
            self.pos += 1

    def _skip_block_comment(self) -> None:
        start = self.pos
        self.pos += 2
        depth = 1
        while depth:
            if not self._peek():
                raise self._error("unterminated block comment", start)
            if self._at("/*"):
                depth += 1
                self.pos += 2
            elif self._at("*/"):
                depth -= 1
                self.pos += 2
            else:
                self.pos += 1

    def _skip_ws(self) -> bool:
        start = self.pos
        while True:
            c = self._peek()
            if c and c in _SPACES:
                self.pos += 1
            elif self._at("/*"):
                self._skip_block_comment()
            elif c == "\\":
                self.pos += 1
                while self._peek() and self._peek() in _SPACES:
                    self.pos += 1
                nxt = self._peek()
                if self._at("//"):
                    self._skip_line_comment()
                    self._skip_newline()
                elif nxt and nxt in _NEWLINES:
                    self._skip_newline()
                elif nxt:
                    raise self._error("expected a newline after line continuation")
            else:
                return self.pos != start

    def _skip_line_space(self) -> None:
        while True:
            c = self._peek()
            if c and c in _NEWLINES:
                self._skip_newline()
            elif self._at("//"):
                self._skip_line_comment()
            elif not self._skip_ws():
                return

    # Nodes.

    def parse_nodes(self, nested: bool) -> list[KdlNode]:
        nodes: list[KdlNode] = []
        while True:
            self._skip_line_space()
            c = self._peek()
            if not c:
                if nested:
                    raise self._error("unclosed children block, expected '}'")
                return nodes
            if c == "}":
                if nested:
                    return nodes
                raise self._error("unexpected '}'")
            skip = self._at("/-")
            if skip:
                self.pos += 2
                self._skip_ws()
            node = self._parse_node()
            if not skip:
                nodes.append(node)

    def _parse_node(self) -> KdlNode:
        start = self.pos
        type_name = self._parse_type()
        name = self._parse_identifier()
        line, column = self._location(start)
        node = KdlNode(name, type_name=type_name, line=line, column=column)
        has_children = False
        while True:
            spaced = self._skip_ws()
            c = self._peek()
            if not c or c in _NEWLINES or c == "}":
                return node
            if c == ";":
                self.pos += 1
                return node
            if self._at("//"):
                self._skip_line_comment()
                return node

            entry_pos = self.pos
            skip = self._at("/-")
            if skip:
                self.pos += 2
                self._skip_ws()
            if self._peek() == "{":
                if has_children:
                    raise self._error("a node can have only one children block")
                children = self._parse_children()
                if not skip:
                    node.children = children
                    has_children = True
                continue
            if has_children:
                raise self._error("unexpected entry after children block", entry_pos)
            if not spaced:
                raise self._error(
                    "expected whitespace before an argument or property", entry_pos
                )
            self._parse_entry(node, discard=skip)

    def _parse_children(self) -> list[KdlNode]:
        self.pos += 1
        children = self.parse_nodes(nested=True)
        self.pos += 1
        return children

    def _parse_entry(self, node: KdlNode, discard: bool) -> None:
        start = self.pos
        key: str | None = None
        value: Value
        if self._peek() == "(":
            self._parse_type()
            value = self._parse_plain_value()
        elif self._at_string():
            text = self._parse_string()
            if self._peek() == "=":
                self.pos += 1
                key = text
                value = self._parse_value()
            else:
                value = text
        elif self._at_number():
            value = self._parse_number()
        else:
            ident = self._parse_bare_identifier()
            if self._peek() == "=":
                self.pos += 1
                key = ident
                value = self._parse_value()
            elif ident in _KEYWORDS:
                value = _KEYWORDS[ident]
            else:
                raise self._error(
                    f"unexpected identifier {ident!r}, expected a value", start
                )
        if discard:
            return
        if key is None:
            node.arguments.append(value)
        else:
            node.properties[key] = value

    # Identifiers and values.

    def _at_string(self) -> bool:
        c = self._peek()
        return c == '"' or (c == "r" and self._peek(1) in ('"', "#"))

    def _at_number(self) -> bool:
        c = self._peek()
        if c in _DIGITS:
            return True
        return c in ("+", "-") and self._peek(1) in _DIGITS

    def _parse_type(self) -> str | None:
        if self._peek() != "(":
            return None
        self.pos += 1
        name = self._parse_identifier()
        if self._peek() != ")":
            raise self._error("expected ')' after type annotation")
        self.pos += 1
        return name

    def _parse_identifier(self) -> str:
        if self._at_string():
            return self._parse_string()
        if self._at_number():
            raise self._error("identifiers cannot start with a number")
        return self._parse_bare_identifier()

    def _parse_bare_identifier(self) -> str:
        start = self.pos
        while _is_identifier_char(self._peek()):
            self.pos += 1
        if self.pos == start:
            found = self._peek()
            what = repr(found) if found else "end of input"
            raise self._error(f"expected an identifier, found {what}")
        return self.text[start : self.pos]

    def _parse_value(self) -> Value:
        self._parse_type()
        return self._parse_plain_value()

    def _parse_plain_value(self) -> Value:
        if self._at_string():
            return self._parse_string()
        if self._at_number():
            return self._parse_number()
        start = self.pos
        if _is_identifier_char(self._peek()):
            ident = self._parse_bare_identifier()
            if ident in _KEYWORDS:
                return _KEYWORDS[ident]
        raise self._error("expected a value", start)

    def _parse_string(self) -> str:
        if self._peek() == "r":
            return self._parse_raw_string()
        start = self.pos
        self.pos += 1
        parts: list[str] = []
        while True:
            c = self._peek()
            if not c:
                raise self._error("unterminated string", start)
            self.pos += 1
            if c == '"':
                return "".join(parts)
            if c != "\\":
                parts.append(c)
                continue
            escape = self._peek()
            if not escape:
                raise self._error("unterminated string", start)
            self.pos += 1
            if escape in _ESCAPES:
                parts.append(_ESCAPES[escape])
            elif escape == "u":
                parts.append(self._parse_unicode_escape())
            else:
                raise self._error(f"invalid escape '\\{escape}'", self.pos - 2)

    def _parse_unicode_escape(self) -> str:
        start = self.pos - 2
        if self._peek() != "{":
            raise self._error("expected '{' in unicode escape", start)
        end = self.text.find("}", self.pos)
        digits = self.text[self.pos + 1 : end] if end != -1 else ""
        if not 1 <= len(digits) <= 6 or any(
            c not in "0123456789abcdefABCDEF" for c in digits
        ):
            raise self._error("invalid unicode escape", start)
        code = int(digits, 16)
        if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
            raise self._error("unicode escape is not a valid code point", start)
        self.pos = end + 1
        return chr(code)

    def _parse_raw_string(self) -> str:
        start = self.pos
        self.pos += 1
        hashes = 0
        while self._peek() == "#":
            hashes += 1
            self.pos += 1
        if self._peek() != '"':
            raise self._error("expected '\"' in raw string", start)
        self.pos += 1
        terminator = '"' + "#" * hashes
        end = self.text.find(terminator, self.pos)
        if end == -1:
            raise self._error("unterminated raw string", start)
        value = self.text[self.pos : end]
        self.pos = end + len(terminator)
        return value

    def _parse_number(self) -> int | float:
        start = self.pos
        value: int | float
        for pattern, base in _RADIX_NUMBERS:
            match = pattern.match(self.text, self.pos)
            if match:
                sign, digits = match.groups()
                value = int(sign + digits.replace("_", ""), base)
                break
        else:
            match = _DECIMAL.match(self.text, self.pos)
            if not match:
                raise self._error("invalid number")
            text = match.group(0).replace("_", "")
            if match.group(1) or match.group(2):
                value = float(text)
            else:
                value = int(text)
        self.pos = match.end()
        if _is_identifier_char(self._peek()):
            raise self._error("invalid number", start)
        return value


def parse_document(text: str) -> list[KdlNode]:
    """Parse a KDL document into its top-level nodes."""
    return _Parser(text).parse_nodes(nested=False)