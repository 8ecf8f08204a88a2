"""
Static reader for tcgdex TypeScript data modules.

tcgdex keeps every set and card as a small TypeScript module whose only job
is to build an object literal and export it:

    import { Card } from "../../../interfaces"
    import Set from "../Genetic Apex"

    const card: Card = {
        set: Set,
        name: { en: "Bulbasaur" },
        hp: 70,
    }

    export default card

This module tokenizes and parses that subset of the language without
evaluating anything. Identifiers bound by imports are left as
ImportReference placeholders for the ModuleLoader to resolve.
"""

import dataclasses
import pathlib
import re
from typing import Any, Dict, Iterator, List, NoReturn, Optional, Set, Tuple, Union

from .exceptions import ModuleLoadError

DEFAULT_EXPORT = "default"

_NAME = re.compile(r"(?:[^\W\d]|\$)(?:\w|\$)*")
_NUMBER = re.compile(
    r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
    r"|(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d+)?"
)
_PUNCTUATORS = ("...", "=>", "{", "}", "[", "]", "(", ")", ":", ";", ",", "=",
                "<", ">", ".", "?", "|", "&", "-", "+", "*", "!")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_KEYWORD_VALUES = {"true": True, "false": False, "null": None}
_TYPE_SUFFIX_OPERATORS = {"|", "&", ":", "<", ",", "=>", "."}


class _Undefined:
    """Marker for `undefined`, dropped from objects when the module is read"""

    def __repr__(self) -> str:
        return "undefined"


UNDEFINED = _Undefined()


@dataclasses.dataclass(frozen=True)
class ImportReference:
    """A value imported from another module, resolved later"""

    source: str
    name: str
    line: int


@dataclasses.dataclass
class Token:
    kind: str
    value: Any
    line: int
    newline_before: bool


@dataclasses.dataclass
class ParsedModule:
    """
    Exports of a data module, keyed by export name. The default export,
    when present, lives under "default".
    """

    exports: Dict[str, Any]


def tokenize(source: str, file_path: Union[str, pathlib.Path]) -> Iterator[Token]:
    """
    Split TypeScript source into tokens, dropping whitespace and comments
    :param source: File contents
    :param file_path: Path, for error messages
    :return: Token stream ending with an "eof" token
    """
    position = 0
    line = 1
    newline_before = False
    length = len(source)

    while position < length:
        char = source[position]

        if char == "\n":
            line += 1
            newline_before = True
            position += 1
            continue
        if char.isspace() or char == "\ufeff":
            position += 1
            continue

        if source.startswith("//", position):
            end = source.find("\n", position)
            position = length if end == -1 else end
            continue
        if source.startswith("/*", position):
            end = source.find("*/", position + 2)
            if end == -1:
                raise ModuleLoadError(file_path, "Unterminated comment", line)
            comment = source[position:end]
            if "\n" in comment:
                newline_before = True
                line += comment.count("\n")
            position = end + 2
            continue

        if char in "\"'`":
            value, position, lines = _read_string(source, position, file_path, line)
            yield Token("string", value, line, newline_before)
            line += lines
            newline_before = False
            continue

        if char.isdigit() or (char == "." and source[position + 1: position + 2].isdigit()):
            match = _NUMBER.match(source, position)
            if match is None:
                raise ModuleLoadError(file_path, f"Invalid number at {char!r}", line)
            yield Token("number", _to_number(match.group(0)), line, newline_before)
            newline_before = False
            position = match.end()
            continue

        match = _NAME.match(source, position)
        if match:
            yield Token("name", match.group(0), line, newline_before)
            newline_before = False
            position = match.end()
            continue

        for punctuator in _PUNCTUATORS:
            if source.startswith(punctuator, position):
                yield Token("punct", punctuator, line, newline_before)
                newline_before = False
                position += len(punctuator)
                break
        else:
            raise ModuleLoadError(file_path, f"Unexpected character {char!r}", line)

    yield Token("eof", None, line, True)


def _to_number(text: str) -> Union[int, float]:
    text = text.replace("_", "")
    if text[:2].lower() == "0x":
        return int(text, 16)
    if text[:2].lower() == "0b":
        return int(text, 2)
    if text[:2].lower() == "0o":
        return int(text, 8)
    if any(char in text for char in ".eE"):
        number = float(text)
        return int(number) if number.is_integer() else number
    return int(text)


def _read_string(
    source: str, start: int, file_path: Union[str, pathlib.Path], line: int
) -> Tuple[str, int, int]:
    """
    Read a quoted string literal
    :return: Decoded value, position after the closing quote, newlines consumed
    """
    quote = source[start]
    position = start + 1
    chunks: List[str] = []
    newlines = 0

    while position < len(source):
        char = source[position]
        if char == quote:
            return "".join(chunks), position + 1, newlines
        if char == "\\":
            escaped, position, continued = _read_escape(
                source, position + 1, file_path, line + newlines
            )
            newlines += continued
            chunks.append(escaped)
            continue
        if char == "\n":
            if quote != "`":
                raise ModuleLoadError(file_path, "Unterminated string", line + newlines)
            newlines += 1
        if quote == "`" and source.startswith("${", position):
            raise ModuleLoadError(
                file_path, "Template interpolation is not supported", line + newlines
            )
        chunks.append(char)
        position += 1

    raise ModuleLoadError(file_path, "Unterminated string", line)


def _read_escape(
    source: str, position: int, file_path: Union[str, pathlib.Path], line: int
) -> Tuple[str, int, int]:
    """
    Decode an escape sequence starting after the backslash
    :return: Decoded text, new position, newlines consumed
    """
    char = source[position: position + 1]
    if not char:
        raise ModuleLoadError(file_path, "Unterminated string", line)

    if char == "\r" and source[position + 1: position + 2] == "\n":
        return "", position + 2, 1
    if char == "\n":
        return "", position + 1, 1
    if char in _SIMPLE_ESCAPES and not (
        char == "0" and source[position + 1: position + 2].isdigit()
    ):
        return _SIMPLE_ESCAPES[char], position + 1, 0
    if char == "x":
        digits = source[position + 1: position + 3]
        if not re.fullmatch(r"[0-9a-fA-F]{2}", digits):
            raise ModuleLoadError(file_path, "Invalid \\x escape", line)
        return chr(int(digits, 16)), position + 3, 0
    if char == "u":
        if source[position + 1: position + 2] == "{":
            end = source.find("}", position)
            digits = source[position + 2: end] if end != -1 else ""
            if not re.fullmatch(r"[0-9a-fA-F]{1,6}", digits):
                raise ModuleLoadError(file_path, "Invalid \\u escape", line)
            return chr(int(digits, 16)), end + 1, 0
        digits = source[position + 1: position + 5]
        if not re.fullmatch(r"[0-9a-fA-F]{4}", digits):
            raise ModuleLoadError(file_path, "Invalid \\u escape", line)
        code_point = int(digits, 16)
        position += 5
        # Join surrogate pairs written as two escapes
        if 0xD800 <= code_point <= 0xDBFF and source.startswith("\\u", position):
            low = source[position + 2: position + 6]
            if re.fullmatch(r"[0-9a-fA-F]{4}", low) and 0xDC00 <= int(low, 16) <= 0xDFFF:
                code_point = 0x10000 + ((code_point - 0xD800) << 10) + (int(low, 16) - 0xDC00)
                position += 6
        return chr(code_point), position, 0
    return char, position + 1, 0


class _Parser:
    """Recursive descent parser over the token stream of one module"""

    def __init__(self, source: str, file_path: Union[str, pathlib.Path]):
        self.file_path = file_path
        self.tokens = list(tokenize(source, file_path))
        self.index = 0
        self.bindings: Dict[str, Any] = {}
        self.type_only: Set[str] = set()
        self.exports: Dict[str, Any] = {}
        self.export_aliases: List[Tuple[str, str, int]] = []

    # Token helpers

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "eof":
            self.index += 1
        return token

    def at(self, kind: str, value: Any = None) -> bool:
        token = self.current
        return token.kind == kind and (value is None or token.value == value)

    def at_name(self, *names: str) -> bool:
        return self.current.kind == "name" and self.current.value in names

    def accept(self, kind: str, value: Any = None) -> bool:
        if self.at(kind, value):
            self.advance()
            return True
        return False

    def expect(self, kind: str, value: Any = None) -> Token:
        if not self.at(kind, value):
            self.fail(f"Expected {value or kind}")
        return self.advance()

    def fail(self, message: str) -> NoReturn:
        token = self.current
        found = "end of file" if token.kind == "eof" else repr(token.value)
        raise ModuleLoadError(self.file_path, f"{message}, found {found}", token.line)

    # Statements

    def parse_module(self) -> ParsedModule:
        while not self.at("eof"):
            if self.accept("punct", ";"):
                continue
            if self.at_name("import"):
                self.parse_import()
            elif self.at_name("export"):
                self.parse_export()
            elif self.at_name("const", "let", "var"):
                self.parse_declaration()
            elif self.at_name("interface"):
                self.skip_interface()
            elif self.at_name("type") and self.tokens[self.index + 1].kind == "name":
                self.skip_type_alias()
            else:
                self.fail("Unsupported statement")

        for local, exported, line in self.export_aliases:
            self.exports[exported] = self.lookup(local, line)

        return ParsedModule(
            exports={
                key: value
                for key, value in self.exports.items()
                if value is not UNDEFINED
            },
        )

    def parse_import(self) -> None:
        self.expect("name", "import")
        if self.at("string"):
            # Side effect import, nothing is bound
            self.advance()
            self.accept("punct", ";")
            return

        type_only = False
        if self.at_name("type") and self.tokens[self.index + 1].value not in (",", "from"):
            self.advance()
            type_only = True

        bound: List[Tuple[str, str, bool]] = []
        if self.at("name") and not self.at_name("from"):
            bound.append((self.advance().value, DEFAULT_EXPORT, type_only))
            self.accept("punct", ",")
        if self.accept("punct", "*"):
            self.expect("name", "as")
            bound.append((self.expect("name").value, "*", type_only))
        elif self.accept("punct", "{"):
            while not self.accept("punct", "}"):
                member_type_only = type_only
                if self.at_name("type") and self.tokens[self.index + 1].kind == "name" \
                        and self.tokens[self.index + 1].value != "as":
                    self.advance()
                    member_type_only = True
                imported = self.advance()
                if imported.kind not in ("name", "string"):
                    self.fail("Expected import name")
                local = imported.value
                if self.at_name("as"):
                    self.advance()
                    local = self.expect("name").value
                bound.append((local, imported.value, member_type_only))
                if not self.accept("punct", ","):
                    self.expect("punct", "}")
                    break

        self.expect("name", "from")
        source = self.expect("string")
        self.accept("punct", ";")

        for local, imported, is_type in bound:
            if is_type:
                self.type_only.add(local)
                continue
            self.bindings[local] = ImportReference(source.value, imported, source.line)

    def parse_export(self) -> None:
        self.expect("name", "export")
        if self.at_name("default"):
            self.advance()
            self.exports[DEFAULT_EXPORT] = self.parse_expression()
            self.accept("punct", ";")
        elif self.at_name("const", "let", "var"):
            for name in self.parse_declaration():
                self.exports[name] = self.bindings[name]
        elif self.at_name("interface"):
            self.skip_interface()
        elif self.at_name("type") and self.tokens[self.index + 1].kind == "name":
            self.skip_type_alias()
        elif self.accept("punct", "{"):
            while not self.accept("punct", "}"):
                token = self.expect("name")
                exported = token.value
                if self.at_name("as"):
                    self.advance()
                    exported = self.advance().value
                self.export_aliases.append((token.value, exported, token.line))
                if not self.accept("punct", ","):
                    self.expect("punct", "}")
                    break
            if self.at_name("from"):
                self.fail("Re-exports are not supported")
            self.accept("punct", ";")
        else:
            self.fail("Unsupported export")

    def parse_declaration(self) -> List[str]:
        self.advance()
        names = []
        while True:
            name = self.expect("name").value
            if self.accept("punct", ":"):
                self.skip_type(stop_at=("=",))
            if self.accept("punct", "="):
                self.bindings[name] = self.parse_expression()
            else:
                self.bindings[name] = UNDEFINED
            names.append(name)
            if not self.accept("punct", ","):
                break
        self.accept("punct", ";")
        return names

    def skip_interface(self) -> None:
        self.advance()
        while not self.at("punct", "{"):
            if self.at("eof"):
                self.fail("Expected interface body")
            self.advance()
        self.skip_balanced()

    def skip_type_alias(self) -> None:
        self.advance()
        self.expect("name")
        if self.at("punct", "<"):
            self.skip_type(stop_at=("=",))
        self.expect("punct", "=")
        self.skip_type(stop_at=(";",))
        self.accept("punct", ";")

    def skip_balanced(self) -> None:
        """Skip a bracketed group starting at the current opening token"""
        closers = {"{": "}", "[": "]", "(": ")", "<": ">"}
        stack = [closers[self.advance().value]]
        while stack:
            token = self.advance()
            if token.kind == "eof":
                self.fail("Unbalanced brackets")
            if token.kind == "punct":
                if token.value in closers:
                    stack.append(closers[token.value])
                elif token.value == stack[-1]:
                    stack.pop()

    def skip_type(self, stop_at: Tuple[str, ...] = ()) -> None:
        """
        Skip a type expression. Ends before a closing bracket or comma at the
        outer level, before any punctuator in `stop_at`, or at a line break
        that does not continue the type.
        """
        previous: Optional[Token] = None
        while True:
            token = self.current
            if token.kind == "eof":
                return
            if token.kind == "punct":
                if token.value in stop_at or token.value in (",", ";", "}", "]", ")"):
                    return
            if (
                previous is not None
                and token.newline_before
                and not (previous.kind == "punct" and previous.value in _TYPE_SUFFIX_OPERATORS)
                and not (token.kind == "punct" and token.value in _TYPE_SUFFIX_OPERATORS)
            ):
                return
            if token.kind == "punct" and token.value in ("{", "[", "(", "<"):
                self.skip_balanced()
                previous = self.tokens[self.index - 1]
                continue
            previous = self.advance()

    # Expressions

    def parse_expression(self) -> Any:
        value = self.parse_primary()
        while self.at_name("as", "satisfies") and not self.current.newline_before:
            self.advance()
            self.skip_type()
        return value

    def parse_primary(self) -> Any:
        token = self.current

        if token.kind == "string" or token.kind == "number":
            self.advance()
            return token.value

        if token.kind == "punct":
            if token.value == "{":
                return self.parse_object()
            if token.value == "[":
                return self.parse_array()
            if token.value in ("-", "+"):
                self.advance()
                number = self.current
                if number.kind != "number":
                    self.fail("Expected number")
                self.advance()
                return -number.value if token.value == "-" else number.value
            if token.value == "(":
                self.advance()
                value = self.parse_expression()
                self.expect("punct", ")")
                return value
            self.fail("Unsupported expression")

        if token.kind == "name":
            if token.value in _KEYWORD_VALUES:
                self.advance()
                return _KEYWORD_VALUES[token.value]
            if token.value == "undefined":
                self.advance()
                return UNDEFINED
            if token.value in ("new", "function", "class", "NaN", "Infinity"):
                self.fail("Unsupported expression")
            self.advance()
            if self.at("punct", "(") or self.at("punct", "=>") or self.at("punct", "."):
                self.fail("Unsupported expression")
            return self.lookup(token.value, token.line)

        self.fail("Expected expression")

    def parse_object(self) -> Dict[str, Any]:
        self.expect("punct", "{")
        result: Dict[str, Any] = {}
        while not self.accept("punct", "}"):
            if self.accept("punct", "..."):
                spread = self.parse_expression()
                if isinstance(spread, ImportReference):
                    self.fail("Spreading imported values is not supported")
                if not isinstance(spread, dict):
                    self.fail("Only objects can be spread into objects")
                result.update(spread)
            else:
                if self.current.kind not in ("name", "string", "number"):
                    self.fail("Expected property name")
                key_token = self.advance()
                key = str(key_token.value)
                if self.accept("punct", ":"):
                    value = self.parse_expression()
                elif key_token.kind == "name" and (self.at("punct", ",") or self.at("punct", "}")):
                    value = self.lookup(key, key_token.line)
                else:
                    self.fail("Expected ':'")
                result[key] = value

            if not self.accept("punct", ","):
                self.expect("punct", "}")
                break

        return {key: value for key, value in result.items() if value is not UNDEFINED}

    def parse_array(self) -> List[Any]:
        self.expect("punct", "[")
        result: List[Any] = []
        while not self.accept("punct", "]"):
            if self.accept("punct", "..."):
                spread = self.parse_expression()
                if not isinstance(spread, list):
                    self.fail("Only arrays can be spread into arrays")
                result.extend(spread)
            else:
                value = self.parse_expression()
                result.append(None if value is UNDEFINED else value)
            if not self.accept("punct", ","):
                self.expect("punct", "]")
                break
        return result

    def lookup(self, name: str, line: int) -> Any:
        if name in self.bindings:
            return self.bindings[name]
        if name in self.type_only:
            raise ModuleLoadError(
                self.file_path, f"'{name}' is imported as a type only", line
            )
        raise ModuleLoadError(self.file_path, f"'{name}' is not defined", line)


def parse_module(source: str, file_path: Union[str, pathlib.Path]) -> ParsedModule:
    """
    Parse a TypeScript data module without evaluating it
    :param source: Module source code
    :param file_path: Path, for error messages
    :return: Module exports, imported values left as ImportReference
    """
    return _Parser(source, file_path).parse_module()
