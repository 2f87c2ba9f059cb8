"""
Built-in key extractor.

Recognizes translation calls and markers in Python and in the JavaScript /
TypeScript family (including Vue and Svelte single-file components).

Usage Examples:
    Extract keys from Python source:
        >>> from keyharvest.extraction.extractors.default import extract
        >>> extract("app.py", 't("greeting", "Hello", ns="common")')
        [{'keyName': 'greeting', 'namespace': 'common', 'defaultValue': 'Hello', 'sourceLocation': 1}]

    Extract keys from a React component:
        >>> extract("App.tsx", '<T keyName="bye" defaultValue="Bye" />')
        [{'keyName': 'bye', 'namespace': None, 'defaultValue': 'Bye', 'sourceLocation': 1}]
"""

from __future__ import annotations

import ast
import logging
import re
import sys
from pathlib import Path

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

logger = logging.getLogger(__name__)

# Translation function names recognized in Python sources
PYTHON_TRANSLATION_FUNCTIONS = {
    "t",
    "translate",
    "gettext",
    "_",
}

PYTHON_EXTENSIONS = {".py"}

SCRIPT_EXTENSIONS = {".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".vue", ".svelte"}

NAMESPACE_KEYWORDS = ("ns", "namespace")
DEFAULT_VALUE_KEYWORDS = ("default", "default_value", "defaultValue")

# Quoted string literal: '...', "..." or `...` without interpolation
_STRING = r"""(?:'(?:[^'\\\n]|\\.)*'|"(?:[^"\\\n]|\\.)*"|`(?:[^`\\$]|\\.)*`)"""

_T_CALL_RE = re.compile(
    r"(?<![\w$])(?:\$t|t)\s*\(\s*(?P<key>" + _STRING + r")"
    + r"(?:\s*,\s*(?P<default>" + _STRING + r"))?"
    + r"(?:\s*,\s*(?P<options>\{[^{}]*\}))?"
)
_T_COMPONENT_RE = re.compile(r"<T\b(?P<attrs>[^<>]*?)/?>", re.DOTALL)
_ATTRIBUTE_RE = re.compile(
    r"\b(?P<name>keyName|ns|defaultValue)\s*=\s*(?:\{\s*)?(?P<value>" + _STRING + r")"
)
_OPTION_RE = re.compile(
    r"\b(?P<name>ns|defaultValue)\s*:\s*(?P<value>" + _STRING + r")"
)
_MAGIC_COMMENT_RE = re.compile(r"@tolgee-key\s+(?P<key>[^\s*]+)")

KeyRecord = dict[str, object]


def _make_key(
    key_name: str,
    namespace: str | None,
    default_value: str | None,
    line: int,
) -> KeyRecord:
    return {
        "keyName": key_name,
        "namespace": namespace,
        "defaultValue": default_value,
        "sourceLocation": line,
    }


class KeyCallVisitor(ast.NodeVisitor):
    """AST visitor to extract translation keys from Python source code."""

    def __init__(self, filename: str) -> None:
        """
        Initialize the key visitor.

        Args:
            filename: Name of the file being processed (for context)
        """
        self.filename: str = filename
        self.keys: list[KeyRecord] = []

    @override
    def visit_Call(self, node: ast.Call) -> None:
        """
        Visit function call nodes to find translation function calls.

        Args:
            node: AST Call node to examine
        """
        func_name = self._get_function_name(node.func)

        if func_name in PYTHON_TRANSLATION_FUNCTIONS and node.args:
            key_name = self._string_value(node.args[0])
            if key_name:
                default_value = None
                if len(node.args) > 1:
                    default_value = self._string_value(node.args[1])
                if default_value is None:
                    default_value = self._keyword_value(node, DEFAULT_VALUE_KEYWORDS)
                namespace = self._keyword_value(node, NAMESPACE_KEYWORDS)

                self.keys.append(
                    _make_key(key_name, namespace, default_value, node.lineno)
                )
                logger.debug(
                    f"Found key '{key_name}' at {self.filename}:{node.lineno}"
                )

        self.generic_visit(node)

    def _get_function_name(self, func_node: ast.AST) -> str | None:
        """
        Extract function name from various AST node types.

        Args:
            func_node: AST node representing the function being called

        Returns:
            Function name if extractable, None otherwise
        """
        if isinstance(func_node, ast.Name):
            return func_node.id
        elif isinstance(func_node, ast.Attribute):
            return func_node.attr
        return None

    @staticmethod
    def _string_value(node: ast.AST) -> str | None:
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            return node.value
        return None

    def _keyword_value(self, node: ast.Call, names: tuple[str, ...]) -> str | None:
        for keyword in node.keywords:
            if keyword.arg in names:
                return self._string_value(keyword.value)
        return None


# Single-character escapes of JavaScript string literals
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(
    r"\\(?:u\{(?P<code_point>[0-9a-fA-F]+)\}|u(?P<unicode>[0-9a-fA-F]{4})"
    r"|x(?P<hex>[0-9a-fA-F]{2})|(?P<char>.))",
    re.DOTALL,
)


def _replace_escape(match: re.Match[str]) -> str:
    for group in ("code_point", "unicode", "hex"):
        digits = match.group(group)
        if digits is not None:
            code_point = int(digits, 16)
            return chr(code_point) if code_point <= sys.maxunicode else match.group(0)
    char = match.group("char")
    return _SIMPLE_ESCAPES.get(char, char)


def _unquote(literal: str) -> str:
    return _ESCAPE_RE.sub(_replace_escape, literal[1:-1])


def _line_of(content: str, offset: int) -> int:
    return content.count("\n", 0, offset) + 1


def extract_python(path: str, content: str) -> list[KeyRecord]:
    """
    Extract keys from Python source.

    Raises:
        SyntaxError: If the file contains invalid Python syntax
    """
    tree = ast.parse(content, filename=path)
    visitor = KeyCallVisitor(path)
    visitor.visit(tree)
    return visitor.keys


def extract_script(path: str, content: str) -> list[KeyRecord]:
    """Extract keys from JavaScript, TypeScript, Vue and Svelte sources."""
    found: list[tuple[int, KeyRecord]] = []

    for match in _T_CALL_RE.finditer(content):
        key_name = _unquote(match.group("key"))
        if not key_name:
            continue
        default_value = _unquote(match.group("default")) if match.group("default") else None
        namespace = None
        options = match.group("options")
        if options:
            for option in _OPTION_RE.finditer(options):
                value = _unquote(option.group("value"))
                if option.group("name") == "ns":
                    namespace = value
                elif default_value is None:
                    default_value = value
        found.append(
            (
                match.start(),
                _make_key(key_name, namespace, default_value, _line_of(content, match.start())),
            )
        )

    for match in _T_COMPONENT_RE.finditer(content):
        attributes = {
            attr.group("name"): _unquote(attr.group("value"))
            for attr in _ATTRIBUTE_RE.finditer(match.group("attrs"))
        }
        key_name = attributes.get("keyName")
        if not key_name:
            continue
        found.append(
            (
                match.start(),
                _make_key(
                    key_name,
                    attributes.get("ns"),
                    attributes.get("defaultValue"),
                    _line_of(content, match.start()),
                ),
            )
        )

    for match in _MAGIC_COMMENT_RE.finditer(content):
        found.append(
            (
                match.start(),
                _make_key(match.group("key"), None, None, _line_of(content, match.start())),
            )
        )

    found.sort(key=lambda item: item[0])
    logger.debug(f"Found {len(found)} keys in {path}")
    return [key for _offset, key in found]


def extract(path: str, content: str) -> list[KeyRecord]:
    """
    Extract translation keys from one source file.

    Args:
        path: Path of the file, used to select the source dialect
        content: Text content of the file

    Returns:
        Keys in source order; files of unsupported types yield no keys
    """
    suffix = Path(path).suffix.lower()

    if suffix in PYTHON_EXTENSIONS:
        return extract_python(path, content)
    if suffix in SCRIPT_EXTENSIONS:
        return extract_script(path, content)

    logger.debug(f"No built-in dialect for {path}, skipping")
    return []
