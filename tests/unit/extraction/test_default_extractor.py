"""
Tests for the built-in key extractor.

This module tests key extraction from Python sources via the AST visitor and
from JavaScript/TypeScript family sources via call and marker patterns.
"""

from __future__ import annotations

import pytest

from keyharvest.extraction.extractors.default import extract


def _names(keys: list[dict[str, object]]) -> list[object]:
    return [key["keyName"] for key in keys]


class TestPythonExtraction:
    """Test extraction from Python source code."""

    def test_extract_simple_translation_call(self) -> None:
        """Test extraction of a simple t() call."""
        code = '''
def view():
    message = t("hello")
    return message
'''
        keys = extract("app.py", code)

        assert len(keys) == 1
        assert keys[0]["keyName"] == "hello"
        assert keys[0]["namespace"] is None
        assert keys[0]["defaultValue"] is None
        assert keys[0]["sourceLocation"] == 3

    def test_extract_default_value_and_namespace(self) -> None:
        """Test positional default value and ns keyword."""
        code = 'label = translate("settings.title", "Settings", ns="menu")\n'

        keys = extract("app.py", code)

        assert keys == [
            {
                "keyName": "settings.title",
                "namespace": "menu",
                "defaultValue": "Settings",
                "sourceLocation": 1,
            }
        ]

    def test_extract_keyword_default_value(self) -> None:
        """Test default/namespace given as keywords."""
        code = 'i18n.t("bye", default="Goodbye", namespace="common")\n'

        keys = extract("app.py", code)

        assert keys[0]["keyName"] == "bye"
        assert keys[0]["defaultValue"] == "Goodbye"
        assert keys[0]["namespace"] == "common"

    def test_extract_multiple_functions(self) -> None:
        """Test extraction from every recognized translation function."""
        code = '''
def view():
    a = _("first")
    b = translate("second")
    c = t("third")
    d = gettext("fourth")
    return a, b, c, d
'''
        keys = extract("module.py", code)

        assert _names(keys) == ["first", "second", "third", "fourth"]

    def test_ignore_non_translation_calls(self) -> None:
        """Test that non-translation function calls are ignored."""
        code = '''
print("This should not be extracted")
log.info("Neither should this")
message = t("but.this")
'''
        keys = extract("module.py", code)

        assert _names(keys) == ["but.this"]

    def test_ignore_dynamic_keys(self) -> None:
        """Test that calls with a non-literal key are skipped."""
        code = 'name = "x"\nt(name)\nt(f"key.{name}")\nt("")\n'

        assert extract("module.py", code) == []

    def test_extract_from_invalid_syntax(self) -> None:
        """Test handling of files with invalid Python syntax."""
        code = '''
def view(
    # Missing closing parenthesis and colon
'''
        with pytest.raises(SyntaxError):
            _ = extract("broken.py", code)


class TestScriptExtraction:
    """Test extraction from JavaScript, TypeScript, Vue and Svelte sources."""

    def test_extract_t_call(self) -> None:
        """Test t('key') with and without a default value."""
        code = "const a = t('hello');\nconst b = t(\"bye\", \"Bye!\");\n"

        keys = extract("app.ts", code)

        assert keys == [
            {"keyName": "hello", "namespace": None, "defaultValue": None, "sourceLocation": 1},
            {"keyName": "bye", "namespace": None, "defaultValue": "Bye!", "sourceLocation": 2},
        ]

    def test_extract_t_call_with_options(self) -> None:
        """Test option objects carrying ns and defaultValue."""
        code = "t('welcome', { ns: 'common', defaultValue: 'Welcome' })"

        keys = extract("page.tsx", code)

        assert keys[0]["keyName"] == "welcome"
        assert keys[0]["namespace"] == "common"
        assert keys[0]["defaultValue"] == "Welcome"

    def test_positional_default_wins_over_option(self) -> None:
        """Test that a positional default value is kept when options also give one."""
        code = "t('k', 'Positional', { ns: 'x', defaultValue: 'Option' })"

        keys = extract("page.js", code)

        assert keys[0]["defaultValue"] == "Positional"
        assert keys[0]["namespace"] == "x"

    def test_extract_vue_dollar_t(self) -> None:
        """Test $t() inside a Vue template and this.$t() in a script block."""
        code = """
<template>
  <p>{{ $t('title') }}</p>
</template>
<script>
export default { computed: { label() { return this.$t('label'); } } };
</script>
"""
        keys = extract("Component.vue", code)

        assert _names(keys) == ["title", "label"]

    def test_extract_t_component(self) -> None:
        """Test <T /> markers with attributes in any order."""
        code = """
<div>
  <T ns="common" keyName="greeting" defaultValue="Hi there" />
  <T keyName={'farewell'} />
</div>
"""
        keys = extract("App.jsx", code)

        assert keys[0] == {
            "keyName": "greeting",
            "namespace": "common",
            "defaultValue": "Hi there",
            "sourceLocation": 3,
        }
        assert keys[1]["keyName"] == "farewell"
        assert keys[1]["namespace"] is None

    def test_extract_magic_comment(self) -> None:
        """Test @tolgee-key magic comments."""
        code = "// @tolgee-key dynamic.key\nconst k = getKey();\n"

        keys = extract("util.ts", code)

        assert _names(keys) == ["dynamic.key"]

    def test_keys_in_source_order(self) -> None:
        """Test that keys from different patterns keep their source order."""
        code = "<T keyName=\"first\" />\nt('second')\n// @tolgee-key third\n"

        keys = extract("mixed.tsx", code)

        assert _names(keys) == ["first", "second", "third"]

    def test_ignore_similar_identifiers(self) -> None:
        """Test that functions merely ending in 't' are not treated as t()."""
        code = "format('x'); split('y'); obj.t('z');"

        keys = extract("util.js", code)

        assert _names(keys) == ["z"]

    def test_escaped_quotes(self) -> None:
        """Test unescaping of quoted literals."""
        code = "t('it\\'s', \"say \\\"hi\\\"\")"

        keys = extract("util.js", code)

        assert keys[0]["keyName"] == "it's"
        assert keys[0]["defaultValue"] == 'say "hi"'

    def test_escape_sequences_in_default_value(self) -> None:
        """Test that JavaScript escapes are decoded rather than stripped."""
        code = r"t('multi', 'Line one\nLine two\tTabbed é \x41 \u{1F600} \q')"

        keys = extract("util.js", code)

        assert keys[0]["defaultValue"] == "Line one\nLine two\tTabbed é A \U0001F600 q"


class TestUnsupportedFiles:
    """Test handling of files without a built-in dialect."""

    @pytest.mark.parametrize("filename", ["README.md", "data.json", "Makefile"])
    def test_unsupported_extension_yields_no_keys(self, filename: str) -> None:
        """Test that unknown file types produce an empty key list."""
        assert extract(filename, "t('not.a.key')") == []
