"""
Tests for ptcgp_data/ts_module.py, the static TypeScript data module reader
"""

import textwrap

import pytest

from ptcgp_data.exceptions import ModuleLoadError
from ptcgp_data.ts_module import ImportReference, parse_module, tokenize


def parse(source: str) -> dict:
    return parse_module(textwrap.dedent(source), "test.ts").exports


class TestTokenize:
    """Test suite for tokenize function."""

    def test_skips_comments_and_tracks_lines(self):
        tokens = list(tokenize("// header\n/* multi\nline */ const a = 1", "test.ts"))

        assert [token.value for token in tokens[:4]] == ["const", "a", "=", 1]
        assert tokens[0].line == 3
        assert tokens[0].newline_before

    @pytest.mark.parametrize(
        "literal,expected",
        [
            ('"plain"', "plain"),
            ("'single'", "single"),
            ("`back\ntick`", "back\ntick"),
            (r'"tab\there"', "tab\there"),
            (r"'it\'s'", "it's"),
            (r'"été"', "été"),
            (r'"\u{1F600}"', "\U0001F600"),
            (r'"😀"', "\U0001F600"),
            (r'"\x41"', "A"),
            ('"Pokémon"', "Pokémon"),
        ],
    )
    def test_string_literals(self, literal: str, expected: str):
        token = next(tokenize(literal, "test.ts"))
        assert token.kind == "string"
        assert token.value == expected

    @pytest.mark.parametrize(
        "literal,expected",
        [("42", 42), ("1_000", 1000), ("0x1F", 31), ("2.5", 2.5), ("1e3", 1000), (".5", 0.5)],
    )
    def test_number_literals(self, literal: str, expected):
        token = next(tokenize(literal, "test.ts"))
        assert token.kind == "number"
        assert token.value == expected

    def test_unterminated_string(self):
        with pytest.raises(ModuleLoadError, match="Unterminated string"):
            list(tokenize('const a = "open\n', "test.ts"))

    def test_template_interpolation_rejected(self):
        with pytest.raises(ModuleLoadError, match="interpolation"):
            list(tokenize("`hello ${name}`", "test.ts"))


class TestParseModule:
    """Test suite for parse_module function."""

    def test_default_export_of_typed_const(self):
        exports = parse(
            """
            import { Card } from "../../../interfaces"

            const card: Card = {
                name: { en: "Bulbasaur", 'fr': "Bulbizarre" },
                hp: 70,
                types: ["Grass",],
                retreat: -1,
                evolveFrom: null,
                holo: true,
            }

            export default card
            """
        )

        assert exports == {
            "default": {
                "name": {"en": "Bulbasaur", "fr": "Bulbizarre"},
                "hp": 70,
                "types": ["Grass"],
                "retreat": -1,
                "evolveFrom": None,
                "holo": True,
            }
        }

    def test_default_import_becomes_reference(self):
        exports = parse(
            """
            import Set from "../Genetic Apex"

            const card = { set: Set, name: { en: "Ivysaur" } }
            export default card
            """
        )

        assert exports["default"]["set"] == ImportReference("../Genetic Apex", "default", 2)

    def test_shorthand_properties_and_named_imports(self):
        exports = parse(
            """
            import serie, { promo as special } from "../Pokémon TCG Pocket"

            export default { serie, special }
            """
        )

        assert exports["default"] == {
            "serie": ImportReference("../Pokémon TCG Pocket", "default", 2),
            "special": ImportReference("../Pokémon TCG Pocket", "promo", 2),
        }

    def test_undefined_properties_are_dropped(self):
        exports = parse("export default { a: undefined, b: [undefined], c: 1 }")
        assert exports["default"] == {"b": [None], "c": 1}

    def test_type_assertions_and_satisfies(self):
        exports = parse(
            """
            const set = {
                id: "A1" as string,
            } as const

            export default set satisfies Record<string, unknown>
            """
        )

        assert exports["default"] == {"id": "A1"}

    def test_generic_type_annotation(self):
        exports = parse(
            """
            const boosters: Record<string, Array<{ name: string }>> = { mew: [] }
            export default boosters
            """
        )

        assert exports["default"] == {"mew": []}

    def test_named_exports_without_default(self):
        exports = parse(
            """
            export const name = { en: "Pikachu" }
            export const hp = 60
            const illustrator = "Mitsuhiro Arita"
            export { illustrator, hp as health }
            """
        )

        assert exports == {
            "name": {"en": "Pikachu"},
            "hp": 60,
            "illustrator": "Mitsuhiro Arita",
            "health": 60,
        }

    def test_object_and_array_spread(self):
        exports = parse(
            """
            const base = { category: "Pokemon", types: ["Fire"] }
            const extra = ["Water"]
            export default { ...base, types: [...extra, "Grass"], hp: 90 }
            """
        )

        assert exports["default"] == {
            "category": "Pokemon",
            "types": ["Water", "Grass"],
            "hp": 90,
        }

    def test_interfaces_and_type_aliases_are_skipped(self):
        exports = parse(
            """
            interface Local extends Base<string> { id: string; name?: string }
            type Stage = "Basic" | "Stage1"
            export default { stage: "Basic" }
            """
        )

        assert exports == {"default": {"stage": "Basic"}}

    def test_type_only_import_used_as_value(self):
        with pytest.raises(ModuleLoadError, match="imported as a type only"):
            parse(
                """
                import type { Set } from "../../interfaces"
                export default { set: Set }
                """
            )

    def test_undefined_identifier(self):
        with pytest.raises(ModuleLoadError, match="'missing' is not defined") as error:
            parse("export default { set: missing }")
        assert error.value.line == 1

    @pytest.mark.parametrize(
        "source",
        [
            "export default new Date()",
            "export default getCard()",
            "console.log('side effect')",
            "export default { method() { return 1 } }",
            "export * from './other'",
        ],
    )
    def test_code_is_rejected(self, source: str):
        with pytest.raises(ModuleLoadError):
            parse(source)
