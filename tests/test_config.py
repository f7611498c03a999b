"""Tests for parser configuration loading."""

import pytest

from mathexpr.config import ParserOptions


class TestParserOptions:
    def test_defaults(self):
        options = ParserOptions()

        assert options.allow_implicit_multiplication is True
        assert options.simplify is True
        assert options.debug is False

    def test_immutable(self):
        options = ParserOptions()
        with pytest.raises(AttributeError):
            options.simplify = False


class TestFromEnv:
    def test_unset_keeps_defaults(self, monkeypatch):
        for name in ("MATHEXPR_IMPLICIT_MULTIPLICATION", "MATHEXPR_SIMPLIFY", "MATHEXPR_DEBUG"):
            monkeypatch.delenv(name, raising=False)

        assert ParserOptions.from_env() == ParserOptions()

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_truthy(self, monkeypatch, value):
        monkeypatch.setenv("MATHEXPR_DEBUG", value)
        assert ParserOptions.from_env().debug is True

    @pytest.mark.parametrize("value", ["0", "false", "no", ""])
    def test_falsy(self, monkeypatch, value):
        monkeypatch.setenv("MATHEXPR_SIMPLIFY", value)
        assert ParserOptions.from_env().simplify is False


class TestFromMapping:
    def test_partial(self):
        options = ParserOptions.from_mapping({"simplify": False})

        assert options.simplify is False
        assert options.allow_implicit_multiplication is True

    def test_none(self):
        assert ParserOptions.from_mapping(None) == ParserOptions()

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown parser options: verbose"):
            ParserOptions.from_mapping({"verbose": True})

    def test_non_boolean(self):
        with pytest.raises(ValueError):
            ParserOptions.from_mapping({"debug": "yes"})


class TestFromYaml:
    def test_top_level(self, tmp_path):
        path = tmp_path / "options.yaml"
        path.write_text("simplify: false\ndebug: true\n")

        options = ParserOptions.from_yaml(path)

        assert options == ParserOptions(simplify=False, debug=True)

    def test_parser_section(self, tmp_path):
        path = tmp_path / "mathexpr.yaml"
        path.write_text("parser:\n  allow_implicit_multiplication: false\n")

        assert ParserOptions.from_yaml(path).allow_implicit_multiplication is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert ParserOptions.from_yaml(path) == ParserOptions()

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- simplify\n")

        with pytest.raises(ValueError):
            ParserOptions.from_yaml(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("simplify: true\nprecision: 10\n")

        with pytest.raises(ValueError):
            ParserOptions.from_yaml(path)
