import pytest

from http_ast.config import CONFIG_FILE, ParserOptions, load_options
from http_ast.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ParserOptions.model_fields:
        monkeypatch.delenv(f"HTTP_AST_{name.upper()}", raising=False)


class TestLoadOptions:
    def test_defaults(self):
        options = load_options()

        assert options.encoding == "utf-8"
        assert options.strict is False
        assert options.max_segments is None
        assert options.max_body_size is None

    def test_config_file_in_working_directory(self, tmp_path):
        (tmp_path / CONFIG_FILE).write_text("strict: true\nmax_segments: 10\n")

        options = load_options()

        assert options.strict is True
        assert options.max_segments == 10

    def test_explicit_config_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("encoding: latin-1\n")

        assert load_options(config_path=path).encoding == "latin-1"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / CONFIG_FILE).write_text("max_body_size: 100\n")
        monkeypatch.setenv("HTTP_AST_MAX_BODY_SIZE", "2048")

        assert load_options().max_body_size == 2048

    def test_env_boolean(self, monkeypatch):
        monkeypatch.setenv("HTTP_AST_STRICT", "true")

        assert load_options().strict is True

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("HTTP_AST_ENCODING", "latin-1")

        options = load_options(overrides={"encoding": "utf-16", "strict": None})

        assert options.encoding == "utf-16"
        assert options.strict is False

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_options(config_path=tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / CONFIG_FILE).write_text("strict: [unclosed\n")

        with pytest.raises(ConfigError):
            load_options()

    def test_not_a_mapping(self, tmp_path):
        (tmp_path / CONFIG_FILE).write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="expected a mapping"):
            load_options()

    def test_invalid_value(self):
        with pytest.raises(ConfigError, match="Invalid parser options"):
            load_options(overrides={"max_segments": 0})

    def test_unknown_encoding(self):
        with pytest.raises(ConfigError, match="unknown encoding"):
            load_options(overrides={"encoding": "no-such-codec"})

    def test_unknown_encoding_from_env(self, monkeypatch):
        monkeypatch.setenv("HTTP_AST_ENCODING", "no-such-codec")

        with pytest.raises(ConfigError):
            load_options()

    def test_encoding_rejected_by_model(self):
        with pytest.raises(ValueError):
            ParserOptions(encoding="no-such-codec")

    def test_empty_file(self, tmp_path):
        (tmp_path / CONFIG_FILE).write_text("")

        assert load_options() == ParserOptions()
