"""Test loading of user configuration."""

from mdeck.config import DeckConfig, find_config_file, load_config
from mdeck.models import PresentationMeta


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "missing.yaml")
    assert config == DeckConfig()
    assert (config.theme, config.transition, config.aspect) == ("light", "slide", "16:9")


def test_load_defaults_section(tmp_path):
    """Test reading values from the defaults mapping."""
    path = tmp_path / "config.yaml"
    path.write_text('defaults:\n  theme: dark\n  aspect: "4:3"\n  code-theme: monokai\n', encoding="utf-8")

    config = load_config(path)

    assert config.theme == "dark"
    assert config.aspect == "4:3"
    assert config.code_theme == "monokai"
    assert config.transition == "slide"


def test_malformed_yaml_gives_defaults(tmp_path, caplog):
    """Test that a broken file is logged and ignored."""
    path = tmp_path / "config.yaml"
    path.write_text("defaults: [unclosed\n", encoding="utf-8")

    assert load_config(path) == DeckConfig()
    assert "Failed to load config" in caplog.text


def test_non_mapping_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    assert load_config(path) == DeckConfig()


def test_env_var_selects_file(tmp_path, monkeypatch):
    """Test lookup through MDECK_CONFIG."""
    path = tmp_path / "deck.yaml"
    path.write_text("defaults:\n  transition: fade\n", encoding="utf-8")
    monkeypatch.setenv("MDECK_CONFIG", str(path))

    assert find_config_file() == path
    assert load_config().transition == "fade"


def test_apply_fills_only_unset_fields():
    """Test that frontmatter values beat config defaults."""
    meta = PresentationMeta(title="Deck", theme="dark")
    result = DeckConfig(theme="light", transition="fade").apply(meta)

    assert result.title == "Deck"
    assert result.theme == "dark"
    assert result.transition == "fade"
    assert result.aspect == "16:9"
    assert result.code_theme is None
