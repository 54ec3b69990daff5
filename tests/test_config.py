from __future__ import annotations

from pathlib import Path

import pytest

from focalpoint.config import ConfigError, FocalPointConfig, config_validate, load_config


def test_defaults_without_file() -> None:
    cfg = load_config(None)
    assert cfg == FocalPointConfig()
    assert cfg.default_value == "50,50"
    assert cfg.theme == "dark"


def test_load_yaml_and_normalize_default(tmp_path: Path) -> None:
    p = tmp_path / "focalpoint.yaml"
    p.write_text(
        "default_value: '120,-3'\n"
        "indicator_size: 31\n"
        "theme: Light\n"
        "log_level: debug\n"
        "preview_href: /preview/1/50%2C50\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.default_value == "100,0"
    assert cfg.indicator_size == 31
    assert cfg.theme == "light"
    assert cfg.log_level == "DEBUG"
    assert cfg.preview_href == "/preview/1/50%2C50"


def test_empty_yaml_is_defaults(tmp_path: Path) -> None:
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == FocalPointConfig()


def test_unknown_key_is_an_error(tmp_path: Path) -> None:
    p = tmp_path / "typo.yaml"
    p.write_text("indicator_szie: 30\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="indicator_szie"):
        load_config(p)


def test_bad_yaml_and_missing_file(tmp_path: Path) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text("theme: [dark\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(p)
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(tmp_path / "missing.yaml")


def test_non_mapping_yaml(tmp_path: Path) -> None:
    p = tmp_path / "list.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(p)


def test_config_validate_report() -> None:
    assert config_validate({"theme": "dark"}).ok
    rep = config_validate({"theme": "sepia", "indicator_size": 1})
    assert not rep.ok
    assert any(e.startswith("theme:") for e in rep.errors)
    assert any(e.startswith("indicator_size:") for e in rep.errors)
