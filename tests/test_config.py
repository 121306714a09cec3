from pathlib import Path

import pytest

from portfolio_data.config import (
    CONFIG_ENV_KEY,
    DATA_DIR_ENV_KEY,
    OUTPUT_DIR_ENV_KEY,
    ConfigError,
    load_config,
)
from portfolio_data.schema import DEFAULT_FIELD_ALIASES, DEFAULT_SOURCE_FILES


def test_defaults_without_config():
    config = load_config()

    assert config.data_dir == Path("src/data")
    assert config.output_dir == Path("src/data")
    assert config.sources == DEFAULT_SOURCE_FILES
    assert config.outputs["focus_areas"] == "focus-areas.json"
    assert config.aliases == DEFAULT_FIELD_ALIASES
    assert config.path is None


def test_yaml_overrides_resolve_relative_to_config(tmp_path):
    config_path = tmp_path / "site" / "portfolio.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        "\n".join(
            [
                "data_dir: ./content",
                "output_dir: ../public/data",
                "sources:",
                "  resume_skills: skills.csv",
                "outputs:",
                "  resume: cv.json",
                "aliases:",
                "  projects:",
                "    display_order: [rank, display_order]",
                "  resume_skills:",
                "    items: list",
            ]
        ),
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.data_dir == (tmp_path / "site" / "content").resolve()
    assert config.output_dir == (tmp_path / "public" / "data").resolve()
    assert config.sources["resume_skills"] == "skills.csv"
    assert config.sources["projects"] == "projects.csv"
    assert config.outputs["resume"] == "cv.json"
    assert config.aliases["projects"]["display_order"] == ["rank", "display_order"]
    assert config.aliases["projects"]["id"] == ["id"]
    assert config.aliases["resume_skills"]["items"] == ["list"]


@pytest.mark.parametrize(
    "body",
    [
        "unknown_key: 1",
        "sources:\n  not_a_table: x.csv",
        "outputs: [projects.json]",
        "aliases:\n  projects:\n    id: []",
        "aliases:\n  nope:\n    id: [id]",
        "- just\n- a list",
        "data_dir: [unclosed",
    ],
)
def test_invalid_config_raises(tmp_path, body):
    config_path = tmp_path / "portfolio.yaml"
    config_path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")


def test_environment_overrides_file_and_flags_override_environment(tmp_path, monkeypatch):
    config_path = tmp_path / "portfolio.yaml"
    config_path.write_text("data_dir: ./from-file\noutput_dir: ./from-file\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_KEY, str(config_path))
    monkeypatch.setenv(DATA_DIR_ENV_KEY, str(tmp_path / "from-env"))

    config = load_config()

    assert config.path == config_path
    assert config.data_dir == tmp_path / "from-env"
    assert config.output_dir == (tmp_path / "from-file").resolve()

    monkeypatch.setenv(OUTPUT_DIR_ENV_KEY, str(tmp_path / "env-out"))
    config = load_config(output_dir=tmp_path / "flag-out")

    assert config.output_dir == tmp_path / "flag-out"
