from __future__ import annotations

import json
from pathlib import Path

import pytest

from lead_finder.backend.sample import StaticBackend
from lead_finder.config import (
    CONFIG_ENV_VAR,
    DEFAULT_BACKEND_CLASS,
    ConfigurationError,
    Settings,
    load_configuration,
    load_settings,
    settings_from_config,
)
from lead_finder.factory import build_backend, build_orchestrators
from lead_finder.models import Coordinates


def test_load_settings_without_file_uses_defaults(monkeypatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    settings = load_settings()

    assert settings.backend_class == DEFAULT_BACKEND_CLASS
    assert settings.page_size == 10
    assert settings.location is None


def test_yaml_configuration_is_converted(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        """
backend:
  class: lead_finder.backend.sample.StaticBackend
  options: {}
history_path: history.json
page_size: 5
export_filename: plumbers.csv
location:
  latitude: 39.78
  longitude: -89.65
""",
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.backend_class == "lead_finder.backend.sample.StaticBackend"
    assert settings.history_path == Path("history.json")
    assert settings.page_size == 5
    assert settings.export_filename == "plumbers.csv"
    assert settings.location == Coordinates(39.78, -89.65)


def test_environment_variable_names_config_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"page_size": 3}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_settings().page_size == 3


def test_empty_yaml_file_is_empty_mapping(tmp_path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("", encoding="utf-8")

    assert load_configuration(path) == {}


@pytest.mark.parametrize(
    "filename, content",
    [
        ("config.json", "{broken"),
        ("config.yaml", "backend: [unclosed"),
        ("config.json", "[1, 2]"),
        ("config.toml", "x = 1"),
    ],
)
def test_invalid_configuration_files_raise(tmp_path, filename, content) -> None:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_configuration(path)


def test_missing_configuration_file_raises(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        load_configuration(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "config",
    [
        {"backend": "gemini"},
        {"backend": {"options": ["verbose"]}},
        {"page_size": 0},
        {"page_size": "many"},
        {"location": {"latitude": 200, "longitude": 0}},
    ],
)
def test_invalid_settings_raise(config) -> None:
    with pytest.raises(ConfigurationError):
        settings_from_config(config)


def test_build_backend_from_class_path() -> None:
    settings = Settings(backend_class="lead_finder.backend.sample.StaticBackend")

    assert isinstance(build_backend(settings), StaticBackend)


@pytest.mark.parametrize("class_path", ["NoModule", "lead_finder.nothing_here.Backend", "lead_finder.backend.Missing"])
def test_build_backend_with_bad_class_path_raises(class_path) -> None:
    with pytest.raises(ConfigurationError):
        build_backend(Settings(backend_class=class_path))


def test_build_orchestrators_share_one_result_set(tmp_path) -> None:
    settings = Settings(history_path=tmp_path / "history.json", page_size=1)

    search, scrape = build_orchestrators(settings, backend=StaticBackend())
    records = search.search("plumbers")
    scrape.scrape(records[0].id)

    assert search.page_size == 1
    assert search.results.get(records[0].id).contact_info.emails == ("info@acme-plumbing.example",)
    assert (tmp_path / "history.json").exists()


def test_build_backend_with_bad_options_raises() -> None:
    settings = Settings(backend_class="lead_finder.backend.sample.StaticBackend", backend_options={"bogus": 1})

    with pytest.raises(ConfigurationError):
        build_backend(settings)
