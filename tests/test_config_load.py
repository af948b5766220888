import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

import pytest

from corgi.config import Config, ConfigManager, load
from corgi.env import Environment
from corgi.errors import ConfigError, EditorNotFoundError


def _make_executable(bin_dir: Path, name: str) -> Path:
    bin_dir.mkdir(parents=True, exist_ok=True)
    exe = bin_dir / name
    exe.write_text("#!/bin/sh\n", encoding="utf-8")
    exe.chmod(0o755)
    return exe


def _env(tmp_path: Path, **variables: str) -> Environment:
    base = {"XDG_CONFIG_HOME": str(tmp_path / "home"), "PATH": str(tmp_path / "bin")}
    base.update(variables)
    return Environment(platform="linux", variables=base)


def _config_file(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".corgi" / "corgi_conf.json"


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_is_new_only_when_every_field_is_empty() -> None:
    assert Config().is_new()
    assert not Config(filter_cmd="/usr/bin/fzf").is_new()
    assert not Config("/a", "/b", "/c", "/d").is_new()


def test_from_mapping_rejects_non_string_values() -> None:
    with pytest.raises(ValueError, match="editor"):
        Config.from_mapping({"editor": 3})


def test_first_load_populates_and_persists_defaults(tmp_path) -> None:
    vim = _make_executable(tmp_path / "bin", "vim")
    fzf = _make_executable(tmp_path / "bin", "fzf")
    _write_config(_config_file(tmp_path), "")

    config = load(_env(tmp_path))

    corgi_home = tmp_path / "home" / ".corgi"
    assert config.snippets_file == str(corgi_home / "snippets.json")
    assert config.snippets_dir == str(corgi_home / "snippets")
    assert config.editor == str(vim)
    assert config.filter_cmd == str(fzf)
    assert not config.is_new()
    assert (corgi_home / "snippets.json").is_file()
    assert (corgi_home / "snippets").is_dir()

    persisted = json.loads(_config_file(tmp_path).read_text(encoding="utf-8"))
    assert persisted == config.as_dict()


def test_first_load_creates_missing_config_file(tmp_path) -> None:
    _make_executable(tmp_path / "bin", "fzf")

    config = load(_env(tmp_path, EDITOR="nano"))

    assert config.editor == "nano"
    assert _config_file(tmp_path).is_file()
    assert json.loads(_config_file(tmp_path).read_text(encoding="utf-8"))["editor"] == "nano"


def test_populated_config_is_returned_without_writing(tmp_path) -> None:
    text = '{"snippets_file":"/a","snippets_dir":"/b","editor":"/c","filter_cmd":"/d"}'
    _write_config(_config_file(tmp_path), text)

    config = load(_env(tmp_path))

    assert config == Config(snippets_file="/a", snippets_dir="/b", editor="/c", filter_cmd="/d")
    assert _config_file(tmp_path).read_text(encoding="utf-8") == text
    assert not (tmp_path / "home" / ".corgi" / "snippets").exists()
    assert not (tmp_path / "home" / ".corgi" / "snippets.json").exists()


def test_malformed_config_fails_and_is_left_alone(tmp_path) -> None:
    _write_config(_config_file(tmp_path), '{"snippets_file":')

    with pytest.raises(ValueError):
        load(_env(tmp_path, EDITOR="nano"))

    assert _config_file(tmp_path).read_text(encoding="utf-8") == '{"snippets_file":'


def test_save_then_load_round_trips(tmp_path) -> None:
    env = _env(tmp_path)
    original = Config(
        snippets_file="/data/snippets.json",
        snippets_dir="/data/snippets",
        editor="/usr/bin/emacs",
        filter_cmd="/usr/local/bin/peco",
    )

    original.save(env)

    assert load(env) == original


def test_missing_filter_cmd_does_not_fail_load(tmp_path) -> None:
    _make_executable(tmp_path / "bin", "vim")

    config = load(_env(tmp_path))

    assert config.filter_cmd == ""
    assert config.editor == str(tmp_path / "bin" / "vim")
    assert json.loads(_config_file(tmp_path).read_text(encoding="utf-8"))["filter_cmd"] == ""


def test_missing_editor_fails_load_and_leaves_config_empty(tmp_path) -> None:
    _make_executable(tmp_path / "bin", "fzf")
    _write_config(_config_file(tmp_path), "")

    with pytest.raises(EditorNotFoundError):
        load(_env(tmp_path))

    assert _config_file(tmp_path).read_text(encoding="utf-8") == ""


def test_manager_exposes_config_locations(tmp_path) -> None:
    manager = ConfigManager(env=_env(tmp_path))

    assert manager.config_home == str(tmp_path / "home")
    assert manager.config_file == str(_config_file(tmp_path))
    assert _config_file(tmp_path).is_file()


def test_saved_file_uses_two_space_indent(tmp_path) -> None:
    env = _env(tmp_path)

    Config("/a", "/b", "/c", "").save(env)

    assert _config_file(tmp_path).read_text(encoding="utf-8") == (
        '{\n  "snippets_file": "/a",\n  "snippets_dir": "/b",\n  "editor": "/c",\n  "filter_cmd": ""\n}'
    )


def test_apply_updates_persists_changes(tmp_path) -> None:
    env = _env(tmp_path, EDITOR="vi")
    manager = ConfigManager(env=env)
    config = manager.load()

    new_dir = tmp_path / "elsewhere" / "snips"
    updated = manager.apply_updates(config, editor="/usr/bin/nano", snippets_dir=str(new_dir))

    assert updated.editor == "/usr/bin/nano"
    assert updated.snippets_dir == str(new_dir)
    assert new_dir.is_dir()
    assert load(env) == updated


def test_apply_updates_expands_user_paths_from_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path / "process-home"))
    manager = ConfigManager(env=_env(tmp_path, EDITOR="vi", HOME=str(tmp_path / "user")))
    config = manager.load()

    updated = manager.apply_updates(config, snippets_file="~/snips.json")

    assert updated.snippets_file == str(tmp_path / "user" / "snips.json")
    assert (tmp_path / "user" / "snips.json").is_file()
    assert not (tmp_path / "process-home").exists()


def test_apply_updates_requires_a_setting(tmp_path) -> None:
    manager = ConfigManager(env=_env(tmp_path, EDITOR="vi"))
    config = manager.load()

    with pytest.raises(ConfigError):
        manager.apply_updates(config)


def test_null_fields_load_as_empty(tmp_path) -> None:
    text = '{"snippets_file":"/a","snippets_dir":"/b","editor":"/c","filter_cmd":null}'
    _write_config(_config_file(tmp_path), text)

    config = load(_env(tmp_path))

    assert config == Config(snippets_file="/a", snippets_dir="/b", editor="/c", filter_cmd="")
    assert _config_file(tmp_path).read_text(encoding="utf-8") == text


def test_from_mapping_still_rejects_lists_and_objects() -> None:
    with pytest.raises(ValueError, match="snippets_dir"):
        Config.from_mapping({"snippets_dir": ["/b"]})
    with pytest.raises(ValueError, match="filter_cmd"):
        Config.from_mapping({"filter_cmd": {"path": "/d"}})
