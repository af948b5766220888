from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from .env import Environment
from .errors import ConfigError, EditorNotFoundError, MissingDefaultFilterCmdError
from .jsonio import JSON_MARSHAL_INDENT, JSON_MARSHAL_PREFIX, dumps_indented, load_json_data_from_file
from .paths import LocalPathEnsurer, PathEnsurer, PathKind

DEFAULT_CONFIG_FILE = ".corgi/corgi_conf.json"
DEFAULT_SNIPPETS_DIR = ".corgi/snippets"
DEFAULT_SNIPPETS_FILE = ".corgi/snippets.json"
DEFAULT_EDITOR = "vim"
DEFAULT_FILTER_CMD_FZF = "fzf"
DEFAULT_FILTER_CMD_PECO = "peco"

DEFAULT_PERMISSIONS = 0o755


@dataclass
class Config:
    snippets_file: str = ""
    snippets_dir: str = ""
    editor: str = ""
    filter_cmd: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Config":
        values: Dict[str, str] = {}
        for key in ("snippets_file", "snippets_dir", "editor", "filter_cmd"):
            value = data.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(f"Config field {key!r} must be a string, got {type(value).__name__}")
            values[key] = value
        return cls(**values)

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)

    def is_new(self) -> bool:
        return self.snippets_file == "" and self.snippets_dir == "" and self.editor == "" and self.filter_cmd == ""

    def save(self, env: Optional[Environment] = None, ensurer: Optional[PathEnsurer] = None) -> None:
        ConfigManager(env=env, ensurer=ensurer).save(self)


def _resolve_env(env: Optional[Environment]) -> Environment:
    return env if env is not None else Environment.from_process()


def get_default_config_home(env: Optional[Environment] = None) -> str:
    """Return the directory the ``.corgi`` tree lives under, or ``""`` on other platforms."""
    env = _resolve_env(env)
    config_home = ""
    if env.platform == "darwin":
        config_home = env.get("HOME", "")
    elif env.platform == "linux":
        config_home = env.get("XDG_CONFIG_HOME", "")
        if config_home == "":
            config_home = env.get("HOME", "")
    return config_home


def _default_location(config_home: str, relative: str, kind: PathKind, ensurer: Optional[PathEnsurer]) -> str:
    location = os.path.join(config_home, relative)
    (ensurer or LocalPathEnsurer()).ensure(location, kind, DEFAULT_PERMISSIONS)
    return location


def get_default_config_file(config_home: str, ensurer: Optional[PathEnsurer] = None) -> str:
    return _default_location(config_home, DEFAULT_CONFIG_FILE, PathKind.FILE, ensurer)


def get_default_snippets_dir(config_home: str, ensurer: Optional[PathEnsurer] = None) -> str:
    return _default_location(config_home, DEFAULT_SNIPPETS_DIR, PathKind.DIRECTORY, ensurer)


def get_default_snippets_file(config_home: str, ensurer: Optional[PathEnsurer] = None) -> str:
    return _default_location(config_home, DEFAULT_SNIPPETS_FILE, PathKind.FILE, ensurer)


def get_default_editor(env: Optional[Environment] = None) -> str:
    """``$EDITOR`` when set (taken as is), otherwise ``vim`` from PATH."""
    env = _resolve_env(env)
    if env.has("EDITOR"):
        return env.get("EDITOR", "")
    editor_path = env.which(DEFAULT_EDITOR)
    if editor_path is None:
        raise EditorNotFoundError(DEFAULT_EDITOR)
    logger.debug("Resolved default editor {}", editor_path)
    return editor_path


def get_default_filter_cmd(env: Optional[Environment] = None) -> str:
    env = _resolve_env(env)
    filter_cmd = env.which(DEFAULT_FILTER_CMD_PECO) or ""
    # the fzf lookup replaces the peco result whether or not fzf is found
    filter_cmd = env.which(DEFAULT_FILTER_CMD_FZF) or ""
    if filter_cmd == "":
        raise MissingDefaultFilterCmdError()
    logger.debug("Resolved default filter command {}", filter_cmd)
    return filter_cmd


class ConfigManager:
    """Loads, initializes and persists the corgi config file."""

    def __init__(self, env: Optional[Environment] = None, ensurer: Optional[PathEnsurer] = None):
        self._env = _resolve_env(env)
        self._ensurer = ensurer or LocalPathEnsurer()

    @property
    def env(self) -> Environment:
        return self._env

    @property
    def ensurer(self) -> PathEnsurer:
        return self._ensurer

    @property
    def config_home(self) -> str:
        return get_default_config_home(self._env)

    @property
    def config_file(self) -> str:
        return get_default_config_file(self.config_home, self._ensurer)

    def load(self) -> Config:
        config_home = self.config_home
        config_file = get_default_config_file(config_home, self._ensurer)

        data = load_json_data_from_file(config_file)
        config = Config.from_mapping(data) if data is not None else Config()
        if not config.is_new():
            return config

        logger.info("No configuration found in {}, populating defaults", config_file)
        snippets_file = get_default_snippets_file(config_home, self._ensurer)
        snippets_dir = get_default_snippets_dir(config_home, self._ensurer)
        editor = get_default_editor(self._env)
        try:
            filter_cmd = get_default_filter_cmd(self._env)
        except MissingDefaultFilterCmdError:
            logger.warning(
                "Neither {} nor {} found in $PATH, filter command left empty",
                DEFAULT_FILTER_CMD_PECO,
                DEFAULT_FILTER_CMD_FZF,
            )
            filter_cmd = ""

        config.snippets_file = snippets_file
        config.snippets_dir = snippets_dir
        config.editor = editor
        config.filter_cmd = filter_cmd
        self.save(config)
        return config

    def save(self, config: Config) -> None:
        config_file = get_default_config_file(self.config_home, self._ensurer)
        data = dumps_indented(config.as_dict(), JSON_MARSHAL_PREFIX, JSON_MARSHAL_INDENT)
        Path(config_file).write_text(data, encoding="utf-8")
        logger.info("Saved configuration to {}", config_file)

    def _expand_user(self, location: str) -> str:
        home = self._env.get("HOME", "")
        if home and (location == "~" or location.startswith("~" + os.sep)):
            return home + location[1:]
        return location

    def apply_updates(
        self,
        config: Config,
        *,
        snippets_file: Optional[str] = None,
        snippets_dir: Optional[str] = None,
        editor: Optional[str] = None,
        filter_cmd: Optional[str] = None,
    ) -> Config:
        """Change the given settings on ``config`` and persist it."""
        if snippets_file is None and snippets_dir is None and editor is None and filter_cmd is None:
            raise ConfigError("nothing to configure, pass at least one setting")

        if snippets_file is not None:
            snippets_file = os.path.abspath(self._expand_user(snippets_file))
            self._ensurer.ensure(snippets_file, PathKind.FILE, DEFAULT_PERMISSIONS)
            config.snippets_file = snippets_file
        if snippets_dir is not None:
            snippets_dir = os.path.abspath(self._expand_user(snippets_dir))
            self._ensurer.ensure(snippets_dir, PathKind.DIRECTORY, DEFAULT_PERMISSIONS)
            config.snippets_dir = snippets_dir
        if editor is not None:
            config.editor = editor
        if filter_cmd is not None:
            config.filter_cmd = filter_cmd
        self.save(config)
        return config


def load(env: Optional[Environment] = None, ensurer: Optional[PathEnsurer] = None) -> Config:
    return ConfigManager(env=env, ensurer=ensurer).load()
