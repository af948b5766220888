from __future__ import annotations


class ConfigError(Exception):
    """Base class for corgi configuration failures."""


class EditorNotFoundError(ConfigError):
    def __init__(self, editor: str):
        super().__init__(
            f'could not find {editor} (default) in $PATH, update your editor choice with '
            f'"corgi configure --editor <path to your editor>"'
        )
        self.editor = editor


class MissingDefaultFilterCmdError(ConfigError):
    def __init__(self, message: str = "missing default filter cmd"):
        super().__init__(message)
