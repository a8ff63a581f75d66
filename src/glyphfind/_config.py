"""Configuration loading for glyphfind."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from glyphfind._errors import ConfigError

CONFIG_ENV_VAR = "GLYPHFIND_CONFIG"


def _known_keys(cls: type, raw: Any) -> dict[str, Any]:
    """Keep only the keys ``cls`` declares; unknown keys are ignored."""
    if not isinstance(raw, dict):
        return {}
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in raw.items() if k in names}


@dataclass
class DataConfig:
    """Where character data comes from."""

    path: str | None = None  # UnicodeData.txt; None uses the builtin tables


@dataclass
class SessionConfig:
    """Interactive session settings."""

    tick_interval: float = 0.03
    page_size: int = 10
    title: str = "glyphfind"
    mouse: bool = True


@dataclass
class LogConfig:
    file: str | None = None
    level: str = "WARNING"


@dataclass
class GlyphfindConfig:
    """Top-level configuration, stored as YAML."""

    data: DataConfig = field(default_factory=DataConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @staticmethod
    def get_config_path() -> Path:
        """Resolve the config file location.

        ``$GLYPHFIND_CONFIG`` wins, then ``$XDG_CONFIG_HOME/glyphfind``,
        then ``~/.config/glyphfind``.
        """
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override).expanduser()

        base = os.environ.get("XDG_CONFIG_HOME")
        config_home = Path(base) if base else Path.home() / ".config"
        return config_home / "glyphfind" / "config.yaml"

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> GlyphfindConfig:
        return cls(
            data=DataConfig(**_known_keys(DataConfig, raw.get("data"))),
            session=SessionConfig(**_known_keys(SessionConfig, raw.get("session"))),
            log=LogConfig(**_known_keys(LogConfig, raw.get("log"))),
        )

    @classmethod
    def load(cls, path: Path | None = None) -> GlyphfindConfig:
        """
        Load configuration from YAML.

        Args:
            path: Config file; defaults to get_config_path()

        Returns:
            Parsed config, or defaults if the file does not exist

        Raises:
            ConfigError: If the file is not valid YAML
        """
        config_path = path or cls.get_config_path()
        if not config_path.exists():
            return cls()

        try:
            raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e

        return cls.from_dict(raw or {})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def save(self, path: Path | None = None) -> Path:
        config_path = path or self.get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(yaml.safe_dump(self.to_dict(), sort_keys=False), encoding="utf-8")
        return config_path

    @classmethod
    def bootstrap(cls, path: Path | None = None) -> Path:
        """Write a default config file (if missing) and return its path."""
        config_path = path or cls.get_config_path()
        if config_path.exists():
            return config_path
        return cls().save(config_path)
