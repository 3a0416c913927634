"""Configuration management for WebJar Extractor."""

import os
from typing import List, Optional

import toml
from pydantic import BaseModel, Field, field_validator

from .utils.paths import get_default_cache_path


def _expand(value: str) -> str:
    return os.path.expanduser(os.path.expandvars(value))


class PathsConfig(BaseModel):
    """Configuration for search roots and output."""

    search_roots: List[str] = Field(
        default_factory=lambda: ["."],
        description="Jar/zip archives or directories to search for WebJars",
    )
    destination: str = Field(default="./webjars")

    @field_validator("search_roots")
    @classmethod
    def expand_roots(cls, v):
        """Expand user paths and environment variables."""
        return [_expand(root) for root in v]

    @field_validator("destination")
    @classmethod
    def expand_destination(cls, v):
        """Expand user paths and environment variables."""
        return _expand(v)


class CacheConfig(BaseModel):
    """Configuration for the extraction cache."""

    backend: str = Field(
        default="file",
        pattern="^(memory|file|duckdb|none)$",
        description="Cache backend: memory, file, duckdb, or none (always extract)",
    )
    file_path: str = Field(
        default_factory=lambda: str(get_default_cache_path("cache.txt")),
        description="Path to the text cache file (file backend)",
    )
    db_path: str = Field(
        default_factory=lambda: str(get_default_cache_path("cache.duckdb")),
        description="Path to DuckDB cache database file (duckdb backend)",
    )

    @field_validator("file_path", "db_path")
    @classmethod
    def expand_path(cls, v):
        """Expand user paths and environment variables."""
        return _expand(v)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


class Config(BaseModel):
    """Main configuration class."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages configuration loading and access."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, searches standard locations.
        """
        self.config_path = config_path or self._find_config_file()
        self._config: Optional[Config] = None

    def _find_config_file(self) -> str:
        """Find configuration file in standard locations."""
        search_paths = [
            os.path.expanduser("~/.config/webjar-extractor/config.toml"),
            "webjar_extractor.toml",
        ]
        env_path = os.getenv("WEBJAR_EXTRACTOR_CONFIG")
        if env_path:
            search_paths.insert(0, os.path.expanduser(env_path))

        for path in search_paths:
            if os.path.exists(path):
                return path

        # Return default path even if it doesn't exist
        return search_paths[0]

    @property
    def config(self) -> Config:
        """Get configuration, loading if necessary."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not os.path.exists(self.config_path):
            return Config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config_data = toml.load(f)
            return Config(**config_data)
        except (toml.TomlDecodeError, ValueError) as e:
            raise ValueError(f"Invalid configuration file {self.config_path}: {e}")

    def reload(self):
        """Reload configuration."""
        self._config = None
