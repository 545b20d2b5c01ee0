"""
YAML configuration loader for gazette sources.

Loads source definitions from YAML files with:
- Environment variable substitution
- Required field validation
- Default values
"""

import os
import re
from pathlib import Path
from typing import Optional

import structlog
import yaml

from gazette_watch.collectors.base import DEFAULT_TIMEZONE, SourceConfig

logger = structlog.get_logger(__name__)

COLLECTOR_FIELDS = {
    "listing": ("listing_url", "link_pattern"),
    "fixed_url": ("document_url",),
}


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - warns and substitutes an empty string if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name) or default
        value = os.getenv(var_expr)
        if value is None:
            logger.warning("env_var_not_set", var=var_expr)
            return ""
        return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


class ConfigLoader:
    """
    Configuration loader for gazette sources.

    Loads YAML config files and validates against the expected schema.
    """

    def __init__(self, config_dir: Optional[str] = None, default_timezone: str = DEFAULT_TIMEZONE):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
                       (defaults to package config directory)
            default_timezone: Timezone for sources that do not set one
        """
        self.default_timezone = default_timezone
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        logger.info("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        content = substitute_env_vars(content)
        config = yaml.safe_load(content)

        return config or {}

    def load_sources(self, filename: str = "sources.yml") -> list[SourceConfig]:
        """
        Load source definitions from YAML.

        Invalid entries are logged and skipped so one broken source does
        not take the others down.

        Args:
            filename: Sources config file name

        Returns:
            List of SourceConfig objects, disabled sources excluded
        """
        config = self.load_file(filename)

        sources = []
        for source_data in config.get("sources", []):
            try:
                source = self._parse_source(source_data)
            except ValueError as e:
                logger.error(
                    "source_load_failed",
                    source=source_data.get("source_id", "unknown"),
                    error=str(e),
                )
                continue
            if not source.enabled:
                logger.info("source_disabled", source_id=source.source_id)
                continue
            sources.append(source)
            logger.debug("source_loaded", source_id=source.source_id)

        if sources and not any(s.primary for s in sources):
            sources[0].primary = True

        return sources

    def _parse_source(self, data: dict) -> SourceConfig:
        """
        Parse source definition into SourceConfig.

        Raises:
            ValueError: If required fields are missing or the collector is unknown
        """
        if "source_id" not in data:
            raise ValueError("Missing required field: source_id")

        collector = data.get("collector", "listing")
        if collector not in COLLECTOR_FIELDS:
            raise ValueError(f"Unknown collector: {collector}")

        for field in COLLECTOR_FIELDS[collector]:
            if not data.get(field):
                raise ValueError(f"Missing required field for {collector}: {field}")

        if data.get("link_pattern"):
            try:
                re.compile(data["link_pattern"])
            except re.error as e:
                raise ValueError(f"Invalid link_pattern: {e}") from e

        return SourceConfig.from_dict(data, default_timezone=self.default_timezone)


def load_sources(
    config_path: Optional[str] = None,
    default_timezone: str = DEFAULT_TIMEZONE,
) -> list[SourceConfig]:
    """
    Convenience function to load source configs.

    Args:
        config_path: Optional path to sources.yml
        default_timezone: Timezone for sources that do not set one (TIMEZONE)

    Returns:
        List of SourceConfig objects
    """
    if config_path:
        loader = ConfigLoader(str(Path(config_path).parent), default_timezone)
        return loader.load_sources(Path(config_path).name)
    return ConfigLoader(default_timezone=default_timezone).load_sources()


def primary_source(sources: list[SourceConfig]) -> str:
    """Name of the source that owns legacy single-URL history state."""
    for source in sources:
        if source.primary:
            return source.source_id
    return sources[0].source_id if sources else ""
