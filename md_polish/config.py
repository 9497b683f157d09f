"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib


@dataclass
class PolishConfig:
    """Configuration for polishing converted Markdown.

    Attributes:
        base_url: Default base URL used when none is given on the command line.
        resolve_urls: Whether link and image destinations are made absolute.
        compact_tables: Whether table padding and separators are compacted.
        min_separator_dashes: Dash count written in each separator cell.
        max_file_size: Maximum input size in bytes that will be processed.

    Examples:
        PolishConfig(base_url="https://example.com/docs/", min_separator_dashes=3)
    """

    base_url: str | None = None

    # Passes
    resolve_urls: bool = True
    compact_tables: bool = True

    # Formatting
    min_separator_dashes: int = 1

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`min_separator_dashes` must be a positive integer")
    """


def load_config(search_path: Path) -> PolishConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.md-polish]`` table from `pyproject.toml` and the ``[md-polish]``
    or ``[tool.md-polish]`` table from `.md-polish.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        PolishConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "md-polish")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".md-polish.toml",
            table_paths=[("md-polish",), ("tool", "md-polish")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return PolishConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> PolishConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> PolishConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return PolishConfig()

    # Accept `min-separator-dashes` as well as `min_separator_dashes`
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return PolishConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: PolishConfig) -> None:
    """Validate a `PolishConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If flags are not booleans, the base URL is not a string,
            or numeric limits are not positive integers.

    Examples:
        validate_config(PolishConfig(min_separator_dashes=3))
    """
    _ensure_integers(
        {
            "min_separator_dashes": config.min_separator_dashes,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "min_separator_dashes": config.min_separator_dashes,
            "max_file_size": config.max_file_size,
        }
    )

    for key in ("resolve_urls", "compact_tables"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    if config.base_url is not None:
        if not isinstance(config.base_url, str):
            raise ConfigError("`base_url` must be a string")
        if not config.base_url.strip():
            raise ConfigError("`base_url` must not be empty")


def apply_overrides(config: PolishConfig, **overrides: object) -> PolishConfig:
    """Apply override values to a `PolishConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        PolishConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `PolishConfig`.

    Examples:
        updated = apply_overrides(config, base_url="https://example.com/", compact_tables=False)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> PolishConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        PolishConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), base_url="https://example.com/")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
