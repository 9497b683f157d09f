"""Filesystem helpers for md-polish."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE
from .exceptions import InputTooLargeError

MAX_FILE_SIZE_ENV_VAR = "MD_POLISH_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed input size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed input size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MD_POLISH_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for an input file.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata.

    Raises:
        IOError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_size(size: int, max_size: int, source: str) -> None:
    """Guard against inputs that exceed the configured maximum size.

    Args:
        size: Input size in bytes.
        max_size: Maximum allowed size in bytes.
        source: Display name of the input.

    Raises:
        InputTooLargeError: If `size` exceeds `max_size`.

    Examples:
        enforce_size(os.stat("page.md").st_size, 102400, "page.md")
    """
    if size > max_size:
        raise InputTooLargeError(source, max_size)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8, with line endings
            left untranslated.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def read_markdown(filepath: Path, max_size: int) -> str:
    """Read a Markdown file after checking its size.

    Args:
        filepath: Path to the Markdown file.
        max_size: Maximum allowed size in bytes.

    Returns:
        str: The file content.

    Raises:
        IOError: If the file cannot be read or is not valid UTF-8.
        InputTooLargeError: If the file exceeds `max_size`.
    """
    stat_result = collect_file_stat(filepath)
    enforce_size(stat_result.st_size, max_size, str(filepath))

    try:
        with safe_read(filepath) as file:
            return file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise IOError(error_message) from error


def write_markdown(filepath: Path, markdown: str) -> None:
    """Write Markdown to a file, ending it with a newline.

    Parent directories are created as needed. The content goes to a temporary
    file in the target directory which then replaces the target, so readers
    never observe a partial file. An existing target keeps its permissions.

    Args:
        filepath: Destination path.
        markdown: Polished Markdown.

    Raises:
        IOError: If the directory cannot be created or the file cannot be written.

    Examples:
        write_markdown(Path("out/page.md"), "# Title")
    """
    if not markdown.endswith("\n"):
        markdown += "\n"

    parent = filepath.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        error_message = f"Failed to create output directory {parent}: {error}"
        raise IOError(error_message) from error

    try:
        permissions = stat.S_IMODE(os.stat(filepath).st_mode)
    except FileNotFoundError:
        permissions = None

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(markdown)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        if permissions is not None:
            os.chmod(temp_path, permissions)
        else:
            # NamedTemporaryFile creates 0600 files; apply the usual umask instead
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(temp_path, 0o666 & ~umask)

        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Failed to write output file {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
