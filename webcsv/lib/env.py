"""Environment helpers for the CLI, the service and the schema registry.

``load_env_file`` reads a ``.env`` file from the working directory (the
same file :class:`~webcsv.lib.settings.WebCSVSettings` reads), so values
in it are visible to ``${VAR}`` references in YAML schema files too.

Uses python-dotenv for .env file loading.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import find_dotenv, load_dotenv

__all__ = ["expand_env_vars", "expand_config", "load_env_file"]

# ${NAME}, ${NAME:-fallback} or $NAME
ENV_VAR_PATTERN = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}"
    r"|\$(?P<bare>[A-Za-z_][A-Za-z0-9_]*)"
)


def load_env_file(
    path: Optional[Union[str, Path]] = None,
    *,
    override: bool = False,
) -> bool:
    """Load environment variables from a .env file.

    Args:
        path: Path to the file. If None, ``.env`` is searched for from the
              current directory upwards.
        override: Replace variables that are already set

    Returns:
        True if a file was found and loaded
    """
    if path is None:
        path = find_dotenv(usecwd=True)
        if not path:
            return False
    return load_dotenv(dotenv_path=path, override=override)


def expand_env_vars(value: str, *, strict: bool = False) -> str:
    """Expand ``${NAME}``, ``${NAME:-fallback}`` and ``$NAME`` references.

    Unset variables without a fallback are left as written unless
    ``strict`` is set.

    Raises:
        KeyError: In strict mode, for an unset variable without fallback

    Example:
        >>> os.environ["PEOPLE_SCHEMA_VERSION"] = "1.0"
        >>> expand_env_vars("ver:${PEOPLE_SCHEMA_VERSION},hdr:${PEOPLE_HEADER:-false}")
        'ver:1.0,hdr:false'
    """

    def replace(match: re.Match[str]) -> str:
        name = match["braced"] or match["bare"]
        if name in os.environ:
            return os.environ[name]
        if match["fallback"] is not None:
            return match["fallback"]
        if strict:
            raise KeyError(f"Environment variable not set: {name}")
        return match.group(0)

    return ENV_VAR_PATTERN.sub(replace, value)


def expand_config(value: Any, *, strict: bool = False) -> Any:
    """Expand environment references in every string of a parsed YAML value."""
    if isinstance(value, str):
        return expand_env_vars(value, strict=strict)
    if isinstance(value, dict):
        return {key: expand_config(item, strict=strict) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_config(item, strict=strict) for item in value]
    return value
