"""Configuration resolution with XDG paths and a project-local config file.

This module handles all settings for a generation run:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.vantagegen/`` on macOS and Windows. Only the data directory is used,
  for crash logs. See :func:`get_data_dir`.
* **Project config** -- an optional ``./vantagegen.json`` pinning the
  document source, output path and emitter options for a repository.
  See :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and model defaults into one
  :class:`~vantagegen.models.GeneratorConfig`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from vantagegen.exceptions import ConfigError, InvalidUsageError
from vantagegen.models import ClientVariant, GeneratorConfig, ProjectConfig

_APP_NAME = "vantagegen"
_PROJECT_CONFIG_FILENAME = "vantagegen.json"

# Environment variables, in GeneratorConfig field order.
_ENV_VARS: dict[str, str] = {
    "document": "VANTAGEGEN_DOCUMENT",
    "output": "VANTAGEGEN_OUTPUT",
    "base_url": "VANTAGEGEN_BASE_URL",
    "variant": "VANTAGEGEN_VARIANT",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/vantagegen/`` (default
    ``~/.local/share/vantagegen/``). On macOS/Windows: ``~/.vantagegen/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> ProjectConfig:
    """Load project-local configuration from ``vantagegen.json``.

    Args:
        directory: Where to look. Defaults to the current working directory.

    Returns:
        The parsed :class:`~vantagegen.models.ProjectConfig`. All fields are
        ``None`` when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or unknown
            or ill-typed keys.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return ProjectConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ProjectConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_document: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_client_class: Optional[str] = None,
    cli_variant: Optional[ClientVariant] = None,
    cli_emit_defaults: Optional[bool] = None,
) -> GeneratorConfig:
    """Resolve the generator settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_*`` arguments that are not ``None``)
        2. Environment variables (``VANTAGEGEN_DOCUMENT``,
           ``VANTAGEGEN_OUTPUT``, ``VANTAGEGEN_BASE_URL``,
           ``VANTAGEGEN_VARIANT``)
        3. Project config (``./vantagegen.json``)
        4. Defaults declared on :class:`~vantagegen.models.GeneratorConfig`

    Returns:
        The effective :class:`~vantagegen.models.GeneratorConfig`.

    Raises:
        InvalidUsageError: If no document source is configured anywhere.
        ConfigError: If the project config or a resolved value is invalid.
    """
    # 3. Project config
    project = load_project_config()
    values: dict[str, Any] = project.model_dump(exclude_none=True)

    # 2. Environment variables
    for field, env_var in _ENV_VARS.items():
        env_value = os.environ.get(env_var)
        if env_value:
            values[field] = env_value

    # 1. CLI flags
    cli_values = {
        "document": cli_document,
        "output": cli_output,
        "base_url": cli_base_url,
        "client_class": cli_client_class,
        "variant": cli_variant,
        "emit_defaults": cli_emit_defaults,
    }
    values.update({k: v for k, v in cli_values.items() if v is not None})

    if not values.get("document"):
        raise InvalidUsageError(
            "No document given. Pass DOCUMENT, set VANTAGEGEN_DOCUMENT, "
            f"or add 'document' to {_PROJECT_CONFIG_FILENAME}"
        )

    try:
        config = GeneratorConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    if not config.client_class.isidentifier():
        raise ConfigError(f"Client class name {config.client_class!r} is not a valid identifier")
    return config
