"""Where specdoc keeps its settings, and how the effective settings are chosen.

* :func:`get_config_dir` / :func:`get_data_dir` follow the XDG base
  directory layout on Linux and the BSDs and fall back to ``~/.specdoc``
  elsewhere.
* The user's :class:`~specdoc.models.GlobalConfig` lives in
  ``config.json`` under the config directory and is replaced atomically on
  save.
* A repository can pin its descriptions in ``./specdoc.json``.
* :func:`resolve_config` layers CLI flags over ``SPECDOC_*`` environment
  variables over the project file over the user file.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from specdoc.exceptions import ConfigError
from specdoc.models import GlobalConfig
from specdoc.parser.loader import is_remote

_APP_NAME = "specdoc"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specdoc.json"

ENV_SPECS = "SPECDOC_SPECS"
ENV_COLLAPSE = "SPECDOC_COLLAPSE"

_TRUTHY = ("1", "true", "yes", "on")


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: tuple[str, ...], fallback: tuple[str, ...]) -> Path:
    if _is_xdg_platform():
        base = os.environ.get(xdg_var)
        root = Path(base) if base else Path.home().joinpath(*xdg_default)
        path = root / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/specdoc`` (``~/.config/specdoc``), or ``~/.specdoc``. Created on demand."""
    return _app_dir("XDG_CONFIG_HOME", (".config",), ())


def get_data_dir() -> Path:
    """``$XDG_DATA_HOME/specdoc`` (``~/.local/share/specdoc``), or ``~/.specdoc/logs``.

    Crash logs are written below it. Created on demand.
    """
    return _app_dir("XDG_DATA_HOME", (".local", "share"), ("logs",))


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data*; readers see either the old or the new file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
    try:
        os.replace(tmp.name, path)
    except OSError:
        Path(tmp.name).unlink(missing_ok=True)
        raise


# --- User config ---


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read the user config; a missing file means defaults.

    Raises:
        ConfigError: If the file is not JSON or does not validate.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _atomic_write(global_config_path(), json.dumps(config.model_dump(mode="json"), indent=2) + "\n")


# --- Project config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./specdoc.json``, or return ``None`` when there is none.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_specs: Optional[list[str]] = None,
    cli_collapse: Optional[bool] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_specs``, ``cli_collapse``, ``cli_format``)
        2. Environment variables (``SPECDOC_SPECS``, comma separated, and
           ``SPECDOC_COLLAPSE``)
        3. Project config (``./specdoc.json``)
        4. User config (``~/.config/specdoc/config.json``)
        5. Defaults

    Raises:
        ConfigError: If a config file is invalid.
    """
    config = load_global_config()

    project = load_project_config()
    if project is not None:
        merged = config.model_dump(mode="json")
        merged.update({k: v for k, v in project.items() if k in GlobalConfig.model_fields})
        try:
            config = GlobalConfig.model_validate(merged)
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    env_specs = os.environ.get(ENV_SPECS)
    if env_specs:
        config.specs = [s.strip() for s in env_specs.split(",") if s.strip()]
    env_collapse = os.environ.get(ENV_COLLAPSE)
    if env_collapse:
        config.collapse = env_collapse.strip().lower() in _TRUTHY

    if cli_specs:
        config.specs = list(cli_specs)
    if cli_collapse is not None:
        config.collapse = cli_collapse
    if cli_format is not None:
        config.output.format = cli_format

    return config


def resolve_spec_locations(config: GlobalConfig) -> list[str]:
    """Return the configured spec locations with relative paths joined onto ``spec_dir``.

    URLs, absolute paths, and ``-`` (stdin) are returned unchanged.
    """
    locations = []
    for spec in config.specs:
        if config.spec_dir and spec != "-" and not is_remote(spec) and not Path(spec).is_absolute():
            spec = str(Path(config.spec_dir) / spec)
        locations.append(spec)
    return locations
