"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PQMCTL_*`` prefix (``PQMCTL_RPC__URL`` for nested keys)
  3. TOML file    — ``pqmctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource`. The
TOML file is the one named by ``--config``, else ``$PQMCTL_CONFIG``, else
the nearest ``pqmctl.toml`` in the working directory or a parent of it, so
a project can keep its node URL and descriptor next to the contract sources.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pqmctl.config.models import (
    ConfirmConfig,
    ContractConfig,
    RpcConfig,
    TransactionConfig,
)

CONFIG_FILENAME = "pqmctl.toml"
CONFIG_ENV_VAR = "PQMCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """The config file to load when ``--config`` is not given, if any.

    ``$PQMCTL_CONFIG`` wins when set; naming a missing file there means no
    config at all and the walk-up is skipped.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``pqmctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PqmSettings(BaseSettings):
    """Unified settings for the entire pqmctl CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.  Stored on
    the :class:`AppContext` at the CLI root level.

    Attributes:
        base_dir: Directory relative paths resolve against (parent of
            ``pqmctl.toml``, or CWD if no config found).
        config_path: The TOML file actually loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PQMCTL_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (derived from config location, not read from TOML) ---
    base_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    debug: bool = False

    # --- TOML sections ---
    rpc: RpcConfig = Field(default_factory=RpcConfig)
    contract: ContractConfig = Field(default_factory=ContractConfig)
    transaction: TransactionConfig = Field(default_factory=TransactionConfig)
    confirm: ConfirmConfig = Field(default_factory=ConfirmConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @property
    def descriptor_path(self) -> Path:
        """The contract descriptor file, resolved against :attr:`base_dir`."""
        path = Path(self.contract.descriptor).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        base_dir: Path | None = None,
        overrides: dict[str, dict[str, Any]] | None = None,
        **cli_flags: Any,
    ) -> PqmSettings:
        """Construct settings from CLI invocation.

        Discovers ``pqmctl.toml`` via walk-up (or explicit *config_path*),
        resolves *base_dir* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.

        *overrides* maps section names to partial section values given on
        the command line (``{"rpc": {"url": ...}}``). They are layered on
        top of the TOML and env values for that section rather than
        replacing the whole section.
        """
        toml_path: Path | None = None
        if config_path:
            toml_path = Path(config_path).expanduser()
            if not toml_path.is_file():
                import click

                raise click.ClickException(f"Config file not found: {toml_path}")
        else:
            toml_path = find_config(base_dir)

        resolved_dir = base_dir
        if resolved_dir is None:
            resolved_dir = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            settings = cls(
                base_dir=resolved_dir,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

        if not overrides:
            return settings
        updates: dict[str, Any] = {}
        for section, values in overrides.items():
            current = getattr(settings, section)
            updates[section] = current.model_copy(update=values)
        return settings.model_copy(update=updates)
