"""Pydantic v2 models describing a multi-tenant Nextcloud deployment.

The models accept both the snake_case attribute names and the camelCase keys
used by the browser form (``adminUser``, ``projectDir``, ``acmeEmail``), so a
form payload can be validated as-is.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ncgen.config import ConfigError

_FIELD_NAMES = {"projectDir": "project_dir", "acmeEmail": "acme_email"}


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class Instance(BaseModel):
    """One Nextcloud tenant: a public domain and its admin login."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    domain: str = Field(..., description="Fully-qualified hostname, e.g. 'cloud.example.com'")
    admin_user: str = Field(..., alias="adminUser", description="Nextcloud admin login name")

    @field_validator("domain", "admin_user")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _require_text(value)


class DeploymentConfig(BaseModel):
    """The whole input of the script composer.

    Instance order matters: the instance at position ``i`` is rendered with
    ordinal ``i + 1`` in every generated identifier.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    project_dir: str = Field(..., alias="projectDir", description="Target directory on the host")
    acme_email: str = Field(..., alias="acmeEmail", description="Let's Encrypt contact address")
    instances: tuple[Instance, ...] = Field(..., min_length=1)

    @field_validator("project_dir", "acme_email")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _require_text(value)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str | Path | None = None) -> "DeploymentConfig":
        """Validate a plain mapping, converting failures to ``ConfigError``."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(_format_validation_error(exc), source) from exc

    @classmethod
    def from_file(cls, path: str | Path) -> "DeploymentConfig":
        """Load and validate a deployment description file.

        Raises:
            ConfigError: If the file cannot be read or fails validation.
        """
        return cls.from_dict(read_config_file(path), path)


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read a ``.json``, ``.yaml`` or ``.yml`` file into a plain mapping.

    Top-level camelCase keys are normalised to their snake_case field
    names; nothing is validated beyond the file being a mapping.

    Raises:
        ConfigError: If the file is missing, unreadable, of an unsupported
            type, or malformed.
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix not in (".json", ".yaml", ".yml"):
        raise ConfigError(f"unsupported file type '{suffix or '(none)'}'", file_path)

    try:
        raw = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError("cannot decode file as UTF-8", file_path) from exc
    except OSError as exc:
        raise ConfigError(f"cannot read file ({exc.strerror or exc})", file_path) from exc

    try:
        data = json.loads(raw) if suffix == ".json" else yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"malformed content: {exc}", file_path) from exc

    if not isinstance(data, dict):
        raise ConfigError("top-level value must be a mapping", file_path)
    return {_FIELD_NAMES.get(key, key): value for key, value in data.items()}


def _format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into a single readable line per problem."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "(root)"
        problems.append(f"{location}: {err['msg']}")
    return "; ".join(problems)
