"""Nextcloud Docker Generator configuration.

Typed settings for the command-line front end. All settings use Pydantic v2
models so they can be validated at construction time and serialised to/from
JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class ConfigError(Exception):
    """Raised when a deployment description cannot be loaded or is invalid."""

    def __init__(self, message: str, source: str | Path | None = None) -> None:
        self.source = str(source) if source is not None else None
        if self.source:
            message = f"{self.source}: {message}"
        super().__init__(message)


class GeneratorSettings(BaseModel):
    """Defaults applied when a deployment description leaves something out.

    Instances are typically created once by the CLI entry point and then
    passed to whatever needs them.
    """

    default_project_dir: str = Field(default="nextcloud-caddy", min_length=1)
    default_admin_user: str = Field(default="admin", min_length=1)
    output_path: Optional[Path] = Field(
        default=None, description="Where to write the script; stdout when unset"
    )
    template_dir: Optional[Path] = Field(
        default=None, description="Override for the bundled Jinja2 templates"
    )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorSettings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "GeneratorSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            NCGEN_PROJECT_DIR, NCGEN_ADMIN_USER, NCGEN_OUTPUT,
            NCGEN_TEMPLATE_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NCGEN_PROJECT_DIR"):
            kwargs["default_project_dir"] = os.environ["NCGEN_PROJECT_DIR"]
        if os.environ.get("NCGEN_ADMIN_USER"):
            kwargs["default_admin_user"] = os.environ["NCGEN_ADMIN_USER"]
        if os.environ.get("NCGEN_OUTPUT"):
            kwargs["output_path"] = Path(os.environ["NCGEN_OUTPUT"])
        if os.environ.get("NCGEN_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["NCGEN_TEMPLATE_DIR"])
        return cls(**kwargs)
