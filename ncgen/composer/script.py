"""Deployment script composition.

``compose`` is the pure core: a ``DeploymentConfig`` in, the complete shell
script out.  ``ScriptComposer`` binds it to a renderer and adds an async
helper that writes the result to disk.
"""

from __future__ import annotations

import asyncio
import functools
from pathlib import Path

from .fragments import build_fragments
from .models import DeploymentConfig
from .templates import DEPLOY_TEMPLATE, TemplateRenderer


class ScriptComposer:
    """Renders deployment scripts from ``DeploymentConfig`` values.

    Holds no per-call state, so a single composer can be shared freely.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def compose(self, config: DeploymentConfig) -> str:
        """Return the full deployment script for *config*."""
        return self.renderer.render(DEPLOY_TEMPLATE, build_fragments(config))

    async def write_script(self, config: DeploymentConfig, output_path: str | Path) -> Path:
        """Compose the script and write it to *output_path* as an executable.

        Parent directories are created automatically.  Returns the written
        path.
        """
        content = self.compose(config)
        out = Path(output_path)
        await asyncio.to_thread(_write_executable, out, content)
        return out


@functools.lru_cache(maxsize=1)
def _default_composer() -> ScriptComposer:
    return ScriptComposer()


def compose(config: DeploymentConfig) -> str:
    """Compose the deployment script using the bundled template."""
    return _default_composer().compose(config)


def _write_executable(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps "\n" line endings on every platform
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)
    path.chmod(0o755)
