"""Script composer -- renders the multi-tenant Nextcloud deployment script.

Quick usage::

    from ncgen.composer import DeploymentConfig, compose

    config = DeploymentConfig(
        project_dir="nc",
        acme_email="admin@example.com",
        instances=[{"domain": "cloud.example.com", "admin_user": "admin"}],
    )
    script = compose(config)
"""

from ncgen.composer.fragments import build_fragments
from ncgen.composer.models import DeploymentConfig, Instance
from ncgen.composer.script import ScriptComposer, compose
from ncgen.composer.templates import TemplateRenderer

__all__ = [
    "DeploymentConfig",
    "Instance",
    "ScriptComposer",
    "TemplateRenderer",
    "build_fragments",
    "compose",
]
