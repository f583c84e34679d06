"""Shared pytest fixtures for the Nextcloud Docker Generator test suite.

Provides reusable fixtures for:
- Deployment configurations with one, two and three instances
- Rendered scripts for those configurations
- Deployment description files (JSON and YAML) on disk
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from ncgen.composer import DeploymentConfig, Instance, compose


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def single_config() -> DeploymentConfig:
    """The canonical one-instance configuration."""
    return DeploymentConfig(
        project_dir="nc",
        acme_email="a@b.com",
        instances=[Instance(domain="cloud.x.com", admin_user="admin")],
    )


@pytest.fixture
def two_config() -> DeploymentConfig:
    """Two tenants with distinct admin users."""
    return DeploymentConfig(
        project_dir="nextcloud-caddy",
        acme_email="ops@example.com",
        instances=[
            Instance(domain="cloud.alpha.com", admin_user="alice"),
            Instance(domain="files.beta.org", admin_user="bob"),
        ],
    )


@pytest.fixture
def three_config() -> DeploymentConfig:
    return DeploymentConfig(
        project_dir="tenants",
        acme_email="le@example.net",
        instances=[
            Instance(domain="one.example.net", admin_user="root1"),
            Instance(domain="two.example.net", admin_user="root2"),
            Instance(domain="three.example.net", admin_user="root3"),
        ],
    )


# ---------------------------------------------------------------------------
# Rendered scripts
# ---------------------------------------------------------------------------


@pytest.fixture
def single_script(single_config: DeploymentConfig) -> str:
    return compose(single_config)


@pytest.fixture
def two_script(two_config: DeploymentConfig) -> str:
    return compose(two_config)


@pytest.fixture
def three_script(three_config: DeploymentConfig) -> str:
    return compose(three_config)


# ---------------------------------------------------------------------------
# Deployment description files
# ---------------------------------------------------------------------------


@pytest.fixture
def json_config_file(tmp_path: Path) -> Path:
    """A deployment description in the browser form's camelCase JSON shape."""
    path = tmp_path / "deployment.json"
    path.write_text(
        json.dumps(
            {
                "projectDir": "nc",
                "acmeEmail": "a@b.com",
                "instances": [
                    {"domain": "cloud.x.com", "adminUser": "admin"},
                    {"domain": "files.x.com", "adminUser": "ops"},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def yaml_config_file(tmp_path: Path) -> Path:
    """A deployment description using snake_case YAML keys."""
    path = tmp_path / "deployment.yaml"
    path.write_text(
        textwrap.dedent(
            """\
            project_dir: nc-yaml
            acme_email: yaml@example.com
            instances:
              - domain: cloud.yaml.com
                admin_user: yadmin
            """
        ),
        encoding="utf-8",
    )
    return path
