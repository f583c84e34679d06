"""Nextcloud Docker Generator.

Turns a small deployment description (project directory, ACME e-mail and a
list of domain/admin-user pairs) into a single shell script that stands up a
multi-tenant Nextcloud stack behind Caddy.

Quick usage::

    from ncgen.composer import DeploymentConfig, compose

    config = DeploymentConfig(
        project_dir="nextcloud-caddy",
        acme_email="admin@example.com",
        instances=[{"domain": "cloud.example.com", "admin_user": "admin"}],
    )
    script = compose(config)
"""

__version__ = "0.1.0"
