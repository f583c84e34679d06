"""Fragment generators for the deployment script.

Each public function maps the ordered instance list to one text fragment per
instance and joins them with a fixed separator.  Instances are numbered by
position (1-based); that ordinal namespaces every per-instance identifier
(``DOMAIN2``, ``nginx2``, ``backend2``, ...).  Values are interpolated
verbatim: nothing here quotes or escapes shell metacharacters.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from .models import DeploymentConfig, Instance

# Shared, unnumbered infrastructure
PROXY_SERVICE = "caddy"
PROXY_NETWORK = "proxy-tier"

SECURITY_HEADERS: tuple[str, ...] = (
    'Strict-Transport-Security "max-age=31536000; includeSubDomains; preload"',
    'X-Content-Type-Options "nosniff"',
    'X-Frame-Options "SAMEORIGIN"',
    'X-XSS-Protection "1; mode=block"',
    'X-Robots-Tag "noindex, nofollow"',
    "-X-Powered-By",
)

SUPPRESS_FAILURE = "2>/dev/null || true"


def _numbered(instances: Sequence[Instance]) -> Iterator[tuple[int, Instance]]:
    return enumerate(instances, start=1)


# ---------------------------------------------------------------------------
# Configuration block and banner
# ---------------------------------------------------------------------------


def domain_vars(instances: Sequence[Instance]) -> str:
    """``DOMAIN{N}="{domain}"`` assignments, one per line."""
    return "\n".join(f'DOMAIN{n}="{inst.domain}"' for n, inst in _numbered(instances))


def domain_list(instances: Sequence[Instance]) -> str:
    """Space-separated ``$DOMAIN{N}`` tokens for the DNS check loop."""
    return " ".join(f"$DOMAIN{n}" for n, _ in _numbered(instances))


def banner_domains(instances: Sequence[Instance]) -> str:
    return "\n".join(
        f'echo "  • ${{GREEN}}${{DOMAIN{n}}}${{NC}} - Nextcloud Instance {n}"'
        for n, _ in _numbered(instances)
    )


# ---------------------------------------------------------------------------
# Secrets and environment file
# ---------------------------------------------------------------------------


def password_generation(instances: Sequence[Instance]) -> str:
    """DB, Redis and admin passwords per instance via ``generate_password``."""
    return "\n".join(
        f"DB{n}_PASSWORD=$(generate_password)\n"
        f"REDIS{n}_PASSWORD=$(generate_password)\n"
        f"NC{n}_ADMIN_PASSWORD=$(generate_password)"
        for n, _ in _numbered(instances)
    )


def env_content(instances: Sequence[Instance]) -> str:
    """Body of the ``.env`` heredoc.

    The admin user is written literally; passwords are references expanded
    by the shell when the heredoc is written.
    """
    return "\n".join(
        f"DB{n}_PASSWORD=${{DB{n}_PASSWORD}}\n"
        f"REDIS{n}_PASSWORD=${{REDIS{n}_PASSWORD}}\n"
        f"NC{n}_ADMIN_USER={inst.admin_user}\n"
        f"NC{n}_ADMIN_PASSWORD=${{NC{n}_ADMIN_PASSWORD}}"
        for n, inst in _numbered(instances)
    )


# ---------------------------------------------------------------------------
# Caddy
# ---------------------------------------------------------------------------


def caddyfile_entries(instances: Sequence[Instance]) -> str:
    """One site block per instance proxying to its nginx container."""
    headers = "\n".join(f"        {header}" for header in SECURITY_HEADERS)
    return "\n\n".join(
        f"${{DOMAIN{n}}} {{\n"
        f"    reverse_proxy nginx{n}:80\n"
        f"\n"
        f"    header {{\n"
        f"{headers}\n"
        f"    }}\n"
        f"}}"
        for n, _ in _numbered(instances)
    )


def caddy_depends_on(instances: Sequence[Instance]) -> str:
    """Continuation of the caddy ``depends_on`` list (first dash is in the template)."""
    return "\n      - ".join(f"nginx{n}" for n, _ in _numbered(instances))


# ---------------------------------------------------------------------------
# docker-compose.yml
# ---------------------------------------------------------------------------


def _service_stanzas(n: int, inst: Instance) -> str:
    """App, nginx, cron, postgres and redis services for one instance."""
    return f"""  # Nextcloud Instance {n} - {inst.domain}
  nextcloud{n}:
    image: nextcloud:fpm-alpine
    container_name: nextcloud{n}-app
    restart: unless-stopped
    environment:
      - POSTGRES_HOST=db{n}
      - POSTGRES_DB=nextcloud{n}
      - POSTGRES_USER=nextcloud{n}
      - POSTGRES_PASSWORD=${{DB{n}_PASSWORD}}
      - REDIS_HOST=redis{n}
      - REDIS_HOST_PASSWORD=${{REDIS{n}_PASSWORD}}
      - NEXTCLOUD_ADMIN_USER=${{NC{n}_ADMIN_USER}}
      - NEXTCLOUD_ADMIN_PASSWORD=${{NC{n}_ADMIN_PASSWORD}}
      - NEXTCLOUD_TRUSTED_DOMAINS={inst.domain}
      - OVERWRITEPROTOCOL=https
      - OVERWRITEHOST={inst.domain}
      - TRUSTED_PROXIES={PROXY_SERVICE} nginx{n}
      - PHP_MEMORY_LIMIT=1G
      - PHP_UPLOAD_LIMIT=10G
    volumes:
      - nc{n}_html:/var/www/html
    networks:
      - backend{n}
      - {PROXY_NETWORK}
    depends_on:
      - db{n}
      - redis{n}

  nginx{n}:
    image: nginx:alpine
    container_name: nginx{n}
    restart: unless-stopped
    volumes:
      - ./nginx/nginx{n}.conf:/etc/nginx/nginx.conf:ro
      - nc{n}_html:/var/www/html:ro
    networks:
      - backend{n}
      - {PROXY_NETWORK}
    depends_on:
      - nextcloud{n}

  nextcloud{n}-cron:
    image: nextcloud:fpm-alpine
    container_name: nextcloud{n}-cron
    restart: unless-stopped
    entrypoint: /cron.sh
    volumes:
      - nc{n}_html:/var/www/html
    networks:
      - backend{n}
    depends_on:
      - db{n}
      - redis{n}

  db{n}:
    image: postgres:15-alpine
    container_name: nextcloud{n}-db
    restart: unless-stopped
    environment:
      POSTGRES_DB: nextcloud{n}
      POSTGRES_USER: nextcloud{n}
      POSTGRES_PASSWORD: ${{DB{n}_PASSWORD}}
    volumes:
      - db{n}_data:/var/lib/postgresql/data
    networks:
      - backend{n}

  redis{n}:
    image: redis:7-alpine
    container_name: nextcloud{n}-redis
    restart: unless-stopped
    command: redis-server --requirepass ${{REDIS{n}_PASSWORD}}
    volumes:
      - redis{n}_data:/data
    networks:
      - backend{n}"""


def nextcloud_services(instances: Sequence[Instance]) -> str:
    return "\n\n".join(_service_stanzas(n, inst) for n, inst in _numbered(instances))


def volumes(instances: Sequence[Instance]) -> str:
    return "\n".join(
        f"  nc{n}_html:\n  db{n}_data:\n  redis{n}_data:" for n, _ in _numbered(instances)
    )


def networks(instances: Sequence[Instance]) -> str:
    """Per-instance internal networks; the proxy network is declared by the template."""
    return "\n".join(f"  backend{n}:\n    internal: true" for n, _ in _numbered(instances))


# ---------------------------------------------------------------------------
# Deployment commands
# ---------------------------------------------------------------------------


def nginx_config_creation(instances: Sequence[Instance]) -> str:
    """Derive ``nginx/nginx{N}.conf`` from the shared template."""
    return "\n".join(
        f"sed 's/NEXTCLOUD_APP/nextcloud{n}-app/g' nginx/nextcloud.conf.template > nginx/nginx{n}.conf"
        for n, _ in _numbered(instances)
    )


def network_creation(instances: Sequence[Instance]) -> str:
    return "\n".join(
        f"docker network create backend{n} {SUPPRESS_FAILURE}" for n, _ in _numbered(instances)
    )


def permission_fixes(instances: Sequence[Instance]) -> str:
    return "\n".join(
        f"docker exec nextcloud{n}-app chown -R www-data:www-data /var/www/html {SUPPRESS_FAILURE}"
        for n, _ in _numbered(instances)
    )


def initial_setup(instances: Sequence[Instance]) -> str:
    """``occ maintenance:install`` per instance.

    The install login stays ``admin``; the configured admin user reaches the
    container through ``NEXTCLOUD_ADMIN_USER`` instead.
    """
    return "\n".join(
        f"docker exec -u www-data nextcloud{n}-app php occ maintenance:install "
        f'--admin-user admin --admin-pass "${{NC{n}_ADMIN_PASSWORD}}" {SUPPRESS_FAILURE}'
        for n, _ in _numbered(instances)
    )


def _occ_settings(n: int, inst: Instance) -> list[tuple[str, str]]:
    return [
        ("trusted_domains 0", inst.domain),
        ("trusted_proxies 0", PROXY_SERVICE),
        ("trusted_proxies 1", f"nginx{n}"),
        ("overwrite.cli.url", f"https://{inst.domain}"),
        ("overwriteprotocol", "https"),
    ]


def nextcloud_config(instances: Sequence[Instance]) -> str:
    """Trusted domain/proxy and overwrite settings, one block per instance."""
    blocks = []
    for n, inst in _numbered(instances):
        blocks.append(
            "\n".join(
                f"docker exec -u www-data nextcloud{n}-app php occ config:system:set "
                f'{key} --value="{value}" {SUPPRESS_FAILURE}'
                for key, value in _occ_settings(n, inst)
            )
        )
    return "\n\n".join(blocks)


# ---------------------------------------------------------------------------
# Credentials report and status check
# ---------------------------------------------------------------------------


def credentials_content(instances: Sequence[Instance]) -> str:
    return "\n\n".join(
        f"${{DOMAIN{n}}}\n"
        f"--------------------------\n"
        f"URL: https://${{DOMAIN{n}}}\n"
        f"Admin User: {inst.admin_user}\n"
        f"Admin Password: ${{NC{n}_ADMIN_PASSWORD}}"
        for n, inst in _numbered(instances)
    )


def db_passwords_credentials(instances: Sequence[Instance]) -> str:
    return "\n".join(f"DB{n}: ${{DB{n}_PASSWORD}}" for n, _ in _numbered(instances))


def service_names(instances: Sequence[Instance]) -> list[str]:
    """Proxy service once, then web, app, db and cache container per instance."""
    names = [PROXY_SERVICE]
    for n, _ in _numbered(instances):
        names.extend([f"nginx{n}", f"nextcloud{n}-app", f"nextcloud{n}-db", f"nextcloud{n}-redis"])
    return names


def service_status_check(instances: Sequence[Instance]) -> str:
    return " ".join(service_names(instances))


# ---------------------------------------------------------------------------
# manage.sh and final summary
# ---------------------------------------------------------------------------


def occ_commands(instances: Sequence[Instance]) -> str:
    """``occ{N})`` case arms forwarding remaining arguments to the instance's occ."""
    return "\n".join(
        f"    occ{n})\n"
        f"        docker exec -u www-data nextcloud{n}-app php occ ${{@:2}}\n"
        f"        ;;"
        for n, _ in _numbered(instances)
    )


def manage_permission_fixes(instances: Sequence[Instance]) -> str:
    return "\n".join(
        f"        docker exec nextcloud{n}-app chown -R www-data:www-data /var/www/html"
        for n, _ in _numbered(instances)
    )


def manage_usage(instances: Sequence[Instance]) -> str:
    return "|".join(f"occ{n}" for n, _ in _numbered(instances))


def final_urls(instances: Sequence[Instance]) -> str:
    # \xf0\x9f\x94\x92 is the UTF-8 lock emoji, decoded by `echo -e`
    return "\n".join(
        f'echo -e "  \\xf0\\x9f\\x94\\x92 ${{GREEN}}https://${{DOMAIN{n}}}${{NC}}"'
        for n, _ in _numbered(instances)
    )


def manage_occ_help(instances: Sequence[Instance]) -> str:
    return "\n".join(
        f'echo "  ./manage.sh occ{n} [command]      - Run occ on instance {n}"'
        for n, _ in _numbered(instances)
    )


# ---------------------------------------------------------------------------
# Template context
# ---------------------------------------------------------------------------

FRAGMENTS = {
    "domain_vars": domain_vars,
    "domain_list": domain_list,
    "banner_domains": banner_domains,
    "password_generation": password_generation,
    "env_content": env_content,
    "caddyfile_entries": caddyfile_entries,
    "nginx_config_creation": nginx_config_creation,
    "caddy_depends_on": caddy_depends_on,
    "nextcloud_services": nextcloud_services,
    "volumes": volumes,
    "networks": networks,
    "network_creation": network_creation,
    "permission_fixes": permission_fixes,
    "initial_setup": initial_setup,
    "nextcloud_config": nextcloud_config,
    "credentials_content": credentials_content,
    "db_passwords_credentials": db_passwords_credentials,
    "service_status_check": service_status_check,
    "manage_permission_fixes": manage_permission_fixes,
    "occ_commands": occ_commands,
    "manage_usage": manage_usage,
    "final_urls": final_urls,
    "manage_occ_help": manage_occ_help,
}


def build_fragments(config: DeploymentConfig) -> dict[str, Any]:
    """Build the full template context for ``deploy.sh.j2``."""
    context: dict[str, Any] = {
        "project_dir": config.project_dir,
        "acme_email": config.acme_email,
    }
    for name, fragment in FRAGMENTS.items():
        context[name] = fragment(config.instances)
    return context
