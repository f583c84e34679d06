"""Command-line front end for the Nextcloud Docker Generator.

Usage::

    ncgen --config deployment.yaml -o deploy.sh
    ncgen --project-dir nc --email admin@example.com \\
          --instance cloud.example.com --instance files.example.org:root
    python -m ncgen.cli --config deployment.json > deploy.sh
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from jinja2 import TemplateNotFound

from ncgen import __version__
from ncgen.composer import DeploymentConfig, ScriptComposer, TemplateRenderer
from ncgen.composer.models import read_config_file
from ncgen.config import ConfigError, GeneratorSettings
from ncgen.utils import (
    print_error,
    print_success,
    print_summary_table,
    print_usage_instructions,
    write_raw,
)


def parse_instance(value: str, default_admin: str) -> dict[str, str]:
    """Parse ``DOMAIN[:ADMIN]`` into an instance mapping.

    Raises:
        ConfigError: If the domain part is empty.
    """
    domain, sep, admin = value.partition(":")
    if not domain.strip():
        raise ConfigError(f"invalid --instance value {value!r}: domain is empty")
    return {"domain": domain, "admin_user": admin if sep else default_admin}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ncgen",
        description="Generate a multi-tenant Nextcloud deployment script with Caddy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  ncgen --config deployment.yaml -o deploy.sh\n"
            "  ncgen --email admin@example.com --instance cloud.example.com\n"
            "  ncgen --email a@b.com --instance a.example.com --instance b.example.com:root\n"
        ),
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="JSON or YAML file with projectDir, acmeEmail and instances",
    )
    parser.add_argument(
        "--project-dir",
        default=None,
        help="Directory created on the server (default: nextcloud-caddy)",
    )
    parser.add_argument(
        "--email",
        default=None,
        help="Let's Encrypt contact e-mail",
    )
    parser.add_argument(
        "--instance", "-i",
        action="append",
        default=[],
        metavar="DOMAIN[:ADMIN]",
        help="Nextcloud instance; repeat for more (admin defaults to 'admin')",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the script to this file instead of stdout",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def load_config(args: argparse.Namespace, settings: GeneratorSettings) -> DeploymentConfig:
    """Merge the config file (if any) with command-line overrides and validate.

    Command-line values win over file values.  Instances given on the command
    line replace the file's instance list.
    """
    data: dict[str, Any] = {}
    if args.config:
        data = read_config_file(args.config)

    if args.project_dir is not None:
        data["project_dir"] = args.project_dir
    data.setdefault("project_dir", settings.default_project_dir)

    if args.email is not None:
        data["acme_email"] = args.email
    if "acme_email" not in data:
        raise ConfigError("an ACME e-mail is required (--email or acmeEmail in --config)")

    if args.instance:
        data["instances"] = [
            parse_instance(value, settings.default_admin_user) for value in args.instance
        ]
    if not data.get("instances"):
        raise ConfigError("at least one instance is required (--instance or instances in --config)")

    return DeploymentConfig.from_dict(data, args.config)


def run(argv: Optional[Sequence[str]] = None, settings: GeneratorSettings | None = None) -> int:
    """Execute the CLI and return the process exit status."""
    args = build_parser().parse_args(argv)
    settings = settings or GeneratorSettings.from_env()

    try:
        config = load_config(args, settings)
    except ConfigError as exc:
        print_error(str(exc))
        return 1

    renderer = TemplateRenderer(settings.template_dir)
    composer = ScriptComposer(renderer)
    output = Path(args.output) if args.output else settings.output_path

    try:
        if output is None:
            write_raw(composer.compose(config))
            return 0
        path = asyncio.run(composer.write_script(config, output))
    except TemplateNotFound as exc:
        print_error(f"template {exc.name} not found in {renderer.template_dir}")
        return 1
    except OSError as exc:
        print_error(f"cannot write {output or 'stdout'}: {exc.strerror or exc}")
        return 1

    print_success(f"Deployment script written to {path}")
    print_summary_table(
        {
            "Project directory": config.project_dir,
            "ACME e-mail": config.acme_email,
            "Instances": str(len(config.instances)),
            "Output": str(path),
        },
        title="Nextcloud deployment",
    )
    print_usage_instructions(path.name)
    return 0


def main() -> None:
    """CLI entry point for ``ncgen`` and ``python -m ncgen.cli``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
