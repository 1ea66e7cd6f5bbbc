"""
Configuration loader for command-line flags and environment variables.
"""

import argparse
import os
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from ..const import (
    APP_VERSION,
    COLLECTOR_ENV_PREFIX,
    DEFAULT_API_URL,
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_REQUEST_TIMEOUT,
)
from ..logging import LEVELS
from .schema import CollectorToggle, Config, GitHubConfig, LoggingConfig, WebConfig

if TYPE_CHECKING:
    from ..registry import Registry


TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def parse_bool(value: str, source: str) -> bool:
    """Parse a boolean from an environment value."""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for {source}: {value!r}")


def collector_env_var(name: str) -> str:
    """Environment variable toggling a collector, e.g. GITHUB_BILLING_COLLECTOR_ACTIONS."""
    return COLLECTOR_ENV_PREFIX + name.upper().replace("-", "_").replace(".", "_")


class ConfigLoader:
    """
    Loads configuration from command-line arguments and the environment.

    One --collector.<name> / --no-collector.<name> flag pair is generated for
    each collector in the registry, so collectors must be registered first.

    Usage:
        loader = ConfigLoader(registry)
        config = loader.load(sys.argv[1:])
        registry.apply(config.toggles)
    """

    def __init__(self, registry: "Registry", environ: Mapping[str, str] | None = None):
        self.registry = registry
        self.environ = os.environ if environ is None else environ

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser, including per-collector toggles."""
        parser = argparse.ArgumentParser(
            prog="github-billing-exporter",
            description="Prometheus exporter for GitHub organization billing",
        )

        parser.add_argument(
            "--github-token",
            metavar="TOKEN",
            help="GitHub token to access the API (env: GITHUB_TOKEN)",
        )
        parser.add_argument(
            "--github-orgs",
            metavar="ORGS",
            help="Comma-separated organizations to get metrics from (env: GITHUB_ORGS)",
        )
        parser.add_argument(
            "--github-api-url",
            metavar="URL",
            help=f"GitHub API base URL (env: GITHUB_API_URL, default: {DEFAULT_API_URL})",
        )
        parser.add_argument(
            "--github-timeout",
            metavar="SECONDS",
            type=float,
            default=DEFAULT_REQUEST_TIMEOUT,
            help=f"HTTP timeout for GitHub API requests (default: {DEFAULT_REQUEST_TIMEOUT})",
        )

        parser.add_argument(
            "--web.listen-address",
            dest="listen_address",
            metavar="ADDRESS",
            default=DEFAULT_LISTEN_ADDRESS,
            help=f"Address to expose metrics on (default: {DEFAULT_LISTEN_ADDRESS})",
        )
        parser.add_argument(
            "--web.disable-exporter-metrics",
            dest="disable_exporter_metrics",
            action="store_true",
            help="Exclude process, platform and GC metrics about the exporter itself",
        )

        parser.add_argument(
            "--log-level",
            choices=sorted(LEVELS),
            default="info",
            help="Console log level (default: info)",
        )
        parser.add_argument(
            "--log-file",
            metavar="PATH",
            help="Write logs to file",
        )
        parser.add_argument(
            "--no-color",
            action="store_true",
            help="Disable colored output",
        )

        parser.add_argument(
            "--list-collectors",
            action="store_true",
            help="Print collectors and their enabled state, then exit",
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {APP_VERSION}",
        )

        group = parser.add_argument_group("collectors")
        for entry in self.registry:
            group.add_argument(
                f"--collector.{entry.name}",
                dest=self._dest(entry.name),
                action=argparse.BooleanOptionalAction,
                default=None,
                help=f"Enable the {entry.name} collector (default: {entry.default_state}).",
            )

        return parser

    def load(self, argv: Sequence[str] | None = None) -> Config:
        """
        Parse arguments and environment into a Config.

        Args:
            argv: Command-line arguments (sys.argv[1:] if None)

        Returns:
            Config object

        Raises:
            ConfigError: If a value is malformed
        """
        args = self.build_parser().parse_args(argv)

        github = GitHubConfig(
            token=args.github_token or self.environ.get("GITHUB_TOKEN") or None,
            orgs=GitHubConfig.parse_orgs(args.github_orgs or self.environ.get("GITHUB_ORGS")),
            api_url=(args.github_api_url or self.environ.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
            timeout=args.github_timeout,
        )
        if github.timeout <= 0:
            raise ConfigError(f"GitHub timeout must be positive: {github.timeout}")

        web = WebConfig(
            listen_address=args.listen_address,
            disable_exporter_metrics=args.disable_exporter_metrics,
        )
        self._check_listen_address(web)

        return Config(
            github=github,
            web=web,
            logging=LoggingConfig(
                level=args.log_level,
                file=args.log_file,
                colors=not args.no_color,
            ),
            toggles=self._toggles(args),
            list_collectors=args.list_collectors,
        )

    def validate(self, config: Config) -> list[str]:
        """
        Check a loaded configuration for likely mistakes.

        Returns:
            List of warning messages
        """
        warnings = []

        if not config.github.token:
            warnings.append("No GitHub token configured (--github-token or GITHUB_TOKEN)")

        if not config.github.orgs:
            warnings.append("No organizations configured (--github-orgs or GITHUB_ORGS)")

        resolved = {entry.name: entry.default_enabled for entry in self.registry}
        for toggle in config.toggles:
            if toggle.overridden:
                resolved[toggle.name] = toggle.value
        if resolved and not any(resolved.values()):
            warnings.append("All collectors are disabled")

        return warnings

    def _toggles(self, args: argparse.Namespace) -> list[CollectorToggle]:
        """Build the enablement table; flags win over environment."""
        toggles = []
        for entry in self.registry:
            value = getattr(args, self._dest(entry.name))
            if value is None:
                env_name = collector_env_var(entry.name)
                env_value = self.environ.get(env_name)
                if env_value is not None and env_value.strip():
                    value = parse_bool(env_value, env_name)

            if value is None:
                toggles.append(CollectorToggle(entry.name, overridden=False, value=entry.default_enabled))
            else:
                toggles.append(CollectorToggle(entry.name, overridden=True, value=value))
        return toggles

    @staticmethod
    def _dest(name: str) -> str:
        return "collector_" + name.replace("-", "_").replace(".", "_")

    @staticmethod
    def _check_listen_address(web: WebConfig) -> None:
        if ":" not in web.listen_address:
            raise ConfigError(f"Listen address must be host:port: {web.listen_address!r}")
        try:
            port = web.port
        except ValueError:
            raise ConfigError(f"Invalid port in listen address: {web.listen_address!r}") from None
        if not 0 <= port <= 65535:
            raise ConfigError(f"Port out of range in listen address: {web.listen_address!r}")
