"""
Entry point for GitHub Billing Exporter.

Usage:
    python -m github_billing_exporter --github-orgs my-org
    python -m github_billing_exporter --help
"""

import sys
from collections.abc import Sequence

from .app import Application
from .collectors import register_builtin_collectors
from .collectors.base import CollectorError
from .config.loader import ConfigError, ConfigLoader
from .logging import LogConfig, get_logger, setup_logging
from .registry import Registry, RegistrationError
from .utils.github_api import GitHubSession

logger = get_logger("main")


def list_collectors(registry: Registry) -> int:
    """Print every collector with its default and resolved state."""
    print(f"{'COLLECTOR':<12} {'DEFAULT':<10} {'STATE':<10} SOURCE")
    for entry in registry:
        state = "enabled" if entry.enabled else "disabled"
        source = "explicit" if entry.overridden else "default"
        print(f"{entry.name:<12} {entry.default_state:<10} {state:<10} {source}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    session = GitHubSession()
    registry = Registry()

    try:
        register_builtin_collectors(registry, session)
    except RegistrationError as e:
        print(f"Collector registration failed: {e}", file=sys.stderr)
        return 1

    loader = ConfigLoader(registry)
    try:
        config = loader.load(argv)
        registry.apply(config.toggles)
    except (ConfigError, RegistrationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        LogConfig(
            console_level=config.logging.level,
            console_colors=config.logging.colors,
            file_enabled=config.logging.file is not None,
            file_path=config.logging.file or LogConfig.file_path,
        )
    )

    if config.list_collectors:
        return list_collectors(registry)

    for warning in loader.validate(config):
        logger.warning(f"Config warning: {warning}")

    for entry in registry:
        if entry.overridden:
            logger.debug(f"Collector {entry.name} explicitly {'enabled' if entry.enabled else 'disabled'}")

    session.configure(config.github)
    app = Application(config, registry, session)

    try:
        app.run()
        return 0
    except CollectorError as e:
        logger.error(f"Startup failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
