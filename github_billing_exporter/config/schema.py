"""
Configuration schema with dataclasses for validation and type safety.

Defines all configuration sections, their fields and defaults.
"""

from dataclasses import dataclass, field

from ..const import DEFAULT_API_URL, DEFAULT_LISTEN_ADDRESS, DEFAULT_REQUEST_TIMEOUT


@dataclass
class GitHubConfig:
    """GitHub API access configuration."""

    token: str | None = None
    orgs: list[str] = field(default_factory=list)
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    @staticmethod
    def parse_orgs(value: str | None) -> list[str]:
        """Split a comma-separated organization list, dropping empty items."""
        if not value:
            return []
        return [org.strip() for org in value.split(",") if org.strip()]


@dataclass
class WebConfig:
    """Metrics HTTP endpoint configuration."""

    listen_address: str = DEFAULT_LISTEN_ADDRESS
    disable_exporter_metrics: bool = False

    @property
    def host(self) -> str:
        """Bind host; empty means all interfaces."""
        host, _, _ = self.listen_address.rpartition(":")
        return host.strip("[]") or "0.0.0.0"

    @property
    def port(self) -> int:
        _, _, port = self.listen_address.rpartition(":")
        return int(port)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    file: str | None = None
    colors: bool = True


@dataclass
class CollectorToggle:
    """
    One row of the collector enablement table.

    `overridden` records whether the value was set explicitly, separately
    from the value itself.
    """

    name: str
    overridden: bool
    value: bool


@dataclass
class Config:
    """Root configuration object."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    toggles: list[CollectorToggle] = field(default_factory=list)
    list_collectors: bool = False
