"""
GitHub billing API client.

Thin synchronous wrapper around httpx for the organization billing
endpoints. A single client is shared by all collectors; httpx.Client is
safe to use from several threads.
"""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from ..config.schema import GitHubConfig
from ..const import APP_NAME, APP_VERSION, DEFAULT_API_URL, DEFAULT_API_VERSION, DEFAULT_REQUEST_TIMEOUT


class GitHubError(Exception):
    """Exception for GitHub API errors."""

    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"GitHub API error {status}: {message}")


def _number(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    return float(value) if value is not None else 0.0


@dataclass
class ActionsBilling:
    """GitHub Actions minutes for the current billing cycle."""

    total_minutes_used: float = 0.0
    total_paid_minutes_used: float = 0.0
    included_minutes: float = 0.0
    minutes_used_breakdown: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ActionsBilling":
        breakdown = data.get("minutes_used_breakdown") or {}
        return cls(
            total_minutes_used=_number(data, "total_minutes_used"),
            total_paid_minutes_used=_number(data, "total_paid_minutes_used"),
            included_minutes=_number(data, "included_minutes"),
            minutes_used_breakdown={
                runner: float(minutes) for runner, minutes in breakdown.items() if minutes is not None
            },
        )


@dataclass
class PackagesBilling:
    """GitHub Packages bandwidth for the current billing cycle."""

    total_gigabytes_bandwidth_used: float = 0.0
    total_paid_gigabytes_bandwidth_used: float = 0.0
    included_gigabytes_bandwidth: float = 0.0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PackagesBilling":
        return cls(
            total_gigabytes_bandwidth_used=_number(data, "total_gigabytes_bandwidth_used"),
            total_paid_gigabytes_bandwidth_used=_number(data, "total_paid_gigabytes_bandwidth_used"),
            included_gigabytes_bandwidth=_number(data, "included_gigabytes_bandwidth"),
        )


@dataclass
class SharedStorageBilling:
    """Shared storage (Actions artifacts and Packages) estimate."""

    days_left_in_billing_cycle: float = 0.0
    estimated_paid_storage_for_month: float = 0.0
    estimated_storage_for_month: float = 0.0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "SharedStorageBilling":
        return cls(
            days_left_in_billing_cycle=_number(data, "days_left_in_billing_cycle"),
            estimated_paid_storage_for_month=_number(data, "estimated_paid_storage_for_month"),
            estimated_storage_for_month=_number(data, "estimated_storage_for_month"),
        )


class GitHubClient:
    """
    GitHub REST API client for organization billing.

    Usage:
        with GitHubClient(token) as client:
            billing = client.get_actions_billing("my-org")
    """

    def __init__(
        self,
        token: str | None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: Personal access token or app token
            base_url: API base URL (GitHub Enterprise Server uses /api/v3)
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"{APP_NAME.replace(' ', '-')}/{APP_VERSION}",
            "X-GitHub-Api-Version": DEFAULT_API_VERSION,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    def _get_json(self, path: str) -> dict[str, Any]:
        """
        GET request returning a JSON object.

        Raises:
            GitHubError: On a non-2xx response or a non-object body
            httpx.HTTPError: On transport failures
        """
        response = self._client.get(path)

        if not response.is_success:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            raise GitHubError(response.status_code, message or response.reason_phrase)

        data = response.json()
        if not isinstance(data, dict):
            raise GitHubError(response.status_code, f"unexpected response body for {path}")
        return data

    def _billing_path(self, org: str, resource: str) -> str:
        return f"/orgs/{quote(org, safe='')}/settings/billing/{resource}"

    def get_actions_billing(self, org: str) -> ActionsBilling:
        return ActionsBilling.from_json(self._get_json(self._billing_path(org, "actions")))

    def get_packages_billing(self, org: str) -> PackagesBilling:
        return PackagesBilling.from_json(self._get_json(self._billing_path(org, "packages")))

    def get_shared_storage_billing(self, org: str) -> SharedStorageBilling:
        return SharedStorageBilling.from_json(self._get_json(self._billing_path(org, "shared-storage")))

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class GitHubSession:
    """
    Shared GitHub settings and client for all collectors.

    Collectors are registered before flags are parsed, so the session is
    configured afterwards and the client is only created on first use.
    """

    def __init__(self, config: GitHubConfig | None = None, transport: httpx.BaseTransport | None = None):
        self.config = config or GitHubConfig()
        self._transport = transport
        self._client: GitHubClient | None = None

    def configure(self, config: GitHubConfig) -> None:
        """Replace the settings; must be called before the client is used."""
        if self._client is not None:
            raise RuntimeError("GitHub client already created")
        self.config = config

    @property
    def client(self) -> GitHubClient:
        if self._client is None:
            self._client = GitHubClient(
                self.config.token,
                base_url=self.config.api_url,
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
