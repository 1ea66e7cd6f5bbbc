"""
Tests for the GitHub billing API client.
"""

import httpx
import pytest

from github_billing_exporter.config.schema import GitHubConfig
from github_billing_exporter.utils.github_api import GitHubClient, GitHubError, GitHubSession


def make_client(handler, token: str | None = "t0ken") -> GitHubClient:
    return GitHubClient(token, base_url="https://api.example.test", transport=httpx.MockTransport(handler))


def test_actions_billing_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={
            "total_minutes_used": 305,
            "total_paid_minutes_used": 0,
            "included_minutes": 3000,
            "minutes_used_breakdown": {"UBUNTU": 205, "MACOS": 10, "WINDOWS": 90},
        })

    with make_client(handler) as client:
        billing = client.get_actions_billing("octo-org")

    assert billing.total_minutes_used == 305.0
    assert billing.included_minutes == 3000.0
    assert billing.minutes_used_breakdown == {"UBUNTU": 205.0, "MACOS": 10.0, "WINDOWS": 90.0}

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/orgs/octo-org/settings/billing/actions"
    assert request.headers["Authorization"] == "Bearer t0ken"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert "X-GitHub-Api-Version" in request.headers


def test_packages_billing() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/orgs/octo-org/settings/billing/packages"
        return httpx.Response(200, json={
            "total_gigabytes_bandwidth_used": 50,
            "total_paid_gigabytes_bandwidth_used": 40,
            "included_gigabytes_bandwidth": 10,
        })

    with make_client(handler) as client:
        billing = client.get_packages_billing("octo-org")

    assert billing.total_gigabytes_bandwidth_used == 50.0
    assert billing.total_paid_gigabytes_bandwidth_used == 40.0
    assert billing.included_gigabytes_bandwidth == 10.0


def test_shared_storage_billing_missing_fields_default_to_zero() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/orgs/octo-org/settings/billing/shared-storage"
        return httpx.Response(200, json={"days_left_in_billing_cycle": 20})

    with make_client(handler) as client:
        billing = client.get_shared_storage_billing("octo-org")

    assert billing.days_left_in_billing_cycle == 20.0
    assert billing.estimated_paid_storage_for_month == 0.0
    assert billing.estimated_storage_for_month == 0.0


def test_error_response_raises_github_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Must have admin rights to Repository."})

    with make_client(handler) as client:
        with pytest.raises(GitHubError, match="admin rights") as exc_info:
            client.get_actions_billing("octo-org")

    assert exc_info.value.status == 403


def test_error_response_without_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad gateway")

    with make_client(handler) as client:
        with pytest.raises(GitHubError, match="502"):
            client.get_packages_billing("octo-org")


def test_non_object_body_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    with make_client(handler) as client:
        with pytest.raises(GitHubError, match="unexpected response"):
            client.get_actions_billing("octo-org")


def test_no_token_sends_no_authorization() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    with make_client(handler, token=None) as client:
        client.get_actions_billing("octo-org")

    assert "Authorization" not in seen[0].headers


def test_session_creates_client_lazily() -> None:
    session = GitHubSession(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
    session.configure(GitHubConfig(token="t0ken", api_url="https://ghe.example.test/api/v3"))

    client = session.client

    assert session.client is client
    assert client.base_url == "https://ghe.example.test/api/v3"
    session.close()


def test_session_cannot_be_reconfigured_after_use() -> None:
    session = GitHubSession(GitHubConfig(token="t0ken"))
    session.client

    with pytest.raises(RuntimeError):
        session.configure(GitHubConfig(token="other"))
    session.close()


def test_redirect_without_location_is_an_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(301, json={
            "message": "Moved Permanently",
            "url": "https://api.example.test/organizations/1/settings/billing/actions",
        })

    with make_client(handler) as client:
        with pytest.raises(GitHubError, match="Moved Permanently") as exc_info:
            client.get_actions_billing("renamed-org")

    assert exc_info.value.status == 301


def test_redirect_is_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/orgs/renamed-org/"):
            return httpx.Response(
                301,
                headers={"Location": "https://api.example.test/organizations/1/settings/billing/actions"},
                json={"message": "Moved Permanently"},
            )
        assert request.url.path == "/organizations/1/settings/billing/actions"
        return httpx.Response(200, json={"total_minutes_used": 12})

    with make_client(handler) as client:
        billing = client.get_actions_billing("renamed-org")

    assert billing.total_minutes_used == 12.0
