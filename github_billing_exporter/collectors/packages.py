"""
GitHub Packages billing collector.
"""

from .base import MetricSink, OrganizationCollector, gauge


class PackagesCollector(OrganizationCollector):
    """Collector for GET /orgs/{org}/settings/billing/packages."""

    NAME = "packages"

    def update_org(self, org: str, sink: MetricSink) -> None:
        billing = self.client.get_packages_billing(org)

        metrics = [
            (
                "packages_total_gigabytes_bandwidth_used",
                "Total data transfer used by GitHub Packages in gigabytes",
                billing.total_gigabytes_bandwidth_used,
            ),
            (
                "packages_total_paid_gigabytes_bandwidth_used",
                "Paid data transfer used by GitHub Packages in gigabytes",
                billing.total_paid_gigabytes_bandwidth_used,
            ),
            (
                "packages_included_gigabytes_bandwidth",
                "Included data transfer for GitHub Packages in gigabytes",
                billing.included_gigabytes_bandwidth,
            ),
        ]
        for name, documentation, value in metrics:
            family = gauge(name, documentation, ["org"])
            family.add_metric([org], value)
            sink.emit(family)
