"""
Shared storage billing collector.

Shared storage covers GitHub Actions artifacts and GitHub Packages.
"""

from .base import MetricSink, OrganizationCollector, gauge


class StorageCollector(OrganizationCollector):
    """Collector for GET /orgs/{org}/settings/billing/shared-storage."""

    NAME = "storage"

    def update_org(self, org: str, sink: MetricSink) -> None:
        billing = self.client.get_shared_storage_billing(org)

        days_left = gauge("storage_days_left_in_billing_cycle", "Days left in the billing cycle", ["org"])
        days_left.add_metric([org], billing.days_left_in_billing_cycle)

        # Estimates are in gigabytes for the whole month
        paid = gauge(
            "storage_estimated_paid_storage_for_month",
            "Estimated paid shared storage for the month in gigabytes",
            ["org"],
        )
        paid.add_metric([org], billing.estimated_paid_storage_for_month)

        estimated = gauge(
            "storage_estimated_storage_for_month",
            "Estimated shared storage for the month in gigabytes",
            ["org"],
        )
        estimated.add_metric([org], billing.estimated_storage_for_month)

        for metric in (days_left, paid, estimated):
            sink.emit(metric)
