"""
GitHub Actions billing collector.

Reports minutes used in the current billing cycle per organization,
with a per-runner-OS breakdown.
"""

from .base import MetricSink, OrganizationCollector, gauge


class ActionsCollector(OrganizationCollector):
    """Collector for GET /orgs/{org}/settings/billing/actions."""

    NAME = "actions"

    def update_org(self, org: str, sink: MetricSink) -> None:
        billing = self.client.get_actions_billing(org)

        total = gauge("actions_total_minutes_used", "Total minutes used on all runner types", ["org"])
        total.add_metric([org], billing.total_minutes_used)

        paid = gauge("actions_total_paid_minutes_used", "Total paid minutes used on all runner types", ["org"])
        paid.add_metric([org], billing.total_paid_minutes_used)

        included = gauge("actions_included_minutes", "Included minutes for the billing cycle", ["org"])
        included.add_metric([org], billing.included_minutes)

        breakdown = gauge("actions_minutes_used_breakdown", "Minutes used per runner type", ["org", "runner"])
        for runner, minutes in sorted(billing.minutes_used_breakdown.items()):
            breakdown.add_metric([org, runner], minutes)

        for metric in (total, paid, included, breakdown):
            sink.emit(metric)
