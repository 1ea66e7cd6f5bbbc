"""
GitHub Billing Exporter - Prometheus exporter for GitHub organization billing.
"""

from .const import APP_VERSION as __version__

__all__ = ["__version__"]
