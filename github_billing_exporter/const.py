"""
Application constants and metadata.
"""

# Application info
APP_NAME = "GitHub Billing Exporter"
APP_VERSION = "0.1.0"

# Metric namespace
NAMESPACE = "github_billing"

# Default values
DEFAULT_LISTEN_ADDRESS = ":9776"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_API_VERSION = "2022-11-28"
DEFAULT_REQUEST_TIMEOUT = 30.0

# Environment variable prefix for collector toggles
COLLECTOR_ENV_PREFIX = "GITHUB_BILLING_COLLECTOR_"

# Collector default states
DEFAULT_ENABLED = True
