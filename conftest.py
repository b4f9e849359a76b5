"""Global pytest configuration."""

import os

# Keep test output quiet before any app imports configure logging
os.environ.setdefault("LOG_LEVEL", "WARNING")
