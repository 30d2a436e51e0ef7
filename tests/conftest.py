"""Root conftest - shared test configuration."""

import os

# Ensure tests never reach a real pricing authority
os.environ.setdefault("PRICING_API_BASE_URL", "http://pricing.test")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("CORS_ORIGINS", '["http://localhost:3000"]')
