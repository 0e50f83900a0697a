"""
Configuration for the Scanner service.

All settings are read from environment variables with development defaults.
"""
import os

# JWT settings (must match Users service)
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "09d25e094faa6ca2556c818166b7a9563b93f7099f6f0f4caa6cf63b88e8d3e7")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Use internal Docker network hostname
INVENTORY_SERVICE_URL = os.getenv("INVENTORY_SERVICE_URL", "http://inventory:8000")
INVENTORY_TIMEOUT = float(os.getenv("INVENTORY_TIMEOUT", "5.0"))  # seconds
INVENTORY_PAGE_SIZE = int(os.getenv("INVENTORY_PAGE_SIZE", "500"))

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CACHE_ENABLED = os.getenv("CACHE_ENABLED", "true").lower() == "true"
INVENTORY_CACHE_TTL = int(os.getenv("INVENTORY_CACHE_TTL", "5"))  # seconds

DEFAULT_UNIT = "meters"
