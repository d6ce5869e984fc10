"""Environment-driven settings for the email discovery service.

Values are read once at import time. ``mailfinder.main`` loads ``.env``
before importing anything else, so a local ``.env`` file is honoured.
"""

import os

# Seconds to wait between domains in a batch (name-resolution rate limits)
INTER_DOMAIN_DELAY_SECONDS = float(os.getenv("DISCOVERY_INTER_DOMAIN_DELAY", "1.0"))

# Boundary cap on the number of domains accepted per batch request
MAX_DOMAINS_PER_BATCH = int(os.getenv("DISCOVERY_MAX_DOMAINS", "100"))

# Uploaded domain lists larger than this are rejected
MAX_DOMAIN_FILE_BYTES = int(os.getenv("DISCOVERY_MAX_DOMAIN_FILE_BYTES", str(5 * 1024 * 1024)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Allow requests from Vite dev server (localhost:5173) by default
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
if _cors_origins_env:
    CORS_ORIGINS = [
        origin.strip() for origin in _cors_origins_env.split(",") if origin.strip()
    ]
else:
    CORS_ORIGINS = DEFAULT_CORS_ORIGINS
