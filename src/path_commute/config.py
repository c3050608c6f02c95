"""Configuration settings for the PATH commute service."""

import logging
import os
from pathlib import Path
from urllib.parse import quote

import structlog
from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv("PATH_COMMUTE_DATA_DIR", PROJECT_ROOT / "data"))
DB_PATH = DATA_DIR / "path_commute.db"

# Logging
LOG_LEVEL = os.getenv("PATH_COMMUTE_LOG_LEVEL", "INFO").upper()

# RidePATH real-time arrivals feed, with a CORS proxy as fallback
RAW_API_URL = "https://panynj.gov/bin/portauthority/ridepath.json"
PROXY_API_URL = f"https://corsproxy.io/?{RAW_API_URL}"

# PATH service alerts (Everbridge incidents)
ALERTS_API_URL = (
    "https://www.panynj.gov/bin/portauthority/everbridge/incidents"
    "?status=All&department=Path"
)
ALERTS_PROXY_URL = f"https://corsproxy.io/?{quote(ALERTS_API_URL, safe='')}"

# Try the proxy before the raw URL (useful where panynj.gov blocks the client)
USE_PROXY_FIRST = os.getenv("PATH_COMMUTE_USE_PROXY_FIRST", "").lower() in ("1", "true", "yes")

REQUEST_TIMEOUT = float(os.getenv("PATH_COMMUTE_REQUEST_TIMEOUT", "10"))
POLLING_INTERVAL = 10  # seconds
ALERTS_CACHE_SECONDS = 300


def configure_logging(level: str = LOG_LEVEL):
    """Route structlog through the standard logging module at the given level."""
    logging.basicConfig(format="%(message)s", level=level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
