import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL: str = (os.environ.get("LOG_LEVEL") or "INFO").upper()

# 0 keeps every simulated day in the response
DEFAULT_MAX_DATA_POINTS: int = int(os.environ.get("DEFAULT_MAX_DATA_POINTS") or "0")

# Allowed distance (in percentage points) between the allocation sum and 100
ALLOCATION_TOLERANCE: float = float(os.environ.get("ALLOCATION_TOLERANCE") or "0.1")

DEFAULT_ANNUAL_RISK_FREE_RETURN: float = float(
    os.environ.get("DEFAULT_ANNUAL_RISK_FREE_RETURN") or "0.03"
)
