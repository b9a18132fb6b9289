"""
Trending job payloads.
"""

from pydantic import BaseModel, ConfigDict

TRENDING_ACTION = "CALCULATE_TRENDING"


class TrendingMessage(BaseModel):
    """Trending queue payload. Fired on a recurring schedule."""

    model_config = ConfigDict(frozen=True)

    action: str = TRENDING_ACTION
    timestamp: str = ""
