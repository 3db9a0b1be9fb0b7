"""Cache administration schemas."""

from typing import Dict, Union

from pydantic import BaseModel, Field


class CacheStatsResponse(BaseModel):
    """Key counts per known pattern; a pattern that failed reports "error"."""

    cache_stats: Dict[str, Union[int, str]] = Field(...)
    message: str = "Cache statistics collected"

    class Config:
        json_schema_extra = {
            "example": {
                "cache_stats": {
                    "products:all": 1,
                    "product:*": 12,
                    "products:category:*": 0,
                    "cached_products_count": 25,
                },
                "message": "Cache statistics collected",
            }
        }
