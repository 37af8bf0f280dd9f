"""
Connection options for Elasticsearch
"""

from typing import Optional

from pydantic import BaseModel, Field

from . import get_env, get_env_int, get_env_float


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9200

# Index types shipped with bundled mapping configuration
INDEX_TYPES = ("users", "contacts")


class ElasticsearchOptions(BaseModel):
    """Where to reach Elasticsearch and where to read index mappings from"""
    host: str = Field(DEFAULT_HOST, min_length=1, description="Elasticsearch host")
    port: int = Field(DEFAULT_PORT, gt=0, lt=65536, description="Elasticsearch port")
    url: Optional[str] = Field(None, description="Full Elasticsearch URL, overrides host/port")
    path: Optional[str] = Field(None, description="Directory holding <type>.json mappings")
    ping_timeout: float = Field(1.0, gt=0, description="Health check timeout in seconds")
    index_concurrency: int = Field(8, ge=1, description="Parallel document upserts per batch")

    @property
    def base_url(self) -> str:
        if self.url:
            return self.url
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_env(cls, **overrides) -> "ElasticsearchOptions":
        """
        Build options from ES_* environment variables.

        Keyword overrides set to None are ignored so CLI defaults do not
        mask the environment.
        """
        values = {
            "host": get_env("ES_HOST", DEFAULT_HOST),
            "port": get_env_int("ES_PORT", DEFAULT_PORT),
            "url": get_env("ES_URL"),
            "path": get_env("ES_MAPPINGS_PATH"),
            "ping_timeout": get_env_float("ES_PING_TIMEOUT", 1.0),
            "index_concurrency": get_env_int("ES_INDEX_CONCURRENCY", 8),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
