"""
Elasticsearch client gateway

Owns one lazily created client handle. The handle is health-checked before
every use and thrown away as soon as a check fails, so the next caller
reconnects from scratch.
"""

import logging
from typing import Optional

from elasticsearch import Elasticsearch

from .errors import ClientConnectionError
from .settings import ElasticsearchOptions

logger = logging.getLogger(__name__)


def create_es_client(url: str, **kwargs) -> Elasticsearch:
    """
    Create Elasticsearch client

    Args:
        url: Elasticsearch URL (e.g. "http://localhost:9200")
        **kwargs: Additional Elasticsearch client options

    Returns:
        Elasticsearch client (not yet verified)
    """
    return Elasticsearch(url, **kwargs)


class ClientGateway:
    """Per-options owner of an Elasticsearch connection"""

    def __init__(self, options: ElasticsearchOptions = None, client_factory=create_es_client):
        self.options = options or ElasticsearchOptions()
        self._client_factory = client_factory
        self._client: Optional[Elasticsearch] = None

    @property
    def url(self) -> str:
        return self.options.base_url

    def get_client(self) -> Elasticsearch:
        """
        Return a live client, connecting first if needed.

        Raises:
            ClientConnectionError: ping failed; the handle has been closed and dropped
        """
        if self._client is None:
            logger.debug("Connecting to Elasticsearch at %s", self.url)
            self._client = self._client_factory(self.url)

        client = self._client
        try:
            alive = client.options(request_timeout=self.options.ping_timeout).ping()
        except Exception as e:
            self._discard(client)
            raise ClientConnectionError(self.url, e) from e

        if not alive:
            self._discard(client)
            raise ClientConnectionError(self.url)

        return client

    def _discard(self, client: Elasticsearch):
        # Only drop the handle we checked; a concurrent caller may already have replaced it
        if self._client is client:
            self._client = None
        try:
            client.close()
        except Exception as e:
            logger.debug("Ignoring error while closing client: %s", e)
        logger.warning("Elasticsearch at %s is unreachable, client discarded", self.url)

    def close(self):
        """Close and drop the current handle, if any"""
        client, self._client = self._client, None
        if client is not None:
            client.close()

    def get_info(self) -> dict:
        """Get Elasticsearch cluster info"""
        return self.get_client().info().body

    def check_health(self) -> dict:
        """Check Elasticsearch cluster health"""
        return self.get_client().cluster.health().body

    def get_version(self) -> str:
        """Major version of the connected Elasticsearch (e.g. "7")"""
        number = self.get_info()["version"]["number"]
        return number.split(".", 1)[0]
