"""
Alias operations
"""

import logging
from typing import List, Optional

from elasticsearch import NotFoundError

from ..es_client import ClientGateway
from .operations import remote_call

logger = logging.getLogger(__name__)


class AliasOperations:
    """Alias lookups and updates; callers keep the alias state consistent"""

    def __init__(self, gateway: ClientGateway):
        self.gateway = gateway

    def alias_exists(self, name: str, index: Optional[str] = None) -> bool:
        """Check whether an alias exists, optionally restricted to one index"""
        es = self.gateway.get_client()
        if index is None:
            return bool(es.indices.exists_alias(name=name))
        return bool(es.indices.exists_alias(name=name, index=index))

    def get_alias_indices(self, name: str) -> List[str]:
        """Indices an alias currently points to (empty if the alias is absent)"""
        es = self.gateway.get_client()
        try:
            response = es.indices.get_alias(name=name)
        except NotFoundError:
            return []
        return sorted(response.body.keys())

    def bind_alias(self, alias: str, index: str):
        """Point alias at index (in addition to anything it already points at)"""
        es = self.gateway.get_client()
        with remote_call("put_alias", alias):
            es.indices.put_alias(index=index, name=alias)
        logger.info("Alias %s bound to %s", alias, index)

    def swap_alias(self, alias: str, from_index: str, to_index: str):
        """
        Move alias from one index to another in a single update_aliases call,
        so the alias is never missing nor on both indices.
        """
        actions = [
            {"add": {"index": to_index, "alias": alias}},
            {"remove": {"index": from_index, "alias": alias}},
        ]
        es = self.gateway.get_client()
        with remote_call("update_aliases", alias):
            es.indices.update_aliases(actions=actions)
        logger.info("Alias %s switched from %s to %s", alias, from_index, to_index)
