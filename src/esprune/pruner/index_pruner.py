"""
Delete every index on the cluster except the reserved one, one at a time.
"""
import logging
from typing import Callable, List

from esprune.core.errors import DecodeError, EsPruneError
from esprune.storage.models import ClusterMetadata, DeletionOutcome

logger = logging.getLogger(__name__)

RESERVED_INDEX = '.kibana'
CLUSTER_METADATA_PATH = '/_cluster/state/metadata'

IndexFilter = Callable[[str], bool]


def default_index_filter(index_name: str) -> bool:
    """Keep everything except the reserved index (exact match)."""
    return index_name != RESERVED_INDEX


class IndexPruner:
    """Fetch cluster metadata, select indices and delete them serially.

    ``outcomes`` holds one :class:`DeletionOutcome` per attempted deletion of
    the most recent run, including the failing one when a run aborts.
    """

    def __init__(self, client):
        self.client = client
        self.outcomes: List[DeletionOutcome] = []

    def prune(self, index_filter: IndexFilter = default_index_filter) -> List[str]:
        """Delete the indices selected by ``index_filter``.

        Returns:
            The selected index names, in cluster metadata order.

        Raises:
            EsPruneError: the metadata fetch or a deletion failed. Indices after
                a failed deletion are not attempted.
        """
        self.outcomes = []

        metadata = self.fetch_metadata()
        targets = self.select_indices(metadata, index_filter)
        if not targets:
            logger.info("No indices selected for deletion")
            return targets

        logger.info(f"Selected {len(targets)} indices for deletion")
        for index_name in targets:
            self.outcomes.append(self.delete_index(index_name))

        return targets

    def fetch_metadata(self) -> ClusterMetadata:
        response = self.client.call('GET', CLUSTER_METADATA_PATH)
        if not isinstance(response, dict):
            raise DecodeError(f"Unexpected cluster metadata response: {type(response).__name__}")
        return ClusterMetadata.from_response(response)

    @staticmethod
    def select_indices(metadata: ClusterMetadata, index_filter: IndexFilter) -> List[str]:
        """Return the names accepted by ``index_filter``, never the reserved index."""
        return [
            name for name in metadata.index_names()
            if name != RESERVED_INDEX and index_filter(name)
        ]

    def delete_index(self, index_name: str) -> DeletionOutcome:
        logger.info(f"Deleting index '{index_name}'")
        try:
            result = self.client.call('DELETE', f"/{index_name}")
        except EsPruneError as e:
            logger.error(f"Failed to delete index '{index_name}': {e}")
            self.outcomes.append(DeletionOutcome(index_name=index_name, error=str(e)))
            raise

        acknowledged = isinstance(result, dict) and result.get('acknowledged') is True
        if acknowledged:
            logger.info(f"Elasticsearch has acknowledged the request to delete index '{index_name}'")
        else:
            logger.warning(f"Elasticsearch has not acknowledged the request to delete index '{index_name}'")
        return DeletionOutcome(index_name=index_name, acknowledged=acknowledged)
