"""
Cluster access and the data models exchanged with it.
"""
from .search_client import SearchClient
from .models import ClusterMetadata, Credentials, DeletionOutcome, SignedRequest

__all__ = [
    'SearchClient',
    'ClusterMetadata',
    'Credentials',
    'DeletionOutcome',
    'SignedRequest'
]
