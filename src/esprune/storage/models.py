"""
Models for the data exchanged with the cluster during a pruning run.
"""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from esprune.core.errors import DecodeError


class Credentials(BaseModel):
    """AWS credentials resolved once per run."""
    access_key_id: str
    secret_access_key: str = Field(..., repr=False)
    session_token: Optional[str] = Field(None, repr=False)

    class Config:
        frozen = True


class SignedRequest(BaseModel):
    """A request carrying its SigV4 headers, built for a single use."""
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes] = None

    class Config:
        frozen = True


class ClusterMetadata(BaseModel):
    """Snapshot of the cluster's index metadata; only the key set matters."""
    indices: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> 'ClusterMetadata':
        """Build from a ``GET /_cluster/state/metadata`` body.

        The cluster nests the indices under ``metadata``; a bare
        ``{"indices": ...}`` body is accepted too.
        """
        metadata = response.get('metadata', response) or {}
        if not isinstance(metadata, dict):
            raise DecodeError(f"Unexpected 'metadata' in cluster state: {type(metadata).__name__}")
        indices = metadata.get('indices') or {}
        if not isinstance(indices, dict):
            raise DecodeError(f"Unexpected 'indices' in cluster state: {type(indices).__name__}")
        return cls(indices=indices)

    def index_names(self) -> List[str]:
        return list(self.indices.keys())


class DeletionOutcome(BaseModel):
    """Result of one DELETE call."""
    index_name: str
    acknowledged: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None
