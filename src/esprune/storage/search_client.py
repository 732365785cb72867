"""
Signed HTTP client for the target Elasticsearch/OpenSearch domain.
"""
import json
import logging
from typing import Any, Dict, Optional

from opensearchpy import OpenSearch, RequestsHttpConnection
from opensearchpy.exceptions import ConnectionError as OpenSearchConnectionError
from opensearchpy.exceptions import SerializationError
from opensearchpy.exceptions import TransportError as OpenSearchTransportError
from requests.auth import AuthBase

from esprune.core.config import ElasticsearchConfig
from esprune.core.errors import ApiError, DecodeError, TransportError

logger = logging.getLogger(__name__)


class SearchClient:
    """Issue signed requests against the configured base URL and return parsed JSON."""

    def __init__(self, config: ElasticsearchConfig, auth: AuthBase, client: Optional[OpenSearch] = None):
        """Initialize the client.

        Args:
            config: Cluster section of the application configuration.
            auth: requests auth hook that signs every outgoing request.
            client: Pre-built OpenSearch client, mainly for tests.
        """
        self.config = config
        self.auth = auth
        self.client = client or self._create_client()

    def call(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """Send ``method path`` and return the decoded JSON body.

        Raises:
            TransportError: the request never got an HTTP response.
            ApiError: the cluster answered with a non-2xx status.
            DecodeError: the response body is not JSON.
        """
        logger.debug(f"{method} {path}")
        try:
            result = self.client.transport.perform_request(method, path, body=body)
        except OpenSearchConnectionError as e:
            raise TransportError(f"{method} {path} failed: {e.error}") from e
        except OpenSearchTransportError as e:
            raise ApiError(e.status_code, e.info) from e
        except SerializationError as e:
            raise DecodeError(f"Invalid JSON in response to {method} {path}: {e}") from e

        return self._ensure_json(result, method, path)

    def _ensure_json(self, result: Any, method: str, path: str) -> Any:
        # Non-JSON content types come back from the transport as raw text.
        if isinstance(result, (dict, list)):
            return result
        if isinstance(result, str) and result:
            try:
                return json.loads(result)
            except ValueError as e:
                raise DecodeError(f"Invalid JSON in response to {method} {path}: {e}") from e
        raise DecodeError(f"Empty response to {method} {path}")

    def _create_client(self) -> OpenSearch:
        """Create and configure the OpenSearch client."""
        logger.info(f"Connecting to {self.config.url}")

        return OpenSearch(
            hosts=[self.config.url],
            http_auth=self.auth,
            use_ssl=self.config.url.startswith('https'),
            verify_certs=self.config.verify_certs,
            ssl_show_warn=False,
            connection_class=RequestsHttpConnection,
            timeout=self.config.request_timeout,
            max_retries=0,
            retry_on_timeout=False
        )
