"""
AWS Signature Version 4 signing for requests sent to the search domain.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Union
from urllib.parse import urlparse

import requests
from requests.auth import AuthBase
from requests.structures import CaseInsensitiveDict
from requests_aws4auth import AWS4Auth

from esprune.core.errors import CredentialError
from esprune.storage.models import Credentials, SignedRequest

logger = logging.getLogger(__name__)

AMZ_DATE_FORMAT = '%Y%m%dT%H%M%SZ'
SCOPE_DATE_FORMAT = '%Y%m%d'

# Only these headers are copied onto the outgoing request.
SIGNATURE_HEADERS = frozenset([
    'host',
    'x-amz-date',
    'x-amz-content-sha256',
    'x-amz-security-token',
    'authorization',
])


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RequestSigner:
    """Compute SigV4 headers for a single request.

    Args:
        credentials: Credentials resolved at startup.
        region: AWS region of the domain.
        service: Signing service name, ``es`` for Elasticsearch/OpenSearch domains.
        clock: Returns the current UTC time; read once per signed request.
    """

    def __init__(self, credentials: Credentials, region: str, service: str = 'es',
                 clock: Callable[[], datetime] = utc_now):
        self.credentials = credentials
        self.region = region
        self.service = service
        self.clock = clock

    def sign(self, method: str, path: str, host: str,
             body: Optional[Union[bytes, str]] = None,
             timestamp: Optional[datetime] = None) -> Dict[str, str]:
        """Return a new headers mapping carrying ``Host`` and the SigV4 signature.

        Raises:
            CredentialError: if the access key or secret key is missing.
        """
        self._check_credentials()
        when = timestamp or self.clock()
        if when.tzinfo is not None:
            when = when.astimezone(timezone.utc)

        auth = AWS4Auth(
            self.credentials.access_key_id,
            self.credentials.secret_access_key,
            self.region,
            self.service,
            when.strftime(SCOPE_DATE_FORMAT),
            session_token=self.credentials.session_token
        )
        prepared = requests.Request(
            method=method.upper(),
            url=f"https://{host}{path}",
            headers={'Host': host, 'X-Amz-Date': when.strftime(AMZ_DATE_FORMAT)},
            data=body
        ).prepare()
        auth(prepared)
        return {
            name: value for name, value in prepared.headers.items()
            if name.lower() in SIGNATURE_HEADERS
        }

    def signed_request(self, method: str, url: str, body: Optional[bytes] = None,
                       timestamp: Optional[datetime] = None) -> SignedRequest:
        """Build a :class:`SignedRequest` for ``url``."""
        parsed = urlparse(url)
        path = parsed.path or '/'
        if parsed.query:
            path = f"{path}?{parsed.query}"
        headers = self.sign(method, path, parsed.hostname, body=body, timestamp=timestamp)
        return SignedRequest(method=method.upper(), url=url, headers=headers, body=body)

    def _check_credentials(self) -> None:
        if self.credentials is None:
            raise CredentialError("No AWS credentials available for signing")
        if not (self.credentials.access_key_id or '').strip():
            raise CredentialError("AWS access key id is missing")
        if not (self.credentials.secret_access_key or '').strip():
            raise CredentialError("AWS secret access key is missing")


class SignedRequestAuth(AuthBase):
    """requests auth hook that signs each outgoing request right before it is sent."""

    def __init__(self, signer: RequestSigner):
        self.signer = signer

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        host = urlparse(r.url).hostname
        signed = self.signer.sign(r.method, r.path_url, host, body=r.body)

        headers = CaseInsensitiveDict(r.headers)
        headers.update(signed)
        r.headers = headers
        logger.debug("Signed %s %s", r.method, r.path_url)
        return r
