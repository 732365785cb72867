"""
Resolve AWS credentials from the ambient provider chain.
"""
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError

from esprune.core.errors import CredentialError
from esprune.storage.models import Credentials

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve credentials through boto3's default provider chain.

    The chain consults environment variables, the shared config and
    credentials files, then container and instance metadata endpoints.
    """

    def __init__(self, region: str, profile: Optional[str] = None, session: Optional[boto3.Session] = None):
        self.region = region
        self.profile = profile
        self._session = session

    def resolve(self) -> Credentials:
        """Return a frozen snapshot of the resolved credentials.

        Raises:
            CredentialError: if no provider yields credentials.
        """
        try:
            session = self._session or boto3.Session(profile_name=self.profile, region_name=self.region)
            resolved = session.get_credentials()
            if resolved is None:
                raise CredentialError("Unable to locate AWS credentials")
            frozen = resolved.get_frozen_credentials()
        except BotoCoreError as e:
            raise CredentialError(f"Failed to resolve AWS credentials: {e}") from e

        if not frozen.access_key or not frozen.secret_key:
            raise CredentialError("Resolved AWS credentials are incomplete")

        logger.debug("Resolved AWS credentials via %s", getattr(resolved, 'method', 'unknown'))
        return Credentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token
        )
