"""
AWS credential resolution and SigV4 request signing.
"""
from .credentials import CredentialResolver
from .signer import RequestSigner, SignedRequestAuth

__all__ = ['CredentialResolver', 'RequestSigner', 'SignedRequestAuth']
