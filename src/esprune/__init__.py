"""
esprune - delete the indices of an AWS-hosted Elasticsearch domain over SigV4-signed HTTPS.
"""
__version__ = "0.1.0"
