#!/usr/bin/env python3
"""
Main entry point for esprune.

Exit status:
    0    every selected index was processed without a deletion failure
    1    AWS_REGION is not configured
    2    ELASTICSEARCH_URL is not configured
    100  credential resolution, the metadata fetch or a deletion failed
"""
import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from esprune.aws import CredentialResolver, RequestSigner, SignedRequestAuth
from esprune.core.config import AppConfig, load_config
from esprune.core.errors import ConfigError, EsPruneError
from esprune.core.utils import setup_logging
from esprune.pruner import IndexPruner, default_index_filter
from esprune.storage import SearchClient

EXIT_SUCCESS = 0
EXIT_RUN_FAILED = 100

logger = logging.getLogger('esprune')


def run(config: AppConfig) -> List[str]:
    """Resolve credentials, build the signed client and prune once."""
    credentials = CredentialResolver(config.aws.region, profile=config.aws.profile).resolve()
    signer = RequestSigner(credentials, config.aws.region, service=config.aws.service)
    client = SearchClient(config.elasticsearch, SignedRequestAuth(signer))

    pruner = IndexPruner(client)
    return pruner.prune(default_index_filter)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description='esprune - delete every index of an AWS-hosted Elasticsearch domain except .kibana'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration file'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Set the logging level'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    load_dotenv()

    try:
        config = load_config(args.config)
    except (ConfigError, ValueError, TypeError) as e:
        logging.basicConfig()
        logger.error(f"Invalid configuration: {e}")
        sys.exit(EXIT_RUN_FAILED)

    if args.log_level:
        config.logging.level = args.log_level

    try:
        setup_logging(config)
    except OSError as e:
        logging.basicConfig()
        logger.error(f"Unable to set up logging: {e}")
        sys.exit(EXIT_RUN_FAILED)

    try:
        config.require_settings()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(e.exit_code)

    try:
        deleted = run(config)
    except EsPruneError as e:
        logger.error(f"Index pruning failed: {e!r}")
        sys.exit(EXIT_RUN_FAILED)
    except KeyboardInterrupt:
        logger.error("Index pruning interrupted by user")
        sys.exit(EXIT_RUN_FAILED)
    except Exception as e:
        logger.error(f"Index pruning failed: {e}", exc_info=True)
        sys.exit(EXIT_RUN_FAILED)

    logger.info(f"Processed {len(deleted)} indices")
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
