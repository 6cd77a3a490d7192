"""
Command Line Interface for catalog view-image regeneration.
"""

import argparse
import logging
import urllib3
from typing import List, Optional

from .catalog import SqlCatalogRepository
from .catalog_config import CatalogDbConfig
from .catalog_db import CatalogDb
from .exceptions import ConfigurationError
from .filter_selection import FilterSelection
from .image_transformer import ImageTransformer
from .local_client import LocalClient, LocalConfig
from .orchestrator import Orchestrator
from .pipeline import TransformPipeline
from .reporter import Reporter
from .run_progress import RunProgress
from .s3_client import S3Client
from .s3_config import S3Config
from .theme_config import ThemeConfig
from .view_config import ViewConfigResolver


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    for name in ('boto3', 'botocore', 'urllib3', 'mysql.connector', 'PIL'):
        logging.getLogger(name).setLevel(logging.WARNING)
    
    return logging.getLogger('imgregen')


def _check(errors: List[str], logger: logging.Logger, label: str) -> None:
    if errors:
        for error in errors:
            logger.error(error)
        raise ConfigurationError(f"{label} configuration invalid")


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()
    
    if args.s3_endpoint:
        config.endpoint = args.s3_endpoint
    if args.s3_bucket:
        config.bucket = args.s3_bucket
    if args.s3_prefix:
        config.prefix = args.s3_prefix
    if args.s3_access_key:
        config.access_key = args.s3_access_key
    if args.s3_secret_key:
        config.secret_key = args.s3_secret_key
    
    return config


def get_storage_client(args: argparse.Namespace, logger: logging.Logger):
    """
    Get the media storage client selected by the arguments.
    
    --media-root selects the local filesystem, otherwise S3 settings are used.
    
    Raises:
        ConfigurationError: If the selected storage is misconfigured
    """
    if args.media_root:
        config = LocalConfig(root_path=args.media_root, prefix=args.media_prefix)
        _check(config.validate(), logger, "Local storage")
        return LocalClient(config, logger)
    
    config = get_s3_config(args)
    _check(config.validate(), logger, "S3")
    return S3Client(config, logger)


def get_db_config(args: argparse.Namespace) -> CatalogDbConfig:
    """Get catalog database configuration from environment and CLI overrides."""
    config = CatalogDbConfig.from_env()
    
    if args.db_host:
        config.host = args.db_host
    if args.db_port:
        config.port = args.db_port
    if args.db_name:
        config.database = args.db_name
    if args.db_user:
        config.user = args.db_user
    
    return config


def get_catalog_repository(args: argparse.Namespace, logger: logging.Logger) -> SqlCatalogRepository:
    config = get_db_config(args)
    _check(config.validate(), logger, "Catalog database")
    return SqlCatalogRepository(
        CatalogDb(config, logger),
        product_table=config.product_table,
        gallery_table=config.gallery_table,
        logger=logger,
    )


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage and database configuration arguments to a parser."""
    local_group = parser.add_argument_group('Local Storage')
    local_group.add_argument('--media-root', metavar='PATH',
                             help='Use local filesystem instead of S3 (e.g., /var/www/pub/media)')
    local_group.add_argument('--media-prefix', default='catalog/product',
                             help='Product media directory within the root (default: catalog/product)')
    
    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-bucket', help='Override S3_BUCKET')
    s3_group.add_argument('--s3-prefix', help='Override S3_PREFIX')
    s3_group.add_argument('--s3-access-key', help='Override S3_ACCESS_KEY')
    s3_group.add_argument('--s3-secret-key', help='Override S3_SECRET_KEY')
    
    db_group = parser.add_argument_group('Catalog Database')
    db_group.add_argument('--db-host', help='Override CATALOG_DB_HOST')
    db_group.add_argument('--db-port', type=int, help='Override CATALOG_DB_PORT')
    db_group.add_argument('--db-name', help='Override CATALOG_DB_NAME')
    db_group.add_argument('--db-user', help='Override CATALOG_DB_USER')


def cmd_regenerate(args: argparse.Namespace) -> int:
    """Regenerate view images, or print the plan in dry-run mode."""
    logger = setup_logging(args.verbose)
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    
    try:
        selection = FilterSelection.from_options(
            product_ids=args.product_ids,
            product_skus=args.product_skus,
            process_all=args.all,
        )
        if selection is None:
            logger.error("Please specify --product-ids, --product-skus, or --all")
            return 1
        
        theme_config = ThemeConfig.load(args.themes, logger)
        repository = get_catalog_repository(args, logger)
        resolver = ViewConfigResolver(theme_config, logger)
        
        if args.dry_run:
            orchestrator = Orchestrator(repository, resolver, snapshot=args.snapshot, logger=logger)
            plan = orchestrator.plan(selection, args.batch_size, args.max_records)
            Reporter().report_plan(plan)
            return 0
        
        storage = get_storage_client(args, logger)
        logger.info(f"Storage: {storage.describe()}")
        pipeline = TransformPipeline(storage, ImageTransformer(logger), logger)
        orchestrator = Orchestrator(repository, resolver, pipeline, snapshot=args.snapshot, logger=logger)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.exception(f"Setup failed: {e}")
        return 1
    
    logger.info(f"Processing {selection.describe()}")
    if args.max_records:
        logger.info(f"Limiting to {args.max_records} products")
    
    progress = None
    if not args.quiet:
        progress = RunProgress(show_files=args.show_files, logger=logger)
    
    try:
        report = orchestrator.run(
            selection,
            batch_size=args.batch_size,
            max_records=args.max_records,
            progress=progress,
        )
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Regeneration failed: {e}")
        return 1
    
    if not args.quiet:
        print()
    Reporter().report_summary(report, show_errors=not args.quiet)
    return 0


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"cannot be negative, got {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='imgregen',
        description='Regenerate resized catalog product images for the themes in use',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  imgregen --product-ids 1,2,3 --media-root /var/www/pub/media
  imgregen --product-skus ABC-1,ABC-2 --dry-run
  imgregen --all --batch-size 100 --max-records 500

Storage options:
  Use --media-root for local filesystem, or S3 environment variables for S3.
  Catalog database settings come from CATALOG_DB_* environment variables.
"""
    )
    
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument('-p', '--product-ids', metavar='IDS',
                           help='Comma-separated product IDs to process')
    selection.add_argument('-s', '--product-skus', metavar='SKUS',
                           help='Comma-separated product SKUs to process')
    selection.add_argument('-a', '--all', action='store_true',
                           help='Process all active products')
    
    parser.add_argument('-b', '--batch-size', type=_positive_int, default=50,
                        help='Products per batch (default: 50)')
    parser.add_argument('-m', '--max-records', type=_non_negative_int, default=0,
                        help='Maximum products to process, 0 for unlimited (default: 0)')
    parser.add_argument('-d', '--dry-run', action='store_true',
                        help='Show what would be processed without generating images')
    parser.add_argument('--snapshot', action='store_true',
                        help='Capture matching product IDs once before paging')
    parser.add_argument('--themes', default='themes.json', metavar='PATH',
                        help='Theme configuration file (default: themes.json)')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    parser.add_argument('--show-files', action='store_true',
                        help='Print each generated file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(parser)
    
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    return cmd_regenerate(parsed_args)
