"""
Catalog view-image regeneration.

Regenerates the resized, watermarked product images declared by the
storefront themes in use, for a filtered set of catalog products:
    1. Resolve themes in use and their deduplicated view images
    2. Page through the filtered catalog
    3. Transform each gallery image once per unique view image

Supports both S3 and local filesystem media storage.
"""

__version__ = "1.0.0"

from .exceptions import (
    ImgRegenError,
    ConfigurationError,
    SourceNotFound,
    TransformFailure,
    QueryOrderError,
)
from .view_image_spec import ViewImageSpec, WatermarkSpec, canonical_key
from .product import GalleryImageRef, Product, ProductPage
from .filter_selection import FilterSelection
from .transform_outcome import TransformOutcome
from .theme_config import AssignmentKey, Theme, ThemeConfig
from .view_config import ViewConfigResolver
from .catalog import ProductQuery, SqlCatalogRepository
from .batch_source import ProductBatchSource
from .local_client import LocalConfig, LocalClient
from .s3_config import S3Config
from .s3_client import S3Client
from .image_transformer import ImageTransformer
from .pipeline import TransformPipeline, destination_key
from .run_report import RunReport
from .run_progress import RunProgress
from .orchestrator import DryRunPlan, Orchestrator
from .reporter import Reporter

__all__ = [
    "ImgRegenError",
    "ConfigurationError",
    "SourceNotFound",
    "TransformFailure",
    "QueryOrderError",
    "ViewImageSpec",
    "WatermarkSpec",
    "canonical_key",
    "GalleryImageRef",
    "Product",
    "ProductPage",
    "FilterSelection",
    "TransformOutcome",
    "AssignmentKey",
    "Theme",
    "ThemeConfig",
    "ViewConfigResolver",
    "ProductQuery",
    "SqlCatalogRepository",
    "ProductBatchSource",
    "LocalConfig",
    "LocalClient",
    "S3Config",
    "S3Client",
    "ImageTransformer",
    "TransformPipeline",
    "destination_key",
    "RunReport",
    "RunProgress",
    "DryRunPlan",
    "Orchestrator",
    "Reporter",
]
