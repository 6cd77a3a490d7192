"""
TransformPipeline - Turns one product's gallery into view images.
"""

import logging
import posixpath
from typing import Dict, List, Optional

from .exceptions import SourceNotFound, TransformFailure
from .image_transformer import ImageTransformer
from .product import GalleryImageRef, Product
from .transform_outcome import TransformOutcome
from .transform_params import TransformParams, build
from .view_image_spec import ViewImageSpec

CACHE_PREFIX = 'cache'
WATERMARK_PREFIX = 'watermark'


def destination_key(relative_path: str, canonical_key: str) -> str:
    """
    Storage key of a generated view image.
    
    Depends only on the original's path and the view image's canonical key, so
    regenerating the same pair always targets the same file.
    """
    return posixpath.join(CACHE_PREFIX, canonical_key, relative_path.lstrip('/'))


def watermark_key(file: str) -> str:
    return posixpath.join(WATERMARK_PREFIX, file.lstrip('/'))


class TransformPipeline:
    """
    Generates every view image of a product, one (image, spec) pair at a time.
    
    Failures never propagate: each pair ends in exactly one outcome, and a
    missing original ends its image in a single failure.
    """
    
    def __init__(
        self,
        storage,
        transformer: ImageTransformer,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.
        
        Args:
            storage: Media storage (LocalClient or S3Client)
            transformer: Image transform engine
            logger: Optional logger instance
        """
        self.storage = storage
        self.transformer = transformer
        self.logger = logger or logging.getLogger(__name__)
        self._watermarks: Dict[str, Optional[bytes]] = {}
    
    def process_product(
        self,
        product: Product,
        specs: Dict[str, ViewImageSpec]
    ) -> List[TransformOutcome]:
        """
        Generate all view images for one product.
        
        Args:
            product: Product with its gallery loaded
            specs: Mapping of canonical key -> ViewImageSpec
            
        Returns:
            Outcomes in processing order
        """
        if not product.gallery:
            self.logger.debug(f"Product {product.id} ({product.sku}) has no gallery images")
            return [TransformOutcome.empty_gallery(product.id, product.sku)]
        
        outcomes: List[TransformOutcome] = []
        for image in product.gallery:
            outcomes.extend(self.process_image(image, specs))
        return outcomes
    
    def process_image(
        self,
        image: GalleryImageRef,
        specs: Dict[str, ViewImageSpec]
    ) -> List[TransformOutcome]:
        try:
            image_data = self._read_source(image)
        except SourceNotFound as e:
            self.logger.warning(f"Product {image.product_id}: {e}")
            return [TransformOutcome.failure(
                image.product_id, image.sku, image.name, f"File not found: {image.name}"
            )]
        except Exception as e:
            self.logger.error(f"Product {image.product_id}: cannot read {image.file}: {e}")
            return [TransformOutcome.failure(
                image.product_id, image.sku, image.name, f"Cannot read {image.name}: {e}"
            )]
        
        return [
            self._transform(image, image_data, key, spec)
            for key, spec in specs.items()
        ]
    
    def _read_source(self, image: GalleryImageRef) -> bytes:
        if not self.storage.exists(image.relative_path):
            raise SourceNotFound(self.storage.get_absolute_path(image.relative_path))
        return self.storage.read(image.relative_path)
    
    def _transform(
        self,
        image: GalleryImageRef,
        image_data: bytes,
        key: str,
        spec: ViewImageSpec
    ) -> TransformOutcome:
        destination = destination_key(image.relative_path, key)
        try:
            params = build(spec)
            watermark_data = self._load_watermark(params)
            extension = posixpath.splitext(image.name)[1]
            data, content_type = self.transformer.render(
                image_data, extension, params, watermark_data
            )
            with self.storage.open_write(destination, content_type) as handle:
                handle.write(data)
        except Exception as e:
            self.logger.error(
                f"Product {image.product_id} | {image.name} | {spec.id}: {e}"
            )
            return TransformOutcome.failure(
                image.product_id, image.sku, image.name, str(e), spec_id=spec.id
            )
        
        self.logger.debug(f"Wrote {destination} ({len(data)} bytes)")
        return TransformOutcome.success(
            image.product_id, image.sku, image.name, spec.id, destination, len(data)
        )
    
    def _load_watermark(self, params: TransformParams) -> Optional[bytes]:
        """Read the watermark image once per run; a missing file fails the pair."""
        if not params.has_watermark:
            return None
        
        key = watermark_key(params.watermark_file)
        if key not in self._watermarks:
            self._watermarks[key] = self.storage.read(key) if self.storage.exists(key) else None
        
        data = self._watermarks[key]
        if data is None:
            raise TransformFailure(f"Watermark file not found: {params.watermark_file}")
        return data
