"""
TransformOutcome - Result of one unit of transform work.
"""

from dataclasses import dataclass
from typing import Optional

SUCCEEDED = 'succeeded'
SKIPPED_EMPTY_GALLERY = 'skipped_empty_gallery'
FAILED = 'failed'


@dataclass(frozen=True)
class TransformOutcome:
    """
    Tagged result of one (gallery image, view-image spec) pair.
    
    Empty-gallery skips are product level and carry no image or spec.
    A failure for a missing source file carries no spec either, since all
    specs for that image were abandoned together.
    
    Attributes:
        status: SUCCEEDED, SKIPPED_EMPTY_GALLERY or FAILED
        product_id: Product id
        sku: Product SKU
        image: Base filename of the gallery image
        spec_id: Id of the view-image spec
        destination: Storage key written (success only)
        reason: Failure reason (failure only)
        bytes_written: Size of the generated artifact
    """
    status: str
    product_id: int
    sku: str
    image: Optional[str] = None
    spec_id: Optional[str] = None
    destination: Optional[str] = None
    reason: Optional[str] = None
    bytes_written: int = 0
    
    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED
    
    @property
    def failed(self) -> bool:
        return self.status == FAILED
    
    @property
    def skipped(self) -> bool:
        return self.status == SKIPPED_EMPTY_GALLERY
    
    @classmethod
    def success(cls, product_id, sku, image, spec_id, destination, bytes_written=0):
        return cls(SUCCEEDED, product_id, sku, image=image, spec_id=spec_id,
                   destination=destination, bytes_written=bytes_written)
    
    @classmethod
    def failure(cls, product_id, sku, image, reason, spec_id=None):
        return cls(FAILED, product_id, sku, image=image, spec_id=spec_id, reason=reason)
    
    @classmethod
    def empty_gallery(cls, product_id, sku):
        return cls(SKIPPED_EMPTY_GALLERY, product_id, sku)
    
    def describe_error(self) -> str:
        """Format a failure as one line of the run error log."""
        if self.spec_id is None:
            return f"Product ID {self.product_id} | SKU {self.sku} | {self.reason}"
        return (
            f"Product ID {self.product_id} | SKU {self.sku} | Image: {self.image} | "
            f"Type: {self.spec_id} | Error: {self.reason}"
        )
