"""
Product records as loaded from the catalog, one page at a time.
"""

import posixpath
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class GalleryImageRef:
    """
    A media gallery entry of a product.
    
    Attributes:
        product_id: Owning product id
        sku: Owning product SKU
        file: Path relative to the product media directory (e.g. /a/b/ab.jpg)
    """
    product_id: int
    sku: str
    file: str
    
    @property
    def name(self) -> str:
        """Base filename."""
        return posixpath.basename(self.file)
    
    @property
    def relative_path(self) -> str:
        """File path without leading slash."""
        return self.file.lstrip('/')


@dataclass
class Product:
    """
    A catalog product and its gallery, in declaration order.
    
    Attributes:
        id: Product entity id
        sku: Product SKU
        gallery: Gallery images
    """
    id: int
    sku: str
    gallery: List[GalleryImageRef] = field(default_factory=list)
    
    @property
    def image_count(self) -> int:
        return len(self.gallery)
    
    def add_image(self, file: str) -> GalleryImageRef:
        """Append a gallery image for this product."""
        ref = GalleryImageRef(product_id=self.id, sku=self.sku, file=file)
        self.gallery.append(ref)
        return ref


@dataclass
class ProductPage:
    """One pagination window of the filtered catalog."""
    number: int
    products: List[Product] = field(default_factory=list)
    
    def __len__(self) -> int:
        return len(self.products)
    
    def __iter__(self):
        return iter(self.products)
    
    @property
    def image_count(self) -> int:
        return sum(p.image_count for p in self.products)
