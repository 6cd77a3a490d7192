"""
ProductBatchSource - Bounded-size pages of the filtered catalog.
"""

import logging
import math
from typing import Iterator, List, Optional

from .catalog import ProductQuery, SqlCatalogRepository
from .filter_selection import FilterSelection
from .product import Product, ProductPage


class ProductBatchSource:
    """
    Turns a filter selection into a lazy sequence of product pages.
    
    Every page is queried afresh: filter on the base query, then gallery
    attachment, then the page window. Without snapshot mode there is no
    consistency across pages; products added or removed during a long run
    can shift later pages. With snapshot=True the candidate ids are captured
    once and later pages are cut from that fixed list.
    """
    
    def __init__(
        self,
        repository: SqlCatalogRepository,
        selection: FilterSelection,
        batch_size: int = 50,
        max_records: int = 0,
        snapshot: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize batch source.
        
        Args:
            repository: Catalog repository
            selection: Product filter
            batch_size: Products per page (> 0)
            max_records: Cap on products yielded, 0 for unlimited
            snapshot: Capture candidate ids once instead of re-filtering per page
            logger: Optional logger instance
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if max_records < 0:
            raise ValueError(f"max_records cannot be negative, got {max_records}")
        
        self.repository = repository
        self.selection = selection
        self.batch_size = batch_size
        self.max_records = max_records
        self.snapshot = snapshot
        self.logger = logger or logging.getLogger(__name__)
        self._total_count: Optional[int] = None
        self._snapshot_ids: Optional[List[int]] = None
        self._started = False
    
    def _base_query(self) -> ProductQuery:
        return self.repository.create_query().apply(self.selection)
    
    def _candidate_ids(self) -> List[int]:
        if self._snapshot_ids is None:
            self._snapshot_ids = self._base_query().ids()
            self.logger.info(f"Captured {len(self._snapshot_ids)} candidate product ids")
        return self._snapshot_ids
    
    @property
    def total_count(self) -> int:
        """Size of the filtered collection."""
        if self._total_count is None:
            if self.snapshot:
                self._total_count = len(self._candidate_ids())
            else:
                self._total_count = self._base_query().count()
        return self._total_count
    
    @property
    def target_count(self) -> int:
        """Products the run intends to process."""
        if self.max_records > 0:
            return min(self.total_count, self.max_records)
        return self.total_count
    
    @property
    def total_pages(self) -> int:
        return math.ceil(self.target_count / self.batch_size)
    
    def _load_page(self, page_number: int) -> List[Product]:
        if self.snapshot:
            start = (page_number - 1) * self.batch_size
            chunk = self._candidate_ids()[start:start + self.batch_size]
            if not chunk:
                return []
            query = self.repository.create_query().filter_ids(chunk).with_gallery()
            return query.page(self.batch_size, 1)
        
        query = self._base_query().with_gallery()
        return query.page(self.batch_size, page_number)
    
    def pages(self) -> Iterator[ProductPage]:
        """
        Yield product pages until the catalog or the cap is exhausted.
        
        The last page is truncated when the cap falls inside it. The
        sequence can only be iterated once.
        """
        if self._started:
            raise RuntimeError("ProductBatchSource pages can only be iterated once")
        self._started = True
        
        total_pages = self.total_pages
        yielded = 0
        
        for page_number in range(1, total_pages + 1):
            if self.max_records and yielded >= self.max_records:
                break
            
            products = self._load_page(page_number)
            if not products:
                self.logger.info("No more products to process")
                break
            
            if self.max_records:
                products = products[:self.max_records - yielded]
            
            yielded += len(products)
            self.logger.debug(
                f"Page {page_number}/{total_pages}: {len(products)} products"
            )
            yield ProductPage(number=page_number, products=products)
    
    def __iter__(self) -> Iterator[ProductPage]:
        return self.pages()
