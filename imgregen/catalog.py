"""
Catalog repository - Filtered, paginated product queries with gallery loading.

A query is always built in the same order: filter predicates on the base
product query, then the gallery attachment, then the page window. Filtering
after the gallery is attached raises QueryOrderError.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from .exceptions import QueryOrderError
from .filter_selection import ALL, IDS, SKUS, FilterSelection
from .product import Product

IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def _check_identifier(name: str) -> str:
    if not IDENTIFIER_PATTERN.match(name):
        raise ValueError(f"Invalid table name: {name!r}")
    return name


class ProductQuery:
    """
    One product query against the catalog.
    
    Only active products (status = 1) are ever matched.
    """
    
    def __init__(self, repository: 'SqlCatalogRepository'):
        self.repository = repository
        self._conditions: List[Tuple[str, Sequence]] = []
        self._gallery_attached = False
    
    @property
    def gallery_attached(self) -> bool:
        return self._gallery_attached
    
    def _add_condition(self, column: str, values: Sequence) -> 'ProductQuery':
        if self._gallery_attached:
            raise QueryOrderError(
                f"Filter on {column} must be applied before the gallery is attached"
            )
        self._conditions.append((column, tuple(values)))
        return self
    
    def filter_ids(self, ids: Sequence[int]) -> 'ProductQuery':
        return self._add_condition('entity_id', [int(i) for i in ids])
    
    def filter_skus(self, skus: Sequence[str]) -> 'ProductQuery':
        return self._add_condition('sku', [str(s) for s in skus])
    
    def apply(self, selection: FilterSelection) -> 'ProductQuery':
        """Apply a filter selection to the base query."""
        if selection.kind == IDS:
            return self.filter_ids(selection.values)
        if selection.kind == SKUS:
            return self.filter_skus(selection.values)
        if selection.kind == ALL:
            if self._gallery_attached:
                raise QueryOrderError("Filters must be applied before the gallery is attached")
            return self
        raise ValueError(f"Unknown filter type: {selection.kind}")
    
    def with_gallery(self) -> 'ProductQuery':
        """Attach gallery image loading to the query's products."""
        self._gallery_attached = True
        return self
    
    def _where(self) -> Tuple[str, list]:
        ph = self.repository.placeholder
        clauses = ['p.status = 1']
        params: list = []
        for column, values in self._conditions:
            if not values:
                clauses.append('1 = 0')
                continue
            clauses.append(f"p.{column} IN ({', '.join([ph] * len(values))})")
            params.extend(values)
        return ' AND '.join(clauses), params
    
    def count(self) -> int:
        """Number of products matching the filters."""
        where, params = self._where()
        sql = f"SELECT COUNT(*) FROM {self.repository.product_table} p WHERE {where}"
        with self.repository.db.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
        return int(row[0]) if row else 0
    
    def ids(self) -> List[int]:
        """Ids of all matching products, ascending."""
        where, params = self._where()
        sql = (
            f"SELECT p.entity_id FROM {self.repository.product_table} p "
            f"WHERE {where} ORDER BY p.entity_id"
        )
        with self.repository.db.cursor() as cursor:
            cursor.execute(sql, params)
            return [int(row[0]) for row in cursor.fetchall()]
    
    def page(self, page_size: int, page_number: int) -> List[Product]:
        """
        Load one page of products.
        
        Args:
            page_size: Products per page (> 0)
            page_number: 1-based page number
            
        Returns:
            Products ordered by id, galleries populated when attached
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if page_number < 1:
            raise ValueError("page_number starts at 1")
        
        where, params = self._where()
        offset = (page_number - 1) * page_size
        sql = (
            f"SELECT p.entity_id, p.sku FROM {self.repository.product_table} p "
            f"WHERE {where} ORDER BY p.entity_id "
            f"LIMIT {int(page_size)} OFFSET {int(offset)}"
        )
        with self.repository.db.cursor() as cursor:
            cursor.execute(sql, params)
            products = [Product(id=int(pid), sku=sku) for pid, sku in cursor.fetchall()]
        
        if self._gallery_attached and products:
            self.repository.load_gallery(products)
        return products


class SqlCatalogRepository:
    """
    Catalog repository over DB-API cursors.
    
    The database object must provide a cursor() context manager; CatalogDb
    does for MySQL. Its 'placeholder' attribute sets the parameter style.
    """
    
    def __init__(
        self,
        db,
        product_table: str = 'catalog_product',
        gallery_table: str = 'catalog_product_gallery',
        logger: Optional[logging.Logger] = None
    ):
        self.db = db
        self.placeholder = getattr(db, 'placeholder', '%s')
        self.product_table = _check_identifier(product_table)
        self.gallery_table = _check_identifier(gallery_table)
        self.logger = logger or logging.getLogger(__name__)
    
    def create_query(self) -> ProductQuery:
        return ProductQuery(self)
    
    def load_gallery(self, products: List[Product]) -> None:
        """Populate the galleries of the given products, in position order."""
        by_id: Dict[int, Product] = {p.id: p for p in products}
        ph = self.placeholder
        sql = (
            f"SELECT g.product_id, g.file FROM {self.gallery_table} g "
            f"WHERE g.product_id IN ({', '.join([ph] * len(by_id))}) "
            f"AND g.disabled = 0 "
            f"ORDER BY g.product_id, g.position, g.value_id"
        )
        with self.db.cursor() as cursor:
            cursor.execute(sql, list(by_id))
            rows = cursor.fetchall()
        
        for product_id, file in rows:
            product = by_id.get(int(product_id))
            if product is not None and file:
                product.add_image(file)
        
        self.logger.debug(f"Loaded {len(rows)} gallery images for {len(products)} products")
