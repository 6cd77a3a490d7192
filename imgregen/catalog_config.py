"""
CatalogDbConfig - Connection settings for the catalog database.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class CatalogDbConfig:
    """
    MySQL connection settings for the product catalog.
    
    Attributes:
        host: Database host
        port: Database port
        user: Database user
        password: Database password
        database: Schema name
        pool_size: Connection pool size
        product_table: Table holding products (entity_id, sku, status)
        gallery_table: Table holding gallery rows (value_id, product_id, file, position, disabled)
    """
    host: Optional[str] = None
    port: int = 3306
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    pool_size: int = 4
    product_table: str = 'catalog_product'
    gallery_table: str = 'catalog_product_gallery'
    
    @classmethod
    def from_env(cls) -> 'CatalogDbConfig':
        """Read configuration from CATALOG_DB_* environment variables."""
        return cls(
            host=os.getenv('CATALOG_DB_HOST'),
            port=int(os.getenv('CATALOG_DB_PORT', '3306')),
            user=os.getenv('CATALOG_DB_USER'),
            password=os.getenv('CATALOG_DB_PASSWORD'),
            database=os.getenv('CATALOG_DB_NAME'),
            pool_size=int(os.getenv('CATALOG_DB_POOL_SIZE', '4')),
            product_table=os.getenv('CATALOG_DB_PRODUCT_TABLE', 'catalog_product'),
            gallery_table=os.getenv('CATALOG_DB_GALLERY_TABLE', 'catalog_product_gallery'),
        )
    
    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty when valid)."""
        errors = []
        if not self.host:
            errors.append("CATALOG_DB_HOST is required")
        if not self.user:
            errors.append("CATALOG_DB_USER is required")
        if not self.database:
            errors.append("CATALOG_DB_NAME is required")
        if self.pool_size < 1:
            errors.append("CATALOG_DB_POOL_SIZE must be at least 1")
        return errors
