"""
Pytest fixtures for imgregen tests.
"""

import io
import logging
import sqlite3
from contextlib import contextmanager

import pytest
from PIL import Image


class SqliteCatalogDb:
    """In-memory stand-in for CatalogDb using the same cursor() contract."""
    
    placeholder = '?'
    
    def __init__(self):
        self.connection = sqlite3.connect(':memory:')
        self.connection.executescript("""
            CREATE TABLE catalog_product (
                entity_id INTEGER PRIMARY KEY,
                sku TEXT NOT NULL,
                status INTEGER NOT NULL DEFAULT 1
            );
            CREATE TABLE catalog_product_gallery (
                value_id INTEGER PRIMARY KEY AUTOINCREMENT,
                product_id INTEGER NOT NULL,
                file TEXT NOT NULL,
                position INTEGER NOT NULL DEFAULT 0,
                disabled INTEGER NOT NULL DEFAULT 0
            );
        """)
        self.queries = []
    
    @contextmanager
    def cursor(self):
        cursor = self.connection.cursor()
        try:
            yield cursor
        finally:
            cursor.close()
    
    def add_product(self, entity_id, sku, status=1, files=(), disabled=()):
        self.connection.execute(
            "INSERT INTO catalog_product (entity_id, sku, status) VALUES (?, ?, ?)",
            (entity_id, sku, status),
        )
        for position, file in enumerate(files):
            self.connection.execute(
                "INSERT INTO catalog_product_gallery (product_id, file, position) VALUES (?, ?, ?)",
                (entity_id, file, position),
            )
        for file in disabled:
            self.connection.execute(
                "INSERT INTO catalog_product_gallery (product_id, file, position, disabled) "
                "VALUES (?, ?, 99, 1)",
                (entity_id, file),
            )
        self.connection.commit()


def image_bytes(size=(100, 100), color='red', mode='RGB', fmt='JPEG'):
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def catalog_db():
    """Fixture providing an empty in-memory catalog."""
    db = SqliteCatalogDb()
    yield db
    db.connection.close()


@pytest.fixture
def repository(catalog_db, logger):
    """Fixture providing a catalog repository over the in-memory catalog."""
    from imgregen.catalog import SqlCatalogRepository
    
    return SqlCatalogRepository(catalog_db, logger=logger)


@pytest.fixture
def five_products(catalog_db):
    """Five active products with two gallery images each, plus one disabled product."""
    for i in range(1, 6):
        catalog_db.add_product(i, f'SKU-{i}', files=[f'/s/k/sku{i}_a.jpg', f'/s/k/sku{i}_b.jpg'])
    catalog_db.add_product(6, 'SKU-6', status=2, files=['/s/k/sku6_a.jpg'])
    return catalog_db


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    return image_bytes()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    return image_bytes(mode='RGBA', color=(255, 0, 0, 128), fmt='PNG')


@pytest.fixture
def watermark_png_bytes():
    """Fixture providing a small watermark image."""
    return image_bytes(size=(20, 10), mode='RGBA', color=(0, 0, 255, 255), fmt='PNG')


@pytest.fixture
def media_root(tmp_path):
    """Fixture providing a media root with an empty product directory."""
    root = tmp_path / 'media'
    (root / 'catalog' / 'product').mkdir(parents=True)
    return root


@pytest.fixture
def local_storage(media_root, logger):
    """Fixture providing local media storage."""
    from imgregen.local_client import LocalClient, LocalConfig
    
    return LocalClient(LocalConfig(root_path=str(media_root)), logger)


@pytest.fixture
def put_original(media_root):
    """Fixture providing a helper that stores an original under the product directory."""
    def _put(file, data):
        path = media_root / 'catalog' / 'product' / file.lstrip('/')
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    return _put


@pytest.fixture
def theme_data():
    """Two assigned themes sharing one image declaration, plus an unassigned theme."""
    return {
        'themes': [
            {
                'id': 1,
                'code': 'Vendor/base',
                'images': {
                    'product_thumbnail': {'type': 'thumbnail', 'width': 50, 'height': 50},
                    'product_small': {'type': 'small_image', 'width': 80, 'height': 60, 'quality': 90},
                },
            },
            {
                'id': 2,
                'code': 'Vendor/child',
                'images': {
                    'cart_thumbnail': {'type': 'thumbnail', 'height': 50, 'width': 50},
                    'product_large': {'type': 'image', 'width': 200, 'height': 200, 'frame': False},
                },
            },
            {
                'id': 3,
                'code': 'Vendor/unused',
                'images': {
                    'unused_image': {'type': 'image', 'width': 999, 'height': 999},
                },
            },
        ],
        'store_themes': {'1': [1], '2': [2, 3]},
    }


@pytest.fixture
def theme_config(theme_data):
    """Fixture providing a ThemeConfig with three registered themes."""
    from imgregen.theme_config import ThemeConfig
    
    return ThemeConfig.from_dict(theme_data)


@pytest.fixture
def s3_config():
    """Fixture providing S3 configuration."""
    from imgregen.s3_config import S3Config
    
    return S3Config(
        endpoint='https://test-endpoint.example.com:9000',
        bucket='test-bucket',
        prefix='media/catalog/product',
        access_key='test-access-key',
        secret_key='test-secret-key',
        region='us-east-1',
    )


@pytest.fixture
def mock_s3_client(s3_config):
    """Fixture providing an S3Client with mocked boto3."""
    from unittest.mock import MagicMock, patch
    from imgregen.s3_client import S3Client
    
    mock_boto = MagicMock()
    
    with patch('boto3.client', return_value=mock_boto):
        client = S3Client(s3_config)
        client._mock_boto = mock_boto
        yield client


@pytest.fixture
def make_image():
    """Fixture providing a helper that encodes a solid-color image."""
    return image_bytes
