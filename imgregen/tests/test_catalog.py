"""Tests for the catalog repository and ProductQuery."""

import pytest

from imgregen.catalog import SqlCatalogRepository
from imgregen.exceptions import QueryOrderError
from imgregen.filter_selection import FilterSelection


class TestProductQuery:
    """Tests for ProductQuery class."""
    
    def test_count_active_only(self, repository, five_products):
        """Test disabled products never match."""
        assert repository.create_query().count() == 5
    
    def test_filter_ids(self, repository, five_products):
        query = repository.create_query().filter_ids([2, 4, 6])
        
        assert query.count() == 2
        assert query.ids() == [2, 4]
    
    def test_filter_skus(self, repository, five_products):
        query = repository.create_query().filter_skus(['SKU-1', 'SKU-5', 'NOPE'])
        
        assert query.ids() == [1, 5]
    
    def test_empty_filter_matches_nothing(self, repository, five_products):
        assert repository.create_query().filter_ids([]).count() == 0
    
    def test_apply_selection(self, repository, five_products):
        assert repository.create_query().apply(FilterSelection.by_skus(['SKU-3'])).ids() == [3]
        assert repository.create_query().apply(FilterSelection.all_active()).count() == 5
    
    def test_filter_after_gallery_rejected(self, repository, five_products):
        """Test filtering after the gallery is attached is refused."""
        query = repository.create_query().with_gallery()
        
        with pytest.raises(QueryOrderError):
            query.filter_ids([1])
        with pytest.raises(QueryOrderError):
            query.apply(FilterSelection.all_active())
    
    def test_count_unaffected_by_gallery_size(self, repository, five_products):
        """Test filtered count equals products, not gallery rows."""
        filtered = repository.create_query().filter_ids([1, 2, 3])
        count = filtered.count()
        
        products = filtered.with_gallery().page(10, 1)
        
        assert count == 3
        assert len(products) == 3
        assert sum(p.image_count for p in products) == 6
    
    def test_sku_count_unaffected_by_gallery(self, repository, five_products):
        """Test an explicit SKU list counts the same with and without the gallery."""
        skus = ['SKU-2', 'SKU-4', 'SKU-5']
        count = repository.create_query().filter_skus(skus).count()
        
        plain = repository.create_query().filter_skus(skus).page(10, 1)
        joined_query = repository.create_query().filter_skus(skus).with_gallery()
        joined = joined_query.page(10, 1)
        
        assert count == 3
        assert joined_query.count() == 3
        assert [p.id for p in plain] == [p.id for p in joined] == [2, 4, 5]
        assert all(p.image_count == 2 for p in joined)
    
    def test_page_window(self, repository, five_products):
        query = repository.create_query().with_gallery()
        
        assert [p.id for p in query.page(2, 1)] == [1, 2]
        assert [p.id for p in query.page(2, 3)] == [5]
        assert query.page(2, 4) == []
    
    def test_page_invalid_arguments(self, repository):
        query = repository.create_query()
        
        with pytest.raises(ValueError):
            query.page(0, 1)
        with pytest.raises(ValueError):
            query.page(10, 0)
    
    def test_page_without_gallery(self, repository, five_products):
        products = repository.create_query().page(10, 1)
        
        assert all(p.gallery == [] for p in products)


class TestGalleryLoading:
    """Tests for gallery loading."""
    
    def test_gallery_order_and_disabled(self, repository, catalog_db):
        """Test images come in position order and disabled ones are left out."""
        catalog_db.add_product(10, 'GAL', files=['/g/a/first.jpg', '/g/a/second.jpg'],
                               disabled=['/g/a/hidden.jpg'])
        
        product = repository.create_query().with_gallery().page(10, 1)[0]
        
        assert [img.file for img in product.gallery] == ['/g/a/first.jpg', '/g/a/second.jpg']
        assert product.gallery[0].name == 'first.jpg'
        assert product.gallery[0].relative_path == 'g/a/first.jpg'
        assert product.gallery[0].sku == 'GAL'
    
    def test_product_without_images(self, repository, catalog_db):
        catalog_db.add_product(11, 'EMPTY')
        
        product = repository.create_query().with_gallery().page(10, 1)[0]
        
        assert product.gallery == []


class TestSqlCatalogRepository:
    """Tests for SqlCatalogRepository class."""
    
    def test_placeholder_from_db(self, repository):
        assert repository.placeholder == '?'
    
    def test_invalid_table_name(self, catalog_db):
        with pytest.raises(ValueError):
            SqlCatalogRepository(catalog_db, product_table='products; DROP TABLE x')
