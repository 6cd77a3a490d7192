"""Tests for LocalClient class."""

import os

import pytest

from imgregen.local_client import LocalClient, LocalConfig


class TestLocalConfig:
    """Tests for LocalConfig class."""
    
    def test_valid(self, media_root):
        assert LocalConfig(root_path=str(media_root)).validate() == []
    
    def test_missing_root(self, tmp_path):
        errors = LocalConfig(root_path=str(tmp_path / 'nope')).validate()
        
        assert len(errors) == 1
        assert 'does not exist' in errors[0]
    
    def test_base_path(self):
        assert LocalConfig(root_path='/media').base_path == os.path.join('/media', 'catalog/product')


class TestLocalClient:
    """Tests for LocalClient class."""
    
    def test_exists_and_read(self, local_storage, put_original):
        put_original('/a/b/ab.jpg', b'data')
        
        assert local_storage.exists('a/b/ab.jpg')
        assert local_storage.exists('/a/b/ab.jpg')
        assert local_storage.read('a/b/ab.jpg') == b'data'
        assert not local_storage.exists('a/b/missing.jpg')
    
    def test_open_write(self, local_storage, media_root):
        """Test a clean write lands at the destination with no temp files left."""
        with local_storage.open_write('cache/k1/a/b/ab.jpg') as handle:
            handle.write(b'generated')
        
        directory = media_root / 'catalog' / 'product' / 'cache' / 'k1' / 'a' / 'b'
        assert (directory / 'ab.jpg').read_bytes() == b'generated'
        assert os.listdir(directory) == ['ab.jpg']
    
    def test_open_write_failure_leaves_nothing(self, local_storage, media_root):
        """Test an error inside the block removes the temp file."""
        with pytest.raises(RuntimeError):
            with local_storage.open_write('cache/k1/x.jpg') as handle:
                handle.write(b'partial')
                raise RuntimeError("encoder crashed")
        
        directory = media_root / 'catalog' / 'product' / 'cache' / 'k1'
        assert os.listdir(directory) == []
    
    def test_open_write_failure_keeps_previous(self, local_storage):
        """Test a failed rewrite does not touch the existing file."""
        with local_storage.open_write('cache/k1/x.jpg') as handle:
            handle.write(b'first')
        
        with pytest.raises(RuntimeError):
            with local_storage.open_write('cache/k1/x.jpg') as handle:
                handle.write(b'second')
                raise RuntimeError("boom")
        
        assert local_storage.read('cache/k1/x.jpg') == b'first'
    
    def test_describe(self, local_storage):
        assert local_storage.describe().startswith('Local filesystem:')
