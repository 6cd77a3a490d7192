"""Tests for CLI module."""

import json

import pytest

from imgregen.cli import create_parser, get_storage_client, main
from imgregen.exceptions import ConfigurationError
from imgregen.local_client import LocalClient


class TestCreateParser:
    """Tests for argument parser creation."""
    
    def test_defaults(self):
        args = create_parser().parse_args(['--all'])
        
        assert args.all is True
        assert args.batch_size == 50
        assert args.max_records == 0
        assert args.dry_run is False
        assert args.snapshot is False
        assert args.themes == 'themes.json'
    
    def test_short_options(self):
        args = create_parser().parse_args(['-p', '1,2', '-b', '10', '-m', '5', '-d'])
        
        assert args.product_ids == '1,2'
        assert args.batch_size == 10
        assert args.max_records == 5
        assert args.dry_run is True
    
    def test_filters_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['-p', '1', '-s', 'A'])
    
    def test_batch_size_must_be_positive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['--all', '-b', '0'])
    
    def test_max_records_not_negative(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['--all', '-m', '-1'])


class TestGetStorageClient:
    """Tests for storage selection."""
    
    def test_local(self, media_root, logger):
        args = create_parser().parse_args(['--all', '--media-root', str(media_root)])
        
        assert isinstance(get_storage_client(args, logger), LocalClient)
    
    def test_local_missing_root(self, tmp_path, logger):
        args = create_parser().parse_args(['--all', '--media-root', str(tmp_path / 'nope')])
        
        with pytest.raises(ConfigurationError):
            get_storage_client(args, logger)
    
    def test_s3_missing_settings(self, monkeypatch, logger):
        for name in ('S3_ENDPOINT', 'S3_BUCKET', 'S3_ACCESS_KEY', 'S3_SECRET_KEY'):
            monkeypatch.delenv(name, raising=False)
        args = create_parser().parse_args(['--all'])
        
        with pytest.raises(ConfigurationError):
            get_storage_client(args, logger)


class TestMain:
    """Tests for main entry point."""
    
    @pytest.fixture
    def themes_file(self, theme_data, tmp_path):
        filepath = tmp_path / 'themes.json'
        filepath.write_text(json.dumps(theme_data))
        return str(filepath)
    
    @pytest.fixture
    def sqlite_catalog(self, mocker, repository, five_products):
        """Route the CLI to the in-memory catalog."""
        mocker.patch('imgregen.cli.get_catalog_repository', return_value=repository)
        return repository
    
    def test_no_filter(self, sqlite_catalog):
        """Test running without a filter option fails."""
        assert main([]) == 1
    
    def test_missing_themes(self, sqlite_catalog, tmp_path):
        assert main(['--all', '--themes', str(tmp_path / 'missing.json')]) == 1
    
    def test_no_matching_products(self, sqlite_catalog, themes_file, media_root):
        result = main(['-s', 'UNKNOWN', '--themes', themes_file, '--media-root', str(media_root)])
        
        assert result == 1
    
    def test_dry_run(self, sqlite_catalog, themes_file, capsys):
        result = main(['--all', '--dry-run', '--themes', themes_file])
        
        assert result == 0
        out = capsys.readouterr().out
        assert 'DRY RUN' in out
        assert 'Total resize operations:  30' in out
    
    def test_run_with_failures_succeeds(self, sqlite_catalog, themes_file, media_root, capsys):
        """Test missing originals are reported but do not change the exit code."""
        result = main(['-p', '1,2', '--themes', themes_file, '--media-root', str(media_root)])
        
        assert result == 0
        out = capsys.readouterr().out
        assert 'Failed:' in out
        assert 'File not found: sku1_a.jpg' in out
    
    def test_run_generates_images(self, sqlite_catalog, themes_file, media_root, put_original,
                                  sample_image_bytes):
        put_original('/s/k/sku1_a.jpg', sample_image_bytes)
        put_original('/s/k/sku1_b.jpg', sample_image_bytes)
        
        result = main(['-p', '1', '-q', '--themes', themes_file, '--media-root', str(media_root)])
        
        assert result == 0
        generated = list((media_root / 'catalog' / 'product' / 'cache').rglob('*.jpg'))
        assert len(generated) == 6
    
    def test_quiet_hides_progress_and_errors(self, sqlite_catalog, themes_file, media_root, capsys):
        result = main(['-p', '1', '-q', '--themes', themes_file, '--media-root', str(media_root)])
        
        assert result == 0
        out = capsys.readouterr().out
        assert 'Page 1/' not in out
        assert 'ERRORS' not in out
        assert 'Failed:' in out
