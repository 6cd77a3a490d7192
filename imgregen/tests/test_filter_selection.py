"""Tests for FilterSelection class."""

import pytest

from imgregen.exceptions import ConfigurationError
from imgregen.filter_selection import ALL, IDS, SKUS, FilterSelection, split_csv


class TestSplitCsv:
    """Tests for split_csv function."""
    
    def test_trims_and_drops_blanks(self):
        assert split_csv(' 1, 2,,3 ') == ('1', '2', '3')
    
    def test_empty(self):
        assert split_csv(None) == ()
        assert split_csv('') == ()


class TestFilterSelection:
    """Tests for FilterSelection class."""
    
    def test_from_options_ids(self):
        selection = FilterSelection.from_options(product_ids='3,1')
        
        assert selection.kind == IDS
        assert selection.values == (3, 1)
    
    def test_from_options_skus(self):
        selection = FilterSelection.from_options(product_skus='A-1,B-2')
        
        assert selection.kind == SKUS
        assert selection.values == ('A-1', 'B-2')
    
    def test_from_options_all(self):
        assert FilterSelection.from_options(process_all=True).kind == ALL
    
    def test_from_options_none(self):
        assert FilterSelection.from_options() is None
    
    def test_non_numeric_ids(self):
        with pytest.raises(ConfigurationError):
            FilterSelection.from_options(product_ids='1,abc')
    
    def test_validate_empty_values(self):
        with pytest.raises(ConfigurationError):
            FilterSelection.by_skus([]).validate()
    
    def test_validate_unknown_kind(self):
        with pytest.raises(ConfigurationError):
            FilterSelection('colors', ('red',)).validate()
    
    def test_describe(self):
        assert FilterSelection.all_active().describe() == 'ALL active products'
        assert FilterSelection.by_ids([1, 2]).describe() == 'products with IDs: 1, 2'
