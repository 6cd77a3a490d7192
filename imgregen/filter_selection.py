"""
FilterSelection - Which products a run should process.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import ConfigurationError

IDS = 'ids'
SKUS = 'skus'
ALL = 'all'


def split_csv(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated option value, trimming blanks."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(',') if part.strip())


@dataclass(frozen=True)
class FilterSelection:
    """
    Exactly one of: explicit id list, explicit SKU list, all active products.
    
    Attributes:
        kind: 'ids', 'skus' or 'all'
        values: Ids or SKUs for the explicit kinds, empty for 'all'
    """
    kind: str
    values: Tuple = ()
    
    @classmethod
    def by_ids(cls, ids) -> 'FilterSelection':
        try:
            values = tuple(int(i) for i in ids)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Product ids must be integers: {ids!r}")
        return cls(IDS, values)
    
    @classmethod
    def by_skus(cls, skus) -> 'FilterSelection':
        return cls(SKUS, tuple(str(s) for s in skus))
    
    @classmethod
    def all_active(cls) -> 'FilterSelection':
        return cls(ALL)
    
    @classmethod
    def from_options(
        cls,
        product_ids: Optional[str] = None,
        product_skus: Optional[str] = None,
        process_all: bool = False
    ) -> Optional['FilterSelection']:
        """
        Build a selection from raw command-line option values.
        
        The first option set wins in the order ids, skus, all.
        Returns None when no option is set.
        """
        if product_ids:
            return cls.by_ids(split_csv(product_ids))
        if product_skus:
            return cls.by_skus(split_csv(product_skus))
        if process_all:
            return cls.all_active()
        return None
    
    def validate(self) -> None:
        """
        Raises:
            ConfigurationError: If the selection cannot match anything
        """
        if self.kind not in (IDS, SKUS, ALL):
            raise ConfigurationError(f"Unknown filter type: {self.kind}")
        if self.kind != ALL and not self.values:
            raise ConfigurationError(f"Filter by {self.kind} needs at least one value")
    
    def describe(self) -> str:
        if self.kind == ALL:
            return "ALL active products"
        label = 'IDs' if self.kind == IDS else 'SKUs'
        return f"products with {label}: {', '.join(str(v) for v in self.values)}"
