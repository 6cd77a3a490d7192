"""
ThemeConfig - Registered themes, store assignments and their image declarations.

The configuration is a JSON document:

    {
        "themes": [
            {
                "id": 3,
                "code": "Vendor/luma",
                "images": {
                    "product_page_image_small": {"type": "small_image", "width": 100, "height": 100}
                }
            }
        ],
        "store_themes": {"3": [1, 2]}
    }

"store_themes" maps a theme key to the stores using it. The key is either
the theme id or the theme code; which one is decided from the mapping itself.
"""

import enum
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import ConfigurationError

ThemeKey = Union[int, str]


class AssignmentKey(enum.Enum):
    """How the store-to-theme mapping refers to themes."""
    ID = 'id'
    CODE = 'code'
    
    @classmethod
    def resolve(cls, store_themes: Dict[Any, Any]) -> 'AssignmentKey':
        """
        Decide the key kind from the shape of the assignment mapping.
        
        The first key decides: an integer (or an all-digit string, as JSON
        object keys are always strings) means theme ids, anything else
        theme codes.
        """
        if not store_themes:
            return cls.ID
        first = next(iter(store_themes))
        if isinstance(first, int) or (isinstance(first, str) and first.isdigit()):
            return cls.ID
        return cls.CODE
    
    def normalize(self, key: Any) -> ThemeKey:
        """
        Raises:
            ConfigurationError: If an id-keyed mapping holds a non-numeric key
        """
        if self is AssignmentKey.ID:
            try:
                return int(key)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Store theme mapping is keyed by theme id but has key {key!r}"
                )
        return str(key)
    
    def key_of(self, theme: 'Theme') -> ThemeKey:
        return theme.id if self is AssignmentKey.ID else theme.code


@dataclass
class Theme:
    """
    A registered presentation theme.
    
    Attributes:
        id: Numeric theme id
        code: Theme code (e.g. 'Vendor/luma')
        images: Raw product image declarations, image id -> parameter mapping
    """
    id: int
    code: str
    images: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    
    @classmethod
    def from_dict(cls, data: dict) -> 'Theme':
        try:
            return cls(
                id=int(data['id']),
                code=str(data['code']),
                images=dict(data.get('images') or {}),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid theme entry {data!r}: {e}")


@dataclass
class ThemeConfig:
    """
    Theme and store configuration for one run.
    
    Attributes:
        themes: Registered themes in registration order
        store_themes: Theme key -> list of store ids using it
    """
    themes: List[Theme] = field(default_factory=list)
    store_themes: Dict[Any, List[int]] = field(default_factory=dict)
    
    def registered_themes(self) -> List[Theme]:
        return list(self.themes)
    
    def stores_by_themes(self) -> Dict[Any, List[int]]:
        return dict(self.store_themes)
    
    def image_entries(self, theme: Theme) -> Dict[str, Dict[str, Any]]:
        """Raw product image declarations of a theme, in declaration order."""
        return dict(theme.images)
    
    @classmethod
    def from_dict(cls, data: dict) -> 'ThemeConfig':
        themes = [Theme.from_dict(t) for t in data.get('themes', [])]
        store_themes = dict(data.get('store_themes') or {})
        return cls(themes=themes, store_themes=store_themes)
    
    @classmethod
    def load(cls, filepath: str, logger: Optional[logging.Logger] = None) -> 'ThemeConfig':
        """
        Load theme configuration from a JSON file.
        
        Raises:
            ConfigurationError: If the file is missing or not valid JSON
        """
        logger = logger or logging.getLogger(__name__)
        path = Path(filepath)
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Theme configuration not found: {filepath}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Theme configuration {filepath} is not valid JSON: {e}")
        
        config = cls.from_dict(data)
        logger.debug(f"Loaded {len(config.themes)} themes from {filepath}")
        return config
