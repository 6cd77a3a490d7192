"""
ViewConfigResolver - Merges per-theme image declarations into one deduplicated work set.
"""

import logging
from typing import Dict, List, Optional

from .exceptions import ConfigurationError
from .theme_config import AssignmentKey, Theme, ThemeConfig
from .view_image_spec import ViewImageSpec


class ViewConfigResolver:
    """
    Resolves which themes are in use and which view images they need.
    """
    
    def __init__(self, theme_config: ThemeConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize resolver.
        
        Args:
            theme_config: Theme/store configuration source
            logger: Optional logger instance
        """
        self.config = theme_config
        self.logger = logger or logging.getLogger(__name__)
    
    def themes_in_use(self) -> List[Theme]:
        """
        Return registered themes assigned to at least one store.
        
        The assignment key kind is resolved once for the whole mapping.
        Order follows theme registration order.
        """
        stores_by_themes = self.config.stores_by_themes()
        key_kind = AssignmentKey.resolve(stores_by_themes)
        assigned = {key_kind.normalize(k) for k in stores_by_themes}
        
        themes = [
            theme for theme in self.config.registered_themes()
            if key_kind.key_of(theme) in assigned
        ]
        self.logger.debug(
            f"Themes in use (keyed by {key_kind.value}): {[t.code for t in themes]}"
        )
        return themes
    
    def view_image_specs(self, themes: List[Theme]) -> Dict[str, ViewImageSpec]:
        """
        Collect view-image specs of the given themes, deduplicated.
        
        Specs are keyed by canonical key. When two declarations share a
        canonical key the one processed last is kept.
        
        Args:
            themes: Themes in the order they should be processed
            
        Returns:
            Mapping of canonical key -> ViewImageSpec
        """
        specs: Dict[str, ViewImageSpec] = {}
        declared = 0
        
        for theme in themes:
            for image_id, params in self.config.image_entries(theme).items():
                try:
                    spec = ViewImageSpec.from_config(image_id, params)
                except ValueError as e:
                    raise ConfigurationError(f"{theme.code}: invalid image '{image_id}': {e}") from e
                key = spec.canonical_key
                if key in specs:
                    self.logger.debug(
                        f"{theme.code}: '{image_id}' duplicates '{specs[key].id}'"
                    )
                specs[key] = spec
                declared += 1
        
        self.logger.info(
            f"Resolved {len(specs)} unique view images from {declared} declarations "
            f"across {len(themes)} themes"
        )
        return specs
    
    def resolve(self) -> Dict[str, ViewImageSpec]:
        """Shortcut for view_image_specs(themes_in_use())."""
        return self.view_image_specs(self.themes_in_use())
