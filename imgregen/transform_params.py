"""
TransformParams - Engine parameter set built from a view-image spec.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .view_image_spec import ViewImageSpec

DEFAULT_QUALITY = 80
DEFAULT_BACKGROUND = (255, 255, 255)
FRAMELESS_TYPES = ('swatch_image', 'swatch_thumb')


@dataclass(frozen=True)
class TransformParams:
    """
    Fully resolved parameters for one transform.
    
    Resize dimensions and watermark settings stay None when the view image does
    not set them; the engine then leaves that step or setting alone.
    """
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    keep_aspect_ratio: bool = True
    keep_frame: bool = True
    keep_transparency: bool = True
    constrain_only: bool = True
    background: Tuple[int, int, int] = DEFAULT_BACKGROUND
    quality: int = DEFAULT_QUALITY
    watermark_file: Optional[str] = None
    watermark_width: Optional[int] = None
    watermark_height: Optional[int] = None
    watermark_position: Optional[str] = None
    watermark_opacity: Optional[int] = None
    
    @property
    def has_resize(self) -> bool:
        return self.image_width is not None and self.image_height is not None
    
    @property
    def has_watermark(self) -> bool:
        return self.watermark_file is not None


def _default(value, fallback):
    return fallback if value is None else value


def build(spec: ViewImageSpec) -> TransformParams:
    """Resolve a spec into engine parameters, filling engine defaults."""
    watermark = spec.watermark
    return TransformParams(
        image_width=spec.width,
        image_height=spec.height,
        keep_aspect_ratio=_default(spec.keep_aspect_ratio, True),
        keep_frame=_default(spec.keep_frame, spec.image_type not in FRAMELESS_TYPES),
        keep_transparency=_default(spec.keep_transparency, True),
        constrain_only=_default(spec.constrain_only, True),
        background=_default(spec.background, DEFAULT_BACKGROUND),
        quality=_default(spec.quality, DEFAULT_QUALITY),
        watermark_file=watermark.file if watermark else None,
        watermark_width=watermark.width if watermark else None,
        watermark_height=watermark.height if watermark else None,
        watermark_position=watermark.position if watermark else None,
        watermark_opacity=watermark.opacity if watermark else None,
    )
