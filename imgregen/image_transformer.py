"""
ImageTransformer - Renders view images from originals using Pillow.
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .exceptions import TransformFailure
from .transform_params import TransformParams

WATERMARK_POSITIONS = (
    'stretch', 'tile', 'top-left', 'top-right', 'bottom-left', 'bottom-right', 'center',
)


class ImageTransformer:
    """
    Applies watermark, resize and encoding settings to an original image.
    
    Operations run in a fixed order: the watermark overlay first, then the
    geometric resize (only when both target dimensions are set), then
    encoding at the requested quality.
    """
    
    FORMATS = {
        '.jpg': ('JPEG', 'image/jpeg'),
        '.jpeg': ('JPEG', 'image/jpeg'),
        '.png': ('PNG', 'image/png'),
        '.gif': ('GIF', 'image/gif'),
        '.webp': ('WEBP', 'image/webp'),
    }
    ALPHA_FORMATS = ('PNG', 'GIF', 'WEBP')
    
    DEFAULT_WATERMARK_POSITION = 'stretch'
    DEFAULT_WATERMARK_OPACITY = 30
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
    
    def get_output_format(self, extension: str) -> Tuple[str, str]:
        """Determine output format and content type from the original extension."""
        return self.FORMATS.get(extension.lower(), ('JPEG', 'image/jpeg'))
    
    def render(
        self,
        image_data: bytes,
        extension: str,
        params: TransformParams,
        watermark_data: Optional[bytes] = None
    ) -> Tuple[bytes, str]:
        """
        Render one view image.
        
        Args:
            image_data: Original image bytes
            extension: Original file extension (e.g. '.jpg')
            params: Resolved transform parameters
            watermark_data: Watermark image bytes when params carry a watermark
            
        Returns:
            Tuple of (image_bytes, content_type)
            
        Raises:
            TransformFailure: If the image cannot be decoded, transformed or encoded
        """
        output_format, content_type = self.get_output_format(extension)
        keep_alpha = params.keep_transparency and output_format in self.ALPHA_FORMATS
        
        try:
            img = Image.open(io.BytesIO(image_data))
            img.load()
            img = self._convert_color_mode(img, keep_alpha, params.background)
            
            if params.has_watermark:
                if watermark_data is None:
                    raise TransformFailure(f"Watermark image missing: {params.watermark_file}")
                img = self._apply_watermark(img, watermark_data, params)
            
            if params.has_resize:
                img = self._resize(img, params, keep_alpha)
            
            return self._encode(img, output_format, params.quality), content_type
        except TransformFailure:
            raise
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise TransformFailure(str(e)) from e
    
    def _convert_color_mode(self, img: Image.Image, keep_alpha: bool, background) -> Image.Image:
        """Normalize to RGBA when keeping transparency, otherwise flatten onto the background."""
        has_alpha = img.mode in ('RGBA', 'LA') or (img.mode == 'P' and 'transparency' in img.info)
        
        if has_alpha:
            img = img.convert('RGBA')
            if keep_alpha:
                return img
            flattened = Image.new('RGB', img.size, tuple(background))
            flattened.paste(img, mask=img.split()[-1])
            return flattened
        
        if img.mode != 'RGB':
            img = img.convert('RGB')
        return img.convert('RGBA') if keep_alpha else img
    
    def _apply_watermark(self, img: Image.Image, watermark_data: bytes, params: TransformParams) -> Image.Image:
        """Overlay the watermark using the configured size, position and opacity."""
        mark = Image.open(io.BytesIO(watermark_data))
        mark.load()
        mark = mark.convert('RGBA')
        
        position = params.watermark_position or self.DEFAULT_WATERMARK_POSITION
        if position not in WATERMARK_POSITIONS:
            raise TransformFailure(f"Unknown watermark position: {position}")
        
        width, height = params.watermark_width, params.watermark_height
        if position == 'stretch':
            width, height = img.size
        elif width is not None and height is None:
            height = max(1, round(mark.height * width / mark.width))
        elif height is not None and width is None:
            width = max(1, round(mark.width * height / mark.height))
        if width is not None and height is not None:
            mark = mark.resize((width, height), Image.Resampling.LANCZOS)
        
        opacity = params.watermark_opacity
        if opacity is None:
            opacity = self.DEFAULT_WATERMARK_OPACITY
        opacity = max(0, min(100, opacity))
        alpha = mark.split()[-1].point(lambda a: a * opacity // 100)
        mark.putalpha(alpha)
        
        base = img.convert('RGBA')
        layer = Image.new('RGBA', base.size, (0, 0, 0, 0))
        
        if position == 'tile':
            for top in range(0, base.height, mark.height):
                for left in range(0, base.width, mark.width):
                    layer.paste(mark, (left, top))
        else:
            layer.paste(mark, self._watermark_offset(position, base.size, mark.size))
        
        composed = Image.alpha_composite(base, layer)
        return composed if img.mode == 'RGBA' else composed.convert(img.mode)
    
    @staticmethod
    def _watermark_offset(position: str, size, mark_size) -> Tuple[int, int]:
        (w, h), (mw, mh) = size, mark_size
        return {
            'stretch': (0, 0),
            'top-left': (0, 0),
            'top-right': (w - mw, 0),
            'bottom-left': (0, h - mh),
            'bottom-right': (w - mw, h - mh),
            'center': ((w - mw) // 2, (h - mh) // 2),
        }[position]
    
    def _resize(self, img: Image.Image, params: TransformParams, keep_alpha: bool) -> Image.Image:
        """Resize to the target box honoring aspect ratio, frame and constrain flags."""
        box_w, box_h = params.image_width, params.image_height
        if box_w <= 0 or box_h <= 0:
            raise TransformFailure(f"Invalid target size {box_w}x{box_h}")
        
        src_w, src_h = img.size
        if params.keep_aspect_ratio:
            scale = min(box_w / src_w, box_h / src_h)
            if params.constrain_only:
                scale = min(scale, 1.0)
            new_size = (max(1, round(src_w * scale)), max(1, round(src_h * scale)))
        elif params.constrain_only and src_w <= box_w and src_h <= box_h:
            new_size = (src_w, src_h)
        else:
            new_size = (box_w, box_h)
        
        if new_size != img.size:
            img = img.resize(new_size, Image.Resampling.LANCZOS)
        
        if params.keep_frame and params.keep_aspect_ratio and img.size != (box_w, box_h):
            if keep_alpha:
                canvas = Image.new('RGBA', (box_w, box_h), (0, 0, 0, 0))
            else:
                canvas = Image.new('RGB', (box_w, box_h), tuple(params.background))
            offset = ((box_w - img.width) // 2, (box_h - img.height) // 2)
            canvas.paste(img, offset, img if img.mode == 'RGBA' else None)
            img = canvas
        
        return img
    
    def _encode(self, img: Image.Image, output_format: str, quality: int) -> bytes:
        output = io.BytesIO()
        if output_format == 'JPEG':
            if img.mode != 'RGB':
                img = img.convert('RGB')
            img.save(output, format='JPEG', quality=quality, optimize=True)
        elif output_format == 'PNG':
            img.save(output, format='PNG', optimize=True)
        elif output_format == 'WEBP':
            img.save(output, format='WEBP', quality=quality)
        else:
            img.save(output, format=output_format)
        return output.getvalue()
