"""
Exceptions raised while regenerating catalog view images.
"""


class ImgRegenError(Exception):
    """Base exception for all imgregen errors."""


class ConfigurationError(ImgRegenError):
    """Invalid or missing run configuration (e.g. no product filter)."""


class SourceNotFound(ImgRegenError):
    """A gallery image's original file does not exist in media storage."""

    def __init__(self, key: str):
        super().__init__(f"File not found: {key}")
        self.key = key


class TransformFailure(ImgRegenError):
    """The transform engine rejected or failed a parameter set."""


class QueryOrderError(ImgRegenError):
    """A product query was built in an order that could widen its result set."""
