"""
LocalClient - Media storage on the local filesystem.
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional


@dataclass
class LocalConfig:
    """
    Local media storage configuration.
    
    Attributes:
        root_path: Media root directory (e.g. /var/www/pub/media)
        prefix: Product media directory within the root
    """
    root_path: str
    prefix: str = 'catalog/product'
    
    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty when valid)."""
        errors = []
        if not self.root_path:
            errors.append("Local media root is required")
        elif not os.path.isdir(self.root_path):
            errors.append(f"Local media root does not exist: {self.root_path}")
        return errors
    
    @property
    def base_path(self) -> str:
        return os.path.join(self.root_path, self.prefix) if self.prefix else self.root_path


class LocalClient:
    """
    Reads originals and writes generated images below the product media directory.
    
    All keys are relative to LocalConfig.base_path.
    """
    
    def __init__(self, config: LocalConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
    
    def get_absolute_path(self, key: str) -> str:
        """Resolve a media key to an absolute filesystem path."""
        return os.path.abspath(os.path.join(self.config.base_path, key.lstrip('/')))
    
    def exists(self, key: str) -> bool:
        return os.path.isfile(self.get_absolute_path(key))
    
    def read(self, key: str) -> bytes:
        with open(self.get_absolute_path(key), 'rb') as f:
            return f.read()
    
    @contextmanager
    def open_write(self, key: str, content_type: Optional[str] = None) -> Iterator[BinaryIO]:
        """
        Open a destination for writing.
        
        Data goes to a temporary file next to the destination, which replaces
        the destination only when the block exits cleanly. On any error the
        temporary file is closed and removed and the destination is untouched.
        """
        path = self.get_absolute_path(key)
        directory = os.path.dirname(path)
        os.makedirs(directory, exist_ok=True)
        
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.tmp-', suffix=os.path.splitext(path)[1])
        handle = os.fdopen(fd, 'wb')
        try:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
            handle.close()
            os.replace(tmp_path, path)
        except BaseException:
            handle.close()
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        self.logger.debug(f"Wrote {path}")
    
    def describe(self) -> str:
        return f"Local filesystem: {self.config.base_path}"
