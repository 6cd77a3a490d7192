"""
S3Config - S3/MinIO connection settings for media storage.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class S3Config:
    """
    S3 media storage configuration.
    
    Attributes:
        endpoint: S3 endpoint URL
        bucket: Bucket name
        prefix: Product media prefix within the bucket
        access_key: Access key id
        secret_key: Secret access key
        region: Region name
        verify_ssl: Verify TLS certificates
    """
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    prefix: str = 'media/catalog/product'
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = 'us-east-1'
    verify_ssl: bool = True
    
    @classmethod
    def from_env(cls) -> 'S3Config':
        """Read configuration from S3_* environment variables."""
        return cls(
            endpoint=os.getenv('S3_ENDPOINT'),
            bucket=os.getenv('S3_BUCKET'),
            prefix=os.getenv('S3_PREFIX', 'media/catalog/product'),
            access_key=os.getenv('S3_ACCESS_KEY'),
            secret_key=os.getenv('S3_SECRET_KEY'),
            region=os.getenv('S3_REGION', 'us-east-1'),
            verify_ssl=os.getenv('S3_VERIFY_SSL', 'true').lower() not in ('0', 'false', 'no'),
        )
    
    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty when valid)."""
        errors = []
        if not self.endpoint:
            errors.append("S3_ENDPOINT is required")
        if not self.bucket:
            errors.append("S3_BUCKET is required")
        if not self.access_key:
            errors.append("S3_ACCESS_KEY is required")
        if not self.secret_key:
            errors.append("S3_SECRET_KEY is required")
        return errors
