"""
S3Client - Media storage on S3/MinIO.
"""

import io
import logging
import mimetypes
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .s3_config import S3Config


class S3Client:
    """
    Wrapper for S3/MinIO operations on product media.
    
    All keys are relative to S3Config.prefix.
    """
    
    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.
        
        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        
        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}
            ),
            verify=config.verify_ssl
        )
    
    def get_absolute_path(self, key: str) -> str:
        """Full object key for a media key."""
        key = key.lstrip('/')
        if self.config.prefix:
            return f"{self.config.prefix.rstrip('/')}/{key}"
        return key
    
    def exists(self, key: str) -> bool:
        """Check if an object exists in S3."""
        try:
            self._client.head_object(Bucket=self.config.bucket, Key=self.get_absolute_path(key))
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise
    
    def read(self, key: str) -> bytes:
        """Download an object from S3."""
        response = self._client.get_object(Bucket=self.config.bucket, Key=self.get_absolute_path(key))
        return response['Body'].read()
    
    def upload_object(
        self, 
        key: str, 
        data: bytes, 
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Upload an object to S3."""
        self._client.put_object(
            Bucket=self.config.bucket,
            Key=self.get_absolute_path(key),
            Body=data,
            ContentType=content_type
        )
    
    @contextmanager
    def open_write(self, key: str, content_type: Optional[str] = None) -> Iterator[BinaryIO]:
        """
        Buffer writes for a destination object.
        
        The object is uploaded only when the block exits cleanly, so a failed
        transform never leaves a truncated object behind.
        """
        content_type = content_type or mimetypes.guess_type(key)[0] or 'application/octet-stream'
        buffer = io.BytesIO()
        try:
            yield buffer
            self.upload_object(key, buffer.getvalue(), content_type)
        finally:
            buffer.close()
        self.logger.debug(f"Uploaded s3://{self.config.bucket}/{self.get_absolute_path(key)}")
    
    def describe(self) -> str:
        return f"S3: {self.config.endpoint} {self.config.bucket}/{self.config.prefix}"
