"""
CatalogDb - Pooled MySQL access to the product catalog.
"""

import logging
from contextlib import contextmanager
from typing import Optional

import mysql.connector
from mysql.connector import pooling
from retrying import retry

from .catalog_config import CatalogDbConfig


class CatalogDb:
    """
    Lazily pooled MySQL connections with retrying cursor acquisition.
    """
    
    placeholder = '%s'
    
    def __init__(self, config: CatalogDbConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.connection_pool = None
    
    def initialize_pool(self) -> None:
        """
        Initialize the connection pool lazily if it hasn't been created yet.
        """
        if not self.connection_pool:
            self.logger.debug("Initializing connection pool...")
            try:
                self.connection_pool = pooling.MySQLConnectionPool(
                    pool_name="imgregen_catalog_pool",
                    pool_size=self.config.pool_size,
                    user=self.config.user,
                    password=self.config.password,
                    host=self.config.host,
                    port=self.config.port,
                    database=self.config.database,
                )
                self.logger.debug("Connection pool initialized.")
            except mysql.connector.Error as err:
                self.logger.error(f"Failed to initialize connection pool: {err}")
                raise
    
    @retry(retry_on_exception=lambda e: isinstance(e, mysql.connector.Error),
           stop_max_attempt_number=3, wait_exponential_multiplier=1000)
    def get_cursor(self):
        """
        Get a connection from the pool and create a cursor.
        """
        try:
            self.initialize_pool()
            connection = self.connection_pool.get_connection()
            return connection.cursor(buffered=True), connection
        except mysql.connector.Error as e:
            self.logger.warning(f"Error getting cursor: {e}")
            raise
    
    def close_connection(self, connection) -> None:
        """
        Return a connection to the pool.
        """
        if connection:
            try:
                connection.close()
            except mysql.connector.Error as e:
                self.logger.warning(f"Error closing connection: {e}")
    
    @contextmanager
    def cursor(self):
        """Yield a cursor, returning its connection to the pool afterwards."""
        cursor, connection = None, None
        try:
            cursor, connection = self.get_cursor()
            yield cursor
        finally:
            if cursor:
                cursor.close()
            if connection:
                self.close_connection(connection)
