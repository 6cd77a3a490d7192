"""
RunProgress - Tracks and displays regeneration progress.
"""

import logging
from typing import Optional

from .product import Product, ProductPage
from .run_report import RunReport
from .transform_outcome import TransformOutcome


class RunProgress:
    """
    Tracks and displays run progress with optional per-file output.
    """
    
    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.
        
        Args:
            show_files: If True, print each generated file
            log_interval: Log summary progress every N products (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.target_count = 0
        self.last_logged = 0
    
    def on_start(self, total_count: int, target_count: int, spec_count: int) -> None:
        self.target_count = target_count
        print(f"Found {total_count} products matching the filter")
        if target_count < total_count:
            print(f"Processing the first {target_count} (max records)")
        print(f"{spec_count} unique view images per gallery image")
    
    def on_page(self, page: ProductPage, total_pages: int) -> None:
        print(f"Page {page.number}/{total_pages}: {len(page)} products, {page.image_count} images")
    
    def on_outcome(self, outcome: TransformOutcome) -> None:
        if not self.show_files:
            return
        if outcome.succeeded:
            print(f"  [OK] {outcome.image} -> {outcome.destination} ({self._format_bytes(outcome.bytes_written)})")
        elif outcome.failed:
            print(f"  [ERROR] {outcome.image or outcome.sku} -> {outcome.reason}")
        else:
            print(f"  [SKIP] {outcome.sku} -> no gallery images")
    
    def on_product(self, product: Product, report: RunReport) -> None:
        """Log a progress summary every log_interval products."""
        done = report.products_processed
        if not self.show_files and done - self.last_logged >= self.log_interval:
            self.last_logged = done
            self.logger.info(
                f"Progress: {done}/{self.target_count} products, "
                f"{report.processed} generated, {report.failed} errors "
                f"({report.rate_per_minute:.1f}/min)"
            )
    
    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if not bytes_val:
            return "0 B"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"
