"""
RunReport - Statistics for a regeneration run.
"""

import time
from dataclasses import dataclass, field
from typing import List

from .transform_outcome import TransformOutcome


@dataclass
class RunReport:
    """
    Aggregated outcome counters of one run.
    
    Every recorded outcome increments exactly one of processed, failed or
    skipped, so total always equals the number of outcomes recorded.
    
    Attributes:
        processed: Successful (image, view image) transforms
        failed: Failed transforms and missing originals
        skipped: Products skipped for an empty gallery
        products_processed: Products handed to the pipeline
        pages_processed: Catalog pages consumed
        bytes_generated: Total bytes of generated images
        start_time: Start timestamp
        end_time: Set by close()
        errors: Failed outcomes in the order they were recorded
    """
    processed: int = 0
    failed: int = 0
    skipped: int = 0
    products_processed: int = 0
    pages_processed: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: float = 0.0
    errors: List[TransformOutcome] = field(default_factory=list)
    
    @property
    def closed(self) -> bool:
        return self.end_time > 0
    
    def record(self, outcome: TransformOutcome) -> None:
        """Fold one outcome into the counters."""
        if self.closed:
            raise RuntimeError("Cannot record outcomes on a closed report")
        
        if outcome.succeeded:
            self.processed += 1
            self.bytes_generated += outcome.bytes_written
        elif outcome.failed:
            self.failed += 1
            self.errors.append(outcome)
        elif outcome.skipped:
            self.skipped += 1
        else:
            raise ValueError(f"Unknown outcome status: {outcome.status}")
    
    def close(self) -> None:
        """Mark the report final."""
        if not self.closed:
            self.end_time = time.time()
    
    @property
    def total(self) -> int:
        return self.processed + self.failed + self.skipped
    
    @property
    def success_rate(self) -> float:
        """Percentage of successful outcomes, rounded to 2 decimals."""
        if self.total == 0:
            return 0
        return round(self.processed / self.total * 100, 2)
    
    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds, frozen once closed."""
        end = self.end_time if self.closed else time.time()
        return end - self.start_time
    
    @property
    def rate_per_minute(self) -> float:
        """Successful transforms per minute."""
        if self.elapsed_seconds > 0:
            return self.processed / self.elapsed_seconds * 60
        return 0.0
