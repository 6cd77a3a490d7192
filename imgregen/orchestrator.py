"""
Orchestrator - Drives a regeneration run from filter selection to report.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .batch_source import ProductBatchSource
from .catalog import SqlCatalogRepository
from .exceptions import ConfigurationError
from .filter_selection import FilterSelection
from .pipeline import TransformPipeline
from .run_progress import RunProgress
from .run_report import RunReport
from .view_config import ViewConfigResolver
from .view_image_spec import ViewImageSpec


@dataclass(frozen=True)
class PlanRow:
    """Dry-run line for one product."""
    id: int
    sku: str
    images: int
    operations: int


@dataclass
class DryRunPlan:
    """
    What a run would do, computed without touching the transform engine.
    
    Attributes:
        total_count: Products matching the filter
        spec_count: Unique view images per gallery image
        rows: One row per product that would be processed
    """
    total_count: int
    spec_count: int
    rows: List[PlanRow] = field(default_factory=list)
    
    @property
    def product_count(self) -> int:
        return len(self.rows)
    
    @property
    def total_images(self) -> int:
        return sum(row.images for row in self.rows)
    
    @property
    def total_operations(self) -> int:
        return sum(row.operations for row in self.rows)


class Orchestrator:
    """
    Runs the pipeline over every product of the filtered catalog.
    
    Order of work: themes in use, deduplicated view-image specs, the batch
    source, then each page and each product until the pages run out or the
    max-records cutoff is reached.
    """
    
    def __init__(
        self,
        repository: SqlCatalogRepository,
        resolver: ViewConfigResolver,
        pipeline: Optional[TransformPipeline] = None,
        snapshot: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize orchestrator.
        
        Args:
            repository: Catalog repository
            resolver: Theme/view-image resolver
            pipeline: Per-product transform pipeline (not needed for plan)
            snapshot: Capture candidate product ids once at the start
            logger: Optional logger instance
        """
        self.repository = repository
        self.resolver = resolver
        self.pipeline = pipeline
        self.snapshot = snapshot
        self.logger = logger or logging.getLogger(__name__)
        self._stop_requested = False
    
    def stop(self) -> None:
        """Request the run to stop after the current product."""
        self._stop_requested = True
    
    @staticmethod
    def _check_selection(selection: Optional[FilterSelection]) -> None:
        if selection is None:
            raise ConfigurationError(
                "Please specify --product-ids, --product-skus, or --all"
            )
        selection.validate()
    
    def _open_source(
        self,
        selection: FilterSelection,
        batch_size: int,
        max_records: int
    ) -> ProductBatchSource:
        source = ProductBatchSource(
            self.repository, selection,
            batch_size=batch_size,
            max_records=max_records,
            snapshot=self.snapshot,
            logger=self.logger,
        )
        if source.total_count == 0:
            raise ConfigurationError(f"No products found matching {selection.describe()}")
        return source
    
    def _resolve_specs(self) -> Dict[str, ViewImageSpec]:
        specs = self.resolver.resolve()
        if not specs:
            self.logger.warning("No view images are declared by the themes in use")
        return specs
    
    def run(
        self,
        selection: Optional[FilterSelection],
        batch_size: int = 50,
        max_records: int = 0,
        progress: Optional[RunProgress] = None
    ) -> RunReport:
        """
        Regenerate view images for the selected products.
        
        Args:
            selection: Product filter; None is a configuration error
            batch_size: Products per catalog page
            max_records: Cap on products processed, 0 for unlimited
            progress: Optional progress tracker
            
        Returns:
            The closed RunReport
            
        Raises:
            ConfigurationError: Missing or empty filter, or no matching products
        """
        self._check_selection(selection)
        if self.pipeline is None:
            raise ConfigurationError("A transform pipeline is required to run")
        
        specs = self._resolve_specs()
        source = self._open_source(selection, batch_size, max_records)
        report = RunReport()
        
        self.logger.info(
            f"Starting regeneration: {source.target_count} of {source.total_count} products, "
            f"{len(specs)} view images, batch size {batch_size}"
        )
        if progress:
            progress.on_start(source.total_count, source.target_count, len(specs))
        
        stopped = False
        for page in source.pages():
            if progress:
                progress.on_page(page, source.total_pages)
            
            for product in page:
                if self._reached_cutoff(report, max_records):
                    stopped = True
                    break
                
                for outcome in self.pipeline.process_product(product, specs):
                    report.record(outcome)
                    if progress:
                        progress.on_outcome(outcome)
                report.products_processed += 1
                
                if progress:
                    progress.on_product(product, report)
            
            report.pages_processed += 1
            if stopped or self._stop_requested:
                break
        
        report.close()
        self.logger.info(
            f"Regeneration complete: {report.processed} generated, "
            f"{report.skipped} skipped, {report.failed} errors "
            f"({report.elapsed_seconds:.1f}s)"
        )
        return report
    
    def _reached_cutoff(self, report: RunReport, max_records: int) -> bool:
        if self._stop_requested:
            self.logger.info("Stop requested, halting regeneration")
            return True
        if max_records and report.products_processed >= max_records:
            self.logger.info(f"Reached max records limit ({max_records})")
            return True
        return False
    
    def plan(
        self,
        selection: Optional[FilterSelection],
        batch_size: int = 50,
        max_records: int = 0
    ) -> DryRunPlan:
        """
        Count the work a run would do without generating anything.
        
        Operations per product are gallery images times unique view images.
        
        Raises:
            ConfigurationError: Missing or empty filter, or no matching products
        """
        self._check_selection(selection)
        
        spec_count = len(self._resolve_specs())
        source = self._open_source(selection, batch_size, max_records)
        plan = DryRunPlan(total_count=source.total_count, spec_count=spec_count)
        
        for page in source.pages():
            for product in page:
                plan.rows.append(PlanRow(
                    id=product.id,
                    sku=product.sku,
                    images=product.image_count,
                    operations=product.image_count * spec_count,
                ))
        
        self.logger.info(
            f"Dry run: {plan.product_count} products, {plan.total_operations} operations"
        )
        return plan
