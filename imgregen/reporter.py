"""
Reporter - Human-readable run summaries and dry-run plans.
"""

import logging
import sys
from typing import Optional, TextIO

from .orchestrator import DryRunPlan
from .run_report import RunReport


class Reporter:
    """
    Writes run reports to a text stream.
    """
    
    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.
        
        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)
    
    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)
    
    def _format_bytes(self, bytes_val: float) -> str:
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} PB"
    
    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"
    
    def report_summary(self, report: RunReport, show_errors: bool = True) -> None:
        """
        Print the final statistics of a run.
        
        Args:
            report: Closed run report
            show_errors: Also list every failure line
        """
        self._print("=" * 70)
        self._print("VIEW IMAGE REGENERATION SUMMARY")
        self._print("=" * 70)
        self._print()
        self._print(f"  Products:        {report.products_processed:>10,}")
        self._print(f"  Pages:           {report.pages_processed:>10,}")
        self._print(f"  Processed:       {report.processed:>10,}")
        self._print(f"  Skipped:         {report.skipped:>10,}")
        self._print(f"  Failed:          {report.failed:>10,}")
        self._print(f"  Success rate:    {report.success_rate:>9}%")
        self._print()
        self._print(f"  Generated:       {self._format_bytes(report.bytes_generated)}")
        self._print(f"  Time:            {self._format_duration(report.elapsed_seconds)}")
        self._print(f"  Rate:            {report.rate_per_minute:.1f}/min")
        
        if show_errors and report.errors:
            self.report_errors(report)
    
    def report_errors(self, report: RunReport) -> None:
        self._print()
        self._print("-" * 70)
        self._print(f"ERRORS ({len(report.errors)})")
        self._print("-" * 70)
        for outcome in report.errors:
            self._print(f"  {outcome.describe_error()}")
    
    def report_plan(self, plan: DryRunPlan) -> None:
        """Print what a run would regenerate, one line per product."""
        self._print("=" * 70)
        self._print("DRY RUN - no images will be generated")
        self._print("=" * 70)
        self._print()
        self._print(f"Products matching filter: {plan.total_count:,}")
        self._print(f"Unique view images:       {plan.spec_count:,}")
        self._print()
        self._print(f"{'ID':>10}  {'SKU':<30} {'Images':>8} {'Operations':>12}")
        self._print(f"{'-'*10}  {'-'*30} {'-'*8} {'-'*12}")
        for row in plan.rows:
            self._print(f"{row.id:>10}  {row.sku:<30} {row.images:>8} {row.operations:>12}")
        self._print()
        self._print(f"Products:                 {plan.product_count:,}")
        self._print(f"Gallery images:           {plan.total_images:,}")
        self._print(f"Total resize operations:  {plan.total_operations:,}")
