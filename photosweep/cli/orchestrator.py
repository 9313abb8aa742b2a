"""
CLI workflow orchestration for PhotoSweep.

Provides the CLIOrchestrator class that coordinates the CLI scanning
workflow from argument parsing through final reporting and export.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Optional

from ..models import PhotoType, ScanResult
from ..orchestrator import ScanOrchestrator
from ..scanner.dependencies import HAS_TQDM, create_progress_bar
from ..sources import DirectoryAssetSource, PillowImageTransformer
from ..user_config import get_user_config
from ..utils.exporters import export_results
from .arg_parser import parse_arguments
from .reporting import print_scan_report

# Progress bar resolution (progress values are in [0, 1])
PROGRESS_BAR_TOTAL = 1000


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI scanning workflow.

    Manages the lifecycle from argument parsing through the library scan,
    reporting and export.
    """

    def __init__(self, argv: Optional[list[str]] = None):
        """
        Initialize the orchestrator.

        Args:
            argv: Command-line arguments (sys.argv[1:] when None)
        """
        self.argv = argv
        self.logger = None
        self.args = None
        self.settings = None
        self.show_progress = True
        self.scanner: Optional[ScanOrchestrator] = None
        self._progress_bar = None

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)

        Workflow phases:
        1. Setup & argument parsing
        2. Validation
        3. Configuration
        4. Library scan
        5. Reporting & export
        """
        # Phase 1: Setup
        self._setup_phase()

        # Phase 2: Validation
        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        # Phase 3: Configuration
        self._configure_phase()

        # Phase 4: Scanning
        exit_code = self._scan_phase()
        if exit_code != 0:
            return exit_code

        # Phase 5: Reporting
        return self._report_phase()

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _validate_phase(self) -> int:
        """
        Phase 2: Validate arguments.

        Returns:
            0 for success, 1 for validation error
        """
        if not self.args.directory.is_dir():
            self.logger.error(f"Directory not found: {self.args.directory}")
            return 1

        for name in ('similarity_threshold', 'monochrome_threshold'):
            value = getattr(self.args, name)
            if value is not None and not 0.0 <= value <= 1.0:
                self.logger.error(f"--{name.replace('_', '-')} must be between 0 and 1, got {value}")
                return 1

        for name in ('batch_size', 'workers', 'max_assets'):
            value = getattr(self.args, name)
            if value is not None and value < 1:
                self.logger.error(f"--{name.replace('_', '-')} must be at least 1, got {value}")
                return 1

        return 0

    def _configure_phase(self) -> None:
        """Phase 3: Merge flags with the user configuration."""
        self.settings = get_user_config().to_settings(
            batch_size=self.args.batch_size,
            max_parallel_operations=self.args.workers,
            similarity_threshold=self.args.similarity_threshold,
            monochrome_threshold=self.args.monochrome_threshold,
            max_media_assets=self.args.max_assets,
        )
        self.logger.debug(f"Scan settings: {self.settings}")

        self.show_progress = not self.args.no_progress
        if self.show_progress and not HAS_TQDM:
            self.logger.debug("tqdm not installed - progress bar disabled")
            self.show_progress = False

    def _on_progress(self, update: dict) -> None:
        """Progress callback driving the tqdm bar."""
        if self._progress_bar is None:
            return

        stats = update['stats']
        phase = update['phase']
        self._progress_bar.set_description(phase.capitalize())
        self._progress_bar.n = int(update['progress'] * PROGRESS_BAR_TOTAL)
        self._progress_bar.set_postfix(
            photos=stats.total_processed,
            mono=stats.monochrome_count,
            similar=stats.similar_total,
            batch=f"{update['current_batch']}/{update['total_batches']}",
            refresh=False,
        )
        self._progress_bar.refresh()

    async def _run_scan(self) -> None:
        """Run one library scan with Ctrl-C wired to cooperative cancellation."""
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, self.scanner.cancel_scan)
        except (NotImplementedError, RuntimeError):
            # Not supported on this platform; Ctrl-C aborts the event loop instead
            self.logger.debug("Signal handlers unavailable - Ctrl-C will abort the scan")

        try:
            await self.scanner.start_scan()
        finally:
            try:
                loop.remove_signal_handler(signal.SIGINT)
            except (NotImplementedError, RuntimeError):
                pass

    def _scan_phase(self) -> int:
        """
        Phase 4: Scan the photo library.

        Returns:
            0 for success, 1 if the scan failed
        """
        self.logger.info(f"Scanning {self.args.directory} for photos...")
        source = DirectoryAssetSource(self.args.directory, recursive=not self.args.no_recursive)

        if self.show_progress:
            self._progress_bar = create_progress_bar(
                PROGRESS_BAR_TOTAL,
                "Loading",
                unit="",
                bar_format='{desc}: {percentage:3.0f}%|{bar}| {postfix}',
            )

        try:
            with PillowImageTransformer() as transformer:
                self.scanner = ScanOrchestrator(
                    source,
                    transformer,
                    settings=self.settings,
                    progress_callback=self._on_progress,
                )
                asyncio.run(self._run_scan())
        except KeyboardInterrupt:
            self.logger.warning("Scan aborted")
            return 1
        finally:
            if self._progress_bar is not None:
                self._progress_bar.close()
                self._progress_bar = None

        state = self.scanner.state
        if state.status == 'error':
            self.logger.error(f"Scan failed: {state.error}")
            return 1

        return 0

    def _selected_results(self) -> list[ScanResult]:
        only = self.args.only
        if only == 'monochrome':
            return self.scanner.get_filtered_results(PhotoType.MONOCHROME)
        if only == 'similar':
            return self.scanner.get_similar_photos()
        return self.scanner.get_filtered_results()

    def _report_phase(self) -> int:
        """
        Phase 5: Display the report and handle exports.

        Returns:
            0 for success, 1 if the export failed
        """
        state = self.scanner.state
        results = self._selected_results()

        print_scan_report(state.stats, results, state.status, state.message)

        if self.args.export:
            try:
                export_results(results, state.stats, self.args.export, self.args.export_format)
            except OSError as e:
                self.logger.error(f"Cannot write export file: {e}")
                return 1
            self.logger.info(f"Results exported to: {self.args.export}")

        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
