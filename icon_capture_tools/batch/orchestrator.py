"""IconBatchOrchestrator service for coordinating icon batch workflows.

This service drives icon jobs through the pipeline one at a time,
combining a capture strategy with the shared encode and write stages.
"""

import csv
import logging
import time
from typing import Callable, List, Optional

from tqdm import tqdm

from icon_capture_tools.batch.config import BatchResult, IconResult
from icon_capture_tools.batch.exceptions import ConfigurationError, IconProcessingError
from icon_capture_tools.batch.models import BatchConfig, IconJob
from icon_capture_tools.services.base_service import BaseService
from icon_capture_tools.services.capture_service import CaptureStrategy
from icon_capture_tools.services.encoder_service import EncoderService


class IconBatchOrchestrator(BaseService):
    """Orchestrates icon batch generation.

    Every job goes through the same stages:
    1. Acquire a source surface (live frame capture or preview thumbnail)
    2. Transform it (center crop or color key substitution)
    3. Encode it in the configured format
    4. Write it atomically to the output directory

    Jobs run strictly one after another; a job is fully written before the
    next one is acquired. The icon settings and output configuration are
    validated once, before the first job, and any problem aborts the run
    with a ConfigurationError before anything is captured or written.

    A failed job is recorded and, by default, the batch continues with the
    next job. With ``BatchConfig.stop_on_first_failure`` the remaining jobs
    are not started.

    Attributes:
        strategy: Capture strategy (live or preview recolor)
        config: Output configuration
        encoder: Service for encoding and writing icons
    """

    def __init__(
        self,
        strategy: CaptureStrategy,
        config: BatchConfig,
        encoder: Optional[EncoderService] = None,
    ):
        """Initialize IconBatchOrchestrator with its collaborators.

        Args:
            strategy: Capture strategy providing acquire/transform
            config: Output configuration
            encoder: EncoderService instance (creates new if None)
        """
        super().__init__()
        self.strategy = strategy
        self.spec = strategy.spec
        self.config = config
        self.encoder = encoder or EncoderService(jpeg_quality=self.spec.jpeg_quality)

    def validate(self, jobs: Optional[List[IconJob]] = None) -> List[str]:
        """Collect validation errors for the whole run.

        Args:
            jobs: Jobs of the run; when given, their icon filenames are
                checked for collisions

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        errors.extend(self.spec.validate())
        errors.extend(self.config.validate())
        errors.extend(self.strategy.validate())
        if jobs is not None:
            errors.extend(self.validate_output_names(jobs))
        return errors

    def validate_output_names(self, jobs: List[IconJob]) -> List[str]:
        """Report jobs whose icons would be written to the same file.

        Filenames are compared ignoring case, as on Windows and macOS.
        """
        by_filename = {}
        for job in jobs:
            filename = self.config.get_icon_filename(job.name, self.spec.image_format)
            by_filename.setdefault(filename.casefold(), []).append(job)

        errors = []
        for colliding in by_filename.values():
            if len(colliding) > 1:
                job_ids = ", ".join(job.job_id for job in colliding)
                filename = self.config.get_icon_filename(
                    colliding[0].name, self.spec.image_format
                )
                errors.append(
                    f"Jobs {job_ids} would all write '{filename}'; "
                    f"give them distinct names"
                )
        return errors

    def validate_or_raise(self, jobs: Optional[List[IconJob]] = None) -> None:
        """Raise ConfigurationError if ``validate`` reports any problem."""
        errors = self.validate(jobs)
        if errors:
            error_summary = "\n".join(errors)
            self.logger.error(f"Configuration validation failed:\n{error_summary}")
            raise ConfigurationError(
                f"Configuration validation failed:\n{error_summary}"
            )

    def run(
        self,
        jobs: List[IconJob],
        progress_callback: Optional[Callable[[int, str], None]] = None,
        show_progress: bool = False,
    ) -> BatchResult:
        """Process every job and write one icon per successful job.

        Args:
            jobs: Jobs to process, in order
            progress_callback: Optional callback(percent, message) for progress
            show_progress: Display a tqdm progress bar

        Returns:
            BatchResult with per-job results

        Raises:
            ConfigurationError: If validation fails (nothing is captured or
                written)
        """
        self.validate_or_raise(jobs)

        start_time = time.time()
        total_jobs = len(jobs)

        batch_result = BatchResult(
            total_jobs=total_jobs,
            output_directory=str(self.config.output_dir_resolved),
        )

        self.config.create_output_directory()
        file_handler = self._attach_log_file()

        try:
            self.logger.info("=" * 60)
            self.logger.info(
                f"Starting {self.strategy.name} icon batch: {total_jobs} jobs"
            )
            self.logger.info(f"  Spec:   {self.spec!r}")
            self.logger.info(f"  Output: {self.config.output_dir_resolved}")
            self.logger.info("=" * 60)

            self.strategy.prepare()

            for idx, job in enumerate(
                tqdm(jobs, total=total_jobs, disable=not show_progress), 1
            ):
                if progress_callback:
                    progress_callback(
                        int((idx - 1) / total_jobs * 100),
                        f"[{idx}/{total_jobs}] {job.name}",
                    )

                result = self.process_job(job)
                batch_result.job_results.append(result)

                if result.success:
                    batch_result.successful += 1
                    continue

                batch_result.failed += 1
                if self.config.stop_on_first_failure:
                    batch_result.aborted = True
                    batch_result.skipped = total_jobs - idx
                    self.logger.error(
                        f"Stopping batch after job failure "
                        f"(stop_on_first_failure=True), "
                        f"{batch_result.skipped} job(s) not started"
                    )
                    break

            batch_result.processing_time_seconds = time.time() - start_time

            if self.config.summary_csv_path:
                self._save_summary(jobs, batch_result)

            if progress_callback:
                progress_callback(100, f"Batch complete: {batch_result}")

            self.logger.info(f"Icon batch complete: {batch_result}")
            for failed in batch_result.get_failed_results():
                self.logger.warning(f"  Failed: {failed.name} - {failed}")

        finally:
            if file_handler is not None:
                self.logger.removeHandler(file_handler)
                file_handler.close()

        return batch_result

    def process_job(self, job: IconJob) -> IconResult:
        """Run a single job through acquire, transform, encode and write.

        Errors are captured in the returned result and on the job; nothing
        is written unless encoding succeeded.

        Args:
            job: Job to process

        Returns:
            IconResult for the job
        """
        start_time = time.time()
        job.mark_processing()
        result = IconResult(job_id=job.job_id, name=job.name, success=False)
        stage = "acquire"

        try:
            surface = self.strategy.acquire(job)
            result.source_size = surface.size

            stage = self.strategy.transform_stage
            icon_surface = self.strategy.transform(surface)
            # The source surface is never reused
            del surface

            stage = "encode"
            path = self.config.get_icon_path(job.name, self.spec.image_format)
            icon = self.encoder.encode_icon(icon_surface, self.spec.image_format, path)

            stage = "write"
            written = self.encoder.write_icon(icon)

            result.success = True
            result.output_path = str(written)
            result.processing_time_seconds = time.time() - start_time
            job.mark_completed(str(written), result.processing_time_seconds)

            self.logger.info(
                f"[{job.job_id}] SUCCESS - {written.name} "
                f"({len(icon)} bytes, {result.processing_time_seconds:.2f}s)"
            )

        except IconProcessingError as e:
            self._record_failure(job, result, stage, e, start_time)

        except Exception as e:
            self._record_failure(job, result, stage, e, start_time, unexpected=True)

        return result

    def _record_failure(
        self,
        job: IconJob,
        result: IconResult,
        stage: str,
        error: Exception,
        start_time: float,
        unexpected: bool = False,
    ) -> None:
        message = f"Unexpected error: {error}" if unexpected else str(error)
        result.error_stage = stage
        result.error_kind = type(error).__name__
        result.error_message = message
        result.processing_time_seconds = time.time() - start_time
        job.mark_failed(message, result.processing_time_seconds, result.error_kind)
        self.logger.error(
            f"[{job.job_id}] FAILED at {stage} - {result.error_kind}: {message}"
        )

    def _attach_log_file(self) -> Optional[logging.FileHandler]:
        if not self.config.log_path:
            return None

        file_handler = logging.FileHandler(self.config.log_path)
        file_handler.setLevel(logging.INFO)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)
        if self.logger.level == logging.NOTSET or self.logger.level > logging.INFO:
            self.logger.setLevel(logging.INFO)
        self.logger.info(f"Batch log: {self.config.log_path}")
        return file_handler

    def _save_summary(self, jobs: List[IconJob], batch_result: BatchResult) -> None:
        """Save a summary CSV with one row per job.

        Args:
            jobs: All jobs of the batch, including ones never started
            batch_result: BatchResult to record the summary path on
        """
        csv_path = self.config.summary_csv_path

        try:
            with open(csv_path, "w", newline="") as f:
                writer = csv.writer(f)
                writer.writerow([
                    "job_id",
                    "name",
                    "object_ref",
                    "status",
                    "output_path",
                    "error_kind",
                    "error_message",
                    "processing_time_s",
                ])
                for job in jobs:
                    writer.writerow([
                        job.job_id,
                        job.name,
                        str(job.object_ref),
                        job.status.value,
                        job.output_path or "",
                        job.error_kind or "",
                        job.error_message or "",
                        f"{job.processing_time:.3f}" if job.processing_time is not None else "",
                    ])
        except OSError as e:
            self.logger.error(f"Failed to write summary CSV {csv_path}: {e}")
            return

        batch_result.summary_csv_path = str(csv_path)
        self.logger.info(f"Summary saved: {csv_path}")
