"""IconJob model representing a single icon to generate."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class JobStatus(Enum):
    """Enumeration of possible job statuses."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class IconJob:
    """Model representing a single icon generation job.

    Parameters
    ----------
    job_id : str
        Unique identifier for this job (typically the CSV row number)
    object_ref : Any
        Reference to the source object. For the bundled software host this
        is the path of an RGBA sprite image; other hosts may use any
        hashable reference understood by their ``spawn`` and preview calls.
    name : Optional[str], default=None
        Job identifier used in the output filename. Defaults to the stem of
        ``object_ref`` when it is a path-like string.
    spawn_offset : float, default=0.0
        Depth offset added to the spawn anchor for live capture

    Attributes
    ----------
    status : JobStatus
        Current processing status of the job
    output_path : Optional[str]
        Path of the written icon (set after completion)
    error_message : Optional[str]
        Error message if job failed
    error_kind : Optional[str]
        Exception class name if job failed
    processing_time : Optional[float]
        Time taken to process job in seconds

    Notes
    -----
    - Status transitions: PENDING → PROCESSING → COMPLETED/FAILED
    - The identifying fields are not modified while the batch runs
    """

    job_id: str
    object_ref: Any
    name: Optional[str] = None
    spawn_offset: float = 0.0

    # Job state (not from CSV)
    status: JobStatus = field(default=JobStatus.PENDING, init=False)
    output_path: Optional[str] = field(default=None, init=False)
    error_message: Optional[str] = field(default=None, init=False)
    error_kind: Optional[str] = field(default=None, init=False)
    processing_time: Optional[float] = field(default=None, init=False)

    def __post_init__(self):
        """Validate job parameters and derive the name if missing."""
        if not self.job_id:
            raise ValueError("job_id cannot be empty")

        if self.object_ref is None or (
            isinstance(self.object_ref, str) and not self.object_ref.strip()
        ):
            raise ValueError("object_ref cannot be empty")

        if not self.name:
            if isinstance(self.object_ref, (str, Path)):
                self.name = Path(self.object_ref).stem
            else:
                self.name = self.job_id

        try:
            self.spawn_offset = float(self.spawn_offset)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"spawn_offset must be numeric, got {self.spawn_offset!r}"
            ) from e

    def mark_processing(self) -> None:
        """Mark job as currently processing."""
        self.status = JobStatus.PROCESSING

    def mark_completed(self, output_path: str, processing_time: float) -> None:
        """Mark job as successfully completed.

        Parameters
        ----------
        output_path : str
            Path of the written icon
        processing_time : float
            Time taken to process job in seconds
        """
        self.status = JobStatus.COMPLETED
        self.output_path = output_path
        self.processing_time = processing_time
        self.error_message = None
        self.error_kind = None

    def mark_failed(
        self,
        error_message: str,
        processing_time: float = 0.0,
        error_kind: Optional[str] = None,
    ) -> None:
        """Mark job as failed.

        Parameters
        ----------
        error_message : str
            Description of what went wrong
        processing_time : float, default=0.0
            Time spent before failure in seconds
        error_kind : str, optional
            Name of the error class that caused the failure
        """
        self.status = JobStatus.FAILED
        self.error_message = error_message
        self.error_kind = error_kind
        self.processing_time = processing_time
        self.output_path = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert job to dictionary representation.

        Returns
        -------
        dict
            Dictionary containing all job data including results
        """
        return {
            "job_id": self.job_id,
            "object_ref": str(self.object_ref),
            "name": self.name,
            "spawn_offset": self.spawn_offset,
            "status": self.status.value,
            "output_path": self.output_path,
            "error_kind": self.error_kind,
            "error_message": self.error_message,
            "processing_time": self.processing_time,
        }

    def __repr__(self) -> str:
        """Return string representation of job."""
        return (
            f"IconJob(job_id='{self.job_id}', "
            f"name='{self.name}', "
            f"status={self.status.value})"
        )
