"""BatchConfig model representing icon batch output configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from icon_capture_tools.batch.models.icon_spec import ImageFormat
from icon_capture_tools.utils.filesystem import (
    ensure_directory,
    sanitize_filename_component,
)


@dataclass
class BatchConfig:
    """Model representing the output side of an icon batch run.

    Parameters
    ----------
    output_folder_name : str, default="Generated Icons"
        Output directory name, resolved relative to the parent directory
        of ``project_root``. An absolute path is used as-is.
    base_file_name : str, default="Icon"
        Prefix for every output file
    project_root : str, default="."
        Project root directory. Icons are written next to it, not inside it.
    stop_on_first_failure : bool, default=False
        If True, stop processing the remaining jobs as soon as one fails
        If False, skip the failed job and continue with the rest
    summary_csv_path : Optional[str], default=None
        If set, a per-job summary CSV is written there after the run
    log_path : Optional[str], default=None
        If set, the batch log is also written to this file

    Attributes
    ----------
    output_dir_resolved : Path
        Resolved absolute path to the output directory

    Notes
    -----
    Output filenames follow ``"{base_file_name} {job name}.{extension}"``.

    Examples
    --------
    >>> config = BatchConfig(
    ...     output_folder_name="Generated Icons",
    ...     base_file_name="Advanced Icon",
    ...     project_root="/projects/game/Assets",
    ... )
    >>> str(config.output_dir_resolved)
    '/projects/game/Generated Icons'
    """

    output_folder_name: str = "Generated Icons"
    base_file_name: str = "Icon"
    project_root: str = "."
    stop_on_first_failure: bool = False
    summary_csv_path: Optional[str] = None
    log_path: Optional[str] = None

    def __post_init__(self):
        """Resolve the output directory after initialization."""
        self.project_root_resolved = Path(self.project_root).resolve()
        self.output_dir_resolved = (
            self.project_root_resolved.parent / self.output_folder_name
        ).resolve()

    def validate(self) -> list:
        """Validate configuration parameters.

        Returns
        -------
        list of str
            List of validation error messages
            Empty list if all validations pass
        """
        errors = []

        if not self.output_folder_name:
            errors.append("output_folder_name cannot be empty")

        if not self.base_file_name or not self.base_file_name.strip():
            errors.append("base_file_name cannot be empty")
        elif sanitize_filename_component(self.base_file_name) != self.base_file_name.strip():
            errors.append(
                f"base_file_name contains characters not allowed in "
                f"filenames: {self.base_file_name!r}"
            )

        if self.output_folder_name:
            if self.output_dir_resolved.exists():
                if not self.output_dir_resolved.is_dir():
                    errors.append(
                        f"Output path exists but is not a directory: "
                        f"{self.output_dir_resolved}"
                    )
                elif not os.access(self.output_dir_resolved, os.W_OK):
                    errors.append(
                        f"No write permission for output directory: "
                        f"{self.output_dir_resolved}"
                    )
            else:
                # Nearest existing ancestor must be writable
                ancestor = self.output_dir_resolved.parent
                while not ancestor.exists() and ancestor != ancestor.parent:
                    ancestor = ancestor.parent
                if not ancestor.is_dir() or not os.access(ancestor, os.W_OK):
                    errors.append(
                        f"Cannot create output directory under: {ancestor}"
                    )

        return errors

    def create_output_directory(self) -> None:
        """Create the output directory if it doesn't exist.

        Raises
        ------
        OSError
            If directory cannot be created due to permissions or other errors
        """
        ensure_directory(self.output_dir_resolved)

    def get_icon_filename(self, job_name: str, image_format: ImageFormat) -> str:
        """Build the icon filename for a job.

        Parameters
        ----------
        job_name : str
            Job identifier (typically the source object name)
        image_format : ImageFormat
            Output format, which selects the extension

        Returns
        -------
        str
            ``"{base_file_name} {job_name}.{extension}"`` with characters
            that are invalid in filenames replaced in the job name
        """
        safe_name = sanitize_filename_component(job_name)
        return f"{self.base_file_name.strip()} {safe_name}.{image_format.extension}"

    def get_icon_path(self, job_name: str, image_format: ImageFormat) -> Path:
        """Absolute destination path of a job's icon."""
        return self.output_dir_resolved / self.get_icon_filename(job_name, image_format)

    def __repr__(self) -> str:
        """Return string representation of configuration."""
        return (
            f"BatchConfig(\n"
            f"  output_dir='{self.output_dir_resolved}',\n"
            f"  base_file_name='{self.base_file_name}',\n"
            f"  stop_on_first_failure={self.stop_on_first_failure}\n"
            f")"
        )
