"""Service for parsing and validating icon job CSV files.

This service handles parsing CSV files listing the objects to turn into
icons and converting them into IconJob objects with validation.
"""

from pathlib import Path
from typing import List, Optional

import pandas as pd

from icon_capture_tools.batch.exceptions import InvalidJobCSVError
from icon_capture_tools.batch.models import IconJob
from icon_capture_tools.services.base_service import BaseService
from icon_capture_tools.utils.filesystem import sanitize_filename_component


class JobCSVParser(BaseService):
    """Service for parsing job CSV files into IconJob objects.

    Required CSV columns:
    - object_ref: Object reference (sprite or thumbnail path, or name)

    Optional CSV columns:
    - name: Job name used in the output filename (default: object_ref stem)
    - spawn_offset: Depth offset for live capture (numeric, default=0.0)
    """

    # Required columns that must exist in CSV
    REQUIRED_COLUMNS = ["object_ref"]

    # Optional columns with their default values
    OPTIONAL_COLUMNS = {
        "name": None,
        "spawn_offset": 0.0,
    }

    def parse_csv(
        self,
        csv_path: str,
        resolve_relative_paths: bool = True,
    ) -> List[IconJob]:
        """Parse a job CSV file and create IconJob objects.

        Parameters
        ----------
        csv_path : str
            Path to the job CSV file
        resolve_relative_paths : bool, default=True
            If True, object references that are relative paths to existing
            files next to the CSV are resolved against the CSV directory

        Returns
        -------
        list of IconJob
            List of validated IconJob instances, one per CSV row

        Raises
        ------
        InvalidJobCSVError
            If CSV file is malformed, missing required columns, or contains
            invalid data

        Notes
        -----
        - Empty rows are skipped
        - Job IDs are generated as "job_{row_number}"
        - Job names that map to the same icon filename (after invalid
          characters are replaced, ignoring case) are rejected
        """
        self.logger.info(f"Parsing job CSV: {csv_path}")

        csv_path_obj = Path(csv_path)
        if not csv_path_obj.exists():
            raise InvalidJobCSVError(f"CSV file does not exist: {csv_path}")

        if not csv_path_obj.is_file():
            raise InvalidJobCSVError(f"Path is not a file: {csv_path}")

        try:
            # Read everything as text; numeric fields are converted per row
            df = pd.read_csv(csv_path, dtype=str, skipinitialspace=True)
        except pd.errors.EmptyDataError:
            raise InvalidJobCSVError(f"CSV file is empty: {csv_path}")
        except pd.errors.ParserError as e:
            raise InvalidJobCSVError(
                f"Failed to parse CSV file: {csv_path}. Error: {e}"
            )

        self._validate_csv_structure(df)

        df = df.dropna(how="all")

        if len(df) == 0:
            raise InvalidJobCSVError(
                f"CSV file contains no data rows: {csv_path}"
            )

        base_dir = csv_path_obj.resolve().parent if resolve_relative_paths else None

        jobs = []
        errors = []

        for row_number, (_, row) in enumerate(df.iterrows(), start=1):
            try:
                jobs.append(self._parse_row_to_job(row, row_number, base_dir))
            except ValueError as e:
                # +1 for the header line
                errors.append(f"Row {row_number + 1}: {e}")
                self.logger.warning(f"Failed to parse row {row_number + 1}: {e}")

        if errors:
            error_summary = "\n".join(errors)
            raise InvalidJobCSVError(
                f"Failed to parse {len(errors)} row(s) in {csv_path}:\n{error_summary}"
            )

        # Names that only differ once sanitized or by case share a file
        by_filename = {}
        for job in jobs:
            key = sanitize_filename_component(job.name).casefold()
            by_filename.setdefault(key, []).append(job.name)
        duplicates = sorted(
            " / ".join(names) for names in by_filename.values() if len(names) > 1
        )
        if duplicates:
            raise InvalidJobCSVError(
                f"Duplicate job names in {csv_path}: {duplicates}"
            )

        self.logger.info(f"Successfully parsed {len(jobs)} jobs from {csv_path}")
        return jobs

    def _validate_csv_structure(self, df: pd.DataFrame) -> None:
        """Validate that the CSV has the required columns.

        Raises
        ------
        InvalidJobCSVError
            If required columns are missing
        """
        missing_columns = [
            col for col in self.REQUIRED_COLUMNS if col not in df.columns
        ]

        if missing_columns:
            raise InvalidJobCSVError(
                f"CSV file missing required columns: {missing_columns}. "
                f"Required columns are: {self.REQUIRED_COLUMNS}"
            )

        unknown = [
            col for col in df.columns
            if col not in self.REQUIRED_COLUMNS and col not in self.OPTIONAL_COLUMNS
        ]
        if unknown:
            self.logger.warning(f"Ignoring unknown CSV columns: {unknown}")

    def _parse_row_to_job(
        self,
        row: pd.Series,
        row_number: int,
        base_dir: Optional[Path],
    ) -> IconJob:
        """Parse a single CSV row into an IconJob.

        Raises
        ------
        ValueError
            If row data is invalid
        """
        object_ref = self._get_string_field(row, "object_ref", required=True)
        name = self._get_string_field(row, "name")
        spawn_offset = self._get_numeric_field(
            row, "spawn_offset", default=self.OPTIONAL_COLUMNS["spawn_offset"]
        )

        if base_dir is not None and not Path(object_ref).is_absolute():
            candidate = base_dir / object_ref
            if candidate.exists():
                if not name:
                    name = Path(object_ref).stem
                object_ref = str(candidate)

        return IconJob(
            job_id=f"job_{row_number:03d}",
            object_ref=object_ref,
            name=name,
            spawn_offset=spawn_offset,
        )

    def _get_string_field(
        self, row: pd.Series, field_name: str, required: bool = False
    ) -> Optional[str]:
        """Extract a stripped string field, or None if absent/empty."""
        if field_name not in row:
            if required:
                raise ValueError(f"Required field '{field_name}' is missing")
            return None

        value = row[field_name]

        if pd.isna(value):
            if required:
                raise ValueError(f"Required field '{field_name}' is empty")
            return None

        value_str = str(value).strip()

        if required and not value_str:
            raise ValueError(f"Required field '{field_name}' is empty")

        return value_str if value_str else None

    def _get_numeric_field(
        self, row: pd.Series, field_name: str, default: float = 0.0
    ) -> float:
        """Extract a numeric field, falling back to ``default`` when empty."""
        if field_name not in row or pd.isna(row[field_name]):
            return default

        try:
            return float(row[field_name])
        except (TypeError, ValueError):
            raise ValueError(
                f"Field '{field_name}' must be numeric, got {row[field_name]!r}"
            )
