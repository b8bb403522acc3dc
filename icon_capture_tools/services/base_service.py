"""Base service class for icon pipeline logic."""

import logging
from typing import Any, Optional


class BaseService:
    """Base class for all service classes.

    Services are responsible for:
    - Pure pipeline logic (no renderer dependencies beyond the host interfaces)
    - Pixel transformations and encoding
    - Validation rules
    - Coordination with other services

    Services should be:
    - Host-agnostic (can be driven by the CLI, tests or an engine bridge)
    - Fully unit testable
    - Stateless (state should be in models, not services)

    All service classes should inherit from this base class to ensure
    consistent behavior and logging support.
    """

    def __init__(self, logger_name: Optional[str] = None):
        """Initialize the base service.

        Args:
            logger_name: Optional name for the logger. If not provided,
                        uses the class name.
        """
        if logger_name is None:
            logger_name = self.__class__.__name__
        self.logger = logging.getLogger(logger_name)

    def _validate_not_none(self, value: Any, param_name: str) -> None:
        """Validate that a parameter is not None.

        Args:
            value: Value to validate
            param_name: Name of the parameter (for error message)

        Raises:
            ValueError: If value is None
        """
        if value is None:
            raise ValueError(f"{param_name} cannot be None")
