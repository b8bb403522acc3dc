"""Tests for BaseService class."""

import pytest
from icon_capture_tools.services import BaseService, EncoderService


class TestBaseService:
    """Tests for BaseService base class."""

    @pytest.fixture
    def service(self):
        """Create a BaseService instance."""
        return BaseService()

    def test_initialization(self, service):
        """Test service initialization."""
        assert service.logger.name == "BaseService"

    def test_initialization_with_custom_logger_name(self):
        """Test service initialization with custom logger name."""
        service = BaseService(logger_name="custom_logger")
        assert service.logger.name == "custom_logger"

    def test_subclass_logger_uses_class_name(self):
        """Test that subclasses log under their own name."""
        assert EncoderService().logger.name == "EncoderService"

    def test_validate_not_none_with_valid_value(self, service):
        """Test _validate_not_none with valid value."""
        service._validate_not_none("valid_value", "test_param")

    def test_validate_not_none_with_none_value(self, service):
        """Test _validate_not_none with None value."""
        with pytest.raises(ValueError, match="test_param cannot be None"):
            service._validate_not_none(None, "test_param")
