"""
Tests for the command entry point.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harmonizer.core.exceptions import ConfigurationError
from harmonizer.main import main


class TestMain:
    """Tests for main function."""

    def test_main_runs_cli(self):
        """Test that arguments are passed to the CLI after validation."""
        with patch('harmonizer.main.validate_and_raise'), \
             patch('harmonizer.main.HarmonizerCLI') as mock_cli:
            main(["providers"])

        mock_cli.return_value.run.assert_called_once_with(["providers"])

    def test_main_invalid_configuration(self):
        """Test that an invalid configuration exits with status 3."""
        with patch('harmonizer.main.validate_and_raise', side_effect=ConfigurationError("bad")), \
             patch('harmonizer.main.HarmonizerCLI') as mock_cli:
            with pytest.raises(SystemExit) as exc_info:
                main([])

        assert exc_info.value.code == 3
        mock_cli.assert_not_called()

    def test_main_reraises_unexpected_errors(self):
        """Test that unexpected errors are logged and propagated."""
        with patch('harmonizer.main.validate_and_raise'), \
             patch('harmonizer.main.HarmonizerCLI') as mock_cli, \
             patch('harmonizer.main.logger') as mock_logger:
            mock_cli.return_value.run.side_effect = RuntimeError("boom")
            with pytest.raises(RuntimeError):
                main([])

        mock_logger.exception.assert_called_once()
