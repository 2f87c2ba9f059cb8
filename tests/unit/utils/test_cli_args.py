"""Unit tests for CLI argument parsing."""

from pathlib import Path

import pytest

from keyharvest.utils.cli.args import (
    ParsedArgs,
    PathValidationError,
    create_argument_parser,
    parse_arguments,
    validate_config_file_path,
    validate_output_path,
)


class TestPathValidation:
    """Test path validation functions."""

    def test_validate_config_file_path_valid(self, tmp_path: Path) -> None:
        """Test validation of an existing config file."""
        config_file = tmp_path / "keyharvest.yml"
        _ = config_file.touch()

        assert validate_config_file_path(str(config_file)) == config_file.resolve()

    def test_validate_config_file_path_missing(self, tmp_path: Path) -> None:
        """Test that the config file must exist."""
        with pytest.raises(PathValidationError) as exc_info:
            _ = validate_config_file_path(str(tmp_path / "missing.yml"))

        assert "Config file does not exist" in str(exc_info.value)

    def test_validate_config_file_path_is_directory(self, tmp_path: Path) -> None:
        """Test validation of a path that is a directory instead of a file."""
        with pytest.raises(PathValidationError) as exc_info:
            _ = validate_config_file_path(str(tmp_path))

        assert "Config file path exists but is not a file" in str(exc_info.value)

    def test_validate_config_file_path_invalid_characters(self) -> None:
        """Test validation of a path with invalid characters."""
        with pytest.raises(PathValidationError) as exc_info:
            _ = validate_config_file_path("\0invalid\0path")

        assert "Invalid config file path" in str(exc_info.value)

    def test_validate_output_path_new_file(self, tmp_path: Path) -> None:
        """Test that a new file in an existing directory is accepted."""
        output = tmp_path / "keys.json"

        assert validate_output_path(str(output)) == output.resolve()

    def test_validate_output_path_missing_parent(self, tmp_path: Path) -> None:
        """Test that the output directory must exist."""
        with pytest.raises(PathValidationError) as exc_info:
            _ = validate_output_path(str(tmp_path / "missing" / "keys.json"))

        assert "Parent directory for output file does not exist" in str(exc_info.value)

    def test_validate_output_path_is_directory(self, tmp_path: Path) -> None:
        """Test that a directory is not a valid output file."""
        with pytest.raises(PathValidationError):
            _ = validate_output_path(str(tmp_path))


class TestArgumentParser:
    """Test the argument parser."""

    def test_command_is_required(self) -> None:
        """Test that running without a command is a usage error."""
        parser = create_argument_parser()

        with pytest.raises(SystemExit) as exc_info:
            _ = parser.parse_args([])

        assert exc_info.value.code == 2

    @pytest.mark.parametrize("workers", ["0", "-1", "many"])
    def test_workers_must_be_positive(self, workers: str) -> None:
        """Test the --workers type check."""
        with pytest.raises(SystemExit):
            _ = parse_arguments(["extract", "*.ts", "--workers", workers])

    def test_isolation_choices(self) -> None:
        """Test that --isolation only accepts known modes."""
        with pytest.raises(SystemExit):
            _ = parse_arguments(["extract", "*.ts", "--isolation", "fiber"])

    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that --version prints the program name."""
        with pytest.raises(SystemExit) as exc_info:
            _ = parse_arguments(["--version"])

        assert exc_info.value.code == 0
        assert "keyharvest" in capsys.readouterr().out


class TestParseArguments:
    """Test parse_arguments()."""

    def test_defaults(self) -> None:
        """Test parsing with only patterns."""
        args = parse_arguments(["extract", "src/**/*.ts", "lib/*.py"])

        assert args == ParsedArgs(
            command="extract",
            patterns=["src/**/*.ts", "lib/*.py"],
            config_file=None,
            extractor=None,
            default_namespace=None,
            exclude=[],
            workers=None,
            isolation=None,
            output=None,
            verbose=False,
        )

    def test_all_options(self, tmp_path: Path) -> None:
        """Test parsing every option."""
        config_file = tmp_path / "keyharvest.yml"
        _ = config_file.touch()

        args = parse_arguments(
            [
                "extract",
                "src/**/*.tsx",
                "--config",
                str(config_file),
                "--extractor",
                "./my_extractor.py",
                "--default-namespace",
                "app",
                "--exclude",
                "node_modules",
                "--exclude",
                "dist",
                "--workers",
                "4",
                "--isolation",
                "thread",
                "--output",
                str(tmp_path / "keys.json"),
                "--verbose",
            ]
        )

        assert args.config_file == config_file.resolve()
        assert args.extractor == "./my_extractor.py"
        assert args.default_namespace == "app"
        assert args.exclude == ["node_modules", "dist"]
        assert args.workers == 4
        assert args.isolation == "thread"
        assert args.output == (tmp_path / "keys.json").resolve()
        assert args.verbose is True

    def test_invalid_config_path_raises(self, tmp_path: Path) -> None:
        """Test that path validation errors propagate."""
        with pytest.raises(PathValidationError):
            _ = parse_arguments(["extract", "--config", str(tmp_path / "nope.yml")])
