"""Tests for the CLI main module."""

import json
from pathlib import Path

import pytest

from simplexml import __version__
from simplexml.cli.main import (
    CLIConfig,
    create_argument_parser,
    format_results,
    main,
)
from simplexml.shared import ConfigError

DOC = """<?xml version="1.0" encoding="UTF-8"?>
<root>
  <item id="1">first</item>
  <item id="2">second</item>
  <other/>
</root>
"""


@pytest.fixture
def xml_file(tmp_path: Path) -> Path:
    path = tmp_path / "doc.xml"
    path.write_text(DOC, encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.xml"
    path.write_text("<root><open></root>", encoding="utf-8")
    return path


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = CLIConfig()
        assert config.config.encoder.indentation == "  "
        assert config.output_format == "text"

    def test_config_from_file(self, tmp_path: Path) -> None:
        """Test loading configuration from a JSON file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "parser": {"max_depth": 10},
            "encoder": {"indentation": "\t"},
            "output_format": "json",
        }), encoding="utf-8")
        config = CLIConfig.from_file(path)
        assert config.config.parser.max_depth == 10
        assert config.config.encoder.indentation == "\t"
        assert config.output_format == "json"

    def test_config_file_defaults_to_pretty(self, tmp_path: Path) -> None:
        """Test an encoder section left out keeps pretty output."""
        path = tmp_path / "config.json"
        path.write_text("{}", encoding="utf-8")
        assert CLIConfig.from_file(path).config.encoder.indentation == "  "

    def test_config_from_nonexistent_file(self, tmp_path: Path) -> None:
        """Test a missing file is a configuration error."""
        with pytest.raises(ConfigError):
            CLIConfig.from_file(tmp_path / "nonexistent.json")

    @pytest.mark.parametrize("content", ["{bad", "[]", '{"output_format": "csv"}', '{"nope": 1}'])
    def test_invalid_config_file(self, tmp_path: Path, content: str) -> None:
        """Test malformed or invalid settings are refused."""
        path = tmp_path / "config.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            CLIConfig.from_file(path)


class TestArgumentParser:
    """Test command line parsing."""

    def test_format_arguments(self) -> None:
        """Test format options."""
        args = create_argument_parser().parse_args(["format", "a.xml", "b.xml", "-i", "4"])
        assert args.command == "format"
        assert args.paths == [Path("a.xml"), Path("b.xml")]
        assert args.indent == 4
        assert not args.tabs

    def test_search_defaults(self) -> None:
        """Test search matches any name by default."""
        args = create_argument_parser().parse_args(["search", "a.xml"])
        assert args.tag == "*"
        assert args.namespace == "*"
        assert args.attr == []
        assert args.content is None

    def test_global_options(self) -> None:
        """Test global options precede the command."""
        args = create_argument_parser().parse_args(["-q", "validate", "a.xml", "-f", "json"])
        assert args.quiet
        assert args.format == "json"

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test --version prints the package version."""
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out


class TestFormatResults:
    """Test validation result rendering."""

    def test_json(self) -> None:
        """Test JSON output is the result list."""
        results = [{"file": "a.xml", "valid": True}]
        assert json.loads(format_results(results, "json")) == results

    def test_text(self) -> None:
        """Test text output marks each file."""
        results = [
            {"file": "a.xml", "valid": True, "element_count": 3, "processing_time_ms": 1.0},
            {"file": "b.xml", "valid": False, "error": "boom"},
        ]
        output = format_results(results, "text")
        assert "Validated 2 files, 1 valid" in output
        assert "✓ a.xml" in output
        assert "✗ b.xml" in output
        assert "Error: boom" in output

    def test_empty(self) -> None:
        """Test the empty message."""
        assert format_results([], "text") == "No results to display."


class TestFormatCommand:
    """Test the format command."""

    def test_format_to_stdout(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test pretty output of an already pretty document is unchanged."""
        assert main(["format", str(xml_file)]) == 0
        assert capsys.readouterr().out == DOC

    def test_format_with_tabs(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test tab indentation."""
        assert main(["format", str(xml_file), "--tabs"]) == 0
        assert '\n\t<item id="1">first</item>\n' in capsys.readouterr().out

    def test_format_to_file(self, xml_file: Path, tmp_path: Path) -> None:
        """Test writing to an output file."""
        output = tmp_path / "out.xml"
        assert main(["format", str(xml_file), "-i", "0", "-o", str(output)]) == 0
        assert output.read_text(encoding="utf-8").splitlines()[2] == '<item id="1">first</item>'

    def test_format_negative_indent(self, xml_file: Path) -> None:
        """Test negative indentation is refused."""
        assert main(["format", str(xml_file), "-i", "-1"]) == 1

    def test_format_broken_file(self, broken_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test malformed input is reported on stderr."""
        assert main(["format", str(broken_file)]) == 1
        assert "XML syntax error" in capsys.readouterr().err


class TestValidateCommand:
    """Test the validate command."""

    def test_validate_json(
        self, xml_file: Path, broken_file: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Test JSON results for a valid and an invalid file."""
        assert main(["validate", str(xml_file), str(broken_file), "-f", "json"]) == 1
        results = json.loads(capsys.readouterr().out)
        assert results[0]["valid"] is True
        assert results[0]["element_count"] == 4
        assert results[1]["valid"] is False
        assert results[1]["error_type"] == "XMLSyntaxError"

    def test_validate_all_valid(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test the exit code when every file is valid."""
        assert main(["validate", str(xml_file)]) == 0
        assert "1 valid" in capsys.readouterr().out

    def test_validate_fragment(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test several roots only pass with --fragment."""
        path = tmp_path / "fragment.xml"
        path.write_text("<a/><b/>", encoding="utf-8")
        assert main(["validate", str(path)]) == 1
        assert main(["validate", str(path), "--fragment"]) == 0

    def test_validate_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test unreadable files are reported as invalid."""
        assert main(["validate", str(tmp_path / "missing.xml"), "-f", "json"]) == 1
        result = json.loads(capsys.readouterr().out)[0]
        assert result["valid"] is False
        assert "Cannot read file" in result["error"]


class TestSearchCommand:
    """Test the search command."""

    def test_search_by_tag(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test every matching element is printed."""
        assert main(["search", str(xml_file), "-t", "item"]) == 0
        assert capsys.readouterr().out == (
            '<item id="1">first</item>\n<item id="2">second</item>\n'
        )

    def test_search_first(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test --first stops at one match."""
        assert main(["search", str(xml_file), "-t", "item", "--first"]) == 0
        assert capsys.readouterr().out == '<item id="1">first</item>\n'

    def test_search_by_attribute_and_content(
        self, xml_file: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Test attribute and content filters combine."""
        assert main(["search", str(xml_file), "-a", "id=2", "-c", "^sec"]) == 0
        assert capsys.readouterr().out == '<item id="2">second</item>\n'

    def test_search_without_match(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test no match gives exit code 1 and no output."""
        assert main(["search", str(xml_file), "-t", "missing"]) == 1
        assert capsys.readouterr().out == ""

    def test_search_invalid_regex(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test a bad content pattern is reported."""
        assert main(["search", str(xml_file), "-c", "("]) == 1
        assert "invalid query" in capsys.readouterr().err


class TestMain:
    """Test main entry point behaviour."""

    def test_no_command(self, capsys: pytest.CaptureFixture) -> None:
        """Test help is printed without a command."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_bad_config(self, xml_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test configuration errors are reported."""
        assert main(["--config", str(tmp_path / "none.json"), "format", str(xml_file)]) == 1
        assert "Error" in capsys.readouterr().err
