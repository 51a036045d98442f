"""Tests for the format command."""

from ledgerparse.cli.main import cli
from ledgerparse.parser.ledger import parse_document
from ledgerparse.serializer import SerializerSettings, serialize


def test_format_to_stdout(cli_runner, ledger_file, sample_document):
    """Test formatting a file to standard output."""
    result = cli_runner.invoke(cli, ["format", str(ledger_file)])

    assert result.exit_code == 0
    assert result.output == serialize(sample_document)


def test_format_to_file(cli_runner, ledger_file, tmp_path, sample_document):
    """Test writing the formatted ledger to a file."""
    out = tmp_path / "out.ledger"
    result = cli_runner.invoke(cli, ["format", str(ledger_file), "-o", str(out)])

    assert result.exit_code == 0
    assert "Wrote 9 items" in result.output
    assert out.read_text(encoding="utf-8") == serialize(sample_document)


def test_format_windows_line_endings(cli_runner, ledger_file, tmp_path):
    """Test that --eol windows writes CRLF line endings."""
    out = tmp_path / "out.ledger"
    result = cli_runner.invoke(
        cli, ["format", str(ledger_file), "-o", str(out), "--eol", "windows"]
    )

    assert result.exit_code == 0
    data = out.read_bytes()
    assert b"\r\n" in data
    assert b"\n" not in data.replace(b"\r\n", b"")


def test_format_tab_indent(cli_runner, ledger_file):
    """Test that a literal \\t indent option means a tab."""
    result = cli_runner.invoke(cli, ["format", str(ledger_file), "--indent", "\\t"])

    assert result.exit_code == 0
    assert "\tAssets:Checking\t$1000.00" in result.output


def test_format_indent_from_environment(cli_runner, ledger_file):
    """Test that LEDGERPARSE_INDENT sets the indent."""
    result = cli_runner.invoke(
        cli, ["format", str(ledger_file)], env={"LEDGERPARSE_INDENT": "    "}
    )

    assert result.exit_code == 0
    assert "\n    Assets:Checking    $1000.00\n" in result.output


def test_format_date_format(cli_runner, ledger_file):
    """Test a custom transaction date format."""
    result = cli_runner.invoke(
        cli, ["format", str(ledger_file), "--date-format", "%Y/%m/%d"]
    )

    assert result.exit_code == 0
    assert "2024/01/01 * Opening Balance" in result.output
    assert "P 2024-01-02 12:00:00 AAPL $185.50" in result.output


def test_format_sameline_comments(cli_runner, tmp_path):
    """Test keeping posting comments on the posting line."""
    path = tmp_path / "comments.ledger"
    path.write_text("2020-01-01 X\n  A  $1\n  ; note\n  B\n", encoding="utf-8")
    result = cli_runner.invoke(cli, ["format", str(path), "--sameline-comments"])

    assert result.exit_code == 0
    assert result.output == "2020-01-01 X\n  A  $1  ; note\n  B\n"


def test_format_check_needs_formatting(cli_runner, ledger_file):
    """Test --check on a file that would change."""
    result = cli_runner.invoke(cli, ["format", str(ledger_file), "--check"])

    assert result.exit_code == 1
    assert "would be reformatted" in result.output


def test_format_check_already_formatted(cli_runner, tmp_path, sample_text):
    """Test --check on a file that is already normalized."""
    path = tmp_path / "clean.ledger"
    path.write_text(serialize(parse_document(sample_text), SerializerSettings()), encoding="utf-8")
    result = cli_runner.invoke(cli, ["format", str(path), "--check"])

    assert result.exit_code == 0
    assert "is already formatted" in result.output


def test_format_parse_error(cli_runner, tmp_path):
    """Test that a parse error is reported with its position."""
    path = tmp_path / "bad.ledger"
    path.write_text("; fine\nnot a ledger line\n", encoding="utf-8")
    result = cli_runner.invoke(cli, ["format", str(path)])

    assert result.exit_code == 1
    assert f"Error: {path}:2:0" in result.output
    assert "^" in result.output


def test_format_missing_file(cli_runner, tmp_path):
    """Test that a missing file is a usage error."""
    result = cli_runner.invoke(cli, ["format", str(tmp_path / "missing.ledger")])

    assert result.exit_code == 2
