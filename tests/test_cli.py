# =============================================================================
# test_cli.py - lycgen Command-Line Tests
# =============================================================================
# Tests for the lycgen tool: artifacts written on success, nothing written
# on failure, and exit codes.
# =============================================================================

from pathlib import Path

from click.testing import CliRunner

from lycc.cli.errors import ExitCode, exit_code_for
from lycc.cli.lycgen import main
from lycc.errors import RPNFormatError, StackUnderflowError
from lycc.rpn.program import LISTING_TITLE


IF_PROGRAM = "\n".join([
    "x", "5", "CMP", "BGE", "7",
    '"small"', "WRITE",
    "x", "WRITE",
]) + "\n"


class TestLycgenCLI:
    """Tests for the lycgen CLI tool."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Generate x87 assembly" in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "lycgen" in result.output

    def test_default_output_name(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("prog.rpn").write_text(IF_PROGRAM)
            result = runner.invoke(main, ["prog.rpn"])

            assert result.exit_code == 0, result.output
            asm = Path("prog.asm").read_text()
            assert "JAE" in asm
            assert asm.endswith("END START\n")

    def test_all_artifacts(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("prog.rpn").write_text(IF_PROGRAM)
            result = runner.invoke(main, [
                "prog.rpn", "-o", "final.asm", "-l", "inter.txt", "-s", "symbols.txt",
            ])

            assert result.exit_code == 0, result.output
            assert Path("final.asm").exists()

            listing = Path("inter.txt").read_text().splitlines()
            assert listing[0] == LISTING_TITLE
            assert listing[2] == "[0] x"
            assert "[4] 7" in listing

            symbols = Path("symbols.txt").read_text().splitlines()
            assert symbols[0].split(" | ")[0].strip() == "NAME"
            assert any(line.startswith("_5_0") for line in symbols)

    def test_failure_writes_nothing(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("bad.rpn").write_text("x\n1\nCMP\nBLT\nabc\n")
            result = runner.invoke(main, ["bad.rpn", "-o", "bad.asm", "-l", "bad.txt"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "not a valid index" in result.output
            assert not Path("bad.asm").exists()
            assert not Path("bad.txt").exists()
            assert list(Path(".").glob("*.tmp")) == []

    def test_stack_underflow_exit_code(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("bad.rpn").write_text("x\n:=\n")
            result = runner.invoke(main, ["bad.rpn"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert not Path("bad.asm").exists()

    def test_malformed_listing(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("bad.txt").write_text("[0] x\n[5] WRITE\n")
            result = runner.invoke(main, ["bad.txt", "-o", "out.asm"])

            assert result.exit_code == ExitCode.INVALID_ARGS
            assert not Path("out.asm").exists()

    def test_missing_input(self):
        runner = CliRunner()
        result = runner.invoke(main, ["does-not-exist.rpn"])
        assert result.exit_code != 0

    def test_subtraction_survives_reading(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("sub.rpn").write_text("a\nb\n-\nc\n:=\n")
            result = runner.invoke(main, ["sub.rpn", "-l", "sub.txt"])

            assert result.exit_code == 0, result.output
            assert "FSUB" in Path("sub.asm").read_text()
            assert "[2] -" in Path("sub.txt").read_text().splitlines()


class TestExitCodes:
    """Exception to exit code mapping."""

    def test_exit_code_table(self):
        assert exit_code_for(RPNFormatError("bad", 1)) is ExitCode.INVALID_ARGS
        assert exit_code_for(StackUnderflowError(":=", 2, 1)) is ExitCode.BUILD_ERROR
        assert exit_code_for(FileNotFoundError("x.rpn")) is ExitCode.INVALID_ARGS
        assert exit_code_for(RuntimeError("boom")) is ExitCode.INTERNAL_ERROR
