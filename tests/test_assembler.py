# =============================================================================
# test_assembler.py - Assembler Facade Tests
# =============================================================================
# Tests for the Assembler class that ties the lexer and resolver together.
#
# Test coverage includes:
#   - Successful runs returning tokens and labels
#   - Failed runs raising AssemblyFailedError with the collected diagnostics
#   - Verbosity handling (suppressed errors still fail)
#   - Symbol file output
#   - File input
# =============================================================================

from pathlib import Path

import pytest

from asm16 import Asm16Error, AssemblerError, AssemblyFailedError, SourceLocation
from asm16.assembler import Assembler, TokenKind, assemble, assemble_file
from asm16.assembler.symbols import LabelKind
from asm16.diagnostics import Severity

DATA_DIR = Path(__file__).parent / "data"


# =============================================================================
# Successful Runs
# =============================================================================

class TestSuccess:
    """Sources without errors produce an AssemblyResult."""

    def test_minimal(self):
        result = Assembler().assemble_string("@prog\n.start hlt")
        assert result.filename == "<input>"
        assert result.labels.lookup("start").offset == 0
        assert result.tokens[-1].kind == TokenKind.END_OF_FILE

    def test_filename_in_result(self):
        result = Assembler().assemble_string("@prog\nhlt", "boot.asm")
        assert result.filename == "boot.asm"

    def test_result_is_kept(self):
        asm = Assembler()
        result = asm.assemble_string("@prog\n.a hlt")
        assert asm.get_result() is result
        assert asm.get_labels() is result.labels
        assert not asm.has_errors()

    def test_warnings_do_not_fail(self):
        asm = Assembler(sink=lambda d: None)
        result = asm.assemble_string("@prog\n.a ld r1 70000")
        assert "a" in result.labels
        assert not asm.has_errors()
        warnings = [d for d in asm.get_diagnostics() if d.severity == Severity.WARNING]
        assert len(warnings) == 1
        assert warnings[0].component == "lexer"

    def test_convenience_function(self):
        result = assemble('@data\n.m\n"x"\n@prog\nhlt')
        assert result.labels.lookup("m").data == b"x\x00"


# =============================================================================
# Failed Runs
# =============================================================================

class TestFailure:
    """Any error makes the run fail with AssemblyFailedError."""

    def test_resolver_error(self):
        asm = Assembler(sink=lambda d: None)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string("@prog\n.x nop\n.x nop", "dup.asm")

        error = exc_info.value
        assert error.filename == "dup.asm"
        assert "assembly of 'dup.asm' failed" in str(error)
        assert "1 error reported" in str(error)
        assert [d.message for d in error.diagnostics if d.is_error] == ["redefinition of label"]
        assert "resolver:3: error: redefinition of label" in error.report
        assert asm.has_errors()
        assert asm.get_result() is None

    def test_failure_points_at_first_error(self):
        """The exception names the line of the first reported error."""
        asm = Assembler(sink=lambda d: None)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string("@prog\n.x nop\n\t.x   hlt\n.y\n", "dup.asm")

        error = exc_info.value
        assert error.location == SourceLocation("dup.asm", 3)
        assert error.error_count == 2
        lines = str(error).split("\n")
        assert lines[0] == "dup.asm:3: error: assembly of 'dup.asm' failed"
        assert lines[1] == "    .x   hlt"
        assert lines[2] == "hint: 2 errors reported"

    def test_lexer_error(self):
        """A lexer error fails the run even if resolution succeeds."""
        asm = Assembler(sink=lambda d: None)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string("@prog\n.a ld r1 0xZZ\n.b hlt")
        components = [d.component for d in exc_info.value.diagnostics if d.is_error]
        assert components == ["lexer"]

    def test_missing_program_section(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            Assembler(sink=lambda d: None).assemble_string('@data\n.a\n"x"')
        messages = [d.message for d in exc_info.value.diagnostics]
        assert "a program section was not found" in messages
        assert exc_info.value.location is None
        assert str(exc_info.value).startswith("error: assembly of '<input>' failed")

    def test_suppressed_errors_still_fail(self):
        """Verbosity NONE delivers nothing but the run still fails."""
        delivered = []
        asm = Assembler(verbosity=Severity.NONE, sink=delivered.append)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string("@prog\n.x nop\n.x nop")
        assert delivered == []
        error = exc_info.value
        assert error.diagnostics == []
        assert error.location is None
        assert error.error_count == 1
        assert error.hidden_count == 1
        assert "hint: 1 error, 1 not shown at this verbosity" in str(error)

    def test_get_labels_without_success(self):
        asm = Assembler(sink=lambda d: None)
        with pytest.raises(RuntimeError):
            asm.get_labels()
        with pytest.raises(AssemblyFailedError):
            asm.assemble_string("@prog\n.x\n")
        with pytest.raises(RuntimeError):
            asm.get_labels()

    def test_failure_clears_previous_result(self):
        asm = Assembler(sink=lambda d: None)
        asm.assemble_string("@prog\nhlt")
        with pytest.raises(AssemblyFailedError):
            asm.assemble_string("@prog\n.x\n")
        assert asm.get_result() is None

    def test_error_hierarchy(self):
        assert issubclass(AssemblyFailedError, AssemblerError)
        assert issubclass(AssemblerError, Asm16Error)

    def test_error_report(self):
        asm = Assembler(sink=lambda d: None)
        with pytest.raises(AssemblyFailedError):
            asm.assemble_string("nop\n@prog\nhlt")
        report = asm.get_error_report()
        assert "expected section declaration" in report
        assert report.endswith("1 error, 0 warnings")


# =============================================================================
# Diagnostics Delivery
# =============================================================================

class TestDelivery:
    """Diagnostics reach the configured sink as they happen."""

    def test_custom_sink_receives_everything(self):
        delivered = []
        asm = Assembler(verbosity=Severity.LOG, sink=delivered.append)
        asm.assemble_string("@prog\n.a hlt", "x.asm")
        components = {d.component for d in delivered}
        assert components == {"x.asm", "lexer", "resolver"}
        assert delivered == asm.get_diagnostics()

    def test_warning_verbosity_hides_log(self):
        delivered = []
        Assembler(sink=delivered.append).assemble_string("@prog\n.a hlt")
        assert delivered == []

    def test_runs_are_independent(self):
        asm = Assembler(sink=lambda d: None)
        with pytest.raises(AssemblyFailedError):
            asm.assemble_string("@prog\n.x\n")
        asm.assemble_string("@prog\n.x hlt")
        assert not asm.has_errors()
        assert "x" in asm.get_labels()


# =============================================================================
# File Input and Symbol Output
# =============================================================================

class TestFiles:
    """assemble_file() and write_symbols()."""

    def test_helloworld_file(self):
        result = assemble_file(DATA_DIR / "helloworld.asm")
        labels = result.labels
        assert result.filename.endswith("helloworld.asm")
        assert labels.lookup("helloworld").kind == LabelKind.DATA
        assert len(labels.lookup("helloworld").data) == 15
        assert labels.lookup("endloop").offset == 32

    def test_test_file(self):
        labels = Assembler().assemble_file(DATA_DIR / "test.asm").labels
        assert len(labels) == 7
        assert labels.lookup("helloworld2").offset == 14
        assert len(labels.lookup("helloworld2").data) == 56

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Assembler().assemble_file(tmp_path / "missing.asm")

    def test_write_symbols(self, tmp_path):
        asm = Assembler()
        asm.assemble_file(DATA_DIR / "helloworld.asm")
        sym_file = tmp_path / "helloworld.sym"
        asm.write_symbols(sym_file)

        content = sym_file.read_text()
        assert content.startswith("# Symbol table")
        assert "DATA helloworld $0000 15\n" in content
        assert "PROG start $0000\n" in content
        assert "PROG loop $0008\n" in content
        assert "PROG endloop $0020\n" in content

    def test_write_symbols_without_success(self, tmp_path):
        with pytest.raises(RuntimeError):
            Assembler().write_symbols(tmp_path / "out.sym")


# =============================================================================
# Error Formatting
# =============================================================================

class TestErrorFormatting:
    """AssemblerError message layout."""

    def test_location_str(self):
        assert str(SourceLocation("a.asm", 3)) == "a.asm:3"

    def test_message_with_source_and_hint(self):
        error = AssemblerError(
            "redefinition of label",
            SourceLocation("a.asm", 3),
            hint="'loop' was first defined on line 2",
            source_line=".loop hlt",
        )
        lines = str(error).split("\n")
        assert lines[0] == "a.asm:3: error: redefinition of label"
        assert lines[1] == "    .loop hlt"
        assert lines[2] == "hint: 'loop' was first defined on line 2"

    def test_message_without_location(self):
        assert str(AssemblerError("broken")) == "error: broken"
