"""Tests for PDF export and the print trigger."""

import os
import tempfile
from unittest.mock import Mock, patch

from sheetflow.model import Document
from sheetflow.pagination import paginate
from sheetflow.pdf_export import PDFExporter, PrintOutput, layout_sheets


def sheets_for(paragraphs):
    document = Document(paragraphs)
    plan, probe = paginate(document)
    return layout_sheets(document, plan, probe)


def test_lines_follow_page_breaks():
    sheets = sheets_for([f"Line {i}" for i in range(30)])

    assert len(sheets) == 2
    assert [line.text for line in sheets[0]] == [f"Line {i}" for i in range(21)]
    assert sheets[1][0].text == "Line 21"
    assert sheets[1][0].top == 0


def test_split_paragraph_continues_on_next_sheet():
    words = " ".join(f"w{i:03d}" for i in range(900))
    sheets = sheets_for([words])

    assert len(sheets) == 2
    assert len(sheets[0]) == 36
    assert sheets[1][0].top == 0
    assert sheets[0][-1].top + sheets[0][-1].height <= 864


def test_generate_pdf():
    pdf = PDFExporter().generate_pdf(sheets_for(["# Title", "Body text"]), title="Letter")

    assert pdf.startswith(b'%PDF')
    assert b'/Type /Page' in pdf


def test_save_to_file_adds_extension():
    with tempfile.TemporaryDirectory() as tmpdir:
        base = os.path.join(tmpdir, "letter")
        ok, error = PrintOutput().save_to_file(sheets_for(["Hello"]), base)

        assert ok, error
        assert os.path.exists(base + ".pdf")


def test_save_to_missing_directory_fails():
    ok, error = PrintOutput().save_to_file(sheets_for(["Hello"]), "/nonexistent/dir/out.pdf")

    assert not ok
    assert error.startswith("Save error")


def test_print_without_lpr():
    with patch("shutil.which", return_value=None):
        output = PrintOutput()
    ok, error = output.print_to_printer(sheets_for(["Hello"]))

    assert not ok
    assert "lpr" in error


def test_print_submits_to_lpr():
    with patch("shutil.which", return_value="/usr/bin/lpr"):
        output = PrintOutput()
    result = Mock(returncode=0, stderr="")

    with patch("subprocess.run", return_value=result) as mock_run:
        ok, error = output.print_to_printer(sheets_for(["Hello"]), printer="Office")

    assert ok, error
    cmd = mock_run.call_args[0][0]
    assert cmd[:3] == ["lpr", "-P", "Office"]
    # Temporary PDF is cleaned up
    assert not os.path.exists(cmd[-1])


def test_print_failure_reports_stderr():
    with patch("shutil.which", return_value="/usr/bin/lpr"):
        output = PrintOutput()
    result = Mock(returncode=1, stderr="no such printer")

    with patch("subprocess.run", return_value=result):
        ok, error = output.print_to_printer(sheets_for(["Hello"]), printer="Nope")

    assert not ok
    assert error == "Print failed: no such printer"
