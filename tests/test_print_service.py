import subprocess

import pytest

import config
from services import print_service
from services.print_service import PrintError, list_printers, print_pdf


class FakeRun:
    """Stands in for subprocess.run and remembers what it was asked to do."""

    def __init__(self, returncode=0, stdout="", stderr="", exc=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.exc = exc
        self.calls = []
        self.spooled = None

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        if command[0] == config.LP_BINARY:
            with open(command[-1], "rb") as fh:
                self.spooled = fh.read()
        if self.exc:
            raise self.exc
        return subprocess.CompletedProcess(command, self.returncode,
                                           self.stdout, self.stderr)


@pytest.fixture(autouse=True)
def temp_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "TEMP_DIR", tmp_path / "spool")
    return tmp_path / "spool"


def test_print_pdf_builds_lp_command(monkeypatch, temp_dir):
    fake = FakeRun(stdout="request id is Brother_P950NW-7 (1 file(s))\n")
    monkeypatch.setattr(print_service.subprocess, "run", fake)

    message = print_pdf(b"%PDF-1.4 label")

    assert message == "request id is Brother_P950NW-7 (1 file(s))"
    command, kwargs = fake.calls[0]
    assert command[:6] == ["lp", "-d", "Brother_P950NW",
                           "-o", "media=Custom.24x60mm", "-o"]
    assert command[6] == "fit-to-page"
    assert command[7].endswith(".pdf")
    assert kwargs["timeout"] == config.PRINT_TIMEOUT
    assert fake.spooled == b"%PDF-1.4 label"
    # temporary file is gone afterwards
    assert list(temp_dir.iterdir()) == []


def test_print_pdf_custom_printer_and_media(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(print_service.subprocess, "run", fake)

    print_pdf(b"%PDF", printer="Office", media="A4")

    command, _ = fake.calls[0]
    assert command[1:5] == ["-d", "Office", "-o", "media=A4"]


@pytest.mark.parametrize("fake", [
    FakeRun(returncode=1, stderr="lp: The printer or class does not exist."),
    FakeRun(exc=FileNotFoundError("lp")),
    FakeRun(exc=subprocess.TimeoutExpired("lp", 30)),
])
def test_print_pdf_failures_are_opaque(monkeypatch, temp_dir, fake):
    monkeypatch.setattr(print_service.subprocess, "run", fake)

    with pytest.raises(PrintError) as exc_info:
        print_pdf(b"%PDF")

    assert str(exc_info.value) == "label printing failed"
    assert list(temp_dir.iterdir()) == []


def test_list_printers(monkeypatch):
    fake = FakeRun(stdout=(
        "printer Brother_P950NW is idle.  enabled since Mon 19 Oct 2026\n"
        "printer Office_Laser disabled since Sun 18 Oct 2026 -\n"
        "\treason unknown\n"
    ))
    monkeypatch.setattr(print_service.subprocess, "run", fake)

    assert list_printers() == ["Brother_P950NW", "Office_Laser"]
    assert fake.calls[0][0] == ["lpstat", "-p"]


def test_list_printers_failure(monkeypatch):
    monkeypatch.setattr(print_service.subprocess, "run",
                        FakeRun(exc=FileNotFoundError("lpstat")))
    with pytest.raises(PrintError):
        list_printers()
