import subprocess

import pytest

from wkpdf import convert, provision

FAKE_TOOL = "/usr/local/bin/wkhtmltopdf"


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("WKPDF_WORKDIR", str(work))
    monkeypatch.delenv("WKHTMLTOPDF_BIN", raising=False)
    monkeypatch.delenv("WKHTMLTOPDF_PATH", raising=False)
    monkeypatch.delenv("WKHTMLTOPDF_BUNDLE", raising=False)
    provision.locate_tool.cache_clear()
    yield work
    provision.locate_tool.cache_clear()


class FakeRenderer:
    """Stands in for subprocess.run inside wkpdf.convert."""

    def __init__(self, pdf=b"%PDF-1.4 fake", stderr="", returncode=0, write_output=True, timeout=False):
        self.pdf = pdf
        self.stderr = stderr
        self.returncode = returncode
        self.write_output = write_output
        self.timeout = timeout
        self.calls = []
        self.sources = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        source = cmd[-2]
        try:
            with open(source, encoding="utf-8") as f:
                self.sources.append(f.read())
        except (OSError, UnicodeDecodeError):
            self.sources.append(None)
        if self.timeout:
            raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"), stderr=b"still loading")
        if self.write_output:
            with open(cmd[-1], "wb") as f:
                f.write(self.pdf)
        return subprocess.CompletedProcess(cmd, self.returncode, stdout="", stderr=self.stderr)


@pytest.fixture
def renderer(monkeypatch):
    def install(**kwargs):
        fake = FakeRenderer(**kwargs)
        monkeypatch.setattr(convert, "run", fake)
        monkeypatch.setattr(convert, "locate_tool", lambda: FAKE_TOOL)
        return fake

    return install


@pytest.fixture
def sample_pdf():
    fitz = pytest.importorskip("fitz")
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Quarterly report")
    data = doc.tobytes()
    doc.close()
    return data
