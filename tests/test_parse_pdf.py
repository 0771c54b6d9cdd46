from wkpdf import parse_pdf


def test_extract_text(sample_pdf):
    assert "Quarterly report" in parse_pdf.extract_text(sample_pdf)


def test_page_count(sample_pdf):
    assert parse_pdf.page_count(sample_pdf) == 1


def test_falls_back_to_next_method(sample_pdf, monkeypatch):
    def broken(pdf):
        raise RuntimeError("boom")

    monkeypatch.setattr(parse_pdf, "METHODS", [("broken", broken), ("PyMuPDF", parse_pdf._fitz_text)])
    assert "Quarterly report" in parse_pdf.extract_text(sample_pdf)


def test_garbage_yields_empty_text(monkeypatch):
    monkeypatch.setattr(parse_pdf, "METHODS", parse_pdf.METHODS[:2])
    assert parse_pdf.extract_text(b"not a pdf at all") == ""
