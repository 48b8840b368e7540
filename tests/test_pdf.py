from notprofi.pdf import PdfWriter


def test_writer_starts_new_page_when_full():
    pdf = PdfWriter("overflow")
    for i in range(100):
        pdf.line(f"Zeile {i}", gap=12)
    assert pdf.canvas.getPageNumber() == 2
    assert pdf.finish().startswith(b"%PDF")


def test_short_document_stays_on_one_page():
    pdf = PdfWriter("short")
    pdf.line("Rechnung", size=16, gap=18)
    pdf.line("Gesamtsumme: € 50.50")
    assert pdf.canvas.getPageNumber() == 1
