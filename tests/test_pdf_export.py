"""
Tests for the PDF export.
"""

from datetime import date, datetime, timezone

import fitz
import pytest

from klar.config.constants import COLOR_SEPARATOR, SECTION_MIN_SPACE
from klar.core.exceptions import ExportError
from klar.core.models import DocumentWithContent
from klar.export.pdf_export import PDFExporter, format_date, format_score, generate_pdf
from klar.rendering import Cursor, PageGeometry

TODAY = date(2024, 5, 17)


def item(title="Brief an Anna", **fields):
    return DocumentWithContent(
        id=title.lower().replace(" ", "-"),
        title=title,
        creation_date=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        **fields,
    )


def page_texts(data):
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [page.get_text() for page in doc]


def test_empty_export_rejected():
    with pytest.raises(ExportError) as exc_info:
        PDFExporter(today=TODAY).generate([])
    assert exc_info.value.message == "Keine Daten zum Exportieren"


def test_reviewed_document():
    data = generate_pdf([item(
        task="Schreiben Sie eine E-Mail.",
        submission_text="Ich gehen ins Kino.",
        review_score=30,
        review_feedback="Gute Struktur.",
        correction="Ich --gehen-- ++gehe++ ins Kino.",
    )], today=TODAY)

    assert data.startswith(b"%PDF")
    text = page_texts(data)[0]
    for expected in ("Klar", "17.05.2024", "01.05.2024", "Anna", "30", "45",
                     "Aufgabe", "Feedback", "Korrigierter", "gehe"):
        assert expected in text
    assert "Einreichung" not in text


def test_unreviewed_document_shows_submission():
    text = page_texts(generate_pdf([item(submission_text="Mein erster Text.")], today=TODAY))[0]

    assert "Noch kein Feedback vorhanden" in text
    assert "Einreichung" in text
    assert "Korrigierter" not in text


def test_many_documents_span_pages():
    items = [
        item(f"Dokument {i}", task="Aufgabe " * 40, correction="--alt-- ++neu++ " * 60)
        for i in range(6)
    ]

    texts = page_texts(generate_pdf(items, today=TODAY))

    assert len(texts) > 1
    joined = "".join(texts)
    assert joined.count("Dokument") >= 6
    assert "Dokumente" in texts[0]


def test_fixed_measurer_is_used(measure):
    exporter = PDFExporter(measure=measure, today=TODAY)

    data = exporter.generate([item(correction="Ein Satz.")])

    assert data.startswith(b"%PDF")
    assert len(page_texts(data)) == 1


def test_format_score():
    assert format_score(30) == "30 / 45"
    assert format_score(27.5) == "27.5 / 45"


def test_format_date():
    assert format_date(date(2024, 1, 2)) == "02.01.2024"


def test_german_typography_survives_export():
    data = generate_pdf([item(
        review_score=40,
        review_feedback="Sehr „gut“ – weiter so…",
        correction="„Hallo“ – 5 € ++schön++ Straße …",
    )], today=TODAY)

    text = page_texts(data)[0]
    for expected in ("„Hallo“", "–", "€", "…", "schön", "Straße", "„gut“"):
        assert expected in text


def separator_lines(page):
    """y positions of the thin rules drawn between documents."""
    return [
        drawing["items"][0][1].y
        for drawing in page.get_drawings()
        if drawing.get("color")
        and all(abs(a - b) < 0.01 for a, b in zip(drawing["color"], COLOR_SEPARATOR))
    ]


def test_separator_moves_to_next_page_near_bottom(measure):
    # 400x300 page, 20pt margins: each title-only document plus separator
    # takes about 60pt, so one separator lands below the 20pt threshold
    geometry = PageGeometry(width=400, height=300, margin=20, font_size=10)
    items = [item(f"Dokument-{i}") for i in range(9)]

    data = PDFExporter(geometry=geometry, measure=measure, today=TODAY).generate(items)

    with fitz.open(stream=data, filetype="pdf") as doc:
        separators = [
            (page.number, y) for page in doc for y in separator_lines(page)
        ]
        texts = [page.get_text() for page in doc]

    assert len(separators) == len(items) - 1
    assert all(y + SECTION_MIN_SPACE <= geometry.bottom + 0.01 for _, y in separators)

    moved = [
        (k, page) for k, (page, y) in enumerate(separators)
        if page > 0 and y == pytest.approx(geometry.top, abs=0.01)
    ]
    assert moved
    for k, page in moved:
        assert f"Dokument-{k + 1}" in texts[page]
        assert f"Dokument-{k}" not in texts[page]


@pytest.mark.parametrize("space_left, expected_page", [
    (SECTION_MIN_SPACE, 0),
    (SECTION_MIN_SPACE - 5, 1),
])
def test_label_needs_section_space(measure, space_left, expected_page):
    exporter = PDFExporter(measure=measure, today=TODAY)
    geometry = exporter.geometry
    with fitz.open() as doc:
        exporter._doc = doc
        cursor = exporter._label("Feedback", Cursor(x=geometry.left, y=geometry.bottom - space_left))

        assert cursor.page_index == expected_page
        assert "Feedback" in doc[expected_page].get_text()
        if expected_page:
            assert "Feedback" not in doc[0].get_text()
