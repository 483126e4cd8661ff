"""
Tests for the command line interface.
"""

import json

import fitz
import pytest

from klar.config.settings import reload_settings
from klar.main import main


@pytest.fixture
def cli_db(tmp_path, monkeypatch):
    monkeypatch.setenv("KLAR_DB_PATH", str(tmp_path / "cli.sqlite"))
    reload_settings()
    yield tmp_path
    monkeypatch.delenv("KLAR_DB_PATH")
    reload_settings()


def backup(path, documents, contents=()):
    path.write_text(json.dumps({"documents": documents, "contents": list(contents)}), encoding="utf-8")
    return str(path)


def test_import_then_export(cli_db):
    source = backup(
        cli_db / "in.json",
        [{"id": "d1", "title": "Brief", "creationDate": "2024-05-01T09:30:00Z"}],
        [{"documentId": "d1", "task": "Aufgabe", "correction": "--a-- ++b++"}],
    )

    assert main(["import-db", source]) == 0
    assert main(["export-db", str(cli_db / "out.json")]) == 0

    data = json.loads((cli_db / "out.json").read_text(encoding="utf-8"))
    assert [d["title"] for d in data["documents"]] == ["Brief"]
    assert data["contents"][0]["task"] == "Aufgabe"


def test_export_pdf(cli_db):
    source = backup(
        cli_db / "in.json",
        [{"id": "d1", "title": "Brief", "creationDate": "2024-05-01T09:30:00Z"}],
    )
    main(["import-db", source])

    assert main(["export-pdf", str(cli_db / "Klar.pdf")]) == 0

    with fitz.open(str(cli_db / "Klar.pdf")) as doc:
        assert doc.page_count == 1


def test_export_pdf_empty_store(cli_db):
    assert main(["export-pdf", str(cli_db / "Klar.pdf")]) == 1
    assert not (cli_db / "Klar.pdf").exists()


def test_import_invalid_backup(cli_db):
    source = backup(cli_db / "in.json", [], [{"documentId": "missing"}])

    assert main(["import-db", source]) == 1


def test_import_missing_file(cli_db):
    assert main(["import-db", str(cli_db / "nope.json")]) == 1


def test_no_command():
    assert main([]) == 0
