"""
Command line entry point for Klar.

Usage:
    klar serve --port 3000
    klar export-pdf Klar.pdf
    klar export-db klar_backup.json
    klar import-db klar_backup.json
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from klar.config.settings import get_settings
from klar.core.exceptions import ExportError, SnapshotValidationError
from klar.core.models import DatabaseSnapshot
from klar.db.database import init_db
from klar.export.pdf_export import generate_pdf
from klar.storage.repository import DocumentRepository

console = Console()


def _repository() -> DocumentRepository:
    init_db(get_settings().database_url)
    return DocumentRepository()


def command_serve(args):
    """Start the API server."""
    import uvicorn

    from klar.api.app import create_app

    console.print("[bold green]Starting Klar[/bold green]")
    console.print(f"Host: {args.host}")
    console.print(f"Port: {args.port}")
    console.print(f"Docs: http://{args.host}:{args.port}/docs")

    if args.reload:
        uvicorn.run("klar.api.app:create_app", factory=True, host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def command_export_pdf(args):
    """Write all documents to a PDF file."""
    items = _repository().get_all_documents_with_content()
    try:
        pdf = generate_pdf(items)
    except ExportError as e:
        console.print(f"[red]{e.message}[/red]")
        return 1

    Path(args.output).write_bytes(pdf)
    console.print(f"[green]✓[/green] {len(items)} documents written to {args.output}")
    return 0


def command_export_db(args):
    """Write the store as JSON."""
    snapshot = _repository().export_snapshot()
    Path(args.output).write_text(
        json.dumps(snapshot.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    console.print(f"[green]✓[/green] Backup written to {args.output}")
    return 0


def command_import_db(args):
    """Replace the store with a JSON backup."""
    try:
        data = json.loads(Path(args.input).read_text(encoding="utf-8"))
        snapshot = DatabaseSnapshot.model_validate(data)
        _repository().import_snapshot(snapshot)
    except (OSError, json.JSONDecodeError, ValidationError, SnapshotValidationError) as e:
        console.print(f"[red]Import failed:[/red] {e}")
        return 1

    console.print(
        f"[green]✓[/green] Imported {len(snapshot.documents)} documents "
        f"and {len(snapshot.contents)} contents"
    )
    return 0


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="klar",
        description="Klar - German writing practice with AI feedback",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=3000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Restart on code changes")

    pdf_parser = subparsers.add_parser("export-pdf", help="Export all documents to PDF")
    pdf_parser.add_argument("output", help="Output PDF path")

    export_parser = subparsers.add_parser("export-db", help="Export database as JSON")
    export_parser.add_argument("output", help="Output JSON path")

    import_parser = subparsers.add_parser("import-db", help="Import database from JSON")
    import_parser.add_argument("input", help="JSON backup path")

    args = parser.parse_args(argv)

    commands = {
        "serve": command_serve,
        "export-pdf": command_export_pdf,
        "export-db": command_export_db,
        "import-db": command_import_db,
    }

    if not args.command:
        parser.print_help()
        return 0

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
