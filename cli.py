#!/usr/bin/env python3
"""
ProposalPress CLI - Command Line Interface
==========================================

Commands:
  proposalpress process <file>     Process a raw proposal into documents
  proposalpress preview <file>     Analyse a raw proposal without writing files
  proposalpress demo               Run the bundled sample through the pipeline
"""

import sys
import argparse
import json
import logging

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from core.config import SUPPORTED_FORMATS, get_config
from core.orchestrator import (
    ProcessingRequest,
    ProposalDocumentProcessor,
    build_report,
    format_bytes,
)
from processing.sample_proposal import SAMPLE_PROPOSAL

console = Console()

DEMO_PLACEHOLDERS = {
    "projectOverview": (
        "A staged redevelopment of the resident portal with an integrated "
        "service request workflow."
    ),
    "duration": "16 weeks",
    "pricing": "$5,000",
}


def print_output(message, style=None):
    """Print output with optional styling"""
    if style:
        console.print(message, style=style)
    else:
        console.print(message)


def read_input(path):
    """Read raw proposal text from a file, or stdin for '-'"""
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def build_request(args, placeholders=None):
    """Map CLI options onto a ProcessingRequest"""
    placeholders = placeholders or {}
    return ProcessingRequest(
        agency=args.agency,
        client=args.client,
        project_overview=args.overview or placeholders.get("projectOverview"),
        duration=args.duration or placeholders.get("duration"),
        pricing=args.pricing or placeholders.get("pricing"),
        formats=args.formats,
        include_toc=not args.no_toc,
        include_title_page=not args.no_title_page,
        include_investment_summary=not args.no_investment_summary,
        page_size=args.page_size,
        template_name=args.template,
    )


def create_processor(args):
    options = {"validate_placeholders": not args.no_enforce}
    if getattr(args, "output_dir", None):
        options["output_dir"] = args.output_dir
    return ProposalDocumentProcessor(options)


def show_validation(validation):
    """Render validation issues"""
    if validation is None:
        return

    for issue in validation.errors:
        print_output(f"  ✗ {issue.message}", "red")
    for issue in validation.warnings:
        print_output(f"  ! {issue.message}", "yellow")

    print_output(f"  Completeness: {validation.completeness_score}/100", "cyan")


def show_result(result):
    """Render a ProcessingResult"""
    if not result.success:
        print_output(f"✗ Processing failed ({result.error_type}): {result.error}", "red")
        show_validation(result.validation)
        return

    document = result.document
    console.print(Panel(
        f"[bold]{result.template.metadata.title}[/bold]\n"
        f"Prepared for {result.template.metadata.client}\n"
        f"{len(document.sections)} sections, {len(document.tables)} tables, "
        f"~{document.stats.estimated_pages} pages",
        title="ProposalPress",
        box=box.ROUNDED,
    ))

    table = Table(title="Outputs", box=box.ROUNDED)
    table.add_column("Format", style="cyan")
    table.add_column("File", style="white")
    table.add_column("Size", style="green")
    table.add_column("Status")

    for output in result.outputs:
        if output.success:
            table.add_row(output.format, output.filepath, format_bytes(output.size), "[green]ok[/green]")
        else:
            table.add_row(output.format, "-", "-", f"[red]{output.error}[/red]")

    console.print(table)
    show_validation(result.validation)


def show_preview(preview):
    """Render a PreviewResult"""
    if not preview.success:
        print_output(f"✗ Preview failed ({preview.error_type}): {preview.error}", "red")
        return

    table = Table(title="Sections", box=box.ROUNDED)
    table.add_column("Page", style="yellow", justify="right")
    table.add_column("Level", style="cyan", justify="right")
    table.add_column("Title", style="white")
    table.add_column("Tables", justify="right")

    for item in preview.document.table_of_contents:
        tables = preview.document.tables_for_section(item.id)
        table.add_row(
            str(item.page),
            str(item.level),
            ("  " * (item.level - 1)) + (item.title or "(untitled)"),
            str(len(tables)),
        )

    console.print(table)

    sizes = ", ".join(
        f"{fmt}: {estimate['readable']}" for fmt, estimate in preview.estimated_outputs.items()
    )
    print_output(f"  Estimated sizes: {sizes}")

    remaining = preview.document.stats.remaining_placeholders
    if remaining:
        print_output(f"  Unresolved tokens: {', '.join(sorted(remaining))}", "yellow")

    show_validation(preview.validation)


def run_process(args, raw_text, placeholders=None):
    processor = create_processor(args)
    request = build_request(args, placeholders)
    result = processor.process_proposal(raw_text, request)

    if args.json:
        report = build_report(result, get_config().output.download_base_url)
        print(json.dumps(report, indent=2, default=str))
    else:
        show_result(result)

    return 0 if result.success else 1


def cmd_process(args):
    """Process a raw proposal file"""
    return run_process(args, read_input(args.file))


def cmd_preview(args):
    """Preview processing without writing files"""
    processor = create_processor(args)
    preview = processor.preview(read_input(args.file), build_request(args))

    if args.json:
        print(json.dumps(preview.to_dict(), indent=2, default=str))
    else:
        show_preview(preview)

    return 0 if preview.success else 1


def cmd_demo(args):
    """Run the bundled sample proposal"""
    if not args.formats:
        available = create_processor(args).converter.available_formats()
        args.formats = [fmt for fmt in SUPPORTED_FORMATS if fmt in available]
        if not args.json:
            print_output(f"Demo formats: {', '.join(args.formats)}", "cyan")

    args.client = args.client or "Harbourside City Council"
    args.agency = args.agency or "Northwind Digital"
    return run_process(args, SAMPLE_PROPOSAL, DEMO_PLACEHOLDERS)


def add_request_options(parser):
    """Options shared by all commands"""
    parser.add_argument("--client", "-c", help="Client name")
    parser.add_argument("--agency", "-a", help="Agency name for the title page")
    parser.add_argument("--overview", help="Replacement for the project overview stub")
    parser.add_argument("--duration", help="Replacement for 'X weeks'")
    parser.add_argument("--pricing", help="Replacement for '$X,XXX' amounts")
    parser.add_argument(
        "--format", "-f",
        dest="formats",
        action="append",
        choices=SUPPORTED_FORMATS,
        help="Output format (repeatable)",
    )
    parser.add_argument("--page-size", default="A4", help="Page size (A4, Letter, ...)")
    parser.add_argument("--template", default="professional-proposal", help="Named style preset")
    parser.add_argument("--no-toc", action="store_true", help="Omit the table of contents")
    parser.add_argument("--no-title-page", action="store_true", help="Omit the title page")
    parser.add_argument(
        "--no-investment-summary", action="store_true", help="Omit the Investment Summary"
    )
    parser.add_argument("--output-dir", "-o", help="Directory for generated files")
    parser.add_argument(
        "--no-enforce",
        action="store_true",
        help="Generate output even when validation reports errors",
    )
    parser.add_argument("--json", action="store_true", help="Print the JSON report")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="ProposalPress - proposal document processing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  proposalpress process draft.txt --client "ACME Corp" -f html -f pdf
  proposalpress preview draft.txt
  proposalpress demo --output-dir ./out
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    process_parser = subparsers.add_parser("process", help="Process a raw proposal")
    process_parser.add_argument("file", help="Path to raw proposal text ('-' for stdin)")
    add_request_options(process_parser)

    preview_parser = subparsers.add_parser("preview", help="Preview without writing files")
    preview_parser.add_argument("file", help="Path to raw proposal text ('-' for stdin)")
    add_request_options(preview_parser)

    demo_parser = subparsers.add_parser("demo", help="Run the bundled sample proposal")
    add_request_options(demo_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "process": cmd_process,
        "preview": cmd_preview,
        "demo": cmd_demo,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
