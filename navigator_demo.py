"""
Example: load a PDF (path or URL), print its outline, then read a section
and/or search it.

Usage:
    python3 navigator_demo.py --pdf /path/to/book.pdf --section "Introduction" --page 1
    python3 navigator_demo.py --pdf https://example.com/manual.pdf --search "portable" --max-results 5
"""

import argparse
import json
from pathlib import Path

from pdf_navigator.library import (
    DocumentError,
    DocumentLibrary,
    JsonDocumentRegistry,
    NullDocumentRegistry,
    PyMuPDFDecodingEngine,
    SourceFetcher,
    setup_logging,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.add_argument("--pdf", required=True, help="Path or http(s) URL of the input PDF")
    parser.add_argument("--section", default=None, help="Section title to extract (fuzzy matched)")
    parser.add_argument("--page", default=1, type=int, help="Page of the section to print")
    parser.add_argument("--char-budget", default=4000, type=int, help="Characters per section page")
    parser.add_argument("--search", default=None, help="Text or pattern to search for")
    parser.add_argument("--regex", action="store_true", help="Treat --search as a regular expression")
    parser.add_argument("--case-sensitive", action="store_true", help="Case sensitive search")
    parser.add_argument("--max-results", default=None, type=int, help="Stop after this many matches")
    parser.add_argument("--registry", default=None, type=Path, help="Registry JSON file to record the load in")
    parser.add_argument("--timeout", default=60.0, type=float, help="Seconds allowed for fetching and decoding")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    registry = JsonDocumentRegistry(args.registry) if args.registry else NullDocumentRegistry()
    library = DocumentLibrary(
        engine=PyMuPDFDecodingEngine(),
        fetcher=SourceFetcher(),
        registry=registry,
        fetch_timeout=args.timeout,
        char_budget=args.char_budget,
    )

    try:
        result = library.load(args.pdf)
        print(f"Loaded {result.id} ({result.page_count} pages)")
        if result.outline:
            print("\nTable of Contents:")
            print(result.outline)

        if args.section:
            section = library.section(result.id, args.section, page=args.page)
            print(f"\n[{section.section}] page {section.page} of {section.total_pages}\n")
            print(section.content)

        if args.search:
            groups = library.search(
                result.id,
                args.search,
                case_sensitive=args.case_sensitive,
                regex=args.regex,
                max_results=args.max_results,
            )
            payload = [
                {"section": g.section, "matches": [{"text": m.text, "context": m.context} for m in g.matches]}
                for g in groups
            ]
            print(json.dumps(payload, ensure_ascii=False, indent=2))
    except DocumentError as exc:
        print(f"Error: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
