"""
Analysis Report Formatting
==========================
Renders AnalysisResult objects as a markdown report.

Also runnable as a command:

    python -m proofing notes.txt essay.docx
    echo "I recieve mail" | python -m proofing --title Mail --json
"""

import sys
import json
from pathlib import Path
from typing import Iterable, List, Optional

from .models import AnalysisResult

NO_ISSUES_MESSAGE = "No issues found! Your document looks great."


def format_analysis_result(result: AnalysisResult) -> str:
    """Render one result; empty sections are omitted."""
    lines = ["---", f"Document Title: {result.document_title}", "", f"Language: {result.language.value}", ""]

    if result.spelling_errors:
        lines.append("### Spelling Errors")
        for error in result.spelling_errors:
            lines.append(f"- {error.original} → {error.corrected}")
        lines.append("")

    if result.grammar_errors:
        lines.append("### Grammar Errors")
        for index, error in enumerate(result.grammar_errors, start=1):
            lines.append(f'{index}. "{error.original}"')
            lines.append(f"   ✖ {error.explanation}")
            lines.append(f'   ✔ "{error.corrected}"')
            lines.append("")

    if result.style_suggestions:
        lines.append("### Style Suggestions (Optional)")
        for suggestion in result.style_suggestions:
            lines.append(f'- Original: "{suggestion.original}"')
            lines.append(f'  Suggestion: "{suggestion.suggestion}"')
            lines.append("")

    if not result.has_issues:
        lines.append(NO_ISSUES_MESSAGE)

    lines.append("---")
    return "\n".join(lines) + "\n"


def format_analysis_results(results: Iterable[AnalysisResult]) -> str:
    return "\n".join(format_analysis_result(result) for result in results)


# ============================================================================
# CLI
# ============================================================================

def _read_document(path: Path) -> str:
    from file_parsers import extract_text
    with open(path, 'rb') as f:
        return extract_text(f, path.name)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface."""
    import argparse
    from config_logging import TypoppError
    from .analyzer import create_analyzer
    from .models import AnalysisRequest

    parser = argparse.ArgumentParser(description='Typopp document analyzer')
    parser.add_argument('files', nargs='*', help='Documents to analyze (.txt, .docx, .pdf); stdin if omitted')
    parser.add_argument('--title', help='Title for text read from stdin', default='stdin')
    parser.add_argument('--patterns', help='JSON patterns file overriding the default tables')
    parser.add_argument('--json', action='store_true', help='Print JSON results instead of markdown')

    args = parser.parse_args(argv)

    try:
        analyzer = create_analyzer(args.patterns)
        if args.files:
            requests = [
                AnalysisRequest(title=Path(name).name, content=_read_document(Path(name)))
                for name in args.files
            ]
        else:
            requests = [AnalysisRequest(title=args.title, content=sys.stdin.read())]
    except (TypoppError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    results = analyzer.analyze_many(requests)
    if args.json:
        print(json.dumps({'results': [r.to_dict() for r in results]}, ensure_ascii=False, indent=2))
    else:
        print(format_analysis_results(results), end='')
    return 0


if __name__ == "__main__":
    sys.exit(main())
