"""
Command-line interface for the smart formatter.

Formats text files (or stdin) into Markdown and prints a per-file summary of
what was done.
"""

import argparse
import sys
from pathlib import Path

from smartformat.config import DEBUG_MODE
from smartformat.custom_rules import CustomRuleStore
from smartformat.formatter import smart_format
from smartformat.logging_config import close_debug_log, info


def _format_file(file_path: Path, rules, output_dir: Path | None) -> dict:
    """Format one file; errors are reported in the result instead of raised."""
    result = {'filename': str(file_path), 'status': 'success', 'format_type': None,
              'output': None, 'error_message': None}
    try:
        text = file_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        result.update(status='error', error_message=str(e))
        return result

    formatted = smart_format(text, custom_rules=rules)
    result['format_type'] = formatted.format_type

    if output_dir is None:
        sys.stdout.write(formatted.formatted + '\n')
        return result

    output_path = output_dir / f"{file_path.stem}_formatted.md"
    try:
        output_path.write_text(formatted.formatted + '\n', encoding='utf-8')
    except OSError as e:
        result.update(status='error', error_message=str(e))
        return result
    result['output'] = str(output_path)
    info(f"Saved formatted text to: {output_path}")
    return result


def _print_summary(results: list[dict], stream) -> None:
    print("\n" + "=" * 60, file=stream)
    print("FORMATTING SUMMARY", file=stream)
    print("=" * 60, file=stream)

    for result in results:
        status_symbol = '[OK]' if result['status'] == 'success' else '[ERROR]'
        print(f"\n{status_symbol} {result['filename']}", file=stream)
        if result['format_type']:
            print(f"  Format: {result['format_type']}", file=stream)
        if result['output']:
            print(f"  Output: {result['output']}", file=stream)
        if result['error_message']:
            print(f"  Error: {result['error_message']}", file=stream)

    total = len(results)
    errors = sum(1 for r in results if r['status'] == 'error')
    print("\n" + "=" * 60, file=stream)
    print(f"Total: {total} | Formatted: {total - errors} | Errors: {errors}", file=stream)
    print("=" * 60, file=stream)


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        prog='smartformat',
        description="SmartFormat - Turn pasted plain text into clean Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Format stdin to stdout
  pbpaste | smartformat

  # Format several files into a directory
  smartformat --input notes.txt prompt.txt --output-dir ./formatted

  # Apply custom find/replace rules first
  smartformat --input prompt.txt --rules rules.yaml

  # Debug mode (verbose logging + debug_flow.txt trace)
  DEBUG=true smartformat --input prompt.txt
        """
    )

    parser.add_argument(
        '--input',
        nargs='+',
        help='Input text file(s) to format (default: read stdin)'
    )

    parser.add_argument(
        '--rules',
        help='Custom rules file (.json, .yaml or .yml)'
    )

    parser.add_argument(
        '--output-dir',
        help='Write <name>_formatted.md files here instead of printing to stdout'
    )

    args = parser.parse_args(argv)

    rules = CustomRuleStore(Path(args.rules)).load() if args.rules else []
    if rules:
        info(f"Loaded {len(rules)} custom rules from {args.rules}")

    output_dir = None
    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    try:
        if not args.input:
            formatted = smart_format(sys.stdin.read(), custom_rules=rules)
            sys.stdout.write(formatted.formatted + '\n')
            print(f"Format: {formatted.format_type}", file=sys.stderr)
            return 0

        results = [_format_file(Path(p), rules, output_dir) for p in args.input]
        # Formatted text owns stdout unless it went to files
        _print_summary(results, sys.stdout if output_dir else sys.stderr)
        return 1 if any(r['status'] == 'error' for r in results) else 0
    finally:
        if DEBUG_MODE:
            close_debug_log()


if __name__ == "__main__":
    sys.exit(main())
