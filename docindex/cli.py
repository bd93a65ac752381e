"""CLI entrypoints for docindex commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from . import codec
from .config import DocIndexConfig, load_config
from .logging import configure_logging, get_logger
from .models import DocIndexError, IndexFormatError
from .validators import IndexValidator

_LOGGER = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Sidebar index file (.js or .json); defaults to index.path from .docindex.yml.",
    )
    parser.add_argument(
        "--format",
        dest="input_format",
        choices=codec.FORMATS,
        default=None,
        help="Input format; detected from the file suffix when omitted.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docindex",
        description="Inspect, validate and serve documentation sidebar indexes.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .docindex.yml or the directory containing it.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Print categories and their entries.")
    _add_verbose_option(show_parser, suppress_default=True)
    _add_path_argument(show_parser)
    show_parser.add_argument("--category", default=None, help="Only print this category.")

    categories_parser = subparsers.add_parser("categories", help="Print category names.")
    _add_verbose_option(categories_parser, suppress_default=True)
    _add_path_argument(categories_parser)

    validate_parser = subparsers.add_parser(
        "validate", help="Check a sidebar index for integrity problems."
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    _add_path_argument(validate_parser)
    validate_parser.add_argument(
        "--allow-unknown-categories",
        action="store_true",
        help="Do not warn about categories outside the known kinds.",
    )

    convert_parser = subparsers.add_parser(
        "convert", help="Re-emit a sidebar index as JSON or a sidebar script."
    )
    _add_verbose_option(convert_parser, suppress_default=True)
    _add_path_argument(convert_parser)
    convert_parser.add_argument("-o", "--output", required=True, help="Destination file.")
    convert_parser.add_argument(
        "--to",
        dest="output_format",
        choices=codec.FORMATS,
        default=None,
        help=(
            "Output format (defaults to the destination suffix, .js or .json; "
            "otherwise output.format)."
        ),
    )
    convert_parser.add_argument("--indent", type=int, default=None, help="JSON indentation.")

    serve_parser = subparsers.add_parser("serve", help="Serve the sidebar index over HTTP.")
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_path_argument(serve_parser)
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docindex commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
        path = _resolve_index_path(args.path, config)
        if path is None:
            parser.exit(1, "No sidebar index given and index.path is not configured.\n")
        fmt = args.input_format or config.index.format

        if args.command == "show":
            _run_show(path, fmt, config, args.category)
        elif args.command == "categories":
            index = codec.load(path, fmt, strict=config.index.strict)
            for category in sorted(index.categories()):
                print(category)
        elif args.command == "validate":
            status = _run_validate(path, fmt, config, bool(args.allow_unknown_categories))
            if status:
                parser.exit(status)
        elif args.command == "convert":
            _run_convert(path, fmt, config, args)
        elif args.command == "serve":  # pragma: no cover - integration path
            from .service import run_service

            run_service(
                path,
                host=args.host or config.service.host,
                port=args.port or config.service.port,
                fmt=fmt,
                strict=config.index.strict,
            )
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except DocIndexError as exc:
        parser.exit(1, f"docindex {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _resolve_index_path(raw: Optional[str], config: DocIndexConfig) -> Optional[Path]:
    if raw:
        return Path(raw)
    return config.index.path


def _run_show(path: Path, fmt: Optional[str], config: DocIndexConfig, category: Optional[str]) -> None:
    index = codec.load(path, fmt, strict=config.index.strict)
    selected = [category] if category else sorted(index.categories())
    for name in selected:
        entries = index.get(name)
        print(f"{name} ({len(entries)})")
        for entry in entries:
            print(f"  {entry.name}: {entry.summary}" if entry.summary else f"  {entry.name}")


def _run_validate(path: Path, fmt: Optional[str], config: DocIndexConfig, allow_unknown: bool) -> int:
    try:
        text = codec.decode(path.read_bytes(), path)
        data, repeated = codec.parse(text, fmt or codec.format_for_path(path))
    except IndexFormatError as exc:
        print(f"error: [shape] <root>: {exc}")
        return 1

    validator = IndexValidator(
        allow_unknown_categories=allow_unknown or config.validate.allow_unknown_categories,
        extra_categories=config.validate.extra_categories,
    )
    issues = validator.validate(data, duplicate_categories=repeated)
    for issue in issues:
        print(issue.describe())
    errors = sum(1 for issue in issues if issue.is_error)
    _LOGGER.info("%s: %d error(s), %d warning(s)", path, errors, len(issues) - errors)
    if not issues:
        print(f"{path}: ok")
    return 1 if errors else 0


def _run_convert(path: Path, fmt: Optional[str], config: DocIndexConfig, args: argparse.Namespace) -> None:
    index = codec.load(path, fmt, strict=config.index.strict)
    output = Path(args.output)
    out_fmt = args.output_format or codec.format_for_path(output)
    if args.output_format is None and output.suffix.lower() not in {".js", ".json"}:
        out_fmt = config.output.format
    indent = args.indent if args.indent is not None else config.output.indent
    codec.dump(index, output, out_fmt, indent=indent)
    print(f"Wrote {_relativize(output)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
