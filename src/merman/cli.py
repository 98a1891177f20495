"""Command-line interface: render a .json description or transform a markdown file."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, PositiveInt, ValidationError

from merman.api import render_svg
from merman.errors import LayoutError, NodeReferenceError, ParseError
from merman.markdown import transform_markdown
from merman.style import DEFAULT_STYLE, Style

logger = logging.getLogger(__name__)


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


class StyleOverrides(BaseModel):
    """Subset of Style fields accepted from a --style JSON file."""

    model_config = ConfigDict(extra="forbid")

    top_level_margin: Optional[int] = None
    box_width: Optional[PositiveInt] = None
    width_between_boxes: Optional[int] = None
    box_height: Optional[PositiveInt] = None
    height_between_boxes: Optional[int] = None
    margin_width: Optional[int] = None
    margin_height: Optional[int] = None
    text_font_size_normal: Optional[PositiveInt] = None
    text_font_size_larger: Optional[PositiveInt] = None
    font_family: Optional[str] = None
    arrowhead_gap: Optional[int] = None

    def apply(self, style: Style) -> Style:
        return dataclasses.replace(style, **self.model_dump(exclude_none=True))


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="merman",
        description="Render merman graph descriptions to SVG.",
    )
    parser.add_argument("path", help="Path to the input .md or .json file")
    parser.add_argument(
        "-o",
        "--output",
        help=(
            "Output path. Without it, a markdown input is modified in place "
            "and a .json input is written to stdout as SVG."
        ),
    )
    parser.add_argument("--style", help="JSON file with style overrides")
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")
    return parser


def _read_text(path: Path) -> str:
    if not path.exists():
        raise CliError("E_IO_READ", f"input file not found: {path}", exit_code=2, file=str(path))
    try:
        return path.read_text()
    except OSError as exc:
        raise CliError(
            "E_IO_READ",
            f"failed to read input file: {path}",
            hint=str(exc),
            exit_code=2,
            file=str(path),
        )


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content)
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _load_style(path: Optional[str]) -> Style:
    if path is None:
        return DEFAULT_STYLE
    style_path = Path(path)
    try:
        overrides = StyleOverrides.model_validate_json(_read_text(style_path))
    except ValidationError as exc:
        raise CliError(
            "E_STYLE",
            f"invalid style file: {style_path}",
            hint=str(exc),
            exit_code=2,
            file=str(style_path),
        )
    return overrides.apply(DEFAULT_STYLE)


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, ParseError):
        return CliError(
            "E_PARSE",
            f"failed to parse graph description: {exc}",
            hint="Expected an object with layoutDirection, nodes and connections.",
            exit_code=3,
        )
    if isinstance(exc, NodeReferenceError):
        return CliError(
            "E_REFERENCE",
            str(exc),
            hint="Every connection endpoint must be a key of nodes.",
            exit_code=3,
        )
    if isinstance(exc, LayoutError):
        return CliError(
            "E_GRAPH",
            str(exc),
            hint="The graph must be acyclic and every node must lead to an output.",
            exit_code=3,
        )
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "hint": err.hint,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _run(args: argparse.Namespace) -> int:
    input_path = Path(args.path)
    is_json = args.path.endswith(".json")
    style = _load_style(args.style)

    content = _read_text(input_path)
    if is_json:
        content = render_svg(content, style)
    else:
        content = transform_markdown(content, style)

    if args.output:
        output_path = Path(args.output)
    elif not is_json:
        output_path = input_path
    else:
        sys.stdout.write(content)
        return 0

    _write_text(output_path, content)
    logger.info(f"Wrote {output_path}")
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    debug_enabled = "--debug" in raw_argv or os.getenv("MERMAN_DEBUG") == "1"
    logging.basicConfig(level=logging.DEBUG if debug_enabled else logging.WARNING)

    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format
        return _run(args)
    except UsageError as exc:
        err = CliError("E_ARGS", str(exc), hint="Usage: merman [-o OUTPUT] PATH", exit_code=2)
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
