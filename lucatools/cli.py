"""Command-line tools for CZ images and bitmap fonts."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import contextmanager
from functools import partial
from pathlib import Path
from typing import Callable, Iterator, Sequence

from lucatools.czimage.loader import load_cz_image_file
from lucatools.font.luca_font import load_luca_font_file

__all__ = ["build_parser", "main"]

VERSION = "2.0.3"
PROG = "LuckSystem"

_LOG = logging.getLogger("lucatools")

Handler = Callable[[argparse.Namespace], int]


def _print_help(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    parser.print_help()
    return 0


def _image_export(args: argparse.Namespace) -> int:
    _LOG.info("image export called")
    cz = load_cz_image_file(args.input)
    with open(args.output, "wb") as out:
        cz.export(out)
    return 0


def _image_import(args: argparse.Namespace) -> int:
    _LOG.info("image import called")
    if not args.source:
        print('Error: required flag(s) "source" not set', file=sys.stderr)
        return 1
    cz = load_cz_image_file(args.source)
    with open(args.input, "rb") as png:
        cz.import_png(png, args.fill)
    with open(args.output, "wb") as out:
        cz.write(out)
    return 0


def _font_create(args: argparse.Namespace) -> int:
    print("Error: creating a new font is not supported", file=sys.stderr)
    return 1


def _font_edit(args: argparse.Namespace) -> int:
    _LOG.info("font edit called")
    if not args.input_ttf:
        print('Error: required flag(s) "input_ttf" not set', file=sys.stderr)
        return 1
    font = load_luca_font_file(args.source_info, args.source)
    start_index = -1 if args.append else args.index
    with open(args.input_ttf, "rb") as ttf:
        font.import_font(ttf, start_index, args.redraw, args.input_charset or None)
    with open(args.output, "wb") as out:
        if args.output_info:
            with open(args.output_info, "wb") as info_out:
                font.write(out, info_out)
        else:
            font.write(out, None)
    return 0


def _font_extract(args: argparse.Namespace) -> int:
    _LOG.info("font extract called")
    font = load_luca_font_file(args.source_info, args.source)
    with open(args.output, "wb") as out:
        font.export(out, args.output_info or None)
    return 0


def _image_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-s", "--source", default="", help="original cz file")
    common.add_argument("-i", "--input", required=True, help="input file")
    common.add_argument("-o", "--output", required=True, help="output file")
    return common


def _font_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-s", "--source", required=True, help="font cz file to read")
    common.add_argument(
        "-S", "--source_info", required=True, help="info file of the same font size"
    )
    common.add_argument("-o", "--output", required=True, help="output file")
    return common


def _add_image_commands(commands: argparse._SubParsersAction) -> None:
    image = commands.add_parser(
        "image",
        help="LucaSystem cz images",
        description="CZ images with headers 'CZ0' to 'CZ3'.",
    )
    image.set_defaults(handler=partial(_print_help, image))
    common = _image_options()
    sub = image.add_subparsers(title="commands")

    export = sub.add_parser("export", parents=[common], help="extract a cz file to png")
    export.set_defaults(handler=_image_export)

    imported = sub.add_parser("import", parents=[common], help="import a png into a cz file")
    imported.add_argument(
        "-f",
        "--fill",
        action="store_true",
        help="pad the image to the size of the source, cz1 and cz2 only",
    )
    imported.set_defaults(handler=_image_import)


def _add_font_commands(commands: argparse._SubParsersAction) -> None:
    font = commands.add_parser(
        "font",
        help="LucaSystem fonts",
        description="A font is a cz glyph sheet with the info file of the same size.",
    )
    font.set_defaults(handler=partial(_print_help, font))
    common = _font_options()
    sub = font.add_subparsers(title="commands")

    create = sub.add_parser("create", parents=[common], help="not supported yet")
    create.set_defaults(handler=_font_create)

    edit = sub.add_parser("edit", parents=[common], help="edit or rebuild a font")
    edit.add_argument("-O", "--output_info", default="", help="where to save the new info")
    edit.add_argument("-f", "--input_ttf", default="", help="TrueType font to draw with")
    edit.add_argument(
        "-c", "--input_charset", default="", help="text file of characters to add or replace"
    )
    placement = edit.add_mutually_exclusive_group()
    placement.add_argument(
        "-a", "--append", action="store_true", help="append the characters after the last one"
    )
    placement.add_argument(
        "-i", "--index", type=int, default=0, help="cell to start drawing at, from 0"
    )
    edit.add_argument("-r", "--redraw", action="store_true", help="redraw the existing glyphs")
    edit.set_defaults(handler=_font_edit)

    extract = sub.add_parser("extract", parents=[common], help="extract glyph sheet and info")
    extract.add_argument(
        "-O", "--output_info", default="", help="where to save the character list"
    )
    extract.set_defaults(handler=_font_extract)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the command."""
    parser = argparse.ArgumentParser(prog=PROG, description="LucaSystem engine tools")
    parser.add_argument("--version", action="version", version=f"%(prog)s version {VERSION}")
    parser.add_argument(
        "--log", action=argparse.BooleanOptionalAction, default=True, help="enable logging"
    )
    parser.add_argument("--log_level", type=int, default=5, help="log verbosity")
    parser.add_argument("--log_dir", default="log", help="directory for log files")
    parser.set_defaults(handler=partial(_print_help, parser))
    commands = parser.add_subparsers(title="commands")
    _add_image_commands(commands)
    _add_font_commands(commands)
    return parser


@contextmanager
def _logging(enabled: bool, level: int, log_dir: str) -> Iterator[None]:
    if not enabled:
        yield
        return
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stderr),
        logging.FileHandler(directory / "lucatools.log", encoding="utf-8"),
    ]
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    previous = _LOG.level
    _LOG.setLevel(logging.DEBUG if level >= 6 else logging.INFO)
    for handler in handlers:
        handler.setFormatter(formatter)
        _LOG.addHandler(handler)
    try:
        yield
    finally:
        for handler in handlers:
            _LOG.removeHandler(handler)
            handler.close()
        _LOG.setLevel(previous)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    if not args_list or args_list[0] in ("-h", "--help"):
        parser.print_help()
        return 1
    try:
        args = parser.parse_args(args_list)
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    with _logging(args.log, args.log_level, args.log_dir):
        try:
            return args.handler(args)
        except (OSError, ValueError, IndexError) as exc:
            _LOG.error("%s", exc)
            print(f"Error: {exc}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())