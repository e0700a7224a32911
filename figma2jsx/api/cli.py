"""
Command-line adapter for the figma2jsx conversion pipeline.

Architectural role:
- Terminal front end over the same input surface and orchestrator used by
  the HTTP adapter.
- Delegates all conversion work to `ConversionOrchestrator.start`.

Request lifecycle:
1. Parse exactly one input option (`--figma-json`, `--image`, `--paste`).
2. Feed it to the input surface.
3. Run one conversion.
4. Write the code to stdout or `--output`, or the error to stderr.

Input validation behavior:
- `--figma-json -` reads the design JSON from stdin.
- `--paste` reads the system clipboard through Pillow's `ImageGrab`; a
  clipboard without an image is reported as an error.
- Rejected input exits with status 2.

Response formatting:
- Success prints only the extracted code (exit status 0).
- Failure prints `Error: <message>` to stderr (exit status 1).
"""

from dotenv import load_dotenv

load_dotenv()

import argparse
import asyncio
import io
import logging
import mimetypes
import os
import sys

from PIL import Image, ImageGrab

from figma2jsx.api.multimodal.input_surface import InputSurface
from figma2jsx.core.conversion_types import ClipboardItem, ConversionStatus, ImageBlob
from figma2jsx.core.engine import ConversionOrchestrator
from figma2jsx.core.errors import InputRejected
from figma2jsx.llm.client import CompletionClient
from figma2jsx.llm.provider_config import load_config


logger = logging.getLogger(__name__)


# =========================================================
# CLIPBOARD
# =========================================================

def read_clipboard_items() -> list[ClipboardItem]:
    """Convert the system clipboard into clipboard items.

    `ImageGrab.grabclipboard()` returns an image, a list of copied file
    paths, or `None`. Images are re-encoded as PNG.
    """
    try:
        content = ImageGrab.grabclipboard()
    except (NotImplementedError, OSError) as err:
        raise InputRejected(f"Clipboard is not available: {err}") from err

    if isinstance(content, Image.Image):
        buffer = io.BytesIO()
        content.save(buffer, format="PNG")
        return [ClipboardItem(mime_type="image/png", data=buffer.getvalue())]

    items = []
    for path in content or []:
        mime_type, _ = mimetypes.guess_type(path)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError:
            data = None
        items.append(
            ClipboardItem(
                mime_type=mime_type or "application/octet-stream",
                data=data,
                file_name=os.path.basename(path),
            )
        )
    return items


# =========================================================
# ARGUMENTS
# =========================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma2jsx",
        description="Convert Figma JSON or a UI screenshot into React + Tailwind JSX",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--figma-json", metavar="FILE", help="Figma JSON export ('-' for stdin)")
    source.add_argument("--image", metavar="FILE", help="Screenshot image file")
    source.add_argument("--paste", action="store_true", help="Use the image on the system clipboard")
    parser.add_argument("--output", metavar="FILE", help="Write the generated code to FILE")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "WARNING"))
    return parser


def load_input(args: argparse.Namespace, surface: InputSurface) -> None:
    """Apply the selected input option to the surface.

    Raises:
        InputRejected: Unreadable file or clipboard without an image.
    """
    if args.figma_json:
        if args.figma_json == "-":
            surface.set_structured_text(sys.stdin.read())
            return
        try:
            with open(args.figma_json, "r", encoding="utf-8") as f:
                surface.set_structured_text(f.read())
        except OSError as err:
            raise InputRejected(f"Cannot read {args.figma_json}: {err.strerror or err}") from err
        return

    if args.image:
        mime_type, _ = mimetypes.guess_type(args.image)
        surface.select_file(
            ImageBlob(
                path=args.image,
                mime_type=mime_type,
                file_name=os.path.basename(args.image),
            )
        )
        return

    if not surface.paste_clipboard_items(read_clipboard_items()):
        raise InputRejected("Clipboard does not contain an image")


# =========================================================
# MAIN
# =========================================================

def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    config = load_config()
    surface = InputSurface(max_image_bytes=config.max_image_bytes)

    try:
        load_input(args, surface)
    except InputRejected as err:
        logger.debug("Input rejected", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 2

    with CompletionClient(config) as client:
        orchestrator = ConversionOrchestrator(surface, client, settings=config.models)
        state = asyncio.run(orchestrator.start())

    if state.status is not ConversionStatus.COMPLETED:
        print(f"Error: {state.message}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(state.code + "\n")
        print(f"Saved: {args.output}", file=sys.stderr)
    else:
        print(state.code)

    surface.clear()
    return 0


if __name__ == "__main__":
    sys.exit(main())
