import argparse
import logging
import os
import sys

from qrbatch.core.config import settings
from qrbatch.core.errors import SourceDecodeError
from qrbatch.core.logging import setup_logging
from qrbatch.models.common import ExtractionMode
from qrbatch.render import archive
from qrbatch.render.qr_renderer import QRRenderer
from qrbatch.services import source_adapter
from qrbatch.services.token_extractor import extract, tokens_as_text

logger = logging.getLogger("qrbatch.cli")


def cmd_extract(args) -> int:
    name = os.path.basename(args.file)
    mode = ExtractionMode(args.mode or settings.extraction_mode)
    with open(args.file, "rb") as f:
        data = f.read()

    try:
        text = source_adapter.to_text(name, data)
    except SourceDecodeError as ex:
        logger.error("%s", ex)
        return 1

    tokens = extract(text, mode)
    if args.list:
        if tokens:
            print(tokens_as_text(tokens))
        return 0
    if not tokens:
        print(f"No tokens found in {name}.")
        return 0

    renderer = QRRenderer.from_settings(settings)
    max_len = settings.archive_name_max_len
    os.makedirs(args.out, exist_ok=True)

    if args.zip:
        path = os.path.join(args.out, archive.archive_filename(name))
        content = archive.pack(tokens, renderer, max_len=max_len)
        with open(path, "wb") as f:
            f.write(content)
        print(f"{len(tokens)} QR codes written to {path}")
        return 0

    for token, fname in zip(tokens, archive.unique_names(tokens, max_len)):
        with open(os.path.join(args.out, fname), "wb") as f:
            f.write(renderer.render_png(token))
    print(f"{len(tokens)} QR codes written to {args.out}")
    return 0


def cmd_serve(args) -> int:
    import uvicorn  # only needed here

    uvicorn.run("qrbatch.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="qrbatch", description="Extract tokens from files and render QR codes")
    sub = ap.add_subparsers(dest="command", required=True)

    ex = sub.add_parser("extract", help="Read one file and write a QR code per token")
    ex.add_argument("file", help=f"Input file ({' '.join(source_adapter.ACCEPTED_EXTENSIONS)}; others read as text)")
    ex.add_argument("--mode", choices=[m.value for m in ExtractionMode], default=None,
                    help="numeric (3+ digit numbers) or line (one token per line)")
    ex.add_argument("--out", default="qr_codes", help="Output folder (default qr_codes)")
    ex.add_argument("--zip", action="store_true", help="Write a single ZIP instead of loose PNGs")
    ex.add_argument("--list", action="store_true", help="Only print the tokens")
    ex.set_defaults(func=cmd_extract)

    sv = sub.add_parser("serve", help="Run the HTTP API")
    sv.add_argument("--host", default="127.0.0.1")
    sv.add_argument("--port", type=int, default=8000)
    sv.set_defaults(func=cmd_serve)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
