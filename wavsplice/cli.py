"""Thin CLI entry point: builds a ProcessorConfig and calls the engine."""

import argparse
import sys
from pathlib import Path

from wavsplice import wavutil
from wavsplice.config import NormalizeConfig, SpliceConfig, load_config
from wavsplice.engine import process
from wavsplice.errors import AudioError
from wavsplice.logging_setup import configure_logging
from wavsplice.packaging import create_zip_from_result
from wavsplice.settings import Settings


def _add_io_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("input", type=Path, help="Source WAV file (16-bit PCM)")
    p.add_argument("--output-dir", "-o", type=Path, required=True, help="Directory for output clips")
    p.add_argument("--zip", type=Path, help="Also bundle the outputs into this ZIP file")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavsplice",
        description="wavsplice: random WAV splicing and peak normalization.",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument("--log-file", type=Path, help="Also log to this (rotating) file")
    sub = parser.add_subparsers(dest="command")

    splice = sub.add_parser("splice", help="Extract random clips")
    _add_io_args(splice)
    splice.add_argument("--duration", "-d", type=float, required=True, help="Clip length in seconds")
    splice.add_argument("--count", "-n", type=int, required=True, help="Number of clips")
    splice.add_argument("--reverse", action="store_true", help="Reverse each clip")

    norm = sub.add_parser("normalize", help="Peak-normalize the file or random splices")
    _add_io_args(norm)
    norm.add_argument("--target-level", "-t", type=float, default=1.0, help="Target peak, 0 < level <= 1")
    norm.add_argument(
        "--apply-to-splices",
        action="store_true",
        help="Normalize five random 2-second splices instead of the whole file",
    )

    proc = sub.add_parser("process", help="Run a JSON config file")
    _add_io_args(proc)
    proc.add_argument("--config", "-c", type=Path, required=True, help="Path to a JSON config")

    info = sub.add_parser("info", help="Show WAV metadata")
    info.add_argument("files", nargs="+", type=Path, help="WAV files")

    serve = sub.add_parser("serve", help="Launch the HTTP service")
    serve.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    serve.add_argument("--host", type=str, default=settings.host, help="Host to bind to")

    return parser


def main(argv: list[str] | None = None) -> None:
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    configure_logging(args.log_level, args.log_file)

    if args.command == "serve":
        from wavsplice.web import create_app
        app = create_app(settings=settings)
        print(f"wavsplice service: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    try:
        if args.command == "info":
            for path in args.files:
                meta = wavutil.probe(path)
                print(
                    f"{path}: {meta.total_duration:.3f}s, {meta.sample_rate} Hz, "
                    f"{meta.channel_count} ch, {meta.bit_depth}-bit"
                )
            return

        if args.command == "splice":
            config = SpliceConfig(duration=args.duration, count=args.count, reverse=args.reverse)
        elif args.command == "normalize":
            config = NormalizeConfig(
                target_level=args.target_level, apply_to_splices=args.apply_to_splices
            )
        else:
            config = load_config(args.config)

        result = process(args.input, args.output_dir, config)
        if args.zip:
            create_zip_from_result(result, args.zip)
    except AudioError as e:
        print(f"Error [{e.kind}]: {e}", file=sys.stderr)
        sys.exit(1)

    meta = result.metadata
    print()
    print(f"Done! {len(result.files)} file(s) in {args.output_dir}")
    for path in result.files:
        print(f"  {path.name}")
    print(f"  Source: {meta.input_duration:.1f}s, {meta.sample_rate} Hz, {meta.channels} ch")
    print(f"  Processing time: {meta.processing_time_ms} ms")
    if args.zip:
        print(f"  Archive: {args.zip}")
