"""Command-line entry point: ``comfygen "a prompt" [-o out.mp4] [--seed N]``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import API_KEY_ENV, ClientConfig
from .errors import ComfyGenError, MissingCredential, MissingPrompt
from .pipeline import VideoGenerator
from .types import SEED_LIMIT, GenerationOptions, random_seed

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on bad input."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _positive_int(raw: str) -> int:
    try:
        value = int(raw, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _seed(raw: str) -> int:
    try:
        value = int(raw, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from None
    if not 0 <= value < SEED_LIMIT:
        raise argparse.ArgumentTypeError(f"seed must be in [0, {SEED_LIMIT - 1}]: {value}")
    return value


def _output_path(raw: str) -> str:
    if not Path(raw).name:
        raise argparse.ArgumentTypeError(f"output must name a file: {raw!r}")
    return raw


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="comfygen",
        description="Generate a video with the LTX-2 text-to-video workflow on ComfyUI Cloud.",
        epilog=f"The API key is read from the {API_KEY_ENV} environment variable.",
    )
    parser.add_argument("prompt", nargs="*", help="Prompt text; all words are joined with spaces.")
    parser.add_argument(
        "-o", "--output", type=_output_path, default="output.mp4", help="Where to save the video."
    )
    parser.add_argument("--seed", type=_seed, default=None, help="Noise seed (random by default).")
    parser.add_argument("--frames", type=_positive_int, default=121, help="Number of frames.")
    parser.add_argument("--fps", type=_positive_int, default=24, help="Frame rate.")
    return parser


def parse_args(argv: list[str]) -> GenerationOptions:
    """Parse CLI arguments into generation options."""
    args = build_parser().parse_intermixed_args(argv)
    return GenerationOptions(
        prompt=" ".join(args.prompt),
        seed=random_seed() if args.seed is None else args.seed,
        frame_count=args.frames,
        fps=args.fps,
        output_path=args.output,
    )


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")


def _check_preconditions(config: ClientConfig, options: GenerationOptions) -> None:
    if not config.api_key:
        raise MissingCredential(f"set {API_KEY_ENV} environment variable")
    if not options.prompt.strip():
        raise MissingPrompt("a prompt is required")


def main(argv: list[str] | None = None) -> int:
    """Entry point used by ``comfygen`` and ``python run.py``."""
    options = parse_args(sys.argv[1:] if argv is None else argv)
    config = ClientConfig.from_env()
    _configure_logging(config.log_level)

    try:
        _check_preconditions(config, options)
    except (MissingCredential, MissingPrompt) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        build_parser().print_usage(sys.stderr)
        return 1

    logger.info("Prompt:  %s", options.prompt)
    logger.info("Seed:    %s", options.seed)
    logger.info(
        "Frames:  %s (%.1fs @ %sfps)", options.frame_count, options.duration_sec, options.fps
    )
    logger.info("Output:  %s", options.output_path)

    try:
        result = VideoGenerator(config).run(options)
    except (ComfyGenError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result.to_dict()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
