from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Iterable

from rich.console import Console

from .ambient import LayerResult, load_external_layer
from .config import AMBIENT_KINDS, DEFAULT_SAMPLE_RATE, NOISE_TYPES, RenderOptions
from .errors import InvalidConfigError
from .logging_utils import configure_logging, debug_enabled, log_exception
from .render import render
from .spinner import Spinner, render_error

_LOGGER = logging.getLogger("brickwave.cli")
_CONSOLE = Console()
_ERR_CONSOLE = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brickwave",
        description="Offline deterministic noise generator for DSP devs, AI researchers, "
        "and sound designers.",
    )
    parser.add_argument("--noise", type=str, help="Noise type: white, pink, or brown")
    parser.add_argument("--duration", type=float, help="Duration in seconds")
    parser.add_argument("--samplerate", type=int, default=DEFAULT_SAMPLE_RATE)
    parser.add_argument("--out", type=str, help="Output .wav file path")
    parser.add_argument("--seed", type=int, help="Seed for deterministic generation")
    parser.add_argument("--stereo", action="store_true", help="Generate stereo output")
    parser.add_argument("--fade-in", type=float, default=0.0, help="Fade in seconds")
    parser.add_argument("--fade-out", type=float, default=0.0, help="Fade out seconds")
    parser.add_argument(
        "--ambient",
        type=str,
        default="",
        help=f"Comma-separated ambient layers: {', '.join(AMBIENT_KINDS)}",
    )
    parser.add_argument("--ambient-intensity", type=float, default=0.5)
    parser.add_argument("--ambient-variation", type=float, default=0.5)
    parser.add_argument(
        "--layer-file",
        action="append",
        default=[],
        help="Externally produced WAV to mix in as a layer (repeatable)",
    )
    return parser


def _usage_error(lines: Iterable[str]) -> int:
    for line in lines:
        _ERR_CONSOLE.print(line)
    return 1


def _summary(
    options: RenderOptions,
    out: str,
    elapsed_ms: float,
    layers: Iterable[LayerResult],
) -> None:
    mode = "(stereo)" if options.channels == 2 else "(mono)"
    _CONSOLE.print(f"✅ Generated {options.noise} noise")
    _CONSOLE.print(f"   📊 {options.duration}s @ {options.sample_rate}Hz {mode}")
    _CONSOLE.print(f"   📁 {out}")
    _CONSOLE.print(f"   ⚡ Generated in {elapsed_ms:.0f}ms")
    if options.seed is not None:
        _CONSOLE.print(f"   🎲 Seed: {options.seed}")
    if options.has_envelope:
        _CONSOLE.print(
            f"   🎚️  Envelope: {options.fade_in}s fade-in, {options.fade_out}s fade-out"
        )
    for layer in layers:
        _CONSOLE.print(f"   🌲 {layer.description}")


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    try:
        parser = build_parser()
        args = parser.parse_args(argv)

        if not args.noise or not args.duration or not args.out:
            return _usage_error(
                [
                    "❌ Missing required flags. Example usage:",
                    "   brickwave --noise pink --duration 60 --out pink.wav",
                    "",
                    "📖 For help: brickwave --help",
                ]
            )
        if args.noise not in NOISE_TYPES:
            return _usage_error(
                [
                    f"❌ Invalid noise type: {args.noise}",
                    f"   Valid types: {', '.join(NOISE_TYPES)}",
                ]
            )
        if args.duration <= 0:
            return _usage_error(["❌ Duration must be greater than 0"])

        try:
            options = RenderOptions.from_dict(
                {
                    "noise": args.noise,
                    "duration": args.duration,
                    "sample_rate": args.samplerate,
                    "seed": args.seed,
                    "stereo": args.stereo,
                    "fade_in": args.fade_in,
                    "fade_out": args.fade_out,
                    "ambient": args.ambient,
                    "ambient_intensity": args.ambient_intensity,
                    "ambient_variation": args.ambient_variation,
                }
            )
        except InvalidConfigError as exc:
            return _usage_error(["❌ Invalid options:", str(exc)])

        _CONSOLE.print(f"🎵 Generating {options.noise} noise...")
        started = time.perf_counter()
        external = [
            load_external_layer(path, options.sample_count, options.sample_rate)
            for path in args.layer_file
        ]
        with Spinner(f"Rendering {options.duration}s of {options.noise} noise"):
            rendered = render(options, external)
        rendered.save(args.out)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        _summary(options, args.out, elapsed_ms, rendered.layers)
        return 0
    except Exception as exc:
        _LOGGER.warning("brickwave CLI failed: %s", exc, exc_info=debug_enabled())
        log_exception("brickwave CLI", exc)
        render_error("brickwave CLI", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
