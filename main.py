# main.py
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import List, Sequence, TextIO

from debug import COMPONENTS, Debug
from errors import EnigmaError
from machine import Machine
from utilities import format_blocks, load_config, preprocess_message, setup

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()
debug.disable("driver")


@dataclass(slots=True)
class Config:
    """Runtime switches for the message driver."""

    block: int = 5                  # output group size
    normalize: bool = False         # upper-case & drop foreign symbols first
    debug: List[str] = field(default_factory=list)
    log_file: str | None = None


# ────────────────────────────────────────────────────────────────────────
#  1. Message processing
# ────────────────────────────────────────────────────────────────────────


def process(machine: Machine, source: TextIO, sink: TextIO, cfg: Config) -> None:
    """Apply settings lines from SOURCE to MACHINE and write every converted
    message line to SINK in blocks of ``cfg.block``."""
    configured = False
    for number, raw in enumerate(source, start=1):
        line = raw.rstrip("\r\n")

        if line.lstrip().startswith("*"):
            setup(machine, line)
            configured = True
            if debug.on("driver"):
                debug.log("driver", f"line {number}: settings {machine.rotor_settings()}")
            continue
        if not configured:
            raise EnigmaError("Input must start with a settings line")
        if not line.strip():
            sink.write("\n")
            continue

        if cfg.normalize:
            line = preprocess_message(line, machine.alphabet)
        out = machine.convert_message(line)
        sink.write(format_blocks(out, cfg.block) + "\n")
        if debug.on("driver"):
            debug.log("driver", f"line {number}: {len(out.replace(' ', ''))} symbols")

    if not configured:
        raise EnigmaError("Empty input")


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt messages with a rotor machine")
    p.add_argument("config", nargs="?", help="Machine description (.conf text or .json). Default: built-in wheels.")
    p.add_argument("input", nargs="?", help="Message file. Default: standard input.")
    p.add_argument("output", nargs="?", help="Result file. Default: standard output.")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    p.add_argument("--normalize", action="store_true", help="Upper-case input and drop symbols outside the alphabet.")
    p.add_argument("--debug", action="append", default=[], choices=COMPONENTS, metavar="COMPONENT",
                   help=f"Enable debug logging for a component ({', '.join(COMPONENTS)}). Repeatable.")
    p.add_argument("--log-file", metavar="FILE", help="Also write debug logging to FILE.")
    return p.parse_args(argv)


def _open(path: str | None, mode: str, default: TextIO) -> TextIO:
    if path is None:
        return default
    try:
        return open(path, mode, encoding="utf-8")
    except OSError as exc:
        raise EnigmaError(f"could not open {path}: {exc.strerror}") from exc


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def run(args: argparse.Namespace) -> None:
    cfg = Config(
        block=args.block,
        normalize=args.normalize,
        debug=args.debug,
        log_file=args.log_file,
    )
    if cfg.log_file:
        debug.add_file(cfg.log_file)
    debug.enable(*cfg.debug)

    machine = load_config(args.config)
    source = _open(args.input, "r", sys.stdin)
    try:
        sink = _open(args.output, "w", sys.stdout)
        try:
            process(machine, source, sink, cfg)
        except UnicodeDecodeError as exc:
            raise EnigmaError(f"{args.input or 'standard input'} is not UTF-8 text") from exc
        finally:
            if sink is not sys.stdout:
                sink.close()
    finally:
        if source is not sys.stdin:
            source.close()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        run(args)
    except EnigmaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
