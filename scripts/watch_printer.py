#!/usr/bin/env python3
"""Watch a printer's synchronized snapshot from the terminal.

Polls the control daemon, prints every snapshot change on one line, and
optionally fires a confirmed command.

Usage
-----
::

    export PRINTSYNC_BASE_URL="http://printer.local:8000"
    python scripts/watch_printer.py

Options::

    --interval SECONDS   Poll cadence (default: config / 3.0)
    --duration SECONDS   Stop after this long (default: run until Ctrl-C)
    --command KIND       Run emergency-stop, restart-firmware, home-xy or home-z
    --json               Print snapshots as JSON
    -v / --verbose       Debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from printsync import CommandKind, PrinterClient, PrinterConfig, Snapshot  # noqa: E402


def _format(snapshot: Snapshot) -> str:
    pos = snapshot.position
    link = "online" if snapshot.connectivity else "OFFLINE"
    return (
        f"[{link}] print={snapshot.print_state} mcu={snapshot.mcu.state} "
        f"{snapshot.progress_percent:5.1f}% {snapshot.elapsed_time}/{snapshot.estimated_remaining} "
        f"pos=({pos.x:.2f},{pos.y:.2f},{pos.z:.2f},{pos.e:.2f}) "
        f"extruder={snapshot.extruder.current:.1f}/{snapshot.extruder.target:.1f}"
    )


async def run(args: argparse.Namespace) -> int:
    overrides = {"poll_interval": args.interval} if args.interval else {}
    config = PrinterConfig.from_env(**overrides)

    def _render(snapshot: Snapshot) -> None:
        if args.json:
            print(snapshot.model_dump_json(), flush=True)
        else:
            print(_format(snapshot), flush=True)

    async with PrinterClient(config) as client:
        unsubscribe = client.subscribe(_render)
        client.start_polling()
        try:
            if args.command:
                outcome = await client.run_command(CommandKind(args.command))
                print(f"{outcome.kind.label}: {outcome.message} ({outcome.state}, {outcome.attempts} attempt(s))")
                if not outcome.success:
                    return 1
            if args.duration:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()
        finally:
            unsubscribe()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch a printer snapshot via printsync.")
    parser.add_argument("--interval", type=float, default=None)
    parser.add_argument("--duration", type=float, default=None)
    parser.add_argument("--command", choices=[kind.value for kind in CommandKind], default=None)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
