from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Optional, Sequence

from . import __version__
from .config import ConfigManager
from .core import ContractViolationError, InvalidPhaseError, LevelCatalog, SessionController, SourceScanner
from .models import RoundPhase
from .utils.logger import get_logger

HELP_TEXT = (
    "Commands: l N (move tile N left), r N (move tile N right), o 3 1 2 (set order), "
    "d (toggle dates), c (check), n (next level), a (acknowledge), q (quit)"
)


def main(argv: Optional[Sequence[str]] = None, input_func: Callable[[str], str] = input) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    print(f"photo-chrono v{__version__}")
    config = ConfigManager(Path(args.config) if args.config else None)
    errors = config.validate_config()
    if errors:
        for error in errors:
            print(f"Config error: {error}")
        return 2

    if args.command in {None, "levels"}:
        _print_levels(config)
        return 0
    return _run_play(args, config, input_func)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photo-chrono")
    parser.add_argument("--config", help="Path to config file", default=None)

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("levels", help="List levels")

    play = subparsers.add_parser("play", help="Play in the terminal")
    source_group = play.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--source", help="Folder with your photos")
    source_group.add_argument("--preset", action="store_true", help="Use the demo photo set")
    play.add_argument("--mobile", action="store_true", help="Use the smaller preview size")

    return parser


def _print_levels(config: ConfigManager) -> None:
    catalog = LevelCatalog.from_config(config)
    for index, level in enumerate(catalog, start=1):
        print(
            f"{index}. {level.display_name} - {level.required_photo_count} photos, "
            f"{level.time_limit_seconds}s, {level.base_points} pts"
        )


def _print_board(controller: SessionController) -> None:
    snapshot = controller.snapshot()
    print(
        f"[{snapshot['level_number']}/{snapshot['level_count']}] {snapshot['level_name']} | "
        f"Score {snapshot['cumulative_score']} | "
        f"{snapshot['time_remaining_seconds']}s ({snapshot['time_band']})"
    )
    for tile in snapshot["tiles"]:
        date_text = f"  {tile['capture_date']}" if "capture_date" in tile else ""
        print(f"  {tile['position']}. {tile['display_url']}{date_text}")
    notice = snapshot["notice"]
    if notice:
        print(f"! {notice['message']}")


def _start_round(controller: SessionController, args: argparse.Namespace, scanner: SourceScanner) -> None:
    if args.preset:
        controller.start_preset_round()
    else:
        controller.start_custom_round(scanner.scan(Path(args.source)))


def _run_play(
    args: argparse.Namespace,
    config: ConfigManager,
    input_func: Callable[[str], str],
) -> int:
    log_file = config.get("logging.file")
    logger = get_logger("cli", Path(log_file) if log_file else None)
    controller = SessionController(config, layout="mobile" if args.mobile else None, logger=logger)
    scanner = SourceScanner(config, logger)
    print(HELP_TEXT)
    try:
        _start_round(controller, args, scanner)
        _print_board(controller)
        while True:
            try:
                line = input_func("> ").strip()
            except EOFError:
                break
            if not line:
                continue
            command, *params = line.split()
            if command == "q":
                break
            try:
                if command == "l":
                    controller.move_left(int(params[0]) - 1)
                elif command == "r":
                    controller.move_right(int(params[0]) - 1)
                elif command == "o":
                    ids = controller.ordering.ids
                    controller.replace_order([ids[int(item) - 1] for item in params])
                elif command == "d":
                    controller.toggle_date_display()
                elif command == "c":
                    if controller.request_check():
                        print(f"Round won! Time bonus: {controller.state.last_round_bonus}")
                elif command == "n":
                    controller.advance_to_next_level()
                    if controller.phase == RoundPhase.IDLE and controller.notice is None:
                        print("All levels complete!")
                        _start_round(controller, args, scanner)
                elif command == "a":
                    controller.acknowledge_notice()
                    _start_round(controller, args, scanner)
                else:
                    print(HELP_TEXT)
            except (ContractViolationError, InvalidPhaseError, IndexError, ValueError) as exc:
                print(f"Cannot do that: {exc}")
            _print_board(controller)
    finally:
        controller.close()
    return 0
