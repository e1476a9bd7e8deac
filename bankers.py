#!/usr/bin/env python3
"""
Banker's Algorithm Allocator
Main entry point: interactive menu and one-shot commands.

Educational tool for demonstrating deadlock avoidance.
"""

import argparse
import sys
from typing import Callable, List, Optional

from models.allocation_state import ConstructionError
from algorithms.avoidance import InvalidRequestError
from algorithms.engine import AllocatorEngine
from utils.formatter import format_state, format_safety, format_outcome
from utils.logger import AllocatorLogger
from utils.scenario_loader import load_scenario, get_scenario_description, ScenarioLoadError
from analysis.events import EventLog


MENU = (
    "Banker's Algorithm Test Menu:\n"
    "1. Check for safe sequence\n"
    "2. User-defined resource request\n"
    "3. Exit\n"
    "4. Show session history"
)


def run_safety_check(engine: AllocatorEngine, logger: AllocatorLogger, event_log: EventLog) -> bool:
    """Run the safety check, print and record the result."""
    is_safe, sequence = engine.safety_check()
    logger.log_safety(is_safe, sequence)
    logger.log(format_safety(is_safe, sequence) + "\n")
    event_log.record_safety(is_safe, sequence)
    return is_safe


def run_request(
    engine: AllocatorEngine,
    pid: int,
    request: List[int],
    logger: AllocatorLogger,
    event_log: EventLog
) -> bool:
    """
    Evaluate one request, print and record the outcome.

    Returns:
        True if the request was granted

    Raises:
        InvalidRequestError: If pid or request is malformed
    """
    outcome = engine.request(pid, request)
    logger.log_request(outcome)
    logger.log(format_outcome(outcome) + "\n")
    event_log.record_outcome(outcome)

    if outcome.granted:
        logger.log_state(format_state(engine.snapshot()))
    return outcome.granted


def _parse_ints(line: str) -> List[int]:
    """Parse whitespace/comma separated integers."""
    return [int(token) for token in line.replace(",", " ").split()]


def run_menu(
    engine: AllocatorEngine,
    logger: AllocatorLogger,
    event_log: Optional[EventLog] = None,
    read_line: Callable[[str], str] = input
) -> EventLog:
    """
    Run the interactive menu until the user exits or input ends.

    Args:
        engine: Engine to operate on
        logger: Output sink
        event_log: Session history (a new one is created if omitted)
        read_line: Prompt-and-read function (defaults to input())

    Returns:
        EventLog of every decision made in the session
    """
    if event_log is None:
        event_log = EventLog()

    n, m = engine.num_processes, engine.num_resources

    while True:
        logger.log(MENU)

        try:
            choice = read_line("Enter your choice (1-4): ").strip()

            if choice == "1":
                run_safety_check(engine, logger, event_log)

            elif choice == "2":
                pid_text = read_line(f"Enter process ID (0-{n - 1}): ")
                try:
                    pid = int(pid_text.strip())
                except ValueError:
                    logger.log("Invalid PID.\n")
                    continue
                if pid < 0 or pid >= n:
                    logger.log("Invalid PID.\n")
                    continue

                request_text = read_line(f"Enter request for P{pid} ({m} integers): ")
                try:
                    request = _parse_ints(request_text)
                except ValueError:
                    logger.log(f"Invalid request: expected {m} integers.\n")
                    continue

                try:
                    run_request(engine, pid, request, logger, event_log)
                except InvalidRequestError as e:
                    logger.log(f"Invalid request: {e}\n")

            elif choice == "3":
                break

            elif choice == "4":
                history = event_log.display()
                logger.log((history if history else "No events yet.") + "\n")

            else:
                logger.log("Invalid choice.\n")

        except EOFError:
            break

    return event_log


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the allocator."""
    parser = argparse.ArgumentParser(
        description="Banker's Algorithm deadlock-avoidance allocator"
    )
    parser.add_argument(
        '--scenario',
        type=str,
        default=None,
        help='Path to scenario JSON file (default: built-in 5x3 example)'
    )
    parser.add_argument(
        '--check',
        action='store_true',
        help='Run one safety check and exit (exit code 1 if unsafe)'
    )
    parser.add_argument(
        '--request',
        type=int,
        nargs='+',
        metavar='N',
        help='Evaluate one request "PID R0 R1 ..." and exit (exit code 1 if not granted)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write output to this file'
    )

    args = parser.parse_args(argv)

    # Validate arguments
    if args.check and args.request:
        parser.error('--check and --request are mutually exclusive')
    if args.request is not None and len(args.request) < 2:
        parser.error('--request needs a PID followed by one amount per resource class')

    logger = AllocatorLogger(verbose=args.verbose, log_file=args.log_file)

    try:
        # Load scenario
        if args.scenario:
            try:
                engine = load_scenario(args.scenario)
            except ScenarioLoadError as e:
                logger.log(f"Failed to load scenario: {e}", "error")
                return 2
            description = get_scenario_description(args.scenario)
            if description:
                logger.log(f"Scenario: {description}", "debug")
        else:
            try:
                engine = AllocatorEngine.canonical()
            except ConstructionError as e:
                logger.log(f"Failed to build default scenario: {e}", "error")
                return 2

        event_log = EventLog()
        logger.log_state(format_state(engine.snapshot()))

        if args.check:
            return 0 if run_safety_check(engine, logger, event_log) else 1

        if args.request:
            pid, request = args.request[0], args.request[1:]
            try:
                return 0 if run_request(engine, pid, request, logger, event_log) else 1
            except InvalidRequestError as e:
                logger.log(f"Invalid request: {e}", "error")
                return 2

        run_menu(engine, logger, event_log)
        return 0
    finally:
        logger.close()


if __name__ == '__main__':
    sys.exit(main())
