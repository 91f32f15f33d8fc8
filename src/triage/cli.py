"""Interactive command shell for the ED waiting list.

Reads one command per line, either typed at the prompt or replayed from
a command file, and drives a PatientPriorityQueue:

    add <priority-code> <patient-name>
    peek | next | list | stats | help | quit
    load <file> | save <file>
    change <arrival-number> <priority-code>

Example usage:
    $ triage --load tonight.txt
    triage> add urgent Jane Doe
    Added patient "Jane Doe" to the priority system
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, IO, Iterable, List, Optional, Sequence, Set

from triage import __version__
from triage.core.config import (
    TriageConfig,
    configure_logging,
    get_default_config_path,
    load_config,
)
from triage.core.entities import Severity
from triage.core.errors import TriageError
from triage.model.queue import PatientPriorityQueue
from triage.results.collector import ResultsCollector

logger = logging.getLogger(__name__)

HELP_TEXT = """\
add <priority-code> <patient-name>
            Adds the patient to the triage system.
            <priority-code> must be one of the 4 accepted priority codes:
                1. immediate 2. emergency 3. urgent 4. minimal
            <patient-name>: patient's full legal name (may contain spaces)
next        Announces the patient to be seen next. Takes into account the
            type of emergency and the patient's arrival order.
peek        Displays the patient that is next in line, but keeps in queue
list        Displays the list of all patients that are still waiting
            in heap order.
change <arrival-number> <priority-code>
            Changes the priority code of the waiting patient with the
            given arrival number.
load <file> Reads the file and executes the command on each line
save <file> Writes the waiting patients to a file as 'add' commands,
            in arrival order, so the list can be loaded again later
stats       Displays how many patients were admitted and seen, and how
            long they waited (in commands)
help        Displays this menu
quit        Exits the program"""

LIST_HEADER = (
    "  Arrival #   Priority Code   Patient Name\n"
    "+-----------+---------------+--------------+"
)


class TriageShell:
    """Line-oriented dispatcher around a PatientPriorityQueue.

    Every command runs to completion and reports its own errors, so a
    bad line never ends the session.

    Attributes:
        queue: The waiting list being driven.
        config: Shell settings.
        collector: Session statistics.
        tick: Number of commands processed so far.
    """

    def __init__(
        self,
        queue: Optional[PatientPriorityQueue] = None,
        config: Optional[TriageConfig] = None,
        collector: Optional[ResultsCollector] = None,
        out: Optional[IO[str]] = None,
    ):
        self.queue = queue if queue is not None else PatientPriorityQueue()
        self.config = config or TriageConfig()
        self.collector = collector if collector is not None else ResultsCollector()
        self.out = out if out is not None else sys.stdout
        self.tick = 0
        self._loading: Set[str] = set()

        self._commands: Dict[str, Callable[[str], None]] = {
            "add": self.add_patient,
            "peek": self.peek_next,
            "next": self.remove_patient,
            "list": self.show_patient_list,
            "load": self.exec_commands_from_file,
            "save": self.save_patient_list,
            "change": self.change_priority,
            "stats": self.show_stats,
            "help": self.show_help,
        }

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    # ---- dispatch ----

    def process_line(self, line: str) -> bool:
        """Run one command line.

        Args:
            line: Raw input line.

        Returns:
            False if the line asks to quit, True otherwise.
        """
        parts = line.strip().split(None, 1)
        if not parts:
            self._print("Error: no command given.")
            return True

        self.tick += 1
        cmd = parts[0]
        rest = parts[1] if len(parts) > 1 else ""

        if cmd == "quit":
            return False

        handler = self._commands.get(cmd)
        if handler is None:
            self._print(f"Error: unrecognized command: {cmd}")
            return True

        try:
            handler(rest)
        except TriageError as e:
            logger.info(f"Command '{cmd}' failed: {e}")
            self._print(f"Error: {e}")
        return True

    def run(self, lines: Optional[Iterable[str]] = None, preload: Sequence[str] = ()) -> None:
        """Process commands until ``quit`` or end of input.

        Args:
            lines: Lines to process. Reads from the prompt if None.
            preload: Command files replayed before the first line, after
                the configured startup file.
        """
        if self.config.banner:
            self._print("Welcome to the hospital triage system.")

        startup = [self.config.startup_file] if self.config.startup_file else []
        for path in [*startup, *preload]:
            self.exec_commands_from_file(str(path))

        source = lines if lines is not None else self._prompt_lines()
        for line in source:
            if not self.process_line(line):
                break

        if self.config.banner:
            self._print("Exiting hospital triage system.")

    def _prompt_lines(self) -> Iterable[str]:
        while True:
            try:
                yield input(f"\n{self.config.prompt}")
            except EOFError:
                return

    # ---- commands ----

    def add_patient(self, args: str) -> None:
        parts = args.split(None, 1)
        if not parts:
            self._print("Error: no priority code given.")
            return
        if len(parts) < 2 or not parts[1].strip():
            self._print("Error: no patient name given.")
            return

        priority, name = parts[0].strip(), parts[1].strip()
        patient = self.queue.admit(priority, name)
        self.collector.record_admission(self.tick, patient)
        self._print(f'Added patient "{patient.name}" to the priority system')

    def peek_next(self, args: str) -> None:
        patient = self.queue.peek()
        self._print(f"Highest priority patient to be called next: {patient.name}")

    def remove_patient(self, args: str) -> None:
        patient = self.queue.remove_highest()
        self.collector.record_call(self.tick, patient)
        self._print(f"This patient will now be seen: {patient.name}")

    def show_patient_list(self, args: str) -> None:
        self._print(f"# patients waiting: {self.queue.size()}")
        self._print(LIST_HEADER)
        for patient in self.queue.enumerate_heap_order():
            self._print(
                f"  {patient.arrival_sequence:>9}   "
                f"{patient.display_severity():<13}   {patient.name}"
            )

    def change_priority(self, args: str) -> None:
        parts = args.split()
        if not parts:
            self._print("Error: no patient id provided.")
            return
        if len(parts) < 2:
            self._print("Error: no priority code given.")
            return
        if len(parts) > 2:
            self._print("Error: too many arguments for change.")
            return

        try:
            arrival_sequence = int(parts[0])
        except ValueError:
            self._print(f"Error: patient id must be a whole number: {parts[0]}")
            return

        change = self.queue.update_priority(arrival_sequence, parts[1])
        self.collector.record_change(self.tick, change)
        self._print(change.describe())

    def exec_commands_from_file(self, args: str) -> None:
        """Replay each line of a file as if it had been typed.

        Per-line errors are reported and the replay carries on. A
        ``quit`` line in the file does not end the session.
        """
        path = args.strip()
        if not path:
            self._print("Error: no file name given.")
            return

        try:
            with open(path, encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not open command file {path}: {e}")
            self._print("Error: could not open file.")
            return

        # A file that loads itself, directly or not, would never finish
        key = str(Path(path).resolve())
        if key in self._loading:
            self._print(f"Error: {path} is already being loaded.")
            return

        logger.info(f"Replaying {len(lines)} lines from {path}")
        self._loading.add(key)
        try:
            for line in lines:
                if self.config.echo_loaded_lines:
                    self._print(f"\n{self.config.prompt}{line}")
                self.process_line(line)
        finally:
            self._loading.discard(key)

    def save_patient_list(self, args: str) -> None:
        path = args.strip()
        if not path:
            self._print("Error: no file name given.")
            return

        try:
            with open(path, "w", encoding="utf-8") as f:
                count = self.queue.save(f)
        except OSError as e:
            logger.warning(f"Could not write {path}: {e}")
            self._print("Error: could not write file.")
            return

        logger.info(f"Saved {count} patients to {path}")
        self._print(f"Saved {count} patients to {path}")

    def show_stats(self, args: str) -> None:
        metrics = self.collector.compute_metrics()
        self._print(
            f"Admitted: {metrics['admitted']}  Seen: {metrics['seen']}  "
            f"Waiting: {self.queue.size()}  Changes: {metrics['changes']}"
        )
        if metrics["mean_wait"] is None:
            self._print("No patients have been seen yet.")
            return

        self._print(
            f"Wait (commands): mean {metrics['mean_wait']:.1f}, "
            f"median {metrics['median_wait']:.1f}, "
            f"p95 {metrics['p95_wait']:.1f}, max {metrics['max_wait']:.0f}"
        )
        for severity in Severity:
            label = severity.label
            mean = metrics[f"{label}_mean_wait"]
            mean_text = f"{mean:.1f}" if mean is not None else "-"
            self._print(
                f"  {label:<10} admitted {metrics[f'admitted_{label}']:>3}  "
                f"seen {metrics[f'seen_{label}']:>3}  mean wait {mean_text}"
            )

    def show_help(self, args: str) -> None:
        self._print(HELP_TEXT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="triage",
        description="Hospital emergency-room triage waiting list.",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML or JSON settings file")
    parser.add_argument("--load", action="append", default=[], metavar="FILE",
                        help="command file to replay before the prompt (repeatable)")
    parser.add_argument("--log-level", default=None,
                        help="logging level, overrides the config file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point."""
    args = build_parser().parse_args(argv)

    config_path = args.config or get_default_config_path()
    try:
        config = load_config(config_path) if config_path else TriageConfig()
        if args.log_level:
            config = replace(config, log_level=args.log_level)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level)
    if config_path:
        logger.info(f"Loaded config from {config_path}")

    shell = TriageShell(config=config)
    shell.run(preload=args.load)
    return 0


if __name__ == "__main__":
    sys.exit(main())
