from typing import Iterable, Sequence

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn, TimeRemainingColumn

from .models import ScanResult

console = Console()


def format_state(is_open: bool) -> str:
    return "open" if is_open else "closed"


class ScannerUI:
    def __init__(self, console: Console = console):
        self.console = console

    def create_progress(self):
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True
        )

    def display_hosts(self, hosts: Iterable[str]):
        for host in hosts:
            self.console.print(host, markup=False, highlight=False)

    def host_added(self, host: str):
        self.console.print(f"Added host: {host}", markup=False, highlight=False)

    def host_deleted(self, host: str):
        self.console.print(f"Deleted host: {host}", markup=False, highlight=False)

    def display_results(self, results: Sequence[ScanResult]):
        """
        Prints one block per host: the host name, then either a not-found
        marker or one line per port in scan order.
        """
        for i, res in enumerate(results):
            if i:
                self.console.print()
            self.console.print(f"{res.host}:", style="bold", markup=False, highlight=False)
            if not res.resolvable:
                self.console.print("    Host not found", style="red", highlight=False)
                continue
            for ps in res.port_states:
                state = format_state(ps.open)
                self.console.print(
                    f"\t{ps.port}: {state}",
                    style="green" if ps.open else "dim",
                    highlight=False
                )

    def show_message(self, msg, style="bold red"):
        self.console.print(str(msg), style=style, markup=False, highlight=False)
