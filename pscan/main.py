import argparse
import asyncio
import logging
from typing import List, Optional

import yaml
from pydantic import ValidationError

from . import __version__
from .config import DEFAULT_CONFIG_FILE, DEFAULT_PORTS, HostsConfig, ScanConfig, load_config
from .errors import PScanError
from .hosts import HostSet
from .scanner import ScanEngine
from .store import load_hosts, save_hosts
from .ui import ScannerUI
from .utils import parse_ports

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pscan",
        description="pScan - executes TCP port scans on a list of hosts"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE,
                        help=f"YAML config file (default: {DEFAULT_CONFIG_FILE})")
    parser.add_argument("-f", "--hosts-file", default=None,
                        help="Hosts file (default: $PSCAN_HOSTS_FILE or pscan.hosts)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", metavar="command")
    commands.required = True

    hosts_parser = commands.add_parser("hosts", help="Manage the hosts list")
    hosts_commands = hosts_parser.add_subparsers(dest="hosts_command", metavar="action")
    hosts_commands.required = True

    add_parser = hosts_commands.add_parser("add", aliases=["a"], help="Add new host(s) to list")
    add_parser.add_argument("hosts", nargs="+", metavar="host")
    add_parser.set_defaults(action=add_action)

    list_parser = hosts_commands.add_parser("list", aliases=["l"], help="List hosts in hosts list")
    list_parser.set_defaults(action=list_action)

    delete_parser = hosts_commands.add_parser("delete", aliases=["d"], help="Delete host(s) from list")
    delete_parser.add_argument("hosts", nargs="+", metavar="host")
    delete_parser.set_defaults(action=delete_action)

    default_ports = ",".join(str(p) for p in DEFAULT_PORTS)
    scan_parser = commands.add_parser("scan", help="Run a port scan on the hosts list")
    scan_parser.add_argument("-p", "--ports", default=None,
                             help=f"Ports to scan (e.g. 22,80,8000-8010). Default: {default_ports}")
    scan_parser.add_argument("-t", "--timeout", type=float, default=None,
                             help="Connect timeout in seconds (Default: 1.0)")
    scan_parser.add_argument("-c", "--concurrency", type=int, default=None,
                             help="Concurrent probes (Default: 100)")
    scan_parser.set_defaults(action=scan_action)

    return parser


def add_action(ui: ScannerUI, args: argparse.Namespace) -> int:
    hosts_file = load_config(HostsConfig, args.config, hosts_file=args.hosts_file).hosts_file
    hl = HostSet()
    load_hosts(hl, hosts_file)

    for host in args.hosts:
        hl.add(host)
        ui.host_added(host)

    save_hosts(hl, hosts_file)
    return 0


def list_action(ui: ScannerUI, args: argparse.Namespace) -> int:
    hosts_file = load_config(HostsConfig, args.config, hosts_file=args.hosts_file).hosts_file
    hl = HostSet()
    load_hosts(hl, hosts_file)
    ui.display_hosts(hl)
    return 0


def delete_action(ui: ScannerUI, args: argparse.Namespace) -> int:
    hosts_file = load_config(HostsConfig, args.config, hosts_file=args.hosts_file).hosts_file
    hl = HostSet()
    load_hosts(hl, hosts_file)

    for host in args.hosts:
        hl.remove(host)
        ui.host_deleted(host)

    save_hosts(hl, hosts_file)
    return 0


def scan_action(ui: ScannerUI, args: argparse.Namespace) -> int:
    config = load_config(
        ScanConfig,
        args.config,
        hosts_file=args.hosts_file,
        ports=parse_ports(args.ports) if args.ports is not None else None,
        timeout=args.timeout,
        concurrency=args.concurrency
    )

    hl = HostSet()
    load_hosts(hl, config.hosts_file)
    if not len(hl):
        ui.show_message(f"No hosts in {config.hosts_file}", style="yellow")
        return 0

    total = len(hl) * len(config.ports)
    with ui.create_progress() as progress:
        task_id = progress.add_task(f"[cyan]Scanning {total} ports...", total=total)
        engine = ScanEngine(
            timeout=config.timeout,
            concurrency=config.concurrency,
            on_progress=lambda n: progress.advance(task_id, n)
        )
        results = asyncio.run(engine.run(hl, config.ports))

    ui.display_results(results)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    ui = ScannerUI()
    try:
        return args.action(ui, args)
    except KeyboardInterrupt:
        ui.show_message("\nScan interrupted by user.", style="yellow")
        return 130
    except (PScanError, ValidationError, ValueError, yaml.YAMLError) as e:
        logger.debug("Command failed", exc_info=True)
        ui.show_message(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
