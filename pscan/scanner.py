import asyncio
import logging
import socket
import time
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .hosts import HostSet
from .models import PortState, ScanResult
from .probe import DEFAULT_TIMEOUT, probe_port

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONCURRENCY = 100


async def resolve_host(host: str) -> bool:
    """True if the platform resolver can map `host` to an address."""
    loop = asyncio.get_running_loop()
    try:
        await loop.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError) as e:
        logger.debug("Could not resolve %s: %s", host, e)
        return False
    return True


class ScanEngine:
    """
    Scans every host of a HostSet against an ordered list of TCP ports.

    Work runs on a bounded pool of `concurrency` consumers fed from a queue.
    Each job writes into a slot addressed by (host index, port index), so
    the returned results follow the host order at call time and the
    caller's port order regardless of completion order.

    `on_progress` receives the number of (host, port) pairs just finished,
    skipped pairs of unresolvable hosts included.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        concurrency: int = DEFAULT_CONCURRENCY,
        on_progress: Optional[Callable[[int], None]] = None
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.timeout = timeout
        self.concurrency = concurrency
        self.on_progress = on_progress

    async def _drain(self, jobs: Iterable[T], handler: Callable[[T], Awaitable[None]]) -> None:
        """
        Runs `handler` over `jobs` with at most `concurrency` in flight.
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.concurrency * 2)

        async def producer():
            for job in jobs:
                await queue.put(job)
            # One sentinel per consumer
            for _ in range(self.concurrency):
                await queue.put(None)

        async def consumer():
            while True:
                job = await queue.get()
                if job is None:
                    queue.task_done()
                    break
                try:
                    await handler(job)
                finally:
                    queue.task_done()

        consumers = [asyncio.create_task(consumer()) for _ in range(self.concurrency)]
        producer_task = asyncio.create_task(producer())
        tasks = [producer_task, *consumers]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def run(self, host_set: HostSet, ports: Sequence[int]) -> List[ScanResult]:
        """
        Resolves each host, then probes every port of every resolvable host.

        Unresolvable hosts yield a result with resolvable=False and no port
        states. Returns only after every host has been processed.
        """
        for port in ports:
            if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
                raise ValueError(f"Invalid port: {port!r}")

        # Snapshot so the slot indices stay valid for the whole run
        hosts = list(host_set)
        ports = list(ports)
        logger.info("Scanning %d hosts on %d ports", len(hosts), len(ports))
        start = time.time()

        resolved: List[bool] = [False] * len(hosts)

        async def resolve_job(idx: int) -> None:
            resolved[idx] = await resolve_host(hosts[idx])

        await self._drain(range(len(hosts)), resolve_job)

        skipped = resolved.count(False) * len(ports)
        if skipped and self.on_progress:
            self.on_progress(skipped)

        slots: List[List[Optional[PortState]]] = [
            [None] * len(ports) if ok else [] for ok in resolved
        ]

        async def probe_job(job: Tuple[int, int]) -> None:
            host_idx, port_idx = job
            slots[host_idx][port_idx] = await probe_port(
                hosts[host_idx], ports[port_idx], self.timeout
            )
            if self.on_progress:
                self.on_progress(1)

        pairs = (
            (h, p)
            for h in range(len(hosts)) if resolved[h]
            for p in range(len(ports))
        )
        await self._drain(pairs, probe_job)

        results = [
            ScanResult(host=host, resolvable=ok, port_states=tuple(slots[i]))
            for i, (host, ok) in enumerate(zip(hosts, resolved))
        ]
        logger.info(
            "Scan finished in %.2fs: %d/%d hosts resolvable",
            time.time() - start, sum(resolved), len(hosts)
        )
        return results


def run_scan(
    host_set: HostSet,
    ports: Sequence[int],
    timeout: float = DEFAULT_TIMEOUT,
    concurrency: int = DEFAULT_CONCURRENCY
) -> List[ScanResult]:
    """Blocking wrapper around ScanEngine.run for callers outside an event loop."""
    engine = ScanEngine(timeout=timeout, concurrency=concurrency)
    return asyncio.run(engine.run(host_set, ports))
