from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class PortState:
    """Open/closed verdict for one TCP port"""
    port: int
    open: bool


@dataclass(frozen=True)
class ScanResult:
    """
    Scan outcome for a single host.

    An unresolvable host never carries port states.
    """
    host: str
    resolvable: bool
    port_states: Tuple[PortState, ...] = field(default_factory=tuple)

    @property
    def open_ports(self) -> List[int]:
        return [ps.port for ps in self.port_states if ps.open]
