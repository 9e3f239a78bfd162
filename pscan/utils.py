from typing import List


def parse_ports(port_input: str) -> List[int]:
    """
    Parses a string of ports (spaces, commas, ranges) into a list of integers.
    Order is preserved and repeats are dropped.
    Example: "443 80 1000-1002 80" -> [443, 80, 1000, 1001, 1002]

    Raises:
        ValueError: on an empty spec, a malformed token or a port outside 1-65535
    """
    # Replace commas with spaces to handle both formats
    tokens = port_input.replace(',', ' ').split()
    if not tokens:
        raise ValueError("Empty port specification")

    ports = {}
    for token in tokens:
        if '-' in token:
            start_s, _, end_s = token.partition('-')
            try:
                start, end = int(start_s), int(end_s)
            except ValueError:
                raise ValueError(f"Invalid port range: {token}") from None
            if start < 1 or end > 65535 or start > end:
                raise ValueError(f"Invalid port range: {token}")
            for p in range(start, end + 1):
                ports.setdefault(p, None)
        else:
            try:
                p = int(token)
            except ValueError:
                raise ValueError(f"Invalid port: {token}") from None
            if not 1 <= p <= 65535:
                raise ValueError(f"Invalid port: {token}")
            ports.setdefault(p, None)
    return list(ports)
