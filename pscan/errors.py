class PScanError(Exception):
    """Base class for errors surfaced to the user."""


class HostExistsError(PScanError):
    """Raised when adding a host that is already in the list."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"host already in the list: {host}")


class HostNotFoundError(PScanError):
    """Raised when removing a host that is not in the list."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"host not in the list: {host}")


class HostStoreError(PScanError):
    """Hosts file could not be read or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"hosts file {path}: {reason}")
