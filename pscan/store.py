"""
Hosts File Module

Persists a HostSet as UTF-8 text, one host per line.
A missing hosts file is an empty list, not an error.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Union

from .errors import HostStoreError
from .hosts import HostSet

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def load_hosts(host_set: HostSet, path: PathLike) -> None:
    r"""
    Appends every line of the hosts file to `host_set` verbatim.

    Lines end at "\n" only; one trailing "\r" per line is dropped, so
    CRLF files load cleanly and any other character stays in the host.

    Duplicates in the file are kept; they only collapse if later passed
    through HostSet.add.
    """
    filepath = Path(path)
    try:
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except FileNotFoundError:
        logger.debug("Hosts file %s does not exist, starting empty", filepath)
        return
    except OSError as e:
        raise HostStoreError(str(filepath), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise HostStoreError(str(filepath), f"not valid UTF-8 ({e.reason} at byte {e.start})") from e

    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    host_set.extend_raw(line[:-1] if line.endswith("\r") else line for line in lines)
    logger.debug("Loaded %d hosts from %s", len(host_set), filepath)


def _file_mode(target: Path) -> int:
    """Mode of the existing file, else 0644 filtered by the umask."""
    try:
        return stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o644 & ~umask


def save_hosts(host_set: HostSet, path: PathLike) -> None:
    """
    Replaces the hosts file with the set's current order.

    Written to a temporary file beside the target and renamed over it,
    so readers never observe a partial file. A symlinked hosts file is
    followed and its target replaced; an existing file keeps its mode.
    """
    filepath = Path(path)
    target = Path(os.path.realpath(filepath))
    output = "".join(f"{host}\n" for host in host_set)

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(output)
        os.chmod(tmp_name, _file_mode(target))
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as e:
        raise HostStoreError(str(filepath), e.strerror or str(e)) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass

    logger.debug("Saved %d hosts to %s", len(host_set), filepath)
