import asyncio
import logging

from .models import PortState

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1.0


async def probe_port(host: str, port: int, timeout: float = DEFAULT_TIMEOUT) -> PortState:
    """
    Single TCP connect attempt bounded by `timeout`.

    Refused, timed out, unreachable and unresolvable all report closed;
    no retry is attempted. An accepted connection is closed immediately.
    """
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout
        )
    except (asyncio.TimeoutError, OSError, UnicodeError) as e:
        logger.debug("Probe %s:%d closed (%s)", host, port, type(e).__name__)
        return PortState(port=port, open=False)

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        # peer reset during close; the connect already succeeded
        pass
    return PortState(port=port, open=True)
