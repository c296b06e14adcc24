"""Port allocation within a fixed range.

Several editor instances on one machine share the same range, so the
listener claims the first port nobody else holds.
"""

import errno
import logging
import socket
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 1.0


class PortUnavailableError(Exception):
    """No port in the configured range could be claimed."""


@dataclass(frozen=True)
class PortRange:
    """Inclusive range of candidate ports."""

    start: int
    end: int

    @property
    def is_valid(self) -> bool:
        return 0 <= self.start <= self.end <= 65535

    def __iter__(self):
        return iter(range(self.start, self.end + 1))

    def __len__(self) -> int:
        return max(0, self.end - self.start + 1)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def is_port_available(
    port: int,
    host: str = "127.0.0.1",
    timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
) -> bool:
    """Probe a port by binding and listening on it, then releasing it.

    Any failure, including a probe that does not finish within
    ``timeout``, counts as occupied. The probe leaves nothing bound.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout)
        sock.bind((host, port))
        sock.listen(1)
        return True
    except OSError as e:
        if e.errno not in (errno.EADDRINUSE, errno.EACCES):
            logger.debug("port_probe_failed", extra={"port": port, "error": str(e)})
        return False
    finally:
        sock.close()


def find_available_port(
    port_range: PortRange,
    timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    host: str = "127.0.0.1",
    probe: Callable[[int, str, float], bool] = is_port_available,
) -> int | None:
    """Return the lowest port in the range whose probe succeeds.

    Candidates are tried one at a time in ascending order. Returns None
    when every probe fails or the range is invalid.
    """
    if not port_range.is_valid:
        logger.error("invalid_port_range", extra={"port_range": str(port_range)})
        return None

    for port in port_range:
        if probe(port, host, timeout):
            logger.debug("port_available", extra={"port": port})
            return port
        logger.debug("port_in_use", extra={"port": port})

    logger.warning("port_range_exhausted", extra={"port_range": str(port_range)})
    return None
