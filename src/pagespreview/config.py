"""Startup configuration for a preview run."""

from dataclasses import dataclass
from pathlib import Path

from pagespreview.errors import ConfigError

DEFAULT_ADDR = "localhost:8080"
DEFAULT_OUTER_NAME = "github-pages.zip"
DEFAULT_INNER_NAME = "artifact.tar"
DEFAULT_HOST = "localhost"


def parse_listen_address(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``:8080``) means ``localhost``. IPv6 hosts must be
    bracketed (``[::1]:8080``).

    Raises:
        ConfigError: If the port is missing or not a valid TCP port
    """
    host, sep, port_text = addr.rpartition(":")
    if not sep:
        raise ConfigError(f"invalid addr: missing port in address {addr!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ConfigError(f"invalid addr: too many colons in address {addr!r}")

    try:
        port = int(port_text)
    except ValueError:
        raise ConfigError(f"invalid addr: bad port {port_text!r}") from None
    if not 0 <= port <= 65535:
        raise ConfigError(f"invalid addr: port {port} out of range")

    return host or DEFAULT_HOST, port


@dataclass(frozen=True)
class PreviewConfig:
    """Everything a preview run needs, fixed at startup."""

    outer_path: Path
    inner_name: str = DEFAULT_INNER_NAME
    host: str = DEFAULT_HOST
    port: int = 8080

    @classmethod
    def from_values(
        cls,
        outer: Path | str,
        addr: str = DEFAULT_ADDR,
        inner_name: str = DEFAULT_INNER_NAME,
    ) -> "PreviewConfig":
        """Build a config from raw command-line values."""
        if not inner_name:
            raise ConfigError("inner archive name must not be empty")
        host, port = parse_listen_address(addr)
        return cls(outer_path=Path(outer), inner_name=inner_name, host=host, port=port)

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"http://{host}:{self.port}/"
