"""Request and response models shared by the builder and the transport."""
from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """How a response body is handed back to the caller."""

    STRUCTURED = "structured"
    RAW = "raw"


@dataclass(frozen=True)
class SignedRequest:
    """A fully signed MWS request, ready for one HTTPS exchange."""

    action: str
    host: str
    path: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)
    method: str = "POST"

    @property
    def url(self) -> str:
        return f"https://{self.host}{self.path}"

    @property
    def query(self) -> str:
        return self.path.partition("?")[2]
