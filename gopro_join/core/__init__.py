"""Core domain models and protocols."""
from .protocols import (
    Progress,
    Reporter,
    Command,
    Merger,
)
from .identifier import (
    Identifier,
    IdentifierKind,
    Encoding,
    parse_identifier,
    parse_encoding,
)
from .models import (
    Fingerprint,
    Recording,
    RecordingGroup,
    MergeResult,
    ProcessingStats,
)
from .filename import parse_recording
from .config import JoinConfig, ReporterKind, Toolchain

__all__ = [
    # Protocols
    "Progress",
    "Reporter",
    "Command",
    "Merger",
    # Identifiers
    "Identifier",
    "IdentifierKind",
    "Encoding",
    "parse_identifier",
    "parse_encoding",
    # Models
    "Fingerprint",
    "Recording",
    "RecordingGroup",
    "MergeResult",
    "ProcessingStats",
    "parse_recording",
    # Config
    "JoinConfig",
    "ReporterKind",
    "Toolchain",
]
