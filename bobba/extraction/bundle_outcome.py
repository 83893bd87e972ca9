# Credits: Bobba Research Team - 2026

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class AssetFailure:
    asset_id: int
    tag_kind: str  # "binary" or "bitmap"
    error: str
    reason: str
    sample: bytes = b""

    @classmethod
    def from_exception(cls, asset_id: int, tag_kind: str, exception: Exception, sample: bytes = b""):
        return cls(asset_id, tag_kind, type(exception).__name__, str(exception), sample)


@dataclass(frozen=True)
class BundleFailure:
    stage: str  # "read", "symbols" or "io"
    error: str
    reason: str

    @classmethod
    def from_exception(cls, stage: str, exception: Exception):
        return cls(stage, type(exception).__name__, str(exception))


@dataclass
class BundleOutcome:
    base_name: str
    written: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    failures: list = field(default_factory=list)
    fatal: Optional[BundleFailure] = None

    @property
    def ok(self):
        return self.fatal is None

    @property
    def written_count(self):
        return len(self.written)

    @property
    def skipped_count(self):
        return len(self.skipped)

    @property
    def failed_count(self):
        return len(self.failures) + (0 if self.ok else 1)

    def counts(self):
        return {"written": self.written_count, "skipped": self.skipped_count, "failed": self.failed_count}
