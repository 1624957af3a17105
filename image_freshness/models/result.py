from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from image_freshness.models.image_reference import ImageReference
from image_freshness.models.tag_version import TagVersion
from image_freshness.models.workload import WorkloadRef


class SkipReason(str, Enum):
    UNPARSABLE = "unparsable"
    DIGEST_PINNED = "digest-pinned"
    NON_SEMVER = "non-semver"
    CONNECTION_FAILURE = "connection-failure"
    LISTING_FAILURE = "listing-failure"


@dataclass(frozen=True)
class FreshnessResult:
    image: str
    reference: ImageReference
    deployed: TagVersion
    newer: list[TagVersion]
    workloads: list[WorkloadRef]

    @property
    def is_outdated(self) -> bool:
        return bool(self.newer)

    @property
    def latest(self) -> TagVersion | None:
        """Highest newer tag, if any."""
        return max(self.newer, default=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "image": self.image,
            "reference": str(self.reference),
            "deployed": {"tag": self.deployed.tag, "version": str(self.deployed)},
            "newer": [{"tag": t.tag, "version": str(t)} for t in self.newer],
            "workloads": [str(w) for w in self.workloads],
        }


@dataclass(frozen=True)
class SkippedImage:
    image: str
    reason: SkipReason
    detail: str
    workloads: list[WorkloadRef] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "image": self.image,
            "reason": self.reason.value,
            "detail": self.detail,
            "workloads": [str(w) for w in self.workloads],
        }


@dataclass(frozen=True)
class EvaluationReport:
    results: list[FreshnessResult]
    skipped: list[SkippedImage]

    @property
    def outdated(self) -> list[FreshnessResult]:
        return [r for r in self.results if r.is_outdated]

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "skipped": [s.to_dict() for s in self.skipped],
        }
