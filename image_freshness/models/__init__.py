from .image_reference import ImageReference, parse_image_reference
from .tag_version import TagVersion, coerce_tag
from .workload import WorkloadRef, WorkloadUsage
from .result import EvaluationReport, FreshnessResult, SkippedImage, SkipReason
from .settings import AuditSettings
from .wrappers import ImageUsage, InventoryFile

__all__ = [
    "AuditSettings",
    "EvaluationReport",
    "FreshnessResult",
    "ImageReference",
    "ImageUsage",
    "InventoryFile",
    "SkipReason",
    "SkippedImage",
    "TagVersion",
    "WorkloadRef",
    "WorkloadUsage",
    "coerce_tag",
    "parse_image_reference",
]
