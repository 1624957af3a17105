from pydantic.dataclasses import dataclass

from image_freshness.models.workload import WorkloadRef

@dataclass(frozen=True)
class ImageUsage:
    image: str
    workloads: list[WorkloadRef]

@dataclass(frozen=True)
class InventoryFile:
    images: list[ImageUsage]
