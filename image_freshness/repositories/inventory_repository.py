import os

from ruamel.yaml import YAML
from image_freshness.models import InventoryFile, WorkloadUsage
from image_freshness.utils.yaml_loader import get_yaml_instance


class InventoryRepository:
    def __init__(self, file_path: str):
        self.file_path: str = file_path
        self.yaml: YAML = get_yaml_instance()

    def find_all(self) -> WorkloadUsage:
        if not os.path.isfile(self.file_path):
            return {}
        with open(self.file_path, "r") as f:
            data = self.yaml.load(f)
            try:
                parsed = InventoryFile(**data)
            except Exception as e:
                raise ValueError(f"Invalid inventory file: {e}") from e

        usage: WorkloadUsage = {}
        for entry in parsed.images:
            workloads = usage.setdefault(entry.image, [])
            for workload in entry.workloads:
                if workload not in workloads:
                    workloads.append(workload)
        return usage
