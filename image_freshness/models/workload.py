from pydantic.dataclasses import dataclass

@dataclass(frozen=True)
class WorkloadRef:
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


WorkloadUsage = dict[str, list[WorkloadRef]]
