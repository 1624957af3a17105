from pydantic import Field
from pydantic.dataclasses import dataclass

@dataclass(frozen=True)
class AuditSettings:
    kubeconfig: str | None = None
    inventory_file: str | None = None
    timeout: float = Field(default=30.0, gt=0)
    max_workers: int = Field(default=8, gt=0)
    json_output: bool = False
