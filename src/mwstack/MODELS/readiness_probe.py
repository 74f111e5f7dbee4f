"""
Model for a bounded-retry readiness probe bound to one dependency.
"""
from typing import Callable
from pydantic import BaseModel, ConfigDict, Field

HealthCheck = Callable[[], bool]

class ReadinessProbe(BaseModel):
    """
    A pass/fail health check with a fixed poll interval and attempt budget.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    check: HealthCheck
    interval: float = Field(default=2.0, ge=0)
    max_attempts: int = Field(default=10, ge=1)
    hint: str = ""
