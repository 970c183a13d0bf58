"""
Step outcomes for the erasure workflow.

Each step is declared FATAL or ADVISORY. A failed FATAL outcome aborts the
request; a failed ADVISORY outcome is logged and kept on the report only.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class FailurePolicy(str, Enum):
    FATAL = "fatal"
    ADVISORY = "advisory"


@dataclass
class StepOutcome:
    step: str
    policy: FailurePolicy
    ok: bool = True
    result: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def succeeded(cls, step: str, policy: FailurePolicy, result: Any = None) -> "StepOutcome":
        return cls(step=step, policy=policy, ok=True, result=result)

    @classmethod
    def failed(cls, step: str, policy: FailurePolicy, error: BaseException) -> "StepOutcome":
        return cls(step=step, policy=policy, ok=False, error=error)

    @property
    def is_fatal(self) -> bool:
        return not self.ok and self.policy is FailurePolicy.FATAL

    @property
    def is_warning(self) -> bool:
        return not self.ok and self.policy is FailurePolicy.ADVISORY


@dataclass
class ErasureReport:
    uid: str
    outcomes: List[StepOutcome] = field(default_factory=list)

    def record(self, outcome: StepOutcome) -> StepOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def warnings(self) -> List[StepOutcome]:
        return [o for o in self.outcomes if o.is_warning]
