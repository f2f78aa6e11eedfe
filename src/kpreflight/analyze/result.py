"""Analysis result emitted once per rule evaluation."""

from dataclasses import dataclass
from typing import Optional

from kpreflight.core.outcomes import Outcome, Verdict


@dataclass(frozen=True)
class AnalysisResult:
    """
    Operator-facing verdict for one rule.

    A result with no verdict is inconclusive: no outcome matched. It is not
    an error.
    """

    title: str
    icon_key: str = ""
    icon_uri: str = ""
    verdict: Optional[Verdict] = None
    message: str = ""
    uri: str = ""

    @property
    def is_fail(self) -> bool:
        return self.verdict is Verdict.FAIL

    @property
    def is_warn(self) -> bool:
        return self.verdict is Verdict.WARN

    @property
    def is_pass(self) -> bool:
        return self.verdict is Verdict.PASS

    @classmethod
    def from_outcome(cls, outcome: Outcome, title: str, icon_key: str = "", icon_uri: str = "") -> "AnalysisResult":
        return cls(
            title=title,
            icon_key=icon_key,
            icon_uri=icon_uri,
            verdict=outcome.verdict,
            message=outcome.message,
            uri=outcome.uri,
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "icon_key": self.icon_key,
            "icon_uri": self.icon_uri,
            "verdict": self.verdict.value if self.verdict else None,
            "message": self.message,
            "uri": self.uri,
        }
