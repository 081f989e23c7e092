"""Domain model for the daily puzzle artifact."""

from dataclasses import dataclass, field
from typing import List

from .combination import Operator


@dataclass(frozen=True)
class SolutionStep:
    """One combination in a puzzle's canonical solution path."""

    element_a: str
    element_b: str
    result: str
    operator: Operator = Operator.COMBINE

    @classmethod
    def from_dict(cls, data: dict) -> "SolutionStep":
        return cls(
            element_a=data["elementA"],
            element_b=data["elementB"],
            result=data["result"],
            operator=Operator.from_symbol(data.get("operator")),
        )

    def to_dict(self) -> dict:
        return {
            "elementA": self.element_a,
            "elementB": self.element_b,
            "result": self.result,
            "operator": self.operator.value,
        }


@dataclass(frozen=True)
class Puzzle:
    """
    Read-only puzzle fetched for one calendar day (America/New_York).

    The solution path is a DAG rooted in starter elements whose final
    result is the target.
    """

    date: str
    number: int
    target_element: str
    target_emoji: str
    par_moves: int
    solution_path: List[SolutionStep] = field(default_factory=list)

    def __post_init__(self):
        """Validate puzzle data on creation."""
        if not self.target_element or not self.target_element.strip():
            raise ValueError("Puzzle target element cannot be empty")

        if self.par_moves < 1:
            raise ValueError(f"Par must be a positive integer, got {self.par_moves}")

    def is_target(self, name: str) -> bool:
        """Check if a name is the target (case-insensitive)."""
        return self.target_element.lower().strip() == name.lower().strip()

    @classmethod
    def from_dict(cls, data: dict) -> "Puzzle":
        return cls(
            date=data["date"],
            number=int(data.get("number", 0)),
            target_element=data["targetElement"],
            target_emoji=data.get("targetEmoji") or "",
            par_moves=int(data["parMoves"]),
            solution_path=[SolutionStep.from_dict(step) for step in data.get("solutionPath") or []],
        )
