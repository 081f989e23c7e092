"""Domain model for element combinations."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Operator(Enum):
    """Combination operator. Daily puzzles only use COMBINE."""

    COMBINE = "+"
    SUBTRACT = "-"

    @property
    def api_mode(self) -> str:
        """Mode name used by the combination service."""
        return "combine" if self == Operator.COMBINE else "subtract"

    @property
    def is_commutative(self) -> bool:
        return self == Operator.COMBINE

    def toggled(self) -> "Operator":
        return Operator.SUBTRACT if self == Operator.COMBINE else Operator.COMBINE

    @classmethod
    def from_symbol(cls, symbol: Optional[str]) -> "Operator":
        """Parse an operator symbol; missing values mean COMBINE."""
        if symbol in (None, "", "+", "combine"):
            return cls.COMBINE
        if symbol in ("-", "−", "subtract"):
            return cls.SUBTRACT
        raise ValueError(f"Unknown operator: {symbol!r}")


class CombinationStatus(Enum):
    """Status of a combine() call."""

    SUCCESS = "success"  # Oracle answered and the ledger was updated
    FAILED = "failed"  # Oracle or transport failure, ledger untouched
    REJECTED = "rejected"  # Preconditions not met (empty slot, already combining)


class DiscoveryKind(Enum):
    """Outcome signal for a successful combination, highest priority first."""

    FIRST_DISCOVERY = "first_discovery"
    NEW = "new"
    EXISTING = "existing"


@dataclass(frozen=True)
class CombinationKey:
    """
    Uniqueness key for a combination within one game.

    `+` is commutative so its operands are sorted; `-` keeps operand order.
    """

    operator: Operator
    operands: Tuple[str, str]

    @classmethod
    def of(cls, element_a: str, element_b: str, operator: Operator = Operator.COMBINE) -> "CombinationKey":
        a = element_a.lower().strip()
        b = element_b.lower().strip()
        if operator.is_commutative:
            a, b = sorted((a, b))
        return cls(operator=operator, operands=(a, b))

    def __str__(self) -> str:
        return f" {self.operator.value} ".join(self.operands)


@dataclass(frozen=True)
class OracleResult:
    """Successful answer from the combination service."""

    element: str
    emoji: str
    is_first_discovery: bool = False


@dataclass(frozen=True)
class CombinationEntry:
    """One step in the combination path of a game."""

    step: int
    element_a: str
    element_b: str
    result: str
    operator: Operator = Operator.COMBINE
    is_duplicate: bool = False

    @property
    def key(self) -> CombinationKey:
        return CombinationKey.of(self.element_a, self.element_b, self.operator)

    @property
    def display_name(self) -> str:
        return f"{self.element_a} {self.operator.value} {self.element_b} → {self.result}"

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "elementA": self.element_a,
            "elementB": self.element_b,
            "result": self.result,
            "operator": self.operator.value,
            "isDuplicate": self.is_duplicate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CombinationEntry":
        return cls(
            step=int(data.get("step", 0)),
            element_a=data["elementA"],
            element_b=data["elementB"],
            result=data["result"],
            operator=Operator.from_symbol(data.get("operator")),
            is_duplicate=bool(data.get("isDuplicate", False)),
        )


@dataclass(frozen=True)
class CombinationResult:
    """
    Result of a combine() call as exposed to the presentation layer.

    A successful result becomes `lastResult`; failures carry the inline
    error message.
    """

    element_a: str
    element_b: str
    status: CombinationStatus
    operator: Operator = Operator.COMBINE
    element: Optional[str] = None
    emoji: Optional[str] = None
    is_new: bool = False
    is_first_discovery: bool = False
    is_duplicate: bool = False
    error_message: Optional[str] = None

    def __post_init__(self):
        """Validate status consistency."""
        if self.status == CombinationStatus.SUCCESS and not self.element:
            raise ValueError("Success status requires a result element")

        if self.status != CombinationStatus.SUCCESS and self.element is not None:
            raise ValueError("Non-success status cannot have a result element")

    @property
    def is_successful(self) -> bool:
        return self.status == CombinationStatus.SUCCESS

    @property
    def discovery_kind(self) -> Optional[DiscoveryKind]:
        if not self.is_successful:
            return None
        if self.is_first_discovery:
            return DiscoveryKind.FIRST_DISCOVERY
        if self.is_new:
            return DiscoveryKind.NEW
        return DiscoveryKind.EXISTING

    @classmethod
    def success(
        cls,
        element_a: str,
        element_b: str,
        operator: Operator,
        oracle: OracleResult,
        is_new: bool,
        is_duplicate: bool,
    ) -> "CombinationResult":
        return cls(
            element_a=element_a,
            element_b=element_b,
            status=CombinationStatus.SUCCESS,
            operator=operator,
            element=oracle.element,
            emoji=oracle.emoji,
            is_new=is_new,
            is_first_discovery=oracle.is_first_discovery,
            is_duplicate=is_duplicate,
        )

    @classmethod
    def failed(cls, element_a: str, element_b: str, operator: Operator, error: str) -> "CombinationResult":
        return cls(
            element_a=element_a,
            element_b=element_b,
            status=CombinationStatus.FAILED,
            operator=operator,
            error_message=error,
        )

    @classmethod
    def rejected(cls, reason: str) -> "CombinationResult":
        return cls(element_a="", element_b="", status=CombinationStatus.REJECTED, error_message=reason)
