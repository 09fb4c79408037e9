"""Data models for taints, tolerations and placement decisions."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from pod_placement.exceptions import InvalidTolerationSpec


class TaintEffect(str, Enum):
    """Severity of a taint, shared by tolerations that target it."""

    NO_SCHEDULE = "NoSchedule"
    PREFER_NO_SCHEDULE = "PreferNoSchedule"
    NO_EXECUTE = "NoExecute"

    @property
    def severity(self) -> int:
        """Rank used to order violations, hardest first."""
        return {
            TaintEffect.NO_EXECUTE: 2,
            TaintEffect.NO_SCHEDULE: 1,
            TaintEffect.PREFER_NO_SCHEDULE: 0,
        }[self]

    @property
    def is_hard(self) -> bool:
        """Whether an untolerated taint with this effect vetoes placement."""
        return self is not TaintEffect.PREFER_NO_SCHEDULE


class TolerationOperator(str, Enum):
    """How a toleration compares its value against a taint."""

    EXISTS = "Exists"
    EQUAL = "Equal"


class PlacementDecision(str, Enum):
    """Outcome of matching a pod's tolerations against a node's taints."""

    SCHEDULABLE = "Schedulable"
    SCHEDULABLE_EVICTABLE = "SchedulableEvictable"
    REJECTED = "Rejected"


class Taint(BaseModel):
    """Kubernetes node taint."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str | None = None
    effect: TaintEffect

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Validate taint key is not empty."""
        if not v:
            raise ValueError("taint key cannot be empty")
        return v

    def __str__(self) -> str:
        return f"{self.key}={self.value or ''}:{self.effect.value}"


class Toleration(BaseModel):
    """Pod toleration.

    An empty ``key`` matches every taint key and a missing ``effect`` matches
    every effect. ``Equal`` needs a value to compare against; ``Exists``
    keeps whatever value it was given but never looks at it.
    """

    model_config = ConfigDict(frozen=True)

    key: str = ""
    operator: TolerationOperator = TolerationOperator.EQUAL
    value: str = ""
    effect: TaintEffect | None = None

    @field_validator("key", "value", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        """Treat explicit nulls from manifests as empty strings."""
        return "" if v is None else v

    @field_validator("effect", mode="before")
    @classmethod
    def empty_effect_as_wildcard(cls, v):
        """An empty effect string means any effect."""
        return None if v == "" else v

    @model_validator(mode="after")
    def validate_operator_value(self) -> "Toleration":
        """Reject Equal tolerations that carry no value."""
        if self.operator is TolerationOperator.EQUAL and not self.value:
            raise InvalidTolerationSpec(
                f"Toleration for key '{self.key or '*'}' uses operator Equal without a value",
                "Set a value to compare against, or use operator Exists to match any value",
            )
        return self

    def __str__(self) -> str:
        key = self.key or "*"
        effect = self.effect.value if self.effect else "*"
        if self.operator is TolerationOperator.EXISTS:
            return f"{key} Exists:{effect}"
        return f"{key}={self.value}:{effect}"


class PlacementReport(BaseModel):
    """Placement decision together with every taint that was not tolerated."""

    model_config = ConfigDict(frozen=True)

    decision: PlacementDecision
    violations: tuple[Taint, ...] = ()
    evict: bool = False

    @property
    def schedulable(self) -> bool:
        return self.decision is not PlacementDecision.REJECTED
