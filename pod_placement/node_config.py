"""Node profile configuration.

A node profile describes the node a provider registers: its name,
architecture and taints. The default profile matches the Stackable
provider, which taints its nodes so only pods that explicitly tolerate the
``stackable-linux`` architecture land there.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from pod_placement.exceptions import ConfigurationError
from pod_placement.logging_config import get_logger
from pod_placement.manifest import ARCH_LABEL
from pod_placement.models import NodeSpec, Taint, TaintEffect

logger = get_logger(__name__)

DEFAULT_ARCHITECTURE = "stackable-linux"


class NodeConfig(BaseModel):
    """Node profile configuration."""

    node_name: str
    architecture: str = DEFAULT_ARCHITECTURE
    taint_architecture: bool = True
    extra_taints: list[Taint] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)

    @field_validator("node_name")
    @classmethod
    def validate_node_name(cls, v: str) -> str:
        """Validate node name is not empty."""
        if not v:
            raise ValueError("node_name cannot be empty")
        return v

    @field_validator("architecture")
    @classmethod
    def validate_architecture(cls, v: str) -> str:
        """Validate architecture is not empty."""
        if not v:
            raise ValueError("architecture cannot be empty")
        return v

    def architecture_taints(self) -> list[Taint]:
        """Taints that keep foreign workloads off this architecture."""
        if not self.taint_architecture:
            return []
        return [
            Taint(key=ARCH_LABEL, value=self.architecture, effect=TaintEffect.NO_SCHEDULE),
            Taint(key=ARCH_LABEL, value=self.architecture, effect=TaintEffect.NO_EXECUTE),
        ]

    def to_node(self) -> NodeSpec:
        """Build the node this profile registers."""
        return NodeSpec(
            name=self.node_name,
            architecture=self.architecture,
            labels={**self.labels, ARCH_LABEL: self.architecture},
            taints=self.architecture_taints() + list(self.extra_taints),
        )

    def save(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False
            )
        logger.info(f"Wrote node profile '{self.node_name}' to {path}")

    @classmethod
    def load(cls, path: str | Path) -> "NodeConfig":
        """Load configuration from YAML file.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid
        """
        path = Path(path)
        logger.debug(f"Loading node profile from {path}")

        if not path.exists():
            raise ConfigurationError(
                f"Node profile not found: {path}",
                "Create one with: pod-placement init-node <path>",
            )

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse node profile {path}", str(e)) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Node profile {path} must contain a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            details = "\n".join(
                f"  - {'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid node profile {path}", details) from e
