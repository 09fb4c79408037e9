"""Data models for pods and nodes as read from manifests."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pod_placement.models.mounts import ConfigVolume, VolumeMount
from pod_placement.models.scheduling import Taint, Toleration


class ContainerSpec(BaseModel):
    """Container of a pod: image, command template and mounts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    image: str | None = None
    command: tuple[str, ...] = ()
    volume_mounts: tuple[VolumeMount, ...] = Field(default=(), alias="volumeMounts")


class PodSpec(BaseModel):
    """Pod definition relevant to placement and configuration mounting."""

    model_config = ConfigDict(frozen=True)

    name: str
    labels: dict[str, str] = Field(default_factory=dict)
    tolerations: tuple[Toleration, ...] = ()
    volumes: tuple[ConfigVolume, ...] = ()
    containers: tuple[ContainerSpec, ...]

    @field_validator("volumes")
    @classmethod
    def validate_unique_volumes(cls, v: tuple[ConfigVolume, ...]) -> tuple[ConfigVolume, ...]:
        """Validate volume names are unique within the pod."""
        seen = set()
        for volume in v:
            if volume.name in seen:
                raise ValueError(f"volume name '{volume.name}' is declared more than once")
            seen.add(volume.name)
        return v

    @field_validator("containers")
    @classmethod
    def validate_containers(cls, v: tuple[ContainerSpec, ...]) -> tuple[ContainerSpec, ...]:
        """Validate the pod declares at least one container."""
        if not v:
            raise ValueError("pod must declare at least one container")
        return v

    def get_container(self, name: str | None = None) -> ContainerSpec | None:
        """Look up a container by name, or the first container if no name is given."""
        if name is None:
            return self.containers[0]
        return next((c for c in self.containers if c.name == name), None)


class NodeSpec(BaseModel):
    """Candidate node with the taints it carries."""

    model_config = ConfigDict(frozen=True)

    name: str
    architecture: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    taints: tuple[Taint, ...] = ()
