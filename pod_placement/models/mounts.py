"""Data models for configuration volumes, mounts and their resolved form."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConfigVolume(BaseModel):
    """Pod volume sourced from a named configuration bundle (ConfigMap)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    config_map_ref: str = Field(alias="configMapRef")

    @field_validator("name", "config_map_ref")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate names are not empty."""
        if not v:
            raise ValueError("volume name and configMapRef cannot be empty")
        return v


class VolumeMount(BaseModel):
    """Container mount of a pod volume."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    mount_path: str = Field(alias="mountPath")

    @field_validator("mount_path")
    @classmethod
    def validate_mount_path(cls, v: str) -> str:
        """Validate mount path is an absolute POSIX path."""
        if not v.startswith("/"):
            raise ValueError(f"mountPath '{v}' must be an absolute path")
        return v


class MountBinding(BaseModel):
    """One entry of a mount plan: where a bundle gets mounted."""

    model_config = ConfigDict(frozen=True)

    volume_name: str
    mount_path: str
    source_bundle_name: str

    def to_dict(self) -> dict:
        """Convert to the launch subsystem's mount plan format."""
        return {"mountPath": self.mount_path, "sourceBundleName": self.source_bundle_name}


class ResolvedContainer(BaseModel):
    """Mount plan and fully substituted command line for one container."""

    model_config = ConfigDict(frozen=True)

    mount_plan: tuple[MountBinding, ...] = ()
    resolved_command: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "mountPlan": [binding.to_dict() for binding in self.mount_plan],
            "resolvedCommand": list(self.resolved_command),
        }
