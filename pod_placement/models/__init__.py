"""Data models for pods, nodes, taints and configuration mounts."""

from pod_placement.models.mounts import ConfigVolume, MountBinding, ResolvedContainer, VolumeMount
from pod_placement.models.pod import ContainerSpec, NodeSpec, PodSpec
from pod_placement.models.scheduling import (
    PlacementDecision,
    PlacementReport,
    Taint,
    TaintEffect,
    Toleration,
    TolerationOperator,
)

__all__ = [
    "ConfigVolume",
    "ContainerSpec",
    "MountBinding",
    "NodeSpec",
    "PlacementDecision",
    "PlacementReport",
    "PodSpec",
    "ResolvedContainer",
    "Taint",
    "TaintEffect",
    "Toleration",
    "TolerationOperator",
    "VolumeMount",
]
