"""Configuration mount binding and command template resolution.

Computes the mount plan and the launch command for a container. Nothing
here touches the filesystem or checks that configuration bundles exist;
only the pod's internal name references are validated.
"""

import posixpath
import re
from collections.abc import Sequence

from pod_placement.exceptions import (
    DuplicateMountPath,
    ResolutionError,
    UnknownVolumeReference,
    UnresolvedPlaceholder,
)
from pod_placement.models import ConfigVolume, MountBinding, PodSpec, ResolvedContainer, VolumeMount

CONFIG_ROOT = "configroot"

# Anything between double braces is a placeholder, well-formed or not
PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)


def placeholders(argument: str) -> list[str]:
    """Return placeholder identifiers used in one argument, in order of appearance."""
    return [token.strip() for token in PLACEHOLDER_PATTERN.findall(argument)]


def normalize_mount_path(mount_path: str) -> str:
    """Collapse redundant separators, dot segments and trailing slashes."""
    return posixpath.normpath("/" + mount_path.lstrip("/"))


def bind_mounts(
    volumes: Sequence[ConfigVolume], mounts: Sequence[VolumeMount]
) -> list[MountBinding]:
    """Join mounts against volumes by name.

    Mounts are checked in declaration order and the first faulty mount
    raises. Paths are compared after normalization, so ``/etc/config/``,
    ``//etc/config`` and ``/etc/config`` all collide.

    Raises:
        UnknownVolumeReference: If a mount names an undeclared volume
        DuplicateMountPath: If two mounts target the same path
    """
    bundles = {volume.name: volume.config_map_ref for volume in volumes}
    seen_paths: set[str] = set()
    bindings = []

    for mount in mounts:
        if mount.name not in bundles:
            raise UnknownVolumeReference(
                mount.name,
                f"Declared volumes: {', '.join(sorted(bundles)) or 'none'}",
            )

        path = normalize_mount_path(mount.mount_path)
        if path in seen_paths:
            raise DuplicateMountPath(mount.mount_path)
        seen_paths.add(path)

        bindings.append(
            MountBinding(
                volume_name=mount.name,
                mount_path=mount.mount_path,
                source_bundle_name=bundles[mount.name],
            )
        )

    return bindings


def config_root(volumes: Sequence[ConfigVolume], bindings: Sequence[MountBinding]) -> str | None:
    """Find the mount path of the primary configuration volume.

    The primary volume is the first declared volume that is mounted at all;
    if it is mounted more than once the first mount wins.
    """
    for volume in volumes:
        for binding in bindings:
            if binding.volume_name == volume.name:
                return binding.mount_path
    return None


def _substitute(argument: str, values: dict[str, str]) -> str:
    def replace(match: re.Match) -> str:
        identifier = match.group(1).strip()
        if identifier not in values:
            raise UnresolvedPlaceholder(
                identifier,
                f"Known placeholders: {', '.join(sorted(values)) or 'none'}",
            )
        return values[identifier]

    return PLACEHOLDER_PATTERN.sub(replace, argument)


def resolve(
    volumes: Sequence[ConfigVolume],
    mounts: Sequence[VolumeMount],
    command_template: Sequence[str],
) -> ResolvedContainer:
    """Resolve a container's mount plan and command line.

    Args:
        volumes: Config volumes declared by the pod
        mounts: Volume mounts of the container
        command_template: Command arguments, possibly containing placeholders

    Returns:
        ResolvedContainer with one binding per mount and the substituted command

    Raises:
        UnknownVolumeReference: If a mount names an undeclared volume
        DuplicateMountPath: If two mounts target the same path
        UnresolvedPlaceholder: If a placeholder has no binding
    """
    bindings = bind_mounts(volumes, mounts)

    values = {}
    root = config_root(volumes, bindings)
    if root is not None:
        values[CONFIG_ROOT] = root

    command = [_substitute(argument, values) for argument in command_template]
    return ResolvedContainer(mount_plan=bindings, resolved_command=command)


def resolve_container(pod: PodSpec, container_name: str | None = None) -> ResolvedContainer:
    """Resolve one container of a parsed pod (the first one by default)."""
    container = pod.get_container(container_name)
    if container is None:
        raise ResolutionError(
            f"Pod '{pod.name}' has no container named '{container_name}'",
            f"Containers: {', '.join(c.name for c in pod.containers)}",
        )
    return resolve(pod.volumes, container.volume_mounts, container.command)
