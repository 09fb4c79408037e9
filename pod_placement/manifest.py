"""Kubernetes manifest loading.

This module reads Pod and Node documents from YAML files using ruamel.yaml
and converts them into the placement models.
"""

from pathlib import Path

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pod_placement.exceptions import ManifestError
from pod_placement.logging_config import get_logger
from pod_placement.models import ConfigVolume, ContainerSpec, NodeSpec, PodSpec, Taint, Toleration

logger = get_logger(__name__)

ARCH_LABEL = "kubernetes.io/arch"


def _describe(document: dict) -> str:
    kind = document.get("kind", "<unknown kind>")
    metadata = document.get("metadata")
    name = metadata.get("name", "<unnamed>") if isinstance(metadata, dict) else "<unnamed>"
    return f"{kind} '{name}'"


def _format_validation_error(error: ValidationError) -> str:
    return "\n".join(
        f"  - {'.'.join(str(x) for x in e['loc'])}: {e['msg']}" for e in error.errors()
    )


def _mapping(value, where: str, document: dict) -> dict:
    """Return ``value`` as a mapping, treating a missing section as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(
            f"'{where}' in {_describe(document)} must be a mapping",
            f"Got {type(value).__name__}: {value!r}",
        )
    return value


def _entries(section: dict, field: str, where: str, document: dict) -> list[dict]:
    """Return the list under ``field``, checking every entry is a mapping."""
    items = section.get(field)
    if items is None:
        return []
    if not isinstance(items, list):
        raise ManifestError(
            f"'{where}.{field}' in {_describe(document)} must be a list",
            f"Got {type(items).__name__}: {items!r}",
        )
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ManifestError(
                f"'{where}.{field}[{index}]' in {_describe(document)} must be a mapping",
                f"Got {type(item).__name__}: {item!r}",
            )
    return items


def parse_pod(document: dict) -> PodSpec:
    """Convert a parsed Pod manifest into a PodSpec.

    Raises:
        ManifestError: If the document is not a valid Pod
        InvalidTolerationSpec: If a toleration uses Equal without a value
    """
    if document.get("kind") != "Pod":
        raise ManifestError(f"Expected a Pod manifest, got {_describe(document)}")

    metadata = _mapping(document.get("metadata"), "metadata", document)
    spec = _mapping(document.get("spec"), "spec", document)

    volumes = []
    for index, volume in enumerate(_entries(spec, "volumes", "spec", document)):
        config_map = _mapping(
            volume.get("configMap"), f"spec.volumes[{index}].configMap", document
        )
        if not config_map:
            raise ManifestError(
                f"Volume '{volume.get('name')}' in {_describe(document)} has no configMap source",
                "Only volumes backed by a configuration bundle (configMap) are supported",
            )
        volumes.append({"name": volume.get("name"), "configMapRef": config_map.get("name")})

    tolerations = _entries(spec, "tolerations", "spec", document)
    containers = _entries(spec, "containers", "spec", document)

    try:
        return PodSpec(
            name=metadata.get("name", ""),
            labels=metadata.get("labels") or {},
            tolerations=[Toleration.model_validate(t) for t in tolerations],
            volumes=[ConfigVolume.model_validate(v) for v in volumes],
            containers=[
                ContainerSpec(
                    name=c.get("name", ""),
                    image=c.get("image"),
                    command=c.get("command") or [],
                    volumeMounts=c.get("volumeMounts") or [],
                )
                for c in containers
            ],
        )
    except ValidationError as e:
        raise ManifestError(
            f"Invalid {_describe(document)}", _format_validation_error(e)
        ) from e


def parse_node(document: dict) -> NodeSpec:
    """Convert a parsed Node manifest into a NodeSpec.

    Raises:
        ManifestError: If the document is not a valid Node
    """
    if document.get("kind") != "Node":
        raise ManifestError(f"Expected a Node manifest, got {_describe(document)}")

    metadata = _mapping(document.get("metadata"), "metadata", document)
    spec = _mapping(document.get("spec"), "spec", document)
    labels = _mapping(metadata.get("labels"), "metadata.labels", document)
    taints = _entries(spec, "taints", "spec", document)

    try:
        return NodeSpec(
            name=metadata.get("name", ""),
            architecture=labels.get(ARCH_LABEL),
            labels=labels,
            taints=[Taint.model_validate(t) for t in taints],
        )
    except ValidationError as e:
        raise ManifestError(
            f"Invalid {_describe(document)}", _format_validation_error(e)
        ) from e


class ManifestReader:
    """Reader for multi-document manifest files."""

    def __init__(self, manifest_path: str | Path):
        """Initialize manifest reader.

        Args:
            manifest_path: Path to a YAML file with one or more documents
        """
        self.manifest_path = Path(manifest_path)
        self.yaml = YAML(typ="safe")

    def read(self) -> list[dict]:
        """Read all documents from the manifest file.

        Returns:
            List of parsed documents, empty documents skipped

        Raises:
            ManifestError: If the file cannot be read or parsed
        """
        logger.debug(f"Reading manifest file: {self.manifest_path}")

        if not self.manifest_path.exists():
            logger.error(f"Manifest file not found: {self.manifest_path}")
            raise ManifestError(
                f"Manifest file not found: {self.manifest_path}",
                f"Expected location: {self.manifest_path.absolute()}",
            )

        try:
            with open(self.manifest_path) as f:
                documents = [doc for doc in self.yaml.load_all(f) if doc is not None]
        except (OSError, YAMLError) as e:
            logger.error(f"Failed to read manifest file: {e}")
            raise ManifestError(
                f"Failed to read manifest file: {self.manifest_path}",
                f"The file may have invalid YAML syntax: {e}",
            ) from e

        for document in documents:
            if not isinstance(document, dict):
                raise ManifestError(
                    f"Manifest file {self.manifest_path} contains a non-mapping document"
                )

        logger.debug(f"Read {len(documents)} documents from {self.manifest_path}")
        return documents

    def pods(self) -> list[PodSpec]:
        """Parse every Pod document in the file."""
        return [parse_pod(doc) for doc in self.read() if doc.get("kind") == "Pod"]

    def nodes(self) -> list[NodeSpec]:
        """Parse every Node document in the file."""
        return [parse_node(doc) for doc in self.read() if doc.get("kind") == "Node"]


def load_manifests(path: str | Path) -> tuple[list[PodSpec], list[NodeSpec]]:
    """Load all pods and nodes from a manifest file. Other kinds are skipped."""
    pods, nodes = [], []
    for document in ManifestReader(path).read():
        kind = document.get("kind")
        if kind == "Pod":
            pods.append(parse_pod(document))
        elif kind == "Node":
            nodes.append(parse_node(document))
        else:
            logger.debug(f"Skipping unsupported document {_describe(document)}")
    return pods, nodes


def load_pod(path: str | Path) -> PodSpec:
    """Load the first Pod from a manifest file."""
    pods = ManifestReader(path).pods()
    if not pods:
        raise ManifestError(f"No Pod document found in {path}")
    if len(pods) > 1:
        logger.warning(f"{path} holds {len(pods)} pods, using '{pods[0].name}'")
    return pods[0]


def load_node(path: str | Path) -> NodeSpec:
    """Load the first Node from a manifest file."""
    nodes = ManifestReader(path).nodes()
    if not nodes:
        raise ManifestError(f"No Node document found in {path}")
    return nodes[0]
