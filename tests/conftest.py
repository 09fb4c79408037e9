"""Pytest configuration and shared fixtures."""

import pytest
from hypothesis import Verbosity, settings
from ruamel.yaml import YAML

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile("default")

ZOOKEEPER_TOLERATIONS = [
    {"key": "node.kubernetes.io/network-unavailable", "operator": "Exists", "effect": "NoSchedule"},
    {
        "key": "kubernetes.io/arch",
        "operator": "Equal",
        "value": "stackable-linux",
        "effect": "NoExecute",
    },
    {
        "key": "kubernetes.io/arch",
        "operator": "Equal",
        "value": "stackable-linux",
        "effect": "NoSchedule",
    },
]


@pytest.fixture
def zookeeper_pod_manifest():
    """Pod manifest for a ZooKeeper server reading its config from a bundle."""
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": "zookeeper-prod-1", "labels": {"status": "ready"}},
        "spec": {
            "containers": [
                {
                    "image": "stackable/zookeeper:v3_6_2",
                    "imagePullPolicy": "Always",
                    "command": [
                        "bin/zkServer.sh",
                        "--config",
                        "{{ configroot }}",
                        "start-foreground",
                    ],
                    "name": "greet",
                    "volumeMounts": [{"name": "zookeeper-prod-1", "mountPath": "/"}],
                }
            ],
            "volumes": [{"name": "zookeeper-prod-1", "configMap": {"name": "zookeeper-prod-1"}}],
            "tolerations": ZOOKEEPER_TOLERATIONS,
        },
    }


@pytest.fixture
def zookeeper_missing_bundle_manifest():
    """Pod manifest whose config bundle does not exist in the cluster."""
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": "zookeeper-prod-1-missing", "labels": {"status": "ready"}},
        "spec": {
            "containers": [
                {
                    "image": "stackable/zookeeper:3.6.2",
                    "imagePullPolicy": "Always",
                    "name": "greet",
                    "volumeMounts": [{"name": "zookeeper-prod-1", "mountPath": "/etc/config"}],
                }
            ],
            "volumes": [
                {"name": "zookeeper-prod-1", "configMap": {"name": "zookeeper-prod-1-missing"}}
            ],
            "tolerations": ZOOKEEPER_TOLERATIONS,
        },
    }


@pytest.fixture
def stackable_node_manifest():
    """Node manifest as registered by the Stackable provider."""
    return {
        "apiVersion": "v1",
        "kind": "Node",
        "metadata": {
            "name": "stackable-node-1",
            "labels": {"kubernetes.io/arch": "stackable-linux"},
        },
        "spec": {
            "taints": [
                {"key": "kubernetes.io/arch", "value": "stackable-linux", "effect": "NoSchedule"},
                {"key": "kubernetes.io/arch", "value": "stackable-linux", "effect": "NoExecute"},
            ]
        },
    }


@pytest.fixture
def write_manifest(tmp_path):
    """Write one or more manifest documents to a YAML file and return its path."""

    def _write(*documents, name="manifest.yaml"):
        path = tmp_path / name
        yaml = YAML()
        with open(path, "w") as f:
            yaml.dump_all(list(documents), f)
        return path

    return _write
