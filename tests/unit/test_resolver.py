"""Unit tests for mount binding and command template resolution."""

import pytest

from pod_placement.exceptions import (
    DuplicateMountPath,
    ResolutionError,
    UnknownVolumeReference,
    UnresolvedPlaceholder,
)
from pod_placement.models import ConfigVolume, MountBinding, PodSpec, VolumeMount
from pod_placement.resolver import (
    bind_mounts,
    config_root,
    normalize_mount_path,
    placeholders,
    resolve,
    resolve_container,
)


@pytest.fixture
def cfg_volume():
    return ConfigVolume(name="cfg", configMapRef="zookeeper-prod-1")


@pytest.fixture
def cfg_mount():
    return VolumeMount(name="cfg", mountPath="/etc/config")


def test_resolves_configroot(cfg_volume, cfg_mount):
    result = resolve([cfg_volume], [cfg_mount], ["bin/run", "--config", "{{ configroot }}"])

    assert list(result.resolved_command) == ["bin/run", "--config", "/etc/config"]
    assert list(result.mount_plan) == [
        MountBinding(
            volume_name="cfg", mount_path="/etc/config", source_bundle_name="zookeeper-prod-1"
        )
    ]


def test_placeholder_inside_argument(cfg_volume, cfg_mount):
    result = resolve([cfg_volume], [cfg_mount], ["--config={{configroot}}/zoo.cfg"])
    assert list(result.resolved_command) == ["--config=/etc/config/zoo.cfg"]


def test_repeated_placeholder_in_one_argument(cfg_volume, cfg_mount):
    result = resolve([cfg_volume], [cfg_mount], ["{{ configroot }}:{{ configroot }}"])
    assert list(result.resolved_command) == ["/etc/config:/etc/config"]


def test_plain_arguments_pass_through(cfg_volume, cfg_mount):
    template = ["bin/zkServer.sh", "start-foreground", "{ not a placeholder }"]
    result = resolve([cfg_volume], [cfg_mount], template)
    assert list(result.resolved_command) == template


def test_empty_template(cfg_volume, cfg_mount):
    result = resolve([cfg_volume], [cfg_mount], [])
    assert list(result.resolved_command) == []
    assert len(result.mount_plan) == 1


def test_unknown_volume_reference(cfg_volume):
    with pytest.raises(UnknownVolumeReference) as exc_info:
        resolve([cfg_volume], [VolumeMount(name="missing", mountPath="/data")], [])

    assert exc_info.value.volume_name == "missing"
    assert "cfg" in exc_info.value.details


def test_duplicate_mount_path(cfg_volume):
    other = ConfigVolume(name="logging", configMapRef="zookeeper-logging")
    mounts = [
        VolumeMount(name="cfg", mountPath="/etc/config"),
        VolumeMount(name="logging", mountPath="/etc/config/"),
    ]
    with pytest.raises(DuplicateMountPath) as exc_info:
        resolve([cfg_volume, other], mounts, [])

    assert exc_info.value.mount_path == "/etc/config/"


def test_unknown_placeholder(cfg_volume, cfg_mount):
    with pytest.raises(UnresolvedPlaceholder) as exc_info:
        resolve([cfg_volume], [cfg_mount], ["--data", "{{ unknownvar }}"])

    assert exc_info.value.identifier == "unknownvar"


def test_configroot_without_mounts_is_unresolved(cfg_volume):
    with pytest.raises(UnresolvedPlaceholder):
        resolve([cfg_volume], [], ["{{ configroot }}"])


def test_unknown_reference_checked_before_placeholders(cfg_volume):
    """Mount errors surface even when the template is also broken."""
    with pytest.raises(UnknownVolumeReference):
        resolve([cfg_volume], [VolumeMount(name="nope", mountPath="/x")], ["{{ unknownvar }}"])


def test_config_root_uses_first_declared_mounted_volume():
    volumes = [
        ConfigVolume(name="unused", configMapRef="unused-bundle"),
        ConfigVolume(name="main", configMapRef="main-bundle"),
        ConfigVolume(name="extra", configMapRef="extra-bundle"),
    ]
    mounts = [
        VolumeMount(name="extra", mountPath="/opt/extra"),
        VolumeMount(name="main", mountPath="/etc/main"),
        VolumeMount(name="main", mountPath="/etc/main-copy"),
    ]
    bindings = bind_mounts(volumes, mounts)

    assert config_root(volumes, bindings) == "/etc/main"
    assert [b.mount_path for b in bindings] == ["/opt/extra", "/etc/main", "/etc/main-copy"]
    assert [b.source_bundle_name for b in bindings] == [
        "extra-bundle",
        "main-bundle",
        "main-bundle",
    ]


def test_placeholders_lists_identifiers_in_order():
    assert placeholders("{{ a }}-{{b}}-{{  configroot  }}") == ["a", "b", "configroot"]
    assert placeholders("no placeholders") == []


def test_missing_bundle_is_not_a_resolution_error():
    """Bundle existence is the config store's concern, not the resolver's."""
    volumes = [ConfigVolume(name="zookeeper-prod-1", configMapRef="zookeeper-prod-1-missing")]
    mounts = [VolumeMount(name="zookeeper-prod-1", mountPath="/etc/config")]

    result = resolve(volumes, mounts, [])
    assert result.mount_plan[0].source_bundle_name == "zookeeper-prod-1-missing"


def test_to_dict_output_shape(cfg_volume, cfg_mount):
    result = resolve([cfg_volume], [cfg_mount], ["{{ configroot }}"])
    assert result.to_dict() == {
        "mountPlan": [{"mountPath": "/etc/config", "sourceBundleName": "zookeeper-prod-1"}],
        "resolvedCommand": ["/etc/config"],
    }


class TestResolveContainer:
    @pytest.fixture
    def pod(self):
        return PodSpec(
            name="zookeeper-prod-1",
            volumes=[{"name": "cfg", "configMapRef": "zookeeper-prod-1"}],
            containers=[
                {
                    "name": "server",
                    "command": ["bin/zkServer.sh", "--config", "{{ configroot }}"],
                    "volumeMounts": [{"name": "cfg", "mountPath": "/"}],
                },
                {
                    "name": "sidecar",
                    "command": ["tail", "-f", "{{ configroot }}"],
                    "volumeMounts": [{"name": "cfg", "mountPath": "/config"}],
                },
            ],
        )

    def test_defaults_to_first_container(self, pod):
        result = resolve_container(pod)
        assert list(result.resolved_command) == ["bin/zkServer.sh", "--config", "/"]

    def test_selects_container_by_name(self, pod):
        result = resolve_container(pod, "sidecar")
        assert list(result.resolved_command) == ["tail", "-f", "/config"]

    def test_unknown_container(self, pod):
        with pytest.raises(ResolutionError, match="no container named 'missing'"):
            resolve_container(pod, "missing")


@pytest.mark.parametrize(
    "token, identifier",
    [
        ("{{ config root }}", "config root"),
        ("{{}}", ""),
        ("{{ 9x }}", "9x"),
        ("--config={{ configroot/ }}", "configroot/"),
    ],
)
def test_malformed_placeholder_is_unresolved(cfg_volume, cfg_mount, token, identifier):
    """Any double-brace token must resolve; malformed ones never reach the command line."""
    with pytest.raises(UnresolvedPlaceholder) as exc_info:
        resolve([cfg_volume], [cfg_mount], ["bin/run", token])
    assert exc_info.value.identifier == identifier


def test_placeholders_include_malformed_tokens():
    assert placeholders("{{}} {{ config root }}") == ["", "config root"]


@pytest.mark.parametrize(
    "first, second",
    [
        ("/etc", "//etc"),
        ("/etc/config", "/etc//config"),
        ("/etc/config", "/etc/./config"),
        ("/etc/config", "/etc/data/../config"),
    ],
)
def test_equivalent_mount_paths_collide(first, second):
    volumes = [
        ConfigVolume(name="cfg", configMapRef="zookeeper-prod-1"),
        ConfigVolume(name="logging", configMapRef="zookeeper-logging"),
    ]
    mounts = [
        VolumeMount(name="cfg", mountPath=first),
        VolumeMount(name="logging", mountPath=second),
    ]
    with pytest.raises(DuplicateMountPath) as exc_info:
        resolve(volumes, mounts, [])
    assert exc_info.value.mount_path == second


def test_normalize_mount_path():
    assert normalize_mount_path("//etc/config/") == "/etc/config"
    assert normalize_mount_path("/") == "/"


def test_resolved_container_is_immutable(cfg_volume, cfg_mount):
    result = resolve([cfg_volume], [cfg_mount], ["{{ configroot }}"])
    assert isinstance(result.resolved_command, tuple)
    assert isinstance(result.mount_plan, tuple)
