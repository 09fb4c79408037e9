"""Taint/toleration matching.

Every function here is a pure function of its arguments: no logging, no
caching, no I/O. Decisions must be recomputed from a fresh snapshot of the
node's taints on every scheduling attempt and every taint change.
"""

from collections.abc import Iterable

from pod_placement.models import (
    NodeSpec,
    PlacementDecision,
    PlacementReport,
    PodSpec,
    Taint,
    TaintEffect,
    Toleration,
    TolerationOperator,
)


def tolerates(toleration: Toleration, taint: Taint) -> bool:
    """Check whether a single toleration tolerates a single taint."""
    if toleration.key and toleration.key != taint.key:
        return False
    if toleration.effect is not None and toleration.effect is not taint.effect:
        return False
    if toleration.operator is TolerationOperator.EXISTS:
        return True
    return toleration.value == (taint.value or "")


def _is_tolerated(tolerations: list[Toleration], taint: Taint) -> bool:
    return any(tolerates(toleration, taint) for toleration in tolerations)


def _violation_order(taint: Taint) -> tuple:
    return (-taint.effect.severity, taint.key, taint.value or "", taint.value is not None)


def untolerated_taints(tolerations: Iterable[Toleration], taints: Iterable[Taint]) -> list[Taint]:
    """Return every taint that no toleration tolerates.

    The result is sorted hardest effect first, then by key and value, so
    permuting either input yields the same list. Duplicate taints are
    reported once.
    """
    tolerations = list(tolerations)
    violations = {taint for taint in taints if not _is_tolerated(tolerations, taint)}
    return sorted(violations, key=_violation_order)


def evaluate(tolerations: Iterable[Toleration], taints: Iterable[Taint]) -> PlacementDecision:
    """Decide whether a pod with ``tolerations`` may run on a node with ``taints``.

    An untolerated NoSchedule or NoExecute taint rejects the pod outright.
    Untolerated PreferNoSchedule taints only downgrade the result to
    SchedulableEvictable. This never raises.
    """
    tolerations = list(tolerations)
    decision = PlacementDecision.SCHEDULABLE

    for taint in taints:
        if _is_tolerated(tolerations, taint):
            continue
        if taint.effect.is_hard:
            return PlacementDecision.REJECTED
        decision = PlacementDecision.SCHEDULABLE_EVICTABLE

    return decision


def requires_eviction(tolerations: Iterable[Toleration], taints: Iterable[Taint]) -> bool:
    """Check whether a pod already running on the node has to be evicted.

    Only untolerated NoExecute taints evict running pods; callers re-check
    this whenever the node's taint set changes.
    """
    tolerations = list(tolerations)
    return any(
        taint.effect is TaintEffect.NO_EXECUTE and not _is_tolerated(tolerations, taint)
        for taint in taints
    )


def diagnose(tolerations: Iterable[Toleration], taints: Iterable[Taint]) -> PlacementReport:
    """Evaluate placement and collect all violations instead of stopping at the first."""
    violations = untolerated_taints(tolerations, taints)

    if any(taint.effect.is_hard for taint in violations):
        decision = PlacementDecision.REJECTED
    elif violations:
        decision = PlacementDecision.SCHEDULABLE_EVICTABLE
    else:
        decision = PlacementDecision.SCHEDULABLE

    return PlacementReport(
        decision=decision,
        violations=violations,
        evict=any(taint.effect is TaintEffect.NO_EXECUTE for taint in violations),
    )


def evaluate_pod(pod: PodSpec, node: NodeSpec) -> PlacementDecision:
    """Evaluate placement of a parsed pod onto a parsed node."""
    return evaluate(pod.tolerations, node.taints)
