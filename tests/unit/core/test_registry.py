"""Tests for Registry partitioning and RegistryPool sharing."""

from pathlib import Path

import pytest

from ucjs_loader.core.metadata import MetadataFields
from ucjs_loader.core.registry import Registry, RegistryPool
from ucjs_loader.core.scanner import ScanResult
from ucjs_loader.core.units import ScriptKind, ScriptUnit

BASE = Path("/chrome")


def _unit(name: str, kind: ScriptKind) -> ScriptUnit:
    return ScriptUnit(
        path=BASE / "UCJS_files" / name,
        kind=kind,
        metadata=MetadataFields(),
        base_dir=BASE,
        modified_ms=0,
    )


A_JS = _unit("a.uc.js", ScriptKind.EXECUTABLE)
B_XUL = _unit("b.uc.xul", ScriptKind.OVERLAY)
C_JS = _unit("c.uc.js", ScriptKind.EXECUTABLE)


class _CountingScan:
    def __init__(self, result: ScanResult) -> None:
        self.result = result
        self.calls = 0

    def __call__(self) -> ScanResult:
        self.calls += 1
        return self.result


def _scan() -> _CountingScan:
    return _CountingScan(ScanResult(units=(A_JS, B_XUL, C_JS), warnings=()))


def test_registry_partitions_units_by_kind_preserving_order() -> None:
    registry = Registry.from_scan(ScanResult(units=(A_JS, B_XUL, C_JS), warnings=()))

    assert registry.executable == (A_JS, C_JS)
    assert registry.overlay == (B_XUL,)
    assert registry.all_units() == (A_JS, C_JS, B_XUL)
    assert len(registry) == 3


def test_pool_scans_once_per_group() -> None:
    scan = _scan()
    pool = RegistryPool(scan)

    first = pool.acquire("main")
    second = pool.acquire("main")

    assert first is second
    assert scan.calls == 1
    assert pool.scan_count == 1
    assert pool.references("main") == 2


def test_pool_keeps_groups_separate() -> None:
    scan = _scan()
    pool = RegistryPool(scan)

    pool.acquire("main")
    pool.acquire("popup")

    assert pool.scan_count == 2


def test_pool_keeps_registry_while_references_remain() -> None:
    pool = RegistryPool(_scan())
    registry = pool.acquire("main")
    pool.acquire("main")

    pool.release("main")

    assert pool.get("main") is registry
    assert pool.references("main") == 1


def test_pool_drops_registry_after_last_release_and_rescans() -> None:
    scan = _scan()
    pool = RegistryPool(scan)
    pool.acquire("main")

    pool.release("main")

    assert pool.get("main") is None
    assert pool.references("main") == 0

    pool.acquire("main")
    assert pool.scan_count == 2


def test_pool_release_of_unknown_group_raises() -> None:
    pool = RegistryPool(_scan())

    with pytest.raises(ValueError, match="popup"):
        pool.release("popup")
