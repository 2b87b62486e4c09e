"""Tests for InMemoryLedgerStore internals and the keyed lock registry."""

import dataclasses
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from restoration_kernel.domain.policy import PermissivePolicy
from restoration_kernel.store.locks import KeyedLockRegistry
from restoration_kernel.store.memory import InMemoryLedgerStore


class TestInMemoryLedgerStore:

    def test_default_policy_is_permissive(self, memory_store):
        assert isinstance(memory_store.policy, PermissivePolicy)
        assert memory_store.describe() == {"backend": "memory", "policy": "permissive"}

    def test_instances_do_not_share_state(self):
        first = InMemoryLedgerStore()
        second = InMemoryLedgerStore()

        first.create_project("A", "a", 1, "o")
        first.create_project("B", "b", 1, "o")

        assert second.create_project("C", "c", 1, "o").value == 1
        assert first.project_count == 2
        assert second.project_count == 1

    def test_returned_project_is_frozen(self, memory_store):
        project_id = memory_store.create_project("A", "a", 1, "o").value
        project = memory_store.get_project(project_id).value

        with pytest.raises(dataclasses.FrozenInstanceError):
            project.current_funding = 10

    def test_recorded_zero_contribution_is_distinct_from_absent(self, memory_store):
        project_id = memory_store.create_project("A", "a", 1, "o").value
        memory_store.fund_project(project_id, 0, "F1")

        assert memory_store._contributions.contains((project_id, "F1"))
        assert not memory_store._contributions.contains((project_id, "F2"))
        assert memory_store.get_funder_amount(project_id, "F1").value == 0
        assert memory_store.get_funder_amount(project_id, "F2").value == 0

    def test_negative_amounts_are_accepted_by_default(self, memory_store):
        project_id = memory_store.create_project("A", "a", 1, "o").value

        assert memory_store.fund_project(project_id, -5, "F1").ok
        assert memory_store.get_project(project_id).value.current_funding == -5

    def test_reset_clears_counter(self, memory_store):
        memory_store.create_project("A", "a", 1, "o")
        memory_store.reset()

        assert memory_store._project_counter == 0
        assert not memory_store._projects
        assert memory_store.create_project("A", "a", 1, "o").value == 1

    def test_unknown_ids_do_not_register_locks(self, memory_store):
        project_id = memory_store.create_project("A", "a", 1, "o").value
        assert len(memory_store._project_locks) == 1

        for unknown in range(1000, 3000):
            memory_store.get_funder_amount(unknown, "F1")
            memory_store.get_project(unknown)
            memory_store.get_share_total(unknown)
            memory_store.fund_project(unknown, 1, "F1")
            memory_store.mint_shares(unknown, 1)
            memory_store.transfer_shares(unknown, "R")

        assert len(memory_store._project_locks) == 1
        assert memory_store._project_locks.get(project_id) is not None

    def test_reset_reuses_registered_locks(self, memory_store):
        memory_store.create_project("A", "a", 1, "o")
        memory_store.create_project("B", "b", 1, "o")

        memory_store.reset()
        memory_store.create_project("C", "c", 1, "o")

        assert len(memory_store._project_locks) == 2

    def test_reset_during_concurrent_funding_leaves_no_writes(self, memory_store):
        project_id = memory_store.create_project("A", "a", 1, "o").value
        started = threading.Event()

        def fund(index):
            for _ in range(500):
                memory_store.fund_project(project_id, 1, f"F{index}")
                started.set()

        with ThreadPoolExecutor(max_workers=4) as pool:
            futures = [pool.submit(fund, i) for i in range(4)]
            assert started.wait(timeout=5)
            memory_store.reset()
            for future in futures:
                future.result()

        # Every fund after the reset fails NotFound, and the reset waited
        # for the ones in flight, so nothing survives it.
        assert memory_store._project_counter == 0
        assert not memory_store._projects
        assert len(memory_store._contributions) == 0
        assert memory_store.get_project(project_id).is_not_found

    def test_bool_share_count_rejected(self, memory_store):
        project_id = memory_store.create_project("A", "a", 1, "o").value

        with pytest.raises(TypeError):
            memory_store.mint_shares(project_id, True)


class TestKeyedLockRegistry:

    def test_same_key_same_lock(self):
        registry = KeyedLockRegistry()

        assert registry.lock_for(1) is registry.lock_for(1)
        assert registry.lock_for(1) is not registry.lock_for(2)
        assert len(registry) == 2

    def test_hold_acquires_and_releases(self):
        registry = KeyedLockRegistry()

        with registry.hold("k"):
            assert registry.lock_for("k").locked()
        assert not registry.lock_for("k").locked()

    def test_hold_releases_on_exception(self):
        registry = KeyedLockRegistry()

        with pytest.raises(RuntimeError):
            with registry.hold("k"):
                raise RuntimeError("boom")
        assert not registry.lock_for("k").locked()

    def test_get_never_registers(self):
        registry = KeyedLockRegistry()

        assert registry.get("missing") is None
        assert len(registry) == 0

    def test_hold_all_blocks_every_key(self):
        registry = KeyedLockRegistry()
        registry.lock_for(1)
        registry.lock_for(2)

        with registry.hold_all():
            assert registry.get(1).locked()
            assert registry.get(2).locked()
        assert not registry.get(1).locked()
        assert not registry.get(2).locked()
