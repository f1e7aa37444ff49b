#!/usr/bin/env python3
"""Unit tests for the hidden set registry."""

import json
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from logger_decoration.core.hidden_registry import HiddenSetRegistry


class TestRegistration:
    """Registering modules and types."""

    def test_starts_empty(self, registry):
        """A fresh registry hides nothing."""
        assert registry.hidden_assemblies == frozenset()
        assert registry.hidden_types == frozenset()
        assert not registry.is_hidden_assembly("app")
        assert not registry.is_hidden_type("app.Worker")

    def test_register_module_object_and_name(self, registry):
        """Modules can be registered as objects or dotted names."""
        registry.register_hidden_assembly(json)
        registry.register_hidden_assembly("app.helpers")

        assert registry.hidden_assemblies == {"json", "app.helpers"}
        assert registry.is_hidden_assembly("json")
        assert registry.is_hidden_assembly("app.helpers")

    def test_register_type_object_and_name(self, registry):
        """Types can be registered as classes or full names."""

        class Helper:
            pass

        registry.register_hidden_type(Helper)
        registry.register_hidden_type("app.helpers.Audit")

        assert registry.is_hidden_type(Helper)
        assert registry.is_hidden_type("app.helpers.Audit")
        assert not registry.is_hidden_type("app.helpers.Other")

    def test_registration_is_idempotent(self, registry):
        """Registering the same element twice keeps the set unchanged."""
        registry.register_hidden_assembly("app.helpers")
        snapshot = registry.hidden_assemblies

        registry.register_hidden_assembly("app.helpers")

        assert registry.hidden_assemblies is snapshot
        assert len(registry.hidden_assemblies) == 1

    def test_none_is_ignored(self, registry):
        """None never ends up in either set."""
        registry.register_hidden_assembly(None)
        registry.register_hidden_type(None)

        assert registry.hidden_assemblies == frozenset()
        assert registry.hidden_types == frozenset()

    def test_published_sets_are_immutable(self, registry):
        """Readers get frozen snapshots that later writes do not alter."""
        registry.register_hidden_type("app.A")
        snapshot = registry.hidden_types

        registry.register_hidden_type("app.B")

        assert snapshot == {"app.A"}
        assert registry.hidden_types == {"app.A", "app.B"}
        with pytest.raises(AttributeError):
            snapshot.add("app.C")

    def test_registries_are_independent(self):
        """Two registries never share state."""
        first = HiddenSetRegistry()
        second = HiddenSetRegistry()

        first.register_hidden_assembly("app.helpers")

        assert not second.is_hidden_assembly("app.helpers")


@pytest.mark.serial
class TestConcurrentRegistration:
    """Registration from many threads."""

    def test_concurrent_registration_keeps_every_item(self, registry):
        """N threads registering the same M items end with exactly M items."""
        items = [f"app.module_{index}" for index in range(50)]
        barrier = threading.Barrier(8)

        def register_all():
            barrier.wait()
            for item in items:
                registry.register_hidden_assembly(item)
                registry.register_hidden_type(item)

        with ThreadPoolExecutor(max_workers=8) as executor:
            for future in [executor.submit(register_all) for _ in range(8)]:
                future.result()

        assert registry.hidden_assemblies == frozenset(items)
        assert registry.hidden_types == frozenset(items)

    def test_readers_see_complete_snapshots(self, registry):
        """A reader racing with writers only ever observes prefixes of the write order."""
        items = [f"app.module_{index}" for index in range(200)]
        done = threading.Event()
        observed_sizes = []

        def write():
            for item in items:
                registry.register_hidden_assembly(item)
            done.set()

        def read():
            while not done.is_set():
                snapshot = registry.hidden_assemblies
                # Items are written in order, so a complete snapshot holds a prefix
                assert snapshot == frozenset(items[: len(snapshot)])
                observed_sizes.append(len(snapshot))

        with ThreadPoolExecutor(max_workers=3) as executor:
            readers = [executor.submit(read) for _ in range(2)]
            executor.submit(write).result()
            for reader in readers:
                reader.result()

        assert registry.hidden_assemblies == frozenset(items)
        assert observed_sizes == [] or max(observed_sizes) <= len(items)
