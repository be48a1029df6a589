"""Tests for registry, broadcast and unicast behavior of the event hub."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import unittest

from stagehub.events import Event, EventKind
from stagehub.exceptions import (
    DuplicateNodeError,
    InvalidNodeNameError,
    NodeNotFoundError,
)
from stagehub.hub import DeliveryStatus, DuplicatePolicy, EventHub
from stagehub.nodes import Node


class RecordingNode(Node):
    """Node that remembers every event it receives."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.received: list[Event] = []

    def receive(self, event: Event) -> None:
        self.received.append(event)


class EchoNode(RecordingNode):
    """Re-broadcasts a DROP whenever it hears a CHORUS."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.reports = []
        self.depths: list[int] = []

    def receive(self, event: Event) -> None:
        super().receive(event)
        assert self.hub is not None
        self.depths.append(self.hub.dispatch_depth)
        if event.kind == EventKind.CHORUS:
            self.reports.append(
                self.hub.emit(Event(kind=EventKind.DROP, origin=self.name, payload="echo"))
            )


class FailingNode(RecordingNode):
    def receive(self, event: Event) -> None:
        super().receive(event)
        raise RuntimeError("receiver exploded")


class RegistryTests(unittest.TestCase):
    """Validate registration, binding and duplicate-name policy."""

    def test_registry_reports_one_entry_per_distinct_name(self) -> None:
        hub = EventHub()
        for index in range(5):
            hub.register(RecordingNode(f"node-{index}"))
        self.assertEqual(len(hub), 5)
        self.assertEqual(hub.names(), {f"node-{index}" for index in range(5)})
        self.assertIn("node-3", hub)
        self.assertNotIn("node-9", hub)

    def test_register_binds_node_to_hub(self) -> None:
        hub = EventHub()
        node = RecordingNode("A")
        self.assertFalse(node.is_bound)
        hub.register(node)
        self.assertIs(node.hub, hub)
        self.assertIs(hub.get("A"), node)

    def test_independent_hubs_do_not_share_registries(self) -> None:
        first, second = EventHub(), EventHub()
        first.register(RecordingNode("A"))
        self.assertEqual(len(first), 1)
        self.assertEqual(len(second), 0)

    def test_empty_or_blank_name_rejected(self) -> None:
        hub = EventHub()
        for name in ("", "   "):
            with self.assertRaises(InvalidNodeNameError):
                hub.register(RecordingNode(name))
        self.assertEqual(len(hub), 0)

    def test_duplicate_name_rejected_by_default(self) -> None:
        hub = EventHub()
        original = RecordingNode("L")
        intruder = RecordingNode("L")
        hub.register(original)
        with self.assertRaises(DuplicateNodeError):
            hub.register(intruder)

        self.assertIs(hub.get("L"), original)
        self.assertFalse(intruder.is_bound)
        hub.send("L", Event(kind=EventKind.DROP))
        self.assertEqual(len(original.received), 1)
        self.assertEqual(intruder.received, [])

    def test_reregistering_same_node_is_idempotent(self) -> None:
        hub = EventHub()
        node = RecordingNode("A")
        hub.register(node)
        hub.register(node)
        self.assertEqual(len(hub), 1)
        self.assertIs(hub.get("A"), node)

    def test_duplicate_name_replaces_under_replace_policy(self) -> None:
        hub = EventHub(duplicate_policy=DuplicatePolicy.REPLACE)
        former = RecordingNode("L")
        latest = RecordingNode("L")
        origin = RecordingNode("A")
        hub.register(former)
        hub.register(origin)
        with self.assertLogs("stagehub.hub", level="WARNING") as logs:
            hub.register(latest)
        self.assertTrue(any("hub.register.replaced" in line for line in logs.output))

        self.assertEqual(len(hub), 2)
        hub.emit(Event(kind=EventKind.CHORUS, origin="A"))
        hub.send("L", Event(kind=EventKind.DROP))
        self.assertEqual(former.received, [])
        self.assertEqual(
            [event.kind for event in latest.received],
            [EventKind.CHORUS, EventKind.DROP],
        )

    def test_policy_accepts_string_values(self) -> None:
        hub = EventHub(duplicate_policy="replace")
        self.assertIs(hub.duplicate_policy, DuplicatePolicy.REPLACE)

    def test_invalid_depth_limit_rejected(self) -> None:
        with self.assertRaises(ValueError):
            EventHub(max_dispatch_depth=0)

    def test_from_config_applies_hub_section(self) -> None:
        hub = EventHub.from_config({"duplicate_policy": "replace", "max_dispatch_depth": 3})
        self.assertIs(hub.duplicate_policy, DuplicatePolicy.REPLACE)
        self.assertEqual(hub.max_dispatch_depth, 3)


class BroadcastTests(unittest.TestCase):
    """Validate emit() delivery set and origin exclusion."""

    def test_every_other_node_receives_exactly_once(self) -> None:
        hub = EventHub()
        nodes = {name: RecordingNode(name) for name in ("O", "B", "C", "D")}
        for node in nodes.values():
            hub.register(node)

        report = hub.emit(Event(kind=EventKind.TALK, origin="O", payload="hello"))

        self.assertIs(report.status, DeliveryStatus.DELIVERED)
        self.assertEqual(report.recipients, {"B", "C", "D"})
        self.assertEqual(nodes["O"].received, [])
        for name in ("B", "C", "D"):
            received = nodes[name].received
            self.assertEqual(len(received), 1)
            self.assertEqual(received[0].kind, EventKind.TALK)
            self.assertEqual(received[0].origin, "O")
            self.assertEqual(received[0].payload, "hello")

    def test_unregistered_origin_reaches_all_nodes(self) -> None:
        hub = EventHub()
        nodes = [RecordingNode("B"), RecordingNode("C")]
        for node in nodes:
            hub.register(node)
        report = hub.emit(Event(kind=EventKind.DROP, origin="ghost"))
        self.assertEqual(report.recipients, {"B", "C"})
        self.assertTrue(all(len(node.received) == 1 for node in nodes))

    def test_recipients_share_the_same_stamped_event(self) -> None:
        hub = EventHub()
        first, second = RecordingNode("B"), RecordingNode("C")
        hub.register(first)
        hub.register(second)
        hub.emit(Event(kind=EventKind.DROP, origin="O"))
        self.assertIs(first.received[0], second.received[0])

    def test_emit_without_other_nodes_is_noop(self) -> None:
        hub = EventHub()
        origin = RecordingNode("O")
        hub.register(origin)
        report = hub.emit(Event(kind=EventKind.CHORUS, origin="O"))
        self.assertIs(report.status, DeliveryStatus.NO_RECIPIENTS)
        self.assertEqual(report.recipients, frozenset())
        self.assertEqual(origin.received, [])

        empty = EventHub().emit(Event(kind=EventKind.CHORUS))
        self.assertIs(empty.status, DeliveryStatus.NO_RECIPIENTS)


class TimestampTests(unittest.TestCase):
    """Validate that dispatch timestamps always come from the hub."""

    def test_caller_supplied_timestamp_is_overwritten(self) -> None:
        hub = EventHub()
        node = RecordingNode("B")
        hub.register(node)
        stale = datetime(2000, 1, 1, tzinfo=timezone.utc)

        before = datetime.now(timezone.utc)
        hub.emit(Event(kind=EventKind.TALK, origin="O", dispatched_at=stale))
        hub.send("B", Event(kind=EventKind.DROP, dispatched_at=stale))

        self.assertEqual(len(node.received), 2)
        for event in node.received:
            self.assertIsNotNone(event.dispatched_at)
            self.assertGreaterEqual(event.dispatched_at, before)

    def test_hub_clock_is_used_for_every_dispatch(self) -> None:
        ticks = iter(
            datetime(2030, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=n)
            for n in range(10)
        )
        hub = EventHub(clock=lambda: next(ticks))
        node = RecordingNode("B")
        hub.register(node)

        hub.emit(Event(kind=EventKind.TALK, origin="O"))
        report = hub.send("missing", Event(kind=EventKind.DROP))
        hub.send("B", Event(kind=EventKind.DROP))

        self.assertEqual(node.received[0].dispatched_at.second, 0)
        self.assertEqual(report.event.dispatched_at.second, 1)
        self.assertEqual(node.received[1].dispatched_at.second, 2)

    def test_original_event_is_left_untouched(self) -> None:
        hub = EventHub()
        hub.register(RecordingNode("B"))
        event = Event(kind=EventKind.TALK, origin="O")
        report = hub.emit(event)
        self.assertIsNone(event.dispatched_at)
        self.assertIsNotNone(report.event.dispatched_at)


class UnicastTests(unittest.TestCase):
    """Validate send() targeting and the non-fatal miss path."""

    def test_send_reaches_only_the_target(self) -> None:
        hub = EventHub()
        nodes = {name: RecordingNode(name) for name in ("A", "B", "C")}
        for node in nodes.values():
            hub.register(node)

        report = hub.send("B", Event(kind=EventKind.SMOKE_NOW, payload="10%"))

        self.assertTrue(report.delivered)
        self.assertEqual(report.recipients, {"B"})
        self.assertEqual(len(nodes["B"].received), 1)
        self.assertEqual(nodes["A"].received, [])
        self.assertEqual(nodes["C"].received, [])

    def test_send_to_origin_itself_is_allowed(self) -> None:
        hub = EventHub()
        node = RecordingNode("A")
        hub.register(node)
        hub.send("A", Event(kind=EventKind.TALK, origin="A"))
        self.assertEqual(len(node.received), 1)

    def test_send_to_unknown_target_reports_not_found(self) -> None:
        hub = EventHub()
        bystander = RecordingNode("A")
        hub.register(bystander)

        with self.assertLogs("stagehub.hub", level="WARNING") as logs:
            report = hub.send("Nonexistent", Event(kind=EventKind.DROP, payload="x"))

        self.assertIs(report.status, DeliveryStatus.NOT_FOUND)
        self.assertFalse(report.delivered)
        self.assertEqual(report.recipients, frozenset())
        self.assertEqual(bystander.received, [])
        self.assertTrue(any("hub.send.not_found" in line for line in logs.output))

    def test_empty_registry_send_does_not_raise(self) -> None:
        hub = EventHub()
        with self.assertLogs("stagehub.hub", level="WARNING"):
            report = hub.send(
                "Nonexistent", Event(kind=EventKind.SMOKE_NOW, origin="HUB", payload="1%")
            )
        self.assertIs(report.status, DeliveryStatus.NOT_FOUND)
        self.assertEqual(len(hub), 0)

    def test_send_or_raise_raises_for_unknown_target(self) -> None:
        hub = EventHub()
        with self.assertLogs("stagehub.hub", level="WARNING"):
            with self.assertRaises(NodeNotFoundError):
                hub.send_or_raise("Nonexistent", Event(kind=EventKind.DROP))

        node = RecordingNode("A")
        hub.register(node)
        report = hub.send_or_raise("A", Event(kind=EventKind.DROP))
        self.assertTrue(report.delivered)


class ReentrancyTests(unittest.TestCase):
    """Validate nested dispatch when receivers originate events."""

    def test_nested_emit_runs_inside_outer_dispatch(self) -> None:
        hub = EventHub()
        origin = RecordingNode("O")
        echo = EchoNode("E")
        hub.register(origin)
        hub.register(echo)

        report = hub.emit(Event(kind=EventKind.CHORUS, origin="O"))

        self.assertTrue(report.delivered)
        self.assertEqual(echo.depths, [1])
        self.assertEqual([event.kind for event in origin.received], [EventKind.DROP])
        self.assertEqual(origin.received[0].origin, "E")
        self.assertEqual(echo.reports[0].status, DeliveryStatus.DELIVERED)
        self.assertEqual(hub.dispatch_depth, 0)

    def test_chained_echoes_nest_on_the_same_stack(self) -> None:
        class Relay(RecordingNode):
            def __init__(self, name: str, forward_to: str, limit: int) -> None:
                super().__init__(name)
                self.forward_to = forward_to
                self.limit = limit
                self.depths: list[int] = []

            def receive(self, event: Event) -> None:
                super().receive(event)
                assert self.hub is not None
                self.depths.append(self.hub.dispatch_depth)
                hops = int(event.payload)
                if hops < self.limit:
                    self.hub.send(
                        self.forward_to,
                        Event(kind=EventKind.TALK, origin=self.name, payload=str(hops + 1)),
                    )

        hub = EventHub()
        ping = Relay("ping", "pong", limit=6)
        pong = Relay("pong", "ping", limit=6)
        hub.register(ping)
        hub.register(pong)

        hub.send("ping", Event(kind=EventKind.TALK, payload="1"))

        self.assertEqual(ping.depths, [1, 3, 5])
        self.assertEqual(pong.depths, [2, 4, 6])
        self.assertEqual(hub.dispatch_depth, 0)

    def test_depth_limit_drops_nested_dispatch(self) -> None:
        hub = EventHub(max_dispatch_depth=1)
        origin = RecordingNode("O")
        echo = EchoNode("E")
        hub.register(origin)
        hub.register(echo)

        with self.assertLogs("stagehub.hub", level="WARNING") as logs:
            report = hub.emit(Event(kind=EventKind.CHORUS, origin="O"))

        self.assertTrue(report.delivered)
        self.assertEqual(len(echo.received), 1)
        self.assertEqual(origin.received, [])
        self.assertIs(echo.reports[0].status, DeliveryStatus.DEPTH_EXCEEDED)
        self.assertTrue(
            any("hub.dispatch.depth_exceeded" in line for line in logs.output)
        )

    def test_registration_during_dispatch_waits_for_next_pass(self) -> None:
        late = RecordingNode("late")

        class Recruiter(RecordingNode):
            def receive(self, event: Event) -> None:
                super().receive(event)
                assert self.hub is not None
                if "late" not in self.hub:
                    self.hub.register(late)

        hub = EventHub()
        hub.register(Recruiter("R"))
        hub.register(RecordingNode("S"))

        first = hub.emit(Event(kind=EventKind.TALK, origin="O"))
        self.assertEqual(first.recipients, {"R", "S"})
        self.assertEqual(late.received, [])

        second = hub.emit(Event(kind=EventKind.TALK, origin="O"))
        self.assertEqual(second.recipients, {"R", "S", "late"})
        self.assertEqual(len(late.received), 1)

    def test_receiver_failure_propagates_and_resets_depth(self) -> None:
        hub = EventHub()
        hub.register(FailingNode("F"))
        with self.assertRaises(RuntimeError):
            hub.send("F", Event(kind=EventKind.DROP))
        self.assertEqual(hub.dispatch_depth, 0)


if __name__ == "__main__":
    unittest.main()
