"""Tests for the broadcast entry point: scenarios, idempotence and form state."""

from __future__ import annotations

import pytest

from formpatch.models.config import BroadcastConfig
from formpatch.models.operations import OperationKind, PatchOperation
from formpatch.patching.attribute_spec import InvalidSpecError
from formpatch.patching.broadcaster import Broadcaster, broadcast_errors
from formpatch.patching.walker import MissingErrorStateError
from formpatch.service.transport import InMemoryTransport
from tests.conftest import Comment, LineItem, Order, Post


class TestScenarios:
    def test_single_invalid_attribute(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(suffix="!")
        post = Post(id=1, errors={"name": ["can't be blank"]})
        ops = Broadcaster(config, transport).broadcast_errors(post, "name")
        assert PatchOperation.add_marker("post_1_form_name_container", "error") in ops
        assert PatchOperation.set_text("post_1_form_name_error", "can't be blank!") in ops

    def test_nested_collection_member(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(emit_events=True)
        items = [Comment(id=20, errors={"price": ["must be positive"]})]
        post = Post(id=1, errors={"items.price": ["must be positive"]}, items=items)
        ops = Broadcaster(config, transport).broadcast_errors(
            post, {"title": "", "items_attributes": {"0": "price"}}
        )
        details = [op.payload["detail"] for op in ops if op.kind == OperationKind.DISPATCH_EVENT]
        assert {"resource": "post", "attribute": "title"} in details
        assert {
            "resource": "post_items_attributes_0",
            "attribute": "price",
            "text": "must be positive",
        } in details
        assert PatchOperation.add_marker("comment_20_form_price_container", "error") in ops
        assert PatchOperation.remove_marker("post_1_form_title_container", "error") in ops

    def test_fully_valid_model(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(disable_submit=True)
        post = Post(id=1)
        ops = Broadcaster(config, transport).broadcast_errors(post, ["title", "body"])
        form_ops = [op for op in ops if op.target == "post_1_form"]
        assert form_ops == [
            PatchOperation.remove_marker("post_1_form", "invalid"),
            PatchOperation.clear_attribute("post_1_form", "disabled"),
        ]
        assert all(op.kind != OperationKind.ADD_MARKER for op in ops)
        assert post.validations == 1

    def test_base_error_set_then_cleared(self, transport: InMemoryTransport) -> None:
        broadcaster = Broadcaster(BroadcastConfig(), transport)
        post = Post(id=1, errors={"base": ["Post is locked", "Try later"]})
        ops = broadcaster.broadcast_errors(post, [])
        assert PatchOperation.set_text("post_1_form_base_error", "Post is locked, Try later") in ops

        post.errors.clear()
        ops = broadcaster.broadcast_errors(post, [])
        assert PatchOperation.set_text("post_1_form_base_error", "") in ops


class TestFormState:
    def test_invalid_form(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(emit_events=True, disable_submit=True)
        post = Post(id=1, errors={"title": ["x"]})
        ops = Broadcaster(config, transport).broadcast_errors(post, "title")
        assert ops[-3:] == (
            PatchOperation.dispatch_event("formpatch:form:invalid", {"resource": "post"}),
            PatchOperation.add_marker("post_1_form", "invalid"),
            PatchOperation.set_attribute("post_1_form", "disabled"),
        )

    def test_valid_form_event(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(emit_events=True)
        ops = Broadcaster(config, transport).broadcast_errors(Post(id=1), "title")
        assert ops[-2:] == (
            PatchOperation.dispatch_event("formpatch:form:valid", {"resource": "post"}),
            PatchOperation.remove_marker("post_1_form", "invalid"),
        )

    def test_empty_form_class_skips_marker(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(form_class="")
        ops = Broadcaster(config, transport).broadcast_errors(Post(id=1, errors={"a": ["x"]}), [])
        assert ops == (PatchOperation.set_text("post_1_form_base_error", ""),)

    def test_independent_submit_selector(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(disable_submit=True, submit_selector="submit")
        ops = Broadcaster(config, transport).broadcast_errors(Post(id=1, errors={"a": ["x"]}), [])
        assert ops[-1] == PatchOperation.set_attribute("post_1_submit", "disabled")

    def test_event_prefix(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(emit_events=True, event_prefix="")
        ops = Broadcaster(config, transport).broadcast_errors(Post(id=1), [])
        assert ops[1].payload["name"] == "form:valid"


class TestIdempotence:
    def test_repeated_calls_are_identical(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(emit_events=True, disable_submit=True)
        comments = [Comment(id=1, errors={"body": ["is too short"]}), Comment(id=2)]
        post = Post(id=9, errors={"title": ["x"], "base": ["locked"]}, comments=comments)
        spec = {"title": "", "slug": "", "comments_attributes": {"0": "body", "1": "body"}}
        broadcaster = Broadcaster(config, transport)

        first = broadcaster.broadcast_errors(post, spec)
        second = broadcaster.broadcast_errors(post, spec)

        assert first == second
        assert [op.to_wire() for op in first] == [op.to_wire() for op in second]

    def test_no_duplicate_operations_within_a_call(self, transport: InMemoryTransport) -> None:
        post = Post(id=9, errors={"title": ["x"]})
        ops = Broadcaster(BroadcastConfig(), transport).broadcast_errors(
            post, ["title", "title", ["title"]]
        )
        assert len(ops) == len(set(op.model_dump_json() for op in ops))


class TestDelivery:
    def test_one_batch_per_call(self, broadcaster: Broadcaster, transport: InMemoryTransport) -> None:
        ops = broadcaster.broadcast_errors(Post(id=1, errors={"title": ["x"]}), "title")
        assert len(transport.broadcasts) == 1
        assert transport.last is not None
        assert transport.last.channel == "FormPatchChannel"
        assert transport.last.operations == ops

    def test_channel_resolved_from_context(self, transport: InMemoryTransport) -> None:
        config = BroadcastConfig(channel=lambda context: f"user:{context['user_id']}")
        Broadcaster(config, transport, context={"user_id": 7}).broadcast_errors(Post(id=1), [])
        assert transport.last is not None
        assert transport.last.channel == "user:7"

    @pytest.mark.parametrize("attributes", [42, "", ["title", ""]])
    def test_invalid_spec_publishes_nothing(
        self, broadcaster: Broadcaster, transport: InMemoryTransport, attributes: object
    ) -> None:
        post = Post(id=1)
        with pytest.raises(InvalidSpecError):
            broadcaster.broadcast_errors(post, attributes)
        assert transport.broadcasts == []
        assert post.validations == 0

    def test_missing_error_state_publishes_nothing(
        self, broadcaster: Broadcaster, transport: InMemoryTransport
    ) -> None:
        with pytest.raises(MissingErrorStateError):
            broadcaster.broadcast_errors(object(), "title")
        assert transport.broadcasts == []

    def test_collect_does_not_publish(
        self, broadcaster: Broadcaster, transport: InMemoryTransport
    ) -> None:
        session = broadcaster.collect(Post(id=1), "title")
        assert len(session) > 0
        assert not session.flushed
        assert transport.broadcasts == []

    def test_module_function(self, transport: InMemoryTransport) -> None:
        ops = broadcast_errors(Post(id=1), "title", transport=transport)
        assert transport.last is not None
        assert transport.last.operations == ops


class TestFormRecords:
    def test_pydantic_validation_drives_operations(self, transport: InMemoryTransport) -> None:
        order = Order(
            id=5,
            reference="A-100",
            lines=[LineItem(id=1, description="Widget"), LineItem(id=2, description=" ")],
        )
        spec = {"reference": "", "lines_attributes": {"0": ["description"], "1": ["description"]}}
        ops = Broadcaster(BroadcastConfig(), transport).broadcast_errors(order, spec)

        assert order.errors["lines.description"] == ["can't be blank"]
        assert PatchOperation.set_text("line_item_2_form_description_error", "can't be blank") in ops
        assert PatchOperation.set_text("line_item_1_form_description_error", "") in ops
        assert PatchOperation.remove_marker("order_5_form_reference_container", "error") in ops
        assert ops[-1] == PatchOperation.add_marker("order_5_form", "invalid")

    def test_model_validator_message_lands_in_base(self, transport: InMemoryTransport) -> None:
        order = Order(id=5, reference="LOCKED")
        ops = Broadcaster(BroadcastConfig(), transport).broadcast_errors(order, "reference")
        assert ops[0] == PatchOperation.set_text("order_5_form_base_error", "Order is locked")
