"""
Tests for EventSchema and TypedEventEmitter payload checks.
"""
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from breeze_events import (
    BreezeEventEmitter, EventSchema, PayloadValidationError,
    TypedEventEmitter, UnknownEventError
)


class User(BaseModel):
    id: str
    name: str
    age: int


class Session:
    """Plain class, checked by isinstance"""
    pass


TEST_USER = User(id="some-id", name="Test User Name", age=123)

EVENTS = {
    "user-connect": (User, str),
    "user-disconnect": (User,),
    "session-open": Session,
    "heartbeat": (),
}


@pytest.fixture
def schema():
    return EventSchema(EVENTS)


class TestEventSchema:
    """Declared shapes and validation"""

    def test_declared_ids(self, schema):
        assert "user-connect" in schema
        assert "unknown" not in schema
        assert schema.event_ids() == list(EVENTS)

    def test_arity(self, schema):
        assert schema.arity("user-connect") == 2
        assert schema.arity("session-open") == 1
        assert schema.arity("heartbeat") == 0

    def test_arity_unknown(self, schema):
        with pytest.raises(UnknownEventError):
            schema.arity("unknown")

    def test_valid_payload(self, schema):
        schema.validate("user-connect", (TEST_USER, "hello"))
        schema.validate("session-open", (Session(),))
        schema.validate("heartbeat", ())

    def test_wrong_arity(self, schema):
        with pytest.raises(PayloadValidationError) as exc_info:
            schema.validate("user-connect", (TEST_USER,))
        assert exc_info.value.event_id == "user-connect"
        assert exc_info.value.errors

    def test_wrong_type_is_not_coerced(self, schema):
        with pytest.raises(PayloadValidationError):
            schema.validate("user-connect", (TEST_USER, 42))

    def test_plain_class_checked(self, schema):
        with pytest.raises(PayloadValidationError):
            schema.validate("session-open", (object(),))

    def test_unknown_event(self, schema):
        with pytest.raises(UnknownEventError) as exc_info:
            schema.validate("unknown", ())
        assert exc_info.value.event_id == "unknown"


class TestTypedEventEmitter:
    """Validation happens before any callback runs"""

    def test_is_an_emitter(self):
        assert isinstance(TypedEventEmitter(EVENTS), BreezeEventEmitter)

    def test_accepts_schema_instance(self, schema):
        assert TypedEventEmitter(schema).schema is schema

    def test_valid_emit_forwards_payload(self):
        events = TypedEventEmitter(EVENTS)
        callback = MagicMock()
        any_callback = MagicMock()
        events.on("user-connect", callback)
        events.on_any(any_callback)

        events.emit("user-connect", TEST_USER, "hello")

        callback.assert_called_once_with(TEST_USER, "hello")
        assert callback.call_args.args[0] is TEST_USER
        any_callback.assert_called_once_with("user-connect", TEST_USER, "hello")

    def test_invalid_emit_calls_nothing(self):
        events = TypedEventEmitter(EVENTS)
        callback = MagicMock()
        any_callback = MagicMock()
        events.on("user-connect", callback)
        events.on_any(any_callback)

        with pytest.raises(PayloadValidationError):
            events.emit("user-connect", TEST_USER)

        callback.assert_not_called()
        any_callback.assert_not_called()

    def test_unknown_allowed_by_default(self):
        events = TypedEventEmitter(EVENTS)
        callback = MagicMock()
        events.on("custom", callback)
        events.emit("custom", 1, 2, 3)
        callback.assert_called_once_with(1, 2, 3)

    def test_unknown_rejected_when_strict(self):
        events = TypedEventEmitter(EVENTS, allow_unknown=False)

        with pytest.raises(UnknownEventError):
            events.on("custom", MagicMock())
        with pytest.raises(UnknownEventError):
            events.emit("custom")

    def test_wildcards_not_restricted(self):
        events = TypedEventEmitter(EVENTS, allow_unknown=False)
        any_callback = MagicMock()
        events.on_any(any_callback)
        events.emit("heartbeat")
        any_callback.assert_called_once_with("heartbeat")

    def test_disposer_still_works(self):
        events = TypedEventEmitter(EVENTS)
        callback = MagicMock()
        disposer = events.on("user-disconnect", callback)
        disposer()
        events.emit("user-disconnect", TEST_USER)
        callback.assert_not_called()
