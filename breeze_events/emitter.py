"""
Synchronous in-process event emitter.

Callbacks are registered per event id with on() and invoked by emit()
in registration order, followed by wildcard callbacks registered with
on_any(). Wildcard callbacks receive the event id as their first argument.

emit() works on a snapshot of both callback lists taken before the first
callback runs, so registrations or removals made by a callback apply from
the next emit onward.
"""
import logging
import threading
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from .config import EmitterConfig

logger = logging.getLogger(__name__)

Callback = Callable[..., Any]


def _callback_name(callback: Callback) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class Disposer:
    """
    Handle for a single registration, returned by on() and on_any().

    Calling it removes the first remaining occurrence of the registered
    callback from the current list. Further calls after a successful
    removal do nothing.
    """

    def __init__(
        self,
        emitter: "BreezeEventEmitter",
        event_id: Optional[Hashable],
        callback: Callback,
        wildcard: bool = False
    ):
        self._emitter = emitter
        self.event_id = event_id
        self.callback = callback
        self.wildcard = wildcard
        self.disposed = False

    def dispose(self) -> bool:
        """Remove the registration. Returns True if something was removed."""
        # Check, removal and flag update must be atomic across threads
        with self._emitter._lock:
            if self.disposed:
                return False
            if self.wildcard:
                removed = self._emitter._remove_any_callback(self.callback)
            else:
                removed = self._emitter._remove_callback(self.event_id, self.callback)
            if removed:
                self.disposed = True
            return removed

    def __call__(self) -> bool:
        return self.dispose()

    def __repr__(self) -> str:
        target = "*" if self.wildcard else repr(self.event_id)
        return f"Disposer({target}, {_callback_name(self.callback)}, disposed={self.disposed})"


class BreezeEventEmitter:
    """
    Minimal synchronous event emitter.

    Usage:
        events = BreezeEventEmitter()
        dispose = events.on("user-added", on_user_added)
        events.on_any(audit)
        events.emit("user-added", user)   # on_user_added(user); audit("user-added", user)
        dispose()
    """

    def __init__(self, config: Optional[EmitterConfig] = None):
        self.config = config or EmitterConfig()
        self._callbacks: Dict[Hashable, List[Callback]] = {}
        self._any_callbacks: List[Callback] = []
        # Guards the lists only; callbacks are always invoked outside it
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def on(self, event_id: Hashable, callback: Callback) -> Disposer:
        """
        Add a callback for an event.

        Args:
            event_id: Event identifier
            callback: Called with the emit() payload

        Returns:
            Disposer that cancels this registration
        """
        with self._lock:
            self._callbacks.setdefault(event_id, []).append(callback)
        logger.debug(f"Registered {_callback_name(callback)} for {event_id!r}")
        return Disposer(self, event_id, callback)

    def off(self, event_id: Hashable) -> None:
        """Remove all callbacks for an event. Wildcard callbacks are kept."""
        with self._lock:
            self._callbacks[event_id] = []
        logger.debug(f"Cleared callbacks for {event_id!r}")

    def on_any(self, callback: Callback) -> Disposer:
        """
        Add a callback for every event.

        The callback is called as callback(event_id, *payload).
        """
        with self._lock:
            self._any_callbacks.append(callback)
        logger.debug(f"Registered wildcard {_callback_name(callback)}")
        return Disposer(self, None, callback, wildcard=True)

    def off_any(self) -> None:
        """Remove all wildcard callbacks"""
        with self._lock:
            self._any_callbacks.clear()
        logger.debug("Cleared wildcard callbacks")

    def _remove_callback(self, event_id: Hashable, callback: Callback) -> bool:
        with self._lock:
            return self._remove_first(self._callbacks.get(event_id), callback)

    def _remove_any_callback(self, callback: Callback) -> bool:
        with self._lock:
            return self._remove_first(self._any_callbacks, callback)

    @staticmethod
    def _remove_first(callbacks: Optional[List[Callback]], callback: Callback) -> bool:
        if not callbacks:
            return False
        for index, registered in enumerate(callbacks):
            if registered is callback:
                del callbacks[index]
                return True
        return False

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def emit(self, event_id: Hashable, *args: Any) -> None:
        """
        Invoke every callback for event_id with args, then every wildcard
        callback with (event_id, *args).

        Exceptions raised by callbacks propagate and stop the remaining
        callbacks, unless config.isolate_errors is set.
        """
        with self._lock:
            callbacks = list(self._callbacks.get(event_id, ()))
            any_callbacks = list(self._any_callbacks)

        if self.config.trace_emits:
            logger.debug(
                f"Emit {event_id!r}: {len(callbacks)} callbacks, "
                f"{len(any_callbacks)} wildcard"
            )

        for callback in callbacks:
            self._invoke(event_id, callback, args)

        any_args = (event_id,) + args
        for callback in any_callbacks:
            self._invoke(event_id, callback, any_args)

    def _invoke(self, event_id: Hashable, callback: Callback, args: Tuple[Any, ...]) -> None:
        if not self.config.isolate_errors:
            callback(*args)
            return
        try:
            callback(*args)
        except Exception:
            logger.exception(f"Callback error for {event_id!r}: {_callback_name(callback)}")

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def listeners(self, event_id: Hashable) -> List[Callback]:
        """Copy of the callbacks currently registered for event_id"""
        with self._lock:
            return list(self._callbacks.get(event_id, ()))

    def any_listeners(self) -> List[Callback]:
        """Copy of the wildcard callbacks"""
        with self._lock:
            return list(self._any_callbacks)

    def listener_count(self, event_id: Optional[Hashable] = None) -> int:
        """Callbacks for one event, or all callbacks plus wildcards when no id is given"""
        with self._lock:
            if event_id is not None:
                return len(self._callbacks.get(event_id, ()))
            return sum(len(cbs) for cbs in self._callbacks.values()) + len(self._any_callbacks)

    def event_ids(self) -> List[Hashable]:
        """Event ids that currently have at least one callback"""
        with self._lock:
            return [event_id for event_id, cbs in self._callbacks.items() if cbs]
