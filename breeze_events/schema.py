"""
Opt-in runtime payload checks.

An EventSchema maps event ids to the positional payload types emit() is
expected to carry, e.g.

    schema = EventSchema({
        "user-connect": (User, str),
        "user-disconnect": (User,),
    })

TypedEventEmitter validates every emit() against it before any callback
runs. Validation is strict (no coercion) and never rewrites the payload:
callbacks receive exactly the objects that were emitted.
"""
import logging
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ConfigDict, TypeAdapter, ValidationError

from .config import EmitterConfig
from .emitter import BreezeEventEmitter, Callback, Disposer
from .errors import PayloadValidationError, UnknownEventError

logger = logging.getLogger(__name__)

PayloadShape = Union[type, Sequence[Any]]

_ADAPTER_CONFIG = ConfigDict(arbitrary_types_allowed=True)


class EventSchema:
    """Static table of event id -> payload argument types"""

    def __init__(self, shapes: Mapping[Hashable, PayloadShape]):
        self._shapes: Dict[Hashable, Tuple[Any, ...]] = {}
        self._adapters: Dict[Hashable, TypeAdapter] = {}
        for event_id, shape in shapes.items():
            types = tuple(shape) if isinstance(shape, (list, tuple)) else (shape,)
            self._shapes[event_id] = types
            self._adapters[event_id] = TypeAdapter(Tuple[types], config=_ADAPTER_CONFIG)

    def __contains__(self, event_id: Hashable) -> bool:
        return event_id in self._shapes

    def event_ids(self) -> List[Hashable]:
        return list(self._shapes)

    def arity(self, event_id: Hashable) -> int:
        if event_id not in self._shapes:
            raise UnknownEventError(event_id)
        return len(self._shapes[event_id])

    def validate(self, event_id: Hashable, args: Iterable[Any]) -> None:
        """
        Check a payload against the declared shape.

        Raises:
            UnknownEventError: event_id is not declared
            PayloadValidationError: wrong number or types of arguments
        """
        adapter = self._adapters.get(event_id)
        if adapter is None:
            raise UnknownEventError(event_id)
        try:
            adapter.validate_python(tuple(args), strict=True)
        except ValidationError as e:
            raise PayloadValidationError(event_id, e) from e


class TypedEventEmitter(BreezeEventEmitter):
    """
    Emitter that checks payloads against an EventSchema.

    With allow_unknown=False, on() and emit() also reject event ids the
    schema does not declare. Wildcard registration is never restricted.
    """

    def __init__(
        self,
        schema: Union[EventSchema, Mapping[Hashable, PayloadShape]],
        allow_unknown: bool = True,
        config: Optional[EmitterConfig] = None
    ):
        super().__init__(config)
        self.schema = schema if isinstance(schema, EventSchema) else EventSchema(schema)
        self.allow_unknown = allow_unknown

    def _check_known(self, event_id: Hashable) -> bool:
        if event_id in self.schema:
            return True
        if not self.allow_unknown:
            raise UnknownEventError(event_id)
        return False

    def on(self, event_id: Hashable, callback: Callback) -> Disposer:
        self._check_known(event_id)
        return super().on(event_id, callback)

    def emit(self, event_id: Hashable, *args: Any) -> None:
        if self._check_known(event_id):
            try:
                self.schema.validate(event_id, args)
            except PayloadValidationError:
                logger.warning(f"Rejected emit of {event_id!r} with {len(args)} args")
                raise
        super().emit(event_id, *args)
