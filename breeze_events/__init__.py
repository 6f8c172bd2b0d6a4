from .emitter import BreezeEventEmitter, Disposer
from .config import EmitterConfig
from .errors import BreezeEventsError, UnknownEventError, PayloadValidationError
from .schema import EventSchema, TypedEventEmitter
from .version import BREEZE_EVENTS_VERSION, get_version_string

__version__ = BREEZE_EVENTS_VERSION
