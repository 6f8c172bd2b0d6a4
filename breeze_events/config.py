"""
Emitter configuration.

Both flags default to off, which gives the plain dispatch contract:
callback exceptions propagate and nothing is logged per emit.
"""
import os

from pydantic import BaseModel

ISOLATE_ERRORS_ENV = "BREEZE_EVENTS_ISOLATE_ERRORS"
TRACE_ENV = "BREEZE_EVENTS_TRACE"


class EmitterConfig(BaseModel):
    # Log and continue when a callback raises instead of aborting the emit
    isolate_errors: bool = False
    # Log every emit at DEBUG with listener counts
    trace_emits: bool = False

    @classmethod
    def from_env(cls) -> "EmitterConfig":
        """Build a config from BREEZE_EVENTS_* environment flags ("1" enables)"""
        return cls(
            isolate_errors=os.environ.get(ISOLATE_ERRORS_ENV, "0") == "1",
            trace_emits=os.environ.get(TRACE_ENV, "0") == "1",
        )
