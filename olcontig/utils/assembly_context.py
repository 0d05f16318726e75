from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, List, Type
import logging

import olcontig.utils.assembly_events as events


class AssemblyContext:
    """ Collects the events of one assembly run.

    Stages call log() without passing the context around, and the driver
    reads the collected anomalies at the end of the run.
    """

    def __init__(self) -> None:
        self.events: List[events.EventType] = []

    def emit(self, event: events.EventType) -> None:
        self.events.append(event)

    def find(self, event_type: Type) -> List[events.EventType]:
        return [event for event in self.events if isinstance(event, event_type)]

    @property
    def anomalies(self) -> List[events.EventType]:
        return [event for event in self.events
                if isinstance(event, events.ANOMALIES)]

    @classmethod
    def get(cls) -> 'AssemblyContext':
        return _assembly_context.get()

    @classmethod
    @contextmanager
    def fresh(cls) -> Iterator['AssemblyContext']:
        ctx = cls()
        token = _assembly_context.set(ctx)
        try:
            yield ctx
        finally:
            _assembly_context.reset(token)


def log(logger: logging.Logger,
        event: events.EventType,
        level: int = logging.DEBUG) -> None:
    """
    Emit an event to the current assembly context, if any, and log it.
    """
    ctx = _assembly_context.get(None)
    if ctx is not None:
        ctx.emit(event)
    logger.log(level, "%s", event)


_assembly_context: ContextVar[AssemblyContext] = ContextVar("AssemblyContext")
