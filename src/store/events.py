import inspect
from typing import Any, Awaitable, Callable, List


Listener = Callable[..., Any]


class Signal:
    """
    Minimal observer list.

    Listeners are called in connection order. A listener may return an awaitable;
    emit() hands those back to the caller, emit_async() awaits them in order.
    """

    def __init__(self, name: str = "signal"):
        self.name = name
        self._listeners: List[Listener] = []

    def connect(self, listener: Listener) -> Listener:
        if listener not in self._listeners:
            self._listeners.append(listener)
        return listener

    def disconnect(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __len__(self) -> int:
        return len(self._listeners)

    def emit(self, *args) -> List[Awaitable]:
        pending = []
        # copy, a listener may disconnect itself
        for listener in list(self._listeners):
            result = listener(*args)
            if inspect.isawaitable(result):
                pending.append(result)
        return pending

    async def emit_async(self, *args) -> None:
        for awaitable in self.emit(*args):
            await awaitable
