import abc
import itertools
import typing
from collections import defaultdict

import attr


BEFORE_SAVE = "Model.beforeSave"
AFTER_SAVE = "Model.afterSave"
AFTER_SAVE_COMMIT = "Model.afterSaveCommit"


@attr.s(auto_attribs=True)
class Event:
    name: str
    subject: typing.Any = None
    data: typing.Dict[str, typing.Any] = attr.Factory(dict)
    result: typing.Any = None
    _stopped: bool = False

    def stop_propagation(self) -> None:
        self._stopped = True

    def is_stopped(self) -> bool:
        return self._stopped


Listener = typing.Callable[[Event], typing.Any]


class EventDispatcher(abc.ABC):
    @abc.abstractmethod
    def dispatch(self, name: str, subject: typing.Any = None, **data: typing.Any) -> Event:
        pass


class EventManager(EventDispatcher):
    """Calls listeners in priority order (lower first, then registration order).

    A listener returning ``False`` stops propagation; any other non-None return value
    becomes the event result.
    """

    def __init__(self) -> None:
        self._listeners: typing.DefaultDict[str, typing.List[typing.Tuple[int, int, Listener]]] = defaultdict(list)
        self._sequence = itertools.count()

    def on(
        self, name: str, listener: typing.Optional[Listener] = None, priority: int = 10
    ) -> typing.Union[Listener, typing.Callable[[Listener], Listener]]:
        if listener is None:

            def decorator(func: Listener) -> Listener:
                self.on(name, func, priority)
                return func

            return decorator

        self._listeners[name].append((priority, next(self._sequence), listener))
        self._listeners[name].sort(key=lambda entry: entry[:2])
        return listener

    def off(self, name: str, listener: typing.Optional[Listener] = None) -> None:
        if listener is None:
            self._listeners.pop(name, None)
            return
        self._listeners[name] = [entry for entry in self._listeners[name] if entry[2] is not listener]

    def listeners(self, name: str) -> typing.List[Listener]:
        return [listener for _priority, _seq, listener in self._listeners.get(name, [])]

    def dispatch(self, name: str, subject: typing.Any = None, **data: typing.Any) -> Event:
        event = Event(name, subject, data)
        for listener in self.listeners(name):
            result = listener(event)
            if result is False:
                event.stop_propagation()
            if result is not None:
                event.result = result
            if event.is_stopped():
                break
        return event
