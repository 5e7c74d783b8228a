# rui/listeners.py
"""
Event listeners.

An event delivers up to three arguments: the view, the new value and the old
value. A listener takes any prefix of them, so ``lambda: ...``,
``lambda view: ...``, ``lambda view, value: ...`` and
``lambda view, value, old: ...`` are all valid for a two-argument event.
When the first parameter is annotated with a type that is not a view, the
view is skipped and the listener receives ``(value)`` or ``(value, old)``.

A listener may also be the name of a method of the view's ``binding``
object; the method is looked up when the event fires.
"""
import inspect
import logging
from typing import Any, Callable, List, Optional, Sequence, Union

from .errors import BindingError

logger = logging.getLogger(__name__)


def _positional_count(func: Callable) -> Optional[int]:
    """Number of positional parameters, -1 for ``*args``, None if unknown."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind == parameter.VAR_POSITIONAL:
            return -1
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def _skips_view(func: Callable) -> bool:
    from .view import View

    try:
        parameters = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return False
    if not parameters:
        return False
    annotation = parameters[0].annotation
    if annotation is inspect.Parameter.empty or annotation is Any or isinstance(annotation, str):
        return False
    return inspect.isclass(annotation) and not issubclass(annotation, View)


class EventListener:
    """
    One listener of an event with ``arity`` value arguments (0, 1 or 2).

    :param handler: A callable, or the name of a method of the view's binding object.
    :param arity: Number of values the event delivers besides the view.
    """

    def __init__(self, handler: Union[Callable, str], arity: int):
        self.handler = handler
        self.arity = arity
        self._count: Optional[int] = None
        self._skip_view = False
        if callable(handler):
            self._count = _positional_count(handler)
            self._skip_view = _skips_view(handler)
            if not self._accepts(self._count, self._skip_view):
                raise BindingError(f"{handler!r} does not accept the arguments of this event")
        elif not isinstance(handler, str) or not handler:
            raise BindingError(f"{handler!r} is neither a callable nor a binding name")

    def _accepts(self, count: Optional[int], skip_view: bool) -> bool:
        if count is None or count == -1:
            return True
        return count <= self.arity + (0 if skip_view else 1)

    @property
    def binding_name(self) -> Optional[str]:
        return self.handler if isinstance(self.handler, str) else None

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, EventListener) and self.handler == other.handler and self.arity == other.arity

    def __hash__(self) -> int:
        return hash((self.handler, self.arity))

    def __repr__(self) -> str:
        return f"EventListener({self.handler!r}, {self.arity})"

    def __call__(self, view: Any, *args: Any) -> None:
        values = args[:self.arity]
        if isinstance(self.handler, str):
            try:
                func, count, skip_view = self._resolve(view)
            except BindingError as e:
                logger.error("%s", e)
                return
        else:
            func, count, skip_view = self.handler, self._count, self._skip_view

        arguments = values if skip_view else (view, *values)
        if count is not None and count >= 0:
            arguments = arguments[:count]
        func(*arguments)

    def _resolve(self, view: Any):
        target = view.binding() if hasattr(view, "binding") else None
        if target is None:
            raise BindingError(f"{self.handler!r}: the view has no binding object")
        func = getattr(target, self.handler, None)
        if func is None or not callable(func):
            raise BindingError(f"{type(target).__name__} has no method {self.handler!r}")
        count = _positional_count(func)
        skip_view = _skips_view(func)
        if not self._accepts(count, skip_view):
            raise BindingError(f"{type(target).__name__}.{self.handler} has an incompatible signature")
        return func, count, skip_view


def make_listeners(value: Any, arity: int) -> Optional[List[EventListener]]:
    """
    Convert a listener value to a list of :class:`EventListener`.

    :param value: A callable, a binding name, an EventListener, or a list of those.
    :param arity: Number of values the event delivers besides the view.
    :return: The listeners, or None (with an error log) if any item is invalid.
    """
    items: Sequence[Any]
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = [value]

    listeners = []
    for item in items:
        if isinstance(item, EventListener):
            if item.arity == arity:
                listeners.append(item)
                continue
            item = item.handler
        try:
            listeners.append(EventListener(item, arity))
        except BindingError as e:
            logger.error("Invalid listener: %s", e)
            return None
    return listeners
