from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

from .config import ChartOptions, EngineSettings
from .context import ChartContext
from .normalizer import nearest_index

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0


class InteractionState(enum.Enum):
    IDLE = "idle"
    PANNING = "panning"
    ZOOMING_VERTICAL_AXIS = "zooming_vertical_axis"


class Target(str, enum.Enum):
    CHART = "chart"
    PRICE_AXIS = "price_axis"


class EventKind(str, enum.Enum):
    DOWN = "down"
    UP = "up"
    MOVE = "move"
    ENTER = "enter"
    LEAVE = "leave"
    WHEEL = "wheel"


@dataclass(frozen=True)
class InputEvent:
    """
    One pointer or wheel event in the host's pointer coordinates.

    ``movement_x``/``movement_y`` are deltas since the previous move;
    ``delta_y`` is the wheel delta, positive when scrolling away from the user.
    """

    kind: EventKind
    x: float = 0.0
    y: float = 0.0
    button: int = PRIMARY_BUTTON
    movement_x: float = 0.0
    movement_y: float = 0.0
    delta_y: float = 0.0
    target: Target = Target.CHART


def pointer_down(x: float, y: float, button: int = PRIMARY_BUTTON, target: Target = Target.CHART) -> InputEvent:
    return InputEvent(EventKind.DOWN, x, y, button=button, target=target)


def pointer_up(x: float, y: float, button: int = PRIMARY_BUTTON, target: Target = Target.CHART) -> InputEvent:
    return InputEvent(EventKind.UP, x, y, button=button, target=target)


def pointer_move(
    x: float,
    y: float,
    movement_x: float = 0.0,
    movement_y: float = 0.0,
    target: Target = Target.CHART,
) -> InputEvent:
    return InputEvent(EventKind.MOVE, x, y, movement_x=movement_x, movement_y=movement_y, target=target)


def pointer_enter(x: float = 0.0, y: float = 0.0, target: Target = Target.CHART) -> InputEvent:
    return InputEvent(EventKind.ENTER, x, y, target=target)


def pointer_leave(target: Target = Target.CHART) -> InputEvent:
    return InputEvent(EventKind.LEAVE, target=target)


def wheel(x: float, y: float, delta_y: float) -> InputEvent:
    return InputEvent(EventKind.WHEEL, x, y, delta_y=delta_y)


@dataclass(frozen=True)
class Outcome:
    redraw: bool = False
    renormalize: bool = False


NOTHING = Outcome()
REDRAW = Outcome(redraw=True)
RENORMALIZE = Outcome(redraw=True, renormalize=True)


class InteractionMachine:
    """
    Gesture state machine over a chart's context.

    Every handler is total: unknown buttons, targets and out-of-canvas
    positions are ignored or clamped, never rejected. ``dispatch`` reports
    whether the frame needs redrawing and whether geometry must be projected
    again; it never draws.
    """

    def __init__(self, context: ChartContext, settings: EngineSettings, options: ChartOptions) -> None:
        self.context = context
        self.settings = settings
        self.options = options
        self.state = InteractionState.IDLE

    def dispatch(self, event: InputEvent) -> Outcome:
        handler = getattr(self, f"_on_{event.kind.value}")
        return handler(event)

    def reset(self) -> None:
        self._set_state(InteractionState.IDLE)

    def resolve_pointer_index(self) -> int:
        ctx = self.context
        ctx.pointer.index = nearest_index(ctx.pointer.x, ctx.origin[0], ctx.viewport, ctx.count)
        return ctx.pointer.index

    def _set_state(self, state: InteractionState) -> None:
        self.state = state
        pointer = self.context.pointer
        pointer.is_panning = state is InteractionState.PANNING
        pointer.is_zooming_vertical = state is InteractionState.ZOOMING_VERTICAL_AXIS

    def _track(self, event: InputEvent) -> None:
        if event.target is Target.CHART:
            self.context.pointer.x = event.x
            self.context.pointer.y = event.y

    def _on_down(self, event: InputEvent) -> Outcome:
        if event.target is Target.PRICE_AXIS:
            if event.button == PRIMARY_BUTTON:
                self._set_state(InteractionState.ZOOMING_VERTICAL_AXIS)
            return NOTHING
        if event.button == PRIMARY_BUTTON and self.state is InteractionState.IDLE:
            self._track(event)
            self._set_state(InteractionState.PANNING)
        return NOTHING

    def _on_up(self, event: InputEvent) -> Outcome:
        if event.target is Target.PRICE_AXIS:
            if self.state is InteractionState.ZOOMING_VERTICAL_AXIS:
                self._set_state(InteractionState.IDLE)
            return NOTHING
        if event.button == PRIMARY_BUTTON and self.state is InteractionState.PANNING:
            self._set_state(InteractionState.IDLE)
        return NOTHING

    def _on_enter(self, event: InputEvent) -> Outcome:
        if event.target is not Target.CHART:
            return NOTHING
        self.context.pointer.visible = True
        self._track(event)
        self.resolve_pointer_index()
        return REDRAW

    def _on_leave(self, event: InputEvent) -> Outcome:
        if event.target is Target.PRICE_AXIS:
            if self.state is InteractionState.ZOOMING_VERTICAL_AXIS:
                self._set_state(InteractionState.IDLE)
            return NOTHING
        self.context.pointer.visible = False
        self.context.stroke_width = self.options.graph_stroke.width
        self._set_state(InteractionState.IDLE)
        return REDRAW

    def _on_move(self, event: InputEvent) -> Outcome:
        if event.target is Target.PRICE_AXIS:
            if self.state is not InteractionState.ZOOMING_VERTICAL_AXIS:
                return NOTHING
            return self._zoom_vertical(event.movement_y)

        ctx = self.context
        ctx.stroke_width = self.options.graph_stroke.hover_width
        self._track(event)
        outcome = REDRAW
        if self.state is InteractionState.PANNING:
            if ctx.viewport.pan(event.movement_x):
                outcome = RENORMALIZE
        self.resolve_pointer_index()
        return outcome

    def _on_wheel(self, event: InputEvent) -> Outcome:
        if event.delta_y == 0 or event.target is not Target.CHART:
            return NOTHING
        self._track(event)
        direction = 1 if event.delta_y > 0 else -1
        if not self.zoom_horizontal(direction, self.context.local_x(event.x)):
            self.resolve_pointer_index()
            return REDRAW
        self.resolve_pointer_index()
        return RENORMALIZE

    def zoom_horizontal(self, direction: int, anchor_x: float) -> bool:
        """One zoom step around ``anchor_x``, skipped if it breaks the candle density band."""
        ctx = self.context
        trial = ctx.viewport.copy()
        if not trial.zoom(direction, anchor_x, self.settings.zoom_divisor):
            return False
        count = ctx.count
        if count > 0:
            before = ctx.viewport.floating_width / count
            after = trial.floating_width / count
            too_dense = after < self.settings.min_candle_px and after < before
            too_sparse = after > self.settings.max_candle_px and after > before
            if too_dense or too_sparse:
                logger.debug("zoom rejected: candle width %.3fpx -> %.3fpx", before, after)
                return False
        ctx.viewport.left = trial.left
        ctx.viewport.right = trial.right
        return True

    def _zoom_vertical(self, movement_y: float) -> Outcome:
        if movement_y == 0 or not math.isfinite(movement_y):
            return NOTHING
        ctx = self.context
        k = ctx.zoom + (movement_y / self.settings.axis_drag_divisor) * ctx.zoom
        k = min(max(k, self.settings.min_zoom), self.settings.max_zoom)
        if k == ctx.zoom:
            return NOTHING
        ctx.zoom = k
        return RENORMALIZE
