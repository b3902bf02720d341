from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from .config import ChartOptions, EngineSettings
from .context import ChartContext
from .errors import ConfigurationError
from .geometry import ScreenGeometry, project
from .grid import GridPlan, plan_grid
from .interaction import InputEvent, InteractionMachine, InteractionState
from .render import Frame, RenderOrchestrator
from .samples import History
from .surface import DrawingSurface, SurfaceHost
from .variants import ChartVariant, variant_for
from .viewport import Viewport

logger = logging.getLogger(__name__)

_HOST_METHODS = ("canvas_size", "begin_frame", "end_frame")


class Chart:
    """
    Interactive price chart bound to one host.

    The host supplies canvas size and a surface per frame (see
    ``SurfaceHost``). History, viewport, zoom factor and pointer live in this
    instance's ``context``; every input event is applied and redrawn before
    ``handle`` returns.
    """

    def __init__(
        self,
        container: Optional[SurfaceHost],
        history: Optional[Iterable[Any]] = None,
        options: Union[ChartOptions, Mapping[str, Any], None] = None,
        *,
        kind: Union[str, ChartVariant] = "candles",
        settings: Optional[EngineSettings] = None,
    ) -> None:
        if container is None or not all(callable(getattr(container, m, None)) for m in _HOST_METHODS):
            raise ConfigurationError("no container is found")
        width, height = self._size_of(container)
        self.host = container
        self.options = options if isinstance(options, ChartOptions) else ChartOptions.from_mapping(options)
        self.settings = settings or EngineSettings()
        self.variant = variant_for(kind)
        self.context = ChartContext(
            history=History.empty(self.variant.sample_kind),
            viewport=Viewport(width, margin=self.settings.panel_margin),
            height=height,
            zoom=self.settings.initial_zoom,
            stroke_width=self.options.graph_stroke.width,
            origin=self._origin_of(container),
        )
        self.interaction = InteractionMachine(self.context, self.settings, self.options)
        self.renderer = RenderOrchestrator(self.variant, self.options)
        self._geometry: Optional[ScreenGeometry] = None
        self._grid: Optional[GridPlan] = None

        if history is not None:
            self.load_history(history)
        else:
            self.redraw()

    @staticmethod
    def _size_of(container: SurfaceHost):
        try:
            width, height = container.canvas_size()
            width, height = float(width), float(height)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"container has no usable canvas size: {exc}") from exc
        if width < 0 or height < 0:
            raise ConfigurationError(f"container has a negative canvas size: {width}x{height}")
        return width, height

    @staticmethod
    def _origin_of(container: SurfaceHost):
        origin = getattr(container, "canvas_origin", None)
        if not callable(origin):
            return (0.0, 0.0)
        x, y = origin()
        return (float(x), float(y))

    @property
    def history(self) -> History:
        return self.context.history

    @property
    def viewport(self) -> Viewport:
        return self.context.viewport

    @property
    def zoom(self) -> float:
        return self.context.zoom

    @property
    def pointer(self):
        return self.context.pointer

    @property
    def state(self) -> InteractionState:
        return self.interaction.state

    @property
    def geometry(self) -> ScreenGeometry:
        if self._geometry is None:
            ctx = self.context
            self._geometry = project(ctx.history, ctx.viewport, ctx.zoom, ctx.height, self.variant)
            self._grid = None
        return self._geometry

    @property
    def grid(self) -> GridPlan:
        geometry = self.geometry
        if self._grid is None:
            self._grid = plan_grid(geometry, self.settings)
        return self._grid

    def invalidate(self) -> None:
        self._geometry = None
        self._grid = None

    def load_history(self, samples: Iterable[Any]) -> None:
        history = History.from_rows(samples, self.variant.sample_kind)
        self.context.history = history
        self.context.pointer.clamp_index(len(history))
        logger.debug("loaded %d %s samples", len(history), history.kind)
        self.invalidate()
        self.redraw()

    def handle(self, event: InputEvent) -> bool:
        outcome = self.interaction.dispatch(event)
        if outcome.renormalize:
            self.invalidate()
        if outcome.redraw:
            self.redraw()
        return outcome.redraw

    def feed(self, events: Iterable[InputEvent]) -> None:
        for event in events:
            self.handle(event)

    def resize(self, width: float, height: float) -> None:
        ctx = self.context
        ctx.viewport.resize(max(0.0, float(width)))
        ctx.height = max(0.0, float(height))
        ctx.origin = self._origin_of(self.host)
        self.invalidate()
        self.redraw()

    def reset_view(self) -> None:
        self.context.viewport.home()
        self.context.zoom = self.settings.initial_zoom
        self.invalidate()
        self.redraw()

    def redraw(self) -> None:
        surface = self.host.begin_frame()
        try:
            self.render_to(surface)
        finally:
            self.host.end_frame(surface)

    def render_to(self, surface: DrawingSurface) -> None:
        frame = Frame(self.geometry, self.grid, self.context)
        self.renderer.render(surface, frame)
