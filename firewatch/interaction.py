"""
Interaction Module – hover / click behaviour of county layers.

State machine:
    Idle ──pointer_enter(F)──▶ Hovering(F)
    Hovering(F) ──pointer_leave(F)──▶ Idle
    Hovering(A) ──pointer_enter(B)──▶ Hovering(B)   (A is reset first)
Clicks zoom the viewport to the feature and never change the state.
"""

import logging

import config
from firewatch.canvas import FeatureEvent, FeatureLayer
from firewatch.styling import highlight_style, style_for

logger = logging.getLogger(__name__)


class FeatureInteractionController:

    def __init__(self, canvas, info):
        self.canvas = canvas
        self.info = info
        self._hovered = None  # FeatureLayer or None

    @property
    def hovered(self):
        """The hovered RiskFeature, or None while idle."""
        return self._hovered.feature if self._hovered is not None else None

    @property
    def state(self) -> str:
        return "idle" if self._hovered is None else "hovering"

    def bind(self, layer: FeatureLayer):
        """Wire pointer handlers and the permanent name label onto a layer."""
        layer.on(
            mouseover=self.pointer_enter,
            mouseout=self.pointer_leave,
            click=self.click,
        )
        if layer.feature.name:
            layer.bind_tooltip(layer.feature.name, permanent=True,
                               direction="center", class_name=config.LABEL_CLASS)

    def pointer_enter(self, event: FeatureEvent):
        if self._hovered is event.layer:
            return
        if self._hovered is not None:
            self._reset(self._hovered)

        layer = event.layer
        layer.set_style(highlight_style())
        if not self.canvas.legacy_renderer:
            layer.bring_to_front()
        self._hovered = layer

        feature = event.feature
        self.info.update({"name": feature.display_name, "risk": feature.display_risk})
        logger.debug("Hovering %s", feature.display_name)

    def pointer_leave(self, event: FeatureEvent):
        if self._hovered is not event.layer:
            return
        self._reset(event.layer)
        self._hovered = None
        self.info.update()

    def click(self, event: FeatureEvent):
        self.canvas.fit_bounds(event.layer.bounds)

    @staticmethod
    def _reset(layer: FeatureLayer):
        layer.reset_style(style_for(layer.feature))
