"""
Controls Module – fixed-position overlay panels (info panel and legend).

Each control follows the same contract:
    mount(canvas) -> DomElement     build the panel once
    update(payload=None)            replace (never append) its content
    unmount()                       destroy the panel and cancel its timers
"""

import logging

from markupsafe import Markup, escape

import config
from firewatch.color_scale import legend_grades

logger = logging.getLogger(__name__)


class DomElement:
    """Minimal DOM node: tag, attributes, optional text, child nodes."""

    def __init__(self, tag: str, text: str = None, children=None, **attrs):
        self.tag = tag
        self.text = text
        self.children = list(children or [])
        self.attrs = attrs
        self.destroyed = False

    def replace_children(self, *children):
        self.children = list(children)

    def find(self, element_id: str):
        if self.attrs.get("id") == element_id:
            return self
        for child in self.children:
            found = child.find(element_id)
            if found is not None:
                return found
        return None

    def node_count(self) -> int:
        return 1 + sum(c.node_count() for c in self.children)

    def text_content(self) -> str:
        parts = [self.text or ""]
        parts.extend(c.text_content() for c in self.children)
        return " ".join(p for p in parts if p)

    def destroy(self):
        self.destroyed = True
        self.children.clear()

    def render(self) -> Markup:
        attrs = Markup("").join(
            Markup(' {}="{}"').format(k.rstrip("_").replace("_", "-"), v)
            for k, v in self.attrs.items()
        )
        inner = escape(self.text or "") + Markup("").join(c.render() for c in self.children)
        return Markup("<{0}{1}>{2}</{0}>").format(Markup(self.tag), attrs, inner)


class OverlayControl:
    """Shared mount/unmount bookkeeping for overlay panels."""

    position = "topright"
    class_name = "info"

    def __init__(self, position: str = None):
        if position:
            self.position = position
        self.handle = None

    def mount(self, canvas) -> DomElement:
        self.handle = DomElement("div", class_=self.class_name)
        self.on_mount(canvas)
        return self.handle

    def on_mount(self, canvas):
        self.update()

    def update(self, payload=None):
        if self.handle is None or self.handle.destroyed:
            logger.debug("%s.update on an unmounted panel ignored", type(self).__name__)
            return
        self.handle.replace_children(*self.render(payload))

    def render(self, payload) -> list:
        raise NotImplementedError

    def unmount(self):
        if self.handle is not None:
            self.handle.destroy()

    def to_html(self) -> Markup:
        return self.handle.render() if self.handle is not None else Markup("")


class InfoControl(OverlayControl):
    """Shows the hovered county's name and risk, or a prompt when idle."""

    position = config.INFO_POSITION

    def render(self, payload):
        title = DomElement("h4", config.INFO_TITLE)
        if not payload:
            return [title, DomElement("span", config.INFO_PROMPT)]
        name = payload.get("name") or config.UNKNOWN_NAME
        risk = payload.get("risk")
        if isinstance(risk, (int, float)) and not isinstance(risk, bool):
            risk_text = f"Risk: {risk:g}%"
        elif risk not in (None, "", config.UNKNOWN_RISK):
            risk_text = f"Risk: {risk}%"
        else:
            risk_text = f"Risk: {config.UNKNOWN_RISK}"
        return [
            title,
            DomElement("div", children=[DomElement("b", f"County: {name}")]),
            DomElement("div", risk_text),
        ]


class LegendControl(OverlayControl):
    """
    Colour swatches for every risk tier plus a forecast box.

    The swatches are built once on mount. The forecast box starts as a
    placeholder and is overwritten exactly once, `forecast_delay` seconds
    after mounting; unmounting first cancels that write.
    """

    position = config.LEGEND_POSITION
    class_name = "info legend"

    def __init__(self, position: str = None, forecast_delay: float = config.FORECAST_DELAY_S,
                 forecast_text: str = config.FORECAST_TEXT):
        super().__init__(position)
        self.forecast_delay = forecast_delay
        self.forecast_text = forecast_text
        self.forecast_updates = 0
        self._timer = None

    def on_mount(self, canvas):
        gradient = "linear-gradient(to right, {})".format(", ".join(config.LEGEND_GRADIENT))
        rows = [DomElement("h4", config.LEGEND_TITLE),
                DomElement("div", class_="legend-gradient",
                           style=f"background: {gradient}; height: 15px; margin-bottom: 5px;")]
        for label, colour in legend_grades():
            rows.append(DomElement("div", children=[
                DomElement("i", style=f"background:{colour}"),
                DomElement("span", label),
            ]))
        rows.append(DomElement("h4", "Forecast"))
        rows.append(DomElement("div", config.FORECAST_PLACEHOLDER, id="forecast",
                               style="padding: 5px; background: #f8f8f8; border-radius: 5px;"))
        self.handle.replace_children(*rows)
        self._timer = canvas.call_later(self.forecast_delay, self._apply_forecast)

    def _apply_forecast(self):
        self._timer = None
        self.update(self.forecast_text)

    def update(self, payload=None):
        """Only the forecast text is mutable after mount."""
        if self.handle is None or self.handle.destroyed:
            logger.debug("Legend forecast update on an unmounted panel ignored")
            return
        if payload is None:
            return
        self.handle.find("forecast").text = str(payload)
        self.forecast_updates += 1

    @property
    def forecast(self) -> str:
        node = self.handle.find("forecast") if self.handle is not None else None
        return node.text if node is not None else None

    def unmount(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        super().unmount()
