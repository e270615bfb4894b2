"""
Selector, prompt and panel collaborators backed by the Qt preset panel.

Each adapter is called on the asyncio loop and hands the widget work to the GUI
thread through the bridge.
"""

import logging

from presetcue.core.interfaces import (
    CameraCommandSurface,
    OperatorPrompt,
    PanelBuilder,
    PresetCatalog,
    SelectorControl,
)
from presetcue.exceptions import ControlSyncFailed
from presetcue.models.config_manager import ConfigManager
from presetcue.models.panel import build_panel_layout
from presetcue.models.selection import Feature
from presetcue.ui.async_bridge import AsyncBridge
from presetcue.ui.preset_panel import PresetPanel

logger = logging.getLogger(__name__)


class QtSelectorControl(SelectorControl):
    """Any failure to update the widget is reported as ControlSyncFailed"""

    def __init__(self, bridge: AsyncBridge, panel: PresetPanel):
        self._bridge = bridge
        self._panel = panel

    async def _call(self, func, *args) -> None:
        try:
            await self._bridge.gui(func, *args)
        except ControlSyncFailed:
            raise
        except Exception as e:
            raise ControlSyncFailed(f"Selector update failed: {e}") from e

    async def set_value(self, widget_id: str, value: str) -> None:
        await self._call(self._panel.set_value, widget_id, value)

    async def unset_value(self, widget_id: str) -> None:
        await self._call(self._panel.unset_value, widget_id)


class QtOperatorPrompt(OperatorPrompt):
    def __init__(self, bridge: AsyncBridge, panel: PresetPanel):
        self._bridge = bridge
        self._panel = panel

    async def display(self, title: str, text: str, dismiss: str, duration_s: int) -> None:
        await self._bridge.gui(self._panel.show_prompt, title, text, dismiss, duration_s)


class QtPanelBuilder(PanelBuilder):
    """Rebuilds the selector from the catalog, the cameras and the current config"""

    def __init__(
        self,
        catalog: PresetCatalog,
        camera: CameraCommandSurface,
        config: ConfigManager,
        bridge: AsyncBridge,
        panel: PresetPanel,
    ):
        self._catalog = catalog
        self._camera = camera
        self._config = config
        self._bridge = bridge
        self._panel = panel

    async def rebuild(self, cause: str) -> frozenset[Feature]:
        logger.info("Building Camera Preset Panel. Cause: [%s]", cause)
        presets = await self._catalog.list_presets()
        capabilities = await self._camera.query_tracking_capabilities()
        features = self._config.get_feature_flags()
        text = self._config.get_panel_text()

        layout = build_panel_layout(presets, capabilities, text, features.show_tracking_options)
        if features.show_tracking_options and not layout.features:
            logger.warning("Tracking options enabled but no tracking feature is configured")

        await self._bridge.gui(self._panel.populate, layout, text)
        logger.info(
            "Panel built: %d presets, tracking modes [%s]",
            len(presets),
            ", ".join(sorted(feature.value for feature in layout.features)),
        )
        return layout.features
