"""BaseService — shared construction for CLI-facing services.

Every service receives the loaded dataset and the settings. Each operation
builds a fresh :class:`GraphViewController` wired to the networkx layout
adapter and, when plugins are loaded, to the event bus.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from latticeview.domain.view_state import ViewState
from latticeview.render.networkx_adapter import NetworkxLayoutAdapter
from latticeview.services.controller import GraphViewController

if TYPE_CHECKING:
    from latticeview.config.settings import LatticeSettings
    from latticeview.infrastructure.loader import LoadResult
    from latticeview.plugins.event_bus import EventBus


class BaseService:
    """Abstract base for services operating on one loaded dataset.

    Usage::

        class ViewService(BaseService):
            def view(self, ...) -> ServiceResult:
                adapter = self._adapter()
                controller = self._controller(adapter)
                with controller.batch():
                    self._load(controller)
                    ...
                self._settle(adapter)
    """

    def __init__(
        self,
        dataset: LoadResult,
        settings: LatticeSettings,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        self._dataset = dataset
        self._settings = settings
        self._bus = event_bus

    def _initial_state(self) -> ViewState:
        view = self._settings.view
        return ViewState(
            filter_tiers=frozenset(view.tiers),
            layout_kind=view.layout,
            labels_visible=view.labels,
            controls_visible=view.controls,
        )

    def _adapter(self) -> NetworkxLayoutAdapter:
        cfg = self._settings.layout
        return NetworkxLayoutAdapter(
            seed=cfg.seed,
            scale=cfg.scale,
            sync=cfg.sync,
            max_workers=cfg.max_workers,
            timeout=cfg.timeout_seconds,
        )

    def _controller(self, adapter: NetworkxLayoutAdapter) -> GraphViewController:
        """A controller with the initial state; the model is loaded by the caller.

        Loading inside the caller's ``batch()`` keeps a single relayout per
        operation.
        """
        return GraphViewController(adapter, state=self._initial_state(), event_bus=self._bus)

    def _load(self, controller: GraphViewController) -> None:
        controller.set_model(self._dataset.model, warnings=self._dataset.warnings)

    @staticmethod
    def _settle(adapter: NetworkxLayoutAdapter) -> None:
        """Wait for threaded layouts to land, then release the pool."""
        adapter.drain()
        adapter.shutdown()

    def _warnings(self, controller: GraphViewController) -> list[str]:
        return [*self._dataset.warnings, *controller.warnings]
