"""Decide whether an animation's target lies inside the recorded container."""

import logging
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError

from ..errors import NodeResolutionFailure

if TYPE_CHECKING:
    from ..browser.protocol import DomDomain, RuntimeDomain

logger = logging.getLogger(__name__)

# Evaluated with ``this`` bound to the container; Node.contains counts the node itself.
CONTAINS_FUNCTION = "function (node) { return this.contains(node); }"


class ContainmentFilter:
    """Checks candidate nodes against a resolved container node."""

    def __init__(
        self,
        dom: "DomDomain",
        runtime: "RuntimeDomain",
        container_object_id: str,
    ):
        self.dom = dom
        self.runtime = runtime
        self.container_object_id = container_object_id

    async def resolve(self, backend_node_id: int | None) -> str:
        """
        Resolve a backend node id to a runtime object id.

        Raises:
            NodeResolutionFailure: If the node is gone or has no runtime object
        """
        if backend_node_id is None:
            raise NodeResolutionFailure("Animation has no target node")
        try:
            object_id = await self.dom.resolve_node(backend_node_id=backend_node_id)
        except PlaywrightError as e:
            raise NodeResolutionFailure(
                f"Could not resolve node {backend_node_id}: {e}"
            ) from e
        if not object_id:
            raise NodeResolutionFailure(f"Node {backend_node_id} has no runtime object")
        return object_id

    async def contains(self, backend_node_id: int | None) -> bool:
        """Return True if the node is the container or one of its descendants."""
        try:
            object_id = await self.resolve(backend_node_id)
            result = await self._call_contains(object_id)
        except NodeResolutionFailure as e:
            logger.debug("Excluding animation target: %s", e)
            return False
        return bool(result)

    async def _call_contains(self, object_id: str) -> object:
        try:
            return await self.runtime.call_function_on(
                self.container_object_id,
                CONTAINS_FUNCTION,
                arguments=[{"objectId": object_id}],
                return_by_value=True,
            )
        except PlaywrightError as e:
            raise NodeResolutionFailure(
                f"Could not check containment of {object_id}: {e}"
            ) from e
