"""Typed wrappers around the DevTools protocol domains the recorder uses."""

from typing import Any

from playwright.async_api import CDPSession


class _Domain:
    """Base class binding a protocol domain to a CDP session."""

    def __init__(self, cdp: CDPSession):
        self._cdp = cdp


class DomDomain(_Domain):
    """``DOM`` domain commands."""

    async def get_document(self) -> int:
        """Return the node id of the document root."""
        result = await self._cdp.send("DOM.getDocument")
        return result["root"]["nodeId"]

    async def query_selector(self, node_id: int, selector: str) -> int:
        """Return the node id of the first match below ``node_id`` (0 if none)."""
        result = await self._cdp.send(
            "DOM.querySelector", {"nodeId": node_id, "selector": selector}
        )
        return result["nodeId"]

    async def resolve_node(
        self,
        node_id: int | None = None,
        backend_node_id: int | None = None,
    ) -> str | None:
        """Resolve a node to a runtime object id, or None if it has no object."""
        params: dict[str, Any] = {}
        if node_id is not None:
            params["nodeId"] = node_id
        if backend_node_id is not None:
            params["backendNodeId"] = backend_node_id
        result = await self._cdp.send("DOM.resolveNode", params)
        return result.get("object", {}).get("objectId")


class AnimationDomain(_Domain):
    """``Animation`` domain commands."""

    async def enable(self) -> None:
        await self._cdp.send("Animation.enable")

    async def set_paused(self, animation_ids: list[str], paused: bool = True) -> None:
        await self._cdp.send(
            "Animation.setPaused", {"animations": animation_ids, "paused": paused}
        )

    async def seek_animations(self, animation_ids: list[str], current_time: float) -> None:
        """Move every listed animation to the same timeline position in one command."""
        await self._cdp.send(
            "Animation.seekAnimations",
            {"animations": animation_ids, "currentTime": current_time},
        )


class RuntimeDomain(_Domain):
    """``Runtime`` domain commands."""

    async def call_function_on(
        self,
        object_id: str,
        function_declaration: str,
        arguments: list[dict[str, Any]] | None = None,
        return_by_value: bool = True,
    ) -> Any:
        """Call a function with ``this`` bound to ``object_id`` and return its value."""
        result = await self._cdp.send(
            "Runtime.callFunctionOn",
            {
                "objectId": object_id,
                "functionDeclaration": function_declaration,
                "arguments": arguments or [],
                "returnByValue": return_by_value,
            },
        )
        if "exceptionDetails" in result:
            raise RuntimeError(result["exceptionDetails"].get("text", "Runtime call failed"))
        return result["result"].get("value")
