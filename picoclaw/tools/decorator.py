"""
@tool decorator - build tools from typed async functions.

Inspects the function signature and type hints to build JSON Schema for
parameters, then wraps the function in a FunctionTool.

Usage::

    from typing import Annotated
    from picoclaw.tools import tool

    @tool
    async def search_notes(
        query: Annotated[str, "Search keywords"],
        limit: Annotated[int, "Max results to return"] = 5,
    ) -> str:
        \"\"\"Search the user's notes.\"\"\"
        ...

    # search_notes is now a FunctionTool instance
    # search_notes.name == "search_notes"
    # search_notes.parameters == {"type": "object", "properties": {...}, "required": ["query"]}
    registry.register(search_notes)
"""

from __future__ import annotations

import inspect
import json
from typing import (
    Annotated,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .base import BaseTool
from .models import ToolResult

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

_NoneType = type(None)


def _is_optional(annotation: Any) -> bool:
    """Return True if *annotation* is ``Optional[X]`` (i.e. ``Union[X, None]``)."""
    if get_origin(annotation) is Union:
        return _NoneType in get_args(annotation)
    return False


def _unwrap_optional(annotation: Any) -> Any:
    """Given ``Optional[X]``, return ``X``."""
    non_none = [a for a in get_args(annotation) if a is not _NoneType]
    return non_none[0] if len(non_none) == 1 else annotation


def _extract_base_type(annotation: Any) -> Any:
    """Unwrap ``Annotated[T, ...]`` to get ``T``."""
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation


def _extract_annotated_description(annotation: Any) -> Optional[str]:
    """If *annotation* is ``Annotated[T, "desc"]``, return ``"desc"``."""
    if get_origin(annotation) is not Annotated:
        return None
    for a in get_args(annotation)[1:]:
        if isinstance(a, str):
            return a
    return None


def _python_type_to_json_schema(annotation: Any) -> Dict[str, Any]:
    """Map a Python type annotation to a JSON Schema dict."""
    base = _extract_base_type(annotation)

    if _is_optional(base):
        return _python_type_to_json_schema(_unwrap_optional(base))

    origin = get_origin(base)

    if base is str:
        return {"type": "string"}
    if base is bool:
        return {"type": "boolean"}
    if base is int:
        return {"type": "integer"}
    if base is float:
        return {"type": "number"}

    if base is list or origin is list:
        schema: Dict[str, Any] = {"type": "array"}
        args = get_args(base)
        if args:
            schema["items"] = _python_type_to_json_schema(args[0])
        return schema

    if base is dict or origin is dict:
        return {"type": "object"}

    return {"type": "string"}


def _build_json_schema(func: Callable) -> Dict[str, Any]:
    """Build a full JSON Schema ``{"type": "object", ...}`` from *func*'s signature."""
    sig = inspect.signature(func)
    hints = get_type_hints(func, include_extras=True)

    properties: Dict[str, Any] = {}
    required: List[str] = []

    for name, param in sig.parameters.items():
        if param.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            continue

        annotation = hints.get(name, param.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = str

        prop_schema = _python_type_to_json_schema(annotation)
        desc = _extract_annotated_description(annotation)
        if desc:
            prop_schema["description"] = desc
        properties[name] = prop_schema

        has_default = param.default is not inspect.Parameter.empty
        if not has_default and not _is_optional(_extract_base_type(annotation)):
            required.append(name)

    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _first_docstring_line(func: Callable) -> str:
    doc = inspect.getdoc(func) or ""
    return doc.strip().split("\n\n")[0].replace("\n", " ").strip()


# ---------------------------------------------------------------------------
# FunctionTool
# ---------------------------------------------------------------------------

class FunctionTool(BaseTool):
    """A tool backed by a plain async function taking keyword arguments."""

    def __init__(
        self,
        func: Callable[..., Awaitable[Any]],
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ):
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"@tool requires an async function, got {func!r}")
        self.func = func
        self.name = name or func.__name__
        self.description = description or _first_docstring_line(func)
        self.parameters = parameters or _build_json_schema(func)

    async def execute(self, args: Dict[str, Any]) -> ToolResult:
        result = await self.func(**args)
        if isinstance(result, ToolResult):
            return result
        if isinstance(result, (dict, list)):
            return ToolResult.success(json.dumps(result, ensure_ascii=False, indent=2))
        return ToolResult.success("" if result is None else str(result))


def tool(
    func: Optional[Callable[..., Awaitable[Any]]] = None,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Any:
    """
    Turn an async function into a FunctionTool.

    Works both bare (``@tool``) and with arguments
    (``@tool(name="notes.search")``).
    """
    def decorator(f: Callable[..., Awaitable[Any]]) -> FunctionTool:
        return FunctionTool(f, name=name, description=description)

    if func is not None:
        return decorator(func)
    return decorator
