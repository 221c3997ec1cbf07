import asyncio
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel


def flatten(document: BaseModel) -> Dict[str, Any]:
    """Dotted path -> JSON value for every leaf of a document."""
    leaves = {}

    def visit(value, prefix):
        if isinstance(value, dict):
            for key, child in value.items():
                visit(child, f"{prefix}.{key}" if prefix else key)
        else:
            leaves[prefix] = value

    visit(document.model_dump(mode="json"), "")
    return leaves


def other_value(annotation, current):
    """A valid value for a leaf of the given type that differs from ``current``."""
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return next(member for member in annotation if member != current)
    if annotation is bool:
        return not current
    if annotation is str:
        return current + "changed"
    return ["Wheel balancer"]


class FakeSubmitter:
    def __init__(self, result=None, error=None, gate: asyncio.Event = None):
        self.result = {"success": True, "message": "Stored"} if result is None else result
        self.error = error
        self.gate = gate
        self.payloads = []

    async def __call__(self, payload):
        self.payloads.append(payload)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result
