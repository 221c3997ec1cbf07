from typing import Any, Dict

from pydantic import BaseModel

from errors import ShapeValidationFailure
from flavors import WizardFlavor


def _clean(value):
    if isinstance(value, str):
        return value.strip()
    return value


def assemble(session: BaseModel, flavor: WizardFlavor) -> Dict[str, Any]:
    """Build the payload the submit collaborator expects from a session.

    Required identifying fields go to the top level and must be non-empty.
    The checklist is nested under ``checklist``. Optional metadata is only
    included when set, and strings only when non-blank after trimming.
    """
    payload: Dict[str, Any] = {}

    for name in flavor.required_fields:
        value = _clean(getattr(session, name))
        if not value:
            raise ShapeValidationFailure(name, flavor.step_of(name))
        payload[name] = value

    payload["checklist"] = session.checklist

    for name in flavor.optional_fields:
        value = _clean(getattr(session, name))
        if value is None or value == "":
            continue
        payload[name] = value

    return flavor.payload_cls(**payload).model_dump(mode="json", exclude_none=True)
