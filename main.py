import logging
import os
import uuid
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from bson import ObjectId

import database
from collaborators import MongoSubmitter
from errors import (
    FieldValueError,
    StepOutOfRange,
    SubmissionInProgress,
    UnknownFieldPath,
    WizardClosed,
)
from flavors import FLAVORS, WizardFlavor
from reporting import OutcomeKind
from store import locators
from wizard import InspectionWizard, Submitter

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

SUBMIT_TIMEOUT_SECONDS = float(os.getenv("SUBMIT_TIMEOUT_SECONDS", "30")) or None
WIZARD_IDLE_SECONDS = float(os.getenv("WIZARD_IDLE_SECONDS", "3600"))

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Active wizards, one per capture in progress. Never persisted.
wizards: Dict[str, InspectionWizard] = {}

ERROR_STATUS = {
    UnknownFieldPath: 422,
    FieldValueError: 422,
    StepOutOfRange: 409,
    SubmissionInProgress: 409,
    WizardClosed: 410,
}

OUTCOME_STATUS = {
    OutcomeKind.SHAPE_VALIDATION: 422,
    OutcomeKind.TRANSPORT: 502,
    OutcomeKind.UNKNOWN: 500,
}


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


for error_cls, status_code in ERROR_STATUS.items():
    app.add_exception_handler(error_cls, _error_handler(status_code))


# Utilities

def to_obj_id(id_str: str) -> ObjectId:
    try:
        return ObjectId(id_str)
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid ObjectId")


def serialize(doc: Dict[str, Any]):
    if not doc:
        return doc
    doc["_id"] = str(doc.get("_id"))
    return doc


def get_flavor(name: str) -> WizardFlavor:
    flavor = FLAVORS.get(name)
    if flavor is None:
        raise HTTPException(status_code=404, detail=f"Unknown inspection type: {name}")
    return flavor


def get_wizard(wizard_id: str) -> InspectionWizard:
    wizard = wizards.get(wizard_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Inspection session not found")
    wizard.touch()
    return wizard


def evict_idle_wizards():
    """Drop wizards nobody has touched for WIZARD_IDLE_SECONDS, unless a submit is in flight."""
    for wizard_id, wizard in list(wizards.items()):
        if wizard.submitting or wizard.idle_for() < WIZARD_IDLE_SECONDS:
            continue
        wizard.discard()
        del wizards[wizard_id]
        logger.info(f"Evicted idle {wizard.flavor.name} wizard {wizard_id}")


def get_submitters() -> Dict[str, Submitter]:
    return {name: MongoSubmitter(flavor.collection) for name, flavor in FLAVORS.items()}


def wizard_state(wizard_id: str, wizard: InspectionWizard) -> Dict[str, Any]:
    state = {
        "id": wizard_id,
        "flavor": wizard.flavor.name,
        "title": wizard.flavor.title,
        "step": wizard.step,
        "totalSteps": wizard.total_steps,
        "submitting": wizard.submitting,
        "completed": wizard.completed,
    }
    if wizard.session is not None:
        state["current"] = wizard.step_view()
        state["session"] = wizard.session.model_dump(mode="json")
    if wizard.last_outcome is not None:
        state["lastOutcome"] = wizard.last_outcome.model_dump(mode="json")
    return state


@app.get("/")
def read_root():
    return {"message": "Inspection Checklist API running"}


@app.get("/schema")
def get_schema():
    # Let the UI introspect steps and addressable fields
    return {
        name: {
            "title": flavor.title,
            "collection": flavor.collection,
            "steps": [{"key": s.key, "title": s.title, "fields": list(s.fields)} for s in flavor.steps],
            "requiredFields": list(flavor.required_fields),
            "optionalFields": list(flavor.optional_fields),
            "paths": {path: loc.target.value for path, loc in locators(flavor.session_cls).items()},
        }
        for name, flavor in FLAVORS.items()
    }


# Wizard lifecycle

class FieldUpdate(BaseModel):
    path: str
    value: Any = None


@app.post("/wizards/{flavor_name}", status_code=201)
async def create_wizard(flavor_name: str, submitters: Dict[str, Submitter] = Depends(get_submitters)):
    flavor = get_flavor(flavor_name)
    evict_idle_wizards()
    wizard_id = str(uuid.uuid4())
    wizards[wizard_id] = InspectionWizard(flavor, submitters[flavor.name], timeout=SUBMIT_TIMEOUT_SECONDS)
    logger.info(f"Started {flavor.name} wizard {wizard_id}")
    return wizard_state(wizard_id, wizards[wizard_id])


@app.get("/wizards/{wizard_id}")
async def read_wizard(wizard_id: str):
    return wizard_state(wizard_id, get_wizard(wizard_id))


@app.patch("/wizards/{wizard_id}/fields")
async def update_field(wizard_id: str, update: FieldUpdate):
    wizard = get_wizard(wizard_id)
    wizard.update(update.path, update.value)
    return wizard_state(wizard_id, wizard)


@app.post("/wizards/{wizard_id}/next")
async def next_step(wizard_id: str):
    wizard = get_wizard(wizard_id)
    wizard.next()
    return wizard_state(wizard_id, wizard)


@app.post("/wizards/{wizard_id}/previous")
async def previous_step(wizard_id: str):
    wizard = get_wizard(wizard_id)
    wizard.previous()
    return wizard_state(wizard_id, wizard)


@app.post("/wizards/{wizard_id}/submit")
async def submit_wizard(wizard_id: str):
    wizard = get_wizard(wizard_id)
    outcome = await wizard.submit()
    if not outcome.ok:
        raise HTTPException(status_code=OUTCOME_STATUS[outcome.kind], detail=outcome.model_dump(mode="json"))

    # Submitted wizards are torn down
    wizards.pop(wizard_id, None)
    return outcome.model_dump(mode="json")


@app.delete("/wizards/{wizard_id}", status_code=204)
async def discard_wizard(wizard_id: str):
    wizard = wizards.get(wizard_id)
    if wizard is not None:
        wizard.discard()
        del wizards[wizard_id]


# Stored inspections

@app.get("/inspections/{flavor_name}")
def list_inspections(flavor_name: str, limit: Optional[int] = 50):
    flavor = get_flavor(flavor_name)
    if database.db is None:
        raise HTTPException(status_code=503, detail="Database not available")
    return {"data": [serialize(doc) for doc in database.get_documents(flavor.collection, limit=limit)]}


@app.get("/inspections/{flavor_name}/{inspection_id}")
def get_inspection(flavor_name: str, inspection_id: str):
    flavor = get_flavor(flavor_name)
    obj_id = to_obj_id(inspection_id)
    if database.db is None:
        raise HTTPException(status_code=503, detail="Database not available")
    doc = database.db[flavor.collection].find_one({"_id": obj_id})
    if doc is None:
        raise HTTPException(status_code=404, detail="Inspection not found")
    return serialize(doc)


@app.delete("/inspections/{flavor_name}/{inspection_id}", status_code=204)
def delete_inspection(flavor_name: str, inspection_id: str):
    flavor = get_flavor(flavor_name)
    obj_id = to_obj_id(inspection_id)
    if database.db is None:
        raise HTTPException(status_code=503, detail="Database not available")
    result = database.db[flavor.collection].delete_one({"_id": obj_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Inspection not found")
    logger.info(f"Deleted {flavor.collection} {inspection_id}")


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "activeWizards": len(wizards),
        "collections": [],
    }

    if database.db is not None:
        try:
            response["collections"] = database.db.list_collection_names()[:10]
            response["database"] = "✅ Connected & Working"
        except Exception as e:
            response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"

    response["database_url"] = "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set"
    response["database_name"] = "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set"

    return response


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
