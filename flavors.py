"""
The three inspection wizards, described as data.

Each flavor names the session schema it drives, its ordered steps, which
identifying fields must be present at submission and which are optional
metadata, and where stored inspections of that kind live.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Type

from pydantic import BaseModel

from schemas import (
    BranchVehicleInspectionSession,
    CreateBranchVehicleInspectionInput,
    CreateGarageInspectionInput,
    CreateGarageVehicleInspectionInput,
    GarageInspectionSession,
    GarageVehicleInspectionSession,
)
from store import identity_fields, locators


@dataclass(frozen=True)
class Step:
    key: str
    title: str
    # Top-level locators (identifying fields or checklist sections) edited here
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class WizardFlavor:
    name: str
    title: str
    session_cls: Type[BaseModel]
    payload_cls: Type[BaseModel]
    steps: Tuple[Step, ...]
    required_fields: Tuple[str, ...]
    optional_fields: Tuple[str, ...]
    collection: str
    redirect: str

    def __post_init__(self):
        known = locators(self.session_cls)
        for step in self.steps:
            for name in step.fields:
                if name not in known:
                    raise ValueError(f"{self.name}: step {step.key} edits unknown field {name}")
        covered = {name for step in self.steps for name in step.fields}
        missing = set(identity_fields(self.session_cls)) - covered
        if missing:
            raise ValueError(f"{self.name}: no step edits {sorted(missing)}")

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def step_of(self, path: str) -> int:
        """1-based index of the step whose form edits ``path``."""
        head = path.split(".", 1)[0]
        for index, step in enumerate(self.steps, start=1):
            if head in step.fields:
                return index
        raise ValueError(f"{self.name}: no step edits {path}")


BRANCH_VEHICLE = WizardFlavor(
    name="branch_vehicle",
    title="Vehicle Inspection Checklist",
    session_cls=BranchVehicleInspectionSession,
    payload_cls=CreateBranchVehicleInspectionInput,
    steps=(
        Step("basicInfo", "Basic Information", ("vehicleId", "branchId", "inspectorId", "signature")),
        Step("exterior", "Exterior Check", ("exterior",)),
        Step("underHood", "Under Hood Check", ("underHood",)),
        Step("fluids", "Fluids Check", ("fluids",)),
        Step("undercarriage", "Undercarriage Check", ("undercarriage",)),
        Step("brakes", "Brakes Check", ("brakes",)),
        Step("tires", "Tires Check", ("tires",)),
        Step("systemChecks", "System Checks", ("systemChecks",)),
    ),
    required_fields=("vehicleId", "branchId", "inspectorId"),
    optional_fields=("signature",),
    collection="vehicle_inspection",
    redirect="/operations/inspections",
)

GARAGE_VEHICLE = WizardFlavor(
    name="garage_vehicle",
    title="Vehicle Inspection Checklist",
    session_cls=GarageVehicleInspectionSession,
    payload_cls=CreateGarageVehicleInspectionInput,
    steps=(
        Step("basicInfo", "Basic Information", ("vehicleId", "garageId", "inspectorId", "lastInspectionDate")),
        Step("exterior", "Exterior Check", ("exterior",)),
        Step("underHood", "Under Hood Check", ("underHood",)),
        Step("fluidsUndercarriage", "Fluids & Undercarriage", ("fluids", "undercarriage")),
        Step("brakesTiresSystem", "Brakes, Tires & System Checks", ("brakes", "tires", "systemChecks")),
    ),
    required_fields=("vehicleId", "garageId", "inspectorId"),
    optional_fields=("lastInspectionDate",),
    collection="garage_vehicle_inspection",
    redirect="/operations/inspections/vehicles",
)

GARAGE = WizardFlavor(
    name="garage",
    title="Garage Inspection Checklist",
    session_cls=GarageInspectionSession,
    payload_cls=CreateGarageInspectionInput,
    steps=(
        Step("basicInfo", "Basic Information", ("garageId", "inspectorId", "lastInspectionDate", "notes")),
        Step("statutoryLocation", "Statutory Requirements & Location", ("statutoryRequirements", "locationPremises")),
        Step("facilitiesSafety", "Garage Facilities & Safety", ("garageFacilities", "safetyAndHealth")),
        Step("wasteProfessionalism", "Waste Management & Professionalism",
             ("wasteManagementEnvironment", "professionalism")),
        Step("securityTools", "Security, Tools & Remarks", ("garageSecurity", "toolsAndEquipment", "otherRemarks")),
    ),
    required_fields=("garageId", "inspectorId"),
    optional_fields=("notes", "lastInspectionDate"),
    collection="garage_inspection",
    redirect="/operations/inspections/garages",
)

FLAVORS: Dict[str, WizardFlavor] = {f.name: f for f in (BRANCH_VEHICLE, GARAGE_VEHICLE, GARAGE)}
