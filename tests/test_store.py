from datetime import date

import pytest

from errors import FieldValueError, UnknownFieldPath
from helpers import flatten, other_value
from schemas import (
    BranchVehicleInspectionSession,
    CheckStatus,
    GarageInspectionChecklist,
    GarageInspectionSession,
    GarageLayout,
    GarageVehicleInspectionSession,
    VehicleInspectionChecklist,
)
from store import Target, apply, apply_to_session, locators, read, resolve

SESSION_CLASSES = [BranchVehicleInspectionSession, GarageVehicleInspectionSession, GarageInspectionSession]


def _checklist_leaves(session_cls):
    return [loc for loc in locators(session_cls).values() if loc.target is Target.CHECKLIST and loc.is_leaf]


@pytest.mark.parametrize("session_cls", SESSION_CLASSES, ids=lambda c: c.__name__)
def test_apply_changes_only_the_addressed_leaf(session_cls):
    for locator in _checklist_leaves(session_cls):
        session = session_cls(inspectorId="I1")
        before = flatten(session)
        current = read(session.checklist, locator.segments)
        value = other_value(locator.annotation, current)

        updated = apply_to_session(session, locator.path, value)

        after = flatten(updated)
        changed = {p for p in before if before[p] != after[p]}
        assert changed == {f"checklist.{locator.path}"}, locator.path
        assert flatten(session) == before


def test_apply_handles_three_segment_paths():
    checklist = VehicleInspectionChecklist()

    updated = apply(checklist, "brakes.frontLeft.pads", CheckStatus.REQUIRES_FUTURE_ATTENTION)

    assert updated.brakes.frontLeft.pads is CheckStatus.REQUIRES_FUTURE_ATTENTION
    assert updated.brakes.frontLeft.rotor is CheckStatus.CHECKED_OK
    assert updated.brakes.frontRight.pads is CheckStatus.CHECKED_OK
    assert checklist.brakes.frontLeft.pads is CheckStatus.CHECKED_OK


def test_apply_handles_four_segment_paths():
    checklist = VehicleInspectionChecklist()

    updated = apply(checklist, "exterior.front.headlights.loBeam", "REQUIRES_IMMEDIATE_ATTENTION")

    assert updated.exterior.front.headlights.loBeam is CheckStatus.REQUIRES_IMMEDIATE_ATTENTION
    assert updated.exterior.front.headlights.hiBeam is CheckStatus.CHECKED_OK
    assert updated.exterior.rear == checklist.exterior.rear


def test_successive_updates_accumulate():
    checklist = GarageInspectionChecklist()

    checklist = apply(checklist, "garageSecurity.securityMeasures.cameras", True)
    checklist = apply(checklist, "garageSecurity.securityMeasures.guard", True)
    checklist = apply(checklist, "garageSecurity.fencedPremises", True)

    measures = checklist.garageSecurity.securityMeasures
    assert (measures.cameras, measures.dogs, measures.guard) == (True, False, True)
    assert checklist.garageSecurity.fencedPremises is True
    assert checklist.garageSecurity.securedGate is False


def test_apply_coerces_values_by_field_type():
    checklist = GarageInspectionChecklist()

    updated = apply(checklist, "locationPremises.garageLayout", "Bad")
    updated = apply(updated, "toolsAndEquipment.otherTools", ["Tyre changer", "Welder"])

    assert updated.locationPremises.garageLayout is GarageLayout.BAD
    assert updated.toolsAndEquipment.otherTools == ["Tyre changer", "Welder"]


def test_apply_replaces_a_whole_sub_object():
    checklist = VehicleInspectionChecklist()

    updated = apply(checklist, "tires.spare", {"treadHealth": "REQUIRES_FUTURE_ATTENTION"})

    assert updated.tires.spare.treadHealth is CheckStatus.REQUIRES_FUTURE_ATTENTION
    assert updated.tires.spare.sidewallHealth is CheckStatus.CHECKED_OK
    assert updated.tires.frontLeft == checklist.tires.frontLeft


def test_apply_rejects_invalid_values():
    with pytest.raises(FieldValueError) as excinfo:
        apply(VehicleInspectionChecklist(), "fluids.oilLevel", "LOW")

    assert excinfo.value.path == "fluids.oilLevel"

    with pytest.raises(FieldValueError):
        apply(GarageInspectionChecklist(), "locationPremises.garageLayout", "Average")


@pytest.mark.parametrize(
    "path",
    ["fluids.fuelLevel", "brakes.frontLeft.pads.inner", "", "tires..spare", "nonexistent"],
)
def test_apply_rejects_paths_outside_the_schema(path):
    with pytest.raises(UnknownFieldPath):
        apply(VehicleInspectionChecklist(), path, CheckStatus.CHECKED_OK)


def test_identity_path_updates_session_and_leaves_checklist_alone():
    session = GarageVehicleInspectionSession(vehicleId="V1", garageId="G1", inspectorId="I1")
    session = apply_to_session(session, "tires.frontLeft.treadHealth", "REQUIRES_IMMEDIATE_ATTENTION")
    checklist_before = session.checklist.model_dump()

    updated = apply_to_session(session, "vehicleId", "V2")

    assert updated.vehicleId == "V2"
    assert updated.garageId == "G1"
    assert updated.checklist.model_dump() == checklist_before
    assert "vehicleId" not in updated.checklist.model_dump()


def test_identity_date_field_is_parsed():
    session = apply_to_session(GarageInspectionSession(), "lastInspectionDate", "2024-03-01")

    assert session.lastInspectionDate == date(2024, 3, 1)


def test_checklist_top_level_field_routes_into_checklist():
    session = apply_to_session(GarageInspectionSession(), "otherRemarks", "Needs a second exit")

    assert session.checklist.otherRemarks == "Needs a second exit"


def test_session_paths_are_a_closed_set():
    with pytest.raises(UnknownFieldPath):
        apply_to_session(GarageInspectionSession(), "checklist.otherRemarks", "x")
    with pytest.raises(UnknownFieldPath):
        apply_to_session(BranchVehicleInspectionSession(), "garageId", "G1")
    with pytest.raises(UnknownFieldPath):
        apply_to_session(GarageInspectionSession(), "brakes.frontLeft.pads", "CHECKED_OK")


def test_locator_table_targets():
    table = locators(BranchVehicleInspectionSession)

    assert table["vehicleId"].target is Target.IDENTITY
    assert table["signature"].target is Target.IDENTITY
    assert table["brakes"].target is Target.CHECKLIST
    assert not table["brakes"].is_leaf
    assert resolve(BranchVehicleInspectionSession, "brakes.rearRight.caliper").segments == (
        "brakes",
        "rearRight",
        "caliper",
    )
    assert "checklist" not in table
