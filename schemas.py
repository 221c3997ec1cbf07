"""
Checklist Schemas

Define the inspection checklist documents here using Pydantic models.
Every model can be created with no arguments and yields the "all clear"
document: findings are CHECKED_OK, facility flags are False, free text is
empty. The models are the single source of truth for valid field paths.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class CheckStatus(str, Enum):
    CHECKED_OK = "CHECKED_OK"
    REQUIRES_FUTURE_ATTENTION = "REQUIRES_FUTURE_ATTENTION"
    REQUIRES_IMMEDIATE_ATTENTION = "REQUIRES_IMMEDIATE_ATTENTION"


class GarageLayout(str, Enum):
    GOOD = "Good"
    BAD = "Bad"


OK = CheckStatus.CHECKED_OK


# Vehicle inspection

class HeadlightsCheck(BaseModel):
    hiBeam: CheckStatus = OK
    loBeam: CheckStatus = OK


class FrontExteriorCheck(BaseModel):
    windshield: CheckStatus = OK
    washerSystem: CheckStatus = OK
    wiperArm: CheckStatus = OK
    headlights: HeadlightsCheck = Field(default_factory=HeadlightsCheck)
    fogLamp: CheckStatus = OK
    indicator: CheckStatus = OK
    hazardLight: CheckStatus = OK
    drl: CheckStatus = OK


class RearExteriorCheck(BaseModel):
    brakeLight: CheckStatus = OK
    indicator: CheckStatus = OK
    hazardLight: CheckStatus = OK
    reverseLight: CheckStatus = OK
    washerSystem: CheckStatus = OK
    wiperArm: CheckStatus = OK
    regPlateLamp: CheckStatus = OK
    topBrakeLight: CheckStatus = OK


class ExteriorCheck(BaseModel):
    front: FrontExteriorCheck = Field(default_factory=FrontExteriorCheck)
    rear: RearExteriorCheck = Field(default_factory=RearExteriorCheck)


class UnderHoodCheck(BaseModel):
    radiatorHosesClamps: CheckStatus = OK
    batteryTerminalsCables: CheckStatus = OK
    horn: CheckStatus = OK
    driveBelt: CheckStatus = OK
    airFilter: CheckStatus = OK
    transmissionFluid: CheckStatus = OK
    brakeFluid: CheckStatus = OK
    powerSteeringFluid: CheckStatus = OK
    heaterHosesClamps: CheckStatus = OK
    ignitionCoilsWires: CheckStatus = OK
    vacuumPumpCondition: CheckStatus = OK
    egrSystem: CheckStatus = OK
    pcvSystem: CheckStatus = OK
    dieselSystemInspection: CheckStatus = OK


class FluidsCheck(BaseModel):
    coolantLevel: CheckStatus = OK
    clutchHydraulicFluid: CheckStatus = OK
    differentialTransferCase: CheckStatus = OK
    oilLevel: CheckStatus = OK


class UndercarriageCheck(BaseModel):
    shocksLeakageDamage: CheckStatus = OK
    bushings: CheckStatus = OK
    cvAxleBoots: CheckStatus = OK
    brakeInspection: CheckStatus = OK
    exhaustSystem: CheckStatus = OK
    steeringComponents: CheckStatus = OK
    ballJoints: CheckStatus = OK
    stabilizerLinks: CheckStatus = OK


class BrakeComponentCheck(BaseModel):
    pads: CheckStatus = OK
    rotor: CheckStatus = OK
    caliper: CheckStatus = OK
    linesDucts: CheckStatus = OK


class BrakesCheck(BaseModel):
    frontLeft: BrakeComponentCheck = Field(default_factory=BrakeComponentCheck)
    frontRight: BrakeComponentCheck = Field(default_factory=BrakeComponentCheck)
    rearLeft: BrakeComponentCheck = Field(default_factory=BrakeComponentCheck)
    rearRight: BrakeComponentCheck = Field(default_factory=BrakeComponentCheck)


class TireHealthCheck(BaseModel):
    sidewallHealth: CheckStatus = OK
    treadHealth: CheckStatus = OK


class TiresCheck(BaseModel):
    frontLeft: TireHealthCheck = Field(default_factory=TireHealthCheck)
    frontRight: TireHealthCheck = Field(default_factory=TireHealthCheck)
    rearLeft: TireHealthCheck = Field(default_factory=TireHealthCheck)
    rearRight: TireHealthCheck = Field(default_factory=TireHealthCheck)
    spare: TireHealthCheck = Field(default_factory=TireHealthCheck)
    parkingBrakeOperation: CheckStatus = OK


class SystemChecks(BaseModel):
    serviceMessage: CheckStatus = OK
    engineOil: CheckStatus = OK


class VehicleInspectionChecklist(BaseModel):
    """Findings tree for a vehicle inspection"""
    exterior: ExteriorCheck = Field(default_factory=ExteriorCheck)
    underHood: UnderHoodCheck = Field(default_factory=UnderHoodCheck)
    fluids: FluidsCheck = Field(default_factory=FluidsCheck)
    undercarriage: UndercarriageCheck = Field(default_factory=UndercarriageCheck)
    brakes: BrakesCheck = Field(default_factory=BrakesCheck)
    tires: TiresCheck = Field(default_factory=TiresCheck)
    systemChecks: SystemChecks = Field(default_factory=SystemChecks)


# Garage inspection

class StatutoryRequirements(BaseModel):
    certificateOfIncorporation: bool = False
    tinCertificate: bool = False
    tradingLicense: bool = False
    otherDocuments: str = ""


class LocationPremises(BaseModel):
    signpost: bool = False
    clearAccessRoad: bool = False
    garageLayout: GarageLayout = GarageLayout.GOOD


class GarageFacilities(BaseModel):
    office: bool = False
    workingShade: bool = False
    sparePartEquipmentStore: bool = False
    parkingArea: bool = False
    customerWaitingArea: bool = False
    otherFacilities: str = ""


class SafetyAndHealth(BaseModel):
    internalTalkingSignages: bool = False
    assortedWasteBins: bool = False
    fireExtinguishers: bool = False
    emergencyExit: bool = False
    staffProtectiveGear: bool = False
    safetyBoots: bool = False
    cleanToilets: bool = False
    femaleStaffProvisions: bool = False
    otherSafetyMeasures: str = ""


class WasteManagementEnvironment(BaseModel):
    biodegradableWasteBin: bool = False
    nonBiodegradableWasteBin: bool = False
    wasteScrapStore: bool = False
    wasteOilTank: bool = False
    generalHygieneSanitation: bool = False
    otherWasteMeasures: str = ""


class Professionalism(BaseModel):
    qualifiedStaff: bool = False
    apprentices: bool = False
    garageInsurance: bool = False
    filingTaxReturns: bool = False
    serviceAdvisor: bool = False
    recordKeeping: bool = False
    businessGroupMembership: bool = False
    otherProfessionalMeasures: str = ""


class SecurityMeasures(BaseModel):
    cameras: bool = False
    dogs: bool = False
    guard: bool = False
    otherSecurityMeasures: str = ""


class GarageSecurity(BaseModel):
    fencedPremises: bool = False
    securedGate: bool = False
    securityMeasures: SecurityMeasures = Field(default_factory=SecurityMeasures)


class ToolsAndEquipment(BaseModel):
    basicHandToolBoxes: bool = False
    servicePitHoist: bool = False
    carStands: bool = False
    carSprayingBooth: bool = False
    otherTools: List[str] = Field(default_factory=list, description="Free-text tool names")


class GarageInspectionChecklist(BaseModel):
    """Facility and compliance flags for a garage inspection"""
    statutoryRequirements: StatutoryRequirements = Field(default_factory=StatutoryRequirements)
    locationPremises: LocationPremises = Field(default_factory=LocationPremises)
    garageFacilities: GarageFacilities = Field(default_factory=GarageFacilities)
    safetyAndHealth: SafetyAndHealth = Field(default_factory=SafetyAndHealth)
    wasteManagementEnvironment: WasteManagementEnvironment = Field(default_factory=WasteManagementEnvironment)
    professionalism: Professionalism = Field(default_factory=Professionalism)
    garageSecurity: GarageSecurity = Field(default_factory=GarageSecurity)
    toolsAndEquipment: ToolsAndEquipment = Field(default_factory=ToolsAndEquipment)
    otherRemarks: str = ""


# In-progress sessions. Identifying fields sit at the top level, the
# checklist document under `checklist`. Empty string means "not selected yet".

class BranchVehicleInspectionSession(BaseModel):
    """Vehicle inspection captured against a branch"""
    vehicleId: str = Field("", description="Reference to vehicle id")
    branchId: str = Field("", description="Reference to branch id")
    inspectorId: str = Field("", description="Reference to inspecting user id")
    signature: Optional[str] = Field(None, description="Inspector signature")
    checklist: VehicleInspectionChecklist = Field(default_factory=VehicleInspectionChecklist)


class GarageVehicleInspectionSession(BaseModel):
    """Vehicle inspection captured against a garage"""
    vehicleId: str = Field("", description="Reference to vehicle id")
    garageId: str = Field("", description="Reference to garage id")
    inspectorId: str = Field("", description="Reference to inspecting user id")
    lastInspectionDate: Optional[date] = None
    checklist: VehicleInspectionChecklist = Field(default_factory=VehicleInspectionChecklist)


class GarageInspectionSession(BaseModel):
    """Inspection of the garage premises itself"""
    garageId: str = Field("", description="Reference to garage id")
    inspectorId: str = Field("", description="Reference to inspecting user id")
    notes: Optional[str] = None
    lastInspectionDate: Optional[date] = None
    checklist: GarageInspectionChecklist = Field(default_factory=GarageInspectionChecklist)


# Payloads handed to the submit collaborator

class CreateBranchVehicleInspectionInput(BaseModel):
    """Collection: vehicle_inspection"""
    vehicleId: str = Field(..., min_length=1)
    branchId: str = Field(..., min_length=1)
    inspectorId: str = Field(..., min_length=1)
    checklist: VehicleInspectionChecklist
    signature: Optional[str] = None


class CreateGarageVehicleInspectionInput(BaseModel):
    """Collection: garage_vehicle_inspection"""
    vehicleId: str = Field(..., min_length=1)
    garageId: str = Field(..., min_length=1)
    inspectorId: str = Field(..., min_length=1)
    checklist: VehicleInspectionChecklist
    lastInspectionDate: Optional[date] = None


class CreateGarageInspectionInput(BaseModel):
    """Collection: garage_inspection"""
    garageId: str = Field(..., min_length=1)
    inspectorId: str = Field(..., min_length=1)
    checklist: GarageInspectionChecklist
    notes: Optional[str] = None
    lastInspectionDate: Optional[date] = None
