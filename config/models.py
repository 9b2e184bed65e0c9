#!/usr/bin/env python3
"""
Parameter records for the simulation center planner.

Groups the facility, equipment, staffing and operations inputs into immutable
value objects. The UI replaces a record wholesale on every edit
(`with_updates`), the calculators only ever read them.
"""

import json
import math
import numbers
from dataclasses import dataclass, asdict, fields, replace
from enum import Enum
from typing import Dict, Any, List, Union

from utils.exceptions import ParameterValidationError, UnknownCategoryError


class _Choice(str, Enum):
    """String-valued category with fail-fast parsing."""

    @classmethod
    def parse(cls, value, field_name: str):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownCategoryError(field_name, value, [m.value for m in cls]) from None


class ConstructionType(_Choice):
    HOSPITAL_RENOVATION = "hospital-renovation"
    CLEAN_SHELL = "clean-shell"


class CostRegion(_Choice):
    LOW = "low-cost"
    MODERATE = "moderate-cost"
    HIGH = "high-cost"


class QualityLevel(_Choice):
    BUDGET = "budget"
    STANDARD = "standard"
    PREMIUM = "premium"


class AVTier(_Choice):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


class OpexModel(_Choice):
    ROOM_BASED = "room-based"
    SESSIONS_BASED = "sessions-based"


# camelCase keys used by presets and saved dashboard files
_FIELD_ALIASES = {
    "floorArea": "floor_area",
    "simRooms": "sim_rooms",
    "controlRooms": "control_rooms",
    "debriefRooms": "debrief_rooms",
    "supportSpaces": "support_spaces",
    "constructionType": "construction_type",
    "costRegion": "cost_region",
    "qualityLevel": "quality_level",
    "highFidelityManikins": "high_fidelity_manikins",
    "taskTrainers": "task_trainers",
    "avTier": "av_tier",
    "coreFTE": "core_fte",
    "facultyAllocationPercent": "faculty_allocation_percent",
    "trainingHoursPerYear": "training_hours_per_year",
    "sessionsPerMonth": "sessions_per_month",
    "opexModel": "opex_model",
    "growthRatePercent": "growth_rate_percent",
    "inflationPercent": "inflation_percent",
    "contingencyPercent": "contingency_percent",
    "refreshReservePercent": "refresh_reserve_percent",
}


CAMEL_CASE_NAMES = {field: alias for alias, field in _FIELD_ALIASES.items()}


def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase keys onto record field names; other keys pass through."""
    return {_FIELD_ALIASES.get(k, k): v for k, v in data.items()}


def _numeric_errors(record, names: List[str]) -> List[str]:
    errors = []
    for name in names:
        value = getattr(record, name)
        if value is None:
            errors.append(f"{name} is required")
        elif isinstance(value, bool) or not isinstance(value, numbers.Real):
            errors.append(f"{name} must be a number, got {value!r}")
        elif not math.isfinite(value):
            errors.append(f"{name} must be finite, got {value!r}")
    return errors


class _ParameterRecord:
    """Shared behaviour for the frozen parameter dataclasses."""

    _CHOICES: Dict[str, type] = {}

    def __post_init__(self):
        for name, choice in self._CHOICES.items():
            object.__setattr__(self, name, choice.parse(getattr(self, name), name))

    def numeric_fields(self) -> List[str]:
        return [f.name for f in fields(self) if f.name not in self._CHOICES]

    def validate(self) -> List[str]:
        return _numeric_errors(self, self.numeric_fields())

    def ensure_valid(self):
        """Raise ParameterValidationError listing every problem, if any."""
        errors = self.validate()
        if errors:
            raise ParameterValidationError(errors)
        return self

    def with_updates(self, **changes):
        """Return a new record with the given fields replaced."""
        changes = normalize_keys(changes)
        names = {f.name for f in fields(self)}
        unknown = [f"unknown field {k!r}" for k in changes if k not in names]
        if unknown:
            raise ParameterValidationError(unknown)
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for name in self._CHOICES:
            out[name] = out[name].value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any], partial: bool = False):
        """
        Build a record from a plain dict.

        Args:
            data: Field values (snake_case or camelCase keys)
            partial: When True, missing fields take their defaults

        Raises:
            ParameterValidationError: on missing or unknown fields
        """
        data = normalize_keys(data)
        names = [f.name for f in fields(cls)]
        errors = [f"unknown field {k!r}" for k in data if k not in names]
        if not partial:
            errors += [f"{n} is required" for n in names if n not in data]
        if errors:
            raise ParameterValidationError(errors)
        return cls(**data)


@dataclass(frozen=True)
class ProjectParameters(_ParameterRecord):
    """Facility inputs for the CAPEX cost model"""
    floor_area: float = 4000
    sim_rooms: int = 3
    control_rooms: int = 1
    debrief_rooms: int = 2
    support_spaces: int = 3  # storage, tech workshop, office
    construction_type: ConstructionType = ConstructionType.HOSPITAL_RENOVATION
    cost_region: CostRegion = CostRegion.MODERATE
    quality_level: QualityLevel = QualityLevel.STANDARD

    _CHOICES = {
        "construction_type": ConstructionType,
        "cost_region": CostRegion,
        "quality_level": QualityLevel,
    }

    @property
    def total_rooms(self) -> int:
        return self.sim_rooms + self.control_rooms + self.debrief_rooms + self.support_spaces


@dataclass(frozen=True)
class SimulatorParameters(_ParameterRecord):
    """Full input vector for the interactive budget simulator"""
    # Facility
    floor_area: float = 4000
    sim_rooms: int = 3
    control_rooms: int = 1
    debrief_rooms: int = 2

    # Equipment
    high_fidelity_manikins: int = 2
    task_trainers: int = 5
    av_tier: AVTier = AVTier.STANDARD

    # Staffing
    core_fte: float = 2.5
    faculty_allocation_percent: float = 20
    training_hours_per_year: float = 40

    # Operations
    sessions_per_month: float = 120
    opex_model: OpexModel = OpexModel.ROOM_BASED
    growth_rate_percent: float = 5
    inflation_percent: float = 3

    # Advanced
    quality_level: QualityLevel = QualityLevel.STANDARD
    cost_region: CostRegion = CostRegion.MODERATE
    contingency_percent: float = 10
    refresh_reserve_percent: float = 15

    _CHOICES = {
        "av_tier": AVTier,
        "opex_model": OpexModel,
        "quality_level": QualityLevel,
        "cost_region": CostRegion,
    }

    @property
    def total_rooms(self) -> int:
        return self.sim_rooms + self.control_rooms + self.debrief_rooms


@dataclass(frozen=True)
class OrganizationInputs(_ParameterRecord):
    """Hospital baseline figures driving the cost-avoidance estimate"""
    total_rns: float = 500
    turnover_rate: float = 0.184
    turnover_cost: float = 61110
    code_blue_events: float = 150
    code_blue_survival: float = 0.21
    medication_errors: float = 200
    medication_error_cost: float = 500
    clabsi_rate: float = 1.5  # per 1,000 line days
    central_line_days: float = 15000
    clabsi_cost: float = 37500
    malpractice_premium: float = 250000
    has_magnet_status: bool = False
    pursuing_magnet: bool = True
    annual_discharges: float = 12000
    discount_rate: float = 0.08

    _FLAGS = ("has_magnet_status", "pursuing_magnet")

    def numeric_fields(self) -> List[str]:
        return [f.name for f in fields(self) if f.name not in self._FLAGS]

    def validate(self) -> List[str]:
        errors = super().validate()
        for name in self._FLAGS:
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be true or false")
        return errors


@dataclass(frozen=True)
class Scenario:
    """A named, read-only parameter preset (simulator or CAPEX model)"""
    id: str
    name: str
    description: str
    parameters: Union[SimulatorParameters, ProjectParameters]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters.to_dict(),
        }


def camel_case_name(field_name: str) -> str:
    """Record field -> camelCase key used in saved files (floor_area -> floorArea)."""
    return CAMEL_CASE_NAMES.get(field_name, field_name)


def parameters_to_json(params: _ParameterRecord) -> str:
    return json.dumps(params.to_dict(), indent=2)


def parameters_from_json(text, record_type=SimulatorParameters):
    """
    Parse a saved parameter record.

    Raises:
        ParameterValidationError: on malformed JSON, missing or unknown fields
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParameterValidationError([f"not a parameter file: {exc}"]) from exc
    if not isinstance(data, dict):
        raise ParameterValidationError(["not a parameter file: expected a JSON object"])
    return record_type.from_dict(data)


def save_parameters(params: _ParameterRecord, filepath: str):
    """Save a parameter record to a JSON file"""
    with open(filepath, 'w') as f:
        f.write(parameters_to_json(params))


def load_parameters(filepath: str, record_type=SimulatorParameters):
    """Load a parameter record from a JSON file"""
    with open(filepath, 'r') as f:
        return parameters_from_json(f.read(), record_type)
