#!/usr/bin/env python3
"""
Result records returned by the calculators.
Derived on every call, never stored; `to_dict()` gives the plain structure the
charts and exports consume.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any, Optional


@dataclass
class CostLineItem:
    id: str
    category: str
    name: str
    amount: float
    basis: str
    notes: str = ""


@dataclass
class CapexResult:
    """Output of the CAPEX cost model"""
    line_items: List[CostLineItem]
    subtotal_hard_costs: float
    soft_costs: float
    contingency: float
    total_project_cost: float
    cost_per_sf: float
    cost_per_room: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CapexSummary:
    construction: float
    equipment: float
    furniture: float
    av_system: float
    soft_costs: float
    contingency: float
    existing_credits: float
    total: float
    net: float
    line_items: List[CostLineItem] = field(default_factory=list)


@dataclass
class OpexSummary:
    staffing: float
    faculty_development: float
    maintenance: float
    consumables: float
    software: float
    utilities: float
    refresh: float
    annual: float
    monthly: float
    line_items: List[CostLineItem] = field(default_factory=list)


@dataclass
class YearProjection:
    year: int
    label: str
    capex: float
    opex: float
    total: float
    cumulative_total: float
    sessions_per_year: float
    cost_per_session: float


@dataclass
class FiveYearProjection:
    year_by_year: List[YearProjection]
    total_capex: float
    total_opex: float
    total_cost: float


@dataclass
class UnitMetrics:
    cost_per_session: float
    cost_per_learner_hour: float
    cost_per_sf: float
    cost_per_room: float
    total_rooms: int
    annual_sessions: float


@dataclass
class BudgetResults:
    """Output of the budget simulator"""
    capex: CapexSummary
    opex: OpexSummary
    five_year: FiveYearProjection
    metrics: UnitMetrics

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ROICategoryResult:
    category: str
    name: str
    annual_savings: float
    five_year_savings: float
    confidence: str
    citations: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class AssetContribution:
    asset_type: str
    name: str
    count: float
    cost: float
    annual_contribution: float
    five_year_contribution: float
    payback_months: Optional[int]


@dataclass
class ValueTimelinePoint:
    year: int
    cumulative_cost: float
    cumulative_savings: float
    net_position: float


@dataclass
class ConfidenceRange:
    conservative: float
    baseline: float
    optimistic: float


@dataclass
class ROISummary:
    total_annual_savings: float
    total_five_year_savings: float
    net_roi: float
    roi_percent: float
    payback_period_months: Optional[int]
    irr_percent: Optional[float]


@dataclass
class ROIResults:
    """Output of the cost-avoidance estimator"""
    by_category: List[ROICategoryResult]
    confidence_range: ConfidenceRange
    summary: Optional[ROISummary] = None
    by_asset: List[AssetContribution] = field(default_factory=list)
    value_timeline: List[ValueTimelinePoint] = field(default_factory=list)

    @property
    def total_annual_savings(self) -> float:
        return self.confidence_range.baseline

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
