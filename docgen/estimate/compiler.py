"""
Estimate Compiler - Prices a cost estimate into a multi-sheet ledger.

The generator only estimates effort (days and a complexity multiplier per
feature); every amount is computed here:

    billable_days  = days x complexity
    billable_price = billable_days x daily_rate
    total_with_markup = total x 1.20      (20% management overhead)
    tax               = total_with_markup x 0.20
    total_with_tax    = total_with_markup + tax

Accumulation is unrounded; figures are rounded to 2 decimals only when a
sheet is rendered.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Union

from ..core.config import EstimateConfig
from ..core.errors import InvalidEstimate
from ..models.estimate import ChiffrageEstimate, EstimateRole
from ..utils.logger import get_logger
from ..validator.response_cleaner import ResponseFormat, clean_response

logger = get_logger(__name__)


OVERHEAD_RATE = 0.20
TAX_RATE = 0.20


def _round(value: float) -> float:
    return round(value, 2)


@dataclass
class FeatureLine:
    """Priced feature."""
    section: str
    name: str
    role: str
    days: float
    complexity: float
    billable_days: float
    billable_price: float
    comment: str = ""


@dataclass
class SectionTotal:
    name: str
    lines: List[FeatureLine] = field(default_factory=list)
    billable_days: float = 0.0
    billable_price: float = 0.0

    @property
    def feature_count(self) -> int:
        return len(self.lines)


@dataclass
class EstimateLedger:
    """Priced estimate with unrounded totals and rendered sheets."""
    daily_rate: float
    sections: List[SectionTotal] = field(default_factory=list)
    roles: List[EstimateRole] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def lines(self) -> List[FeatureLine]:
        return [line for s in self.sections for line in s.lines]

    @property
    def total_days(self) -> float:
        return sum(s.billable_days for s in self.sections)

    @property
    def total_price(self) -> float:
        return sum(s.billable_price for s in self.sections)

    @property
    def overhead(self) -> float:
        return self.total_price * OVERHEAD_RATE

    @property
    def total_with_markup(self) -> float:
        return self.total_price * (1 + OVERHEAD_RATE)

    @property
    def tax(self) -> float:
        return self.total_with_markup * TAX_RATE

    @property
    def total_with_tax(self) -> float:
        return self.total_with_markup + self.tax

    def features_sheet(self) -> List[Dict[str, Any]]:
        """Feature rows, a subtotal row after each section, a grand-total row last."""
        rows: List[Dict[str, Any]] = []
        for section in self.sections:
            for line in section.lines:
                rows.append({
                    "kind": "feature",
                    "section": line.section,
                    "feature": line.name,
                    "role": line.role,
                    "days": line.days,
                    "complexity": line.complexity,
                    "total_days": _round(line.billable_days),
                    "total_price": _round(line.billable_price),
                    "comment": line.comment,
                })
            rows.append({
                "kind": "subtotal",
                "section": section.name,
                "feature": f"Sous-total {section.name}",
                "total_days": _round(section.billable_days),
                "total_price": _round(section.billable_price),
            })
        rows.append({
            "kind": "total",
            "feature": "TOTAL GÉNÉRAL",
            "total_days": _round(self.total_days),
            "total_price": _round(self.total_price),
        })
        return rows

    def roles_sheet(self) -> List[Dict[str, str]]:
        return [{"role": r.name, "description": r.description} for r in self.roles]

    def summary_sheet(self) -> Dict[str, Any]:
        return {
            "daily_rate": self.daily_rate,
            "sections": [
                {
                    "section": s.name,
                    "total_days": _round(s.billable_days),
                    "total_price": _round(s.billable_price),
                }
                for s in self.sections
            ],
            "total_days": _round(self.total_days),
            "total_excl_tax": _round(self.total_price),
            "overhead": _round(self.overhead),
            "total_with_markup": _round(self.total_with_markup),
            "tax": _round(self.tax),
            "total_with_tax": _round(self.total_with_tax),
            "section_count": len(self.sections),
            "feature_count": len(self.lines),
            "role_count": len(self.roles),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "features": self.features_sheet(),
            "roles": self.roles_sheet(),
            "summary": self.summary_sheet(),
            "warnings": list(self.warnings),
        }


def _check_number(value: float, what: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
        raise InvalidEstimate(f"{what} must be a finite number, got {value!r}")
    return float(value)


def _load_estimate(estimate: Union[ChiffrageEstimate, Dict[str, Any], str]) -> ChiffrageEstimate:
    if isinstance(estimate, ChiffrageEstimate):
        return estimate
    if isinstance(estimate, str):
        estimate = clean_response(estimate, ResponseFormat.ESTIMATE)
    try:
        return ChiffrageEstimate.from_dict(estimate)
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidEstimate(f"Invalid estimate payload: {e}")


def compile_estimate(
    estimate: Union[ChiffrageEstimate, Dict[str, Any], str],
    daily_rate: float,
    config: Optional[EstimateConfig] = None,
) -> EstimateLedger:
    """
    Price an estimate at a daily rate.

    Complexity multipliers outside the documented set are accepted with
    a warning when positive, unless ``strict_complexity`` is set.

    Args:
        estimate: Estimate model, parsed payload, or stored JSON text
        daily_rate: Price of one day
        config: Estimate settings

    Returns:
        EstimateLedger

    Raises:
        InvalidEstimate: If the rate, a day count or a multiplier is invalid
        MalformedResponse: If stored JSON text cannot be parsed
    """
    config = config or EstimateConfig()
    daily_rate = _check_number(daily_rate, "Daily rate")
    if daily_rate < 0:
        raise InvalidEstimate(f"Daily rate must not be negative, got {daily_rate:g}")

    model = _load_estimate(estimate)
    allowed = {float(c) for c in config.allowed_complexities}
    ledger = EstimateLedger(daily_rate=daily_rate, roles=list(model.roles))

    for section in model.sections:
        total = SectionTotal(name=section.name)

        for feature in section.features:
            label = f"{section.name} / {feature.name}"
            days = _check_number(feature.days, f"Days of {label}")
            complexity = _check_number(feature.complexity, f"Complexity of {label}")

            if days < 0:
                raise InvalidEstimate(f"Days of {label} must not be negative, got {days:g}")
            if complexity <= 0:
                raise InvalidEstimate(f"Complexity of {label} must be positive, got {complexity:g}")
            if complexity not in allowed:
                message = f"Complexity {complexity:g} of {label} is outside {sorted(allowed)}"
                if config.strict_complexity:
                    raise InvalidEstimate(message)
                logger.warning(message)
                ledger.warnings.append(message)

            billable_days = days * complexity
            billable_price = billable_days * daily_rate

            total.lines.append(FeatureLine(
                section=section.name,
                name=feature.name,
                role=feature.role,
                days=days,
                complexity=complexity,
                billable_days=billable_days,
                billable_price=billable_price,
                comment=feature.comment or "",
            ))
            total.billable_days += billable_days
            total.billable_price += billable_price

        ledger.sections.append(total)

    logger.info(
        f"Compiled estimate: {len(ledger.lines)} features, "
        f"{_round(ledger.total_days)} days, {_round(ledger.total_with_tax)} incl. tax"
    )
    return ledger


def ledger_to_json(ledger: EstimateLedger) -> str:
    """Serialize the three sheets of a ledger."""
    return json.dumps(ledger.to_dict(), ensure_ascii=False, indent=2)
