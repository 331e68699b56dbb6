"""
Cost estimate models.

A ChiffrageEstimate is what the generator returns for the ``chiffrage``
document type: effort per feature, grouped in sections, plus the user
roles of the project. Money is never part of it.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class EstimateFeature:
    """One estimated feature. Billable days = days x complexity."""
    name: str
    role: str = ""
    days: float = 0.0
    complexity: float = 1.0
    comment: Optional[str] = None

    @property
    def billable_days(self) -> float:
        return self.days * self.complexity


@dataclass
class EstimateSection:
    name: str
    features: List[EstimateFeature] = field(default_factory=list)


@dataclass
class EstimateRole:
    name: str
    description: str = ""


@dataclass
class ChiffrageEstimate:
    """Effort estimate grouped in sections."""
    sections: List[EstimateSection] = field(default_factory=list)
    roles: List[EstimateRole] = field(default_factory=list)

    @property
    def feature_count(self) -> int:
        return sum(len(s.features) for s in self.sections)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChiffrageEstimate':
        """
        Build an estimate from the generator's JSON payload.

        Numeric fields are coerced with float(); a non-numeric value
        raises ValueError, which callers translate to their own error.
        """
        sections = []
        for s_data in data.get('sections', []):
            features = [
                EstimateFeature(
                    name=f_data.get('name', ''),
                    role=f_data.get('role', ''),
                    days=float(f_data.get('days', 0)),
                    complexity=float(f_data.get('complexity', 1)),
                    comment=f_data.get('comment') or None,
                )
                for f_data in s_data.get('features', [])
            ]
            sections.append(EstimateSection(name=s_data.get('name', ''), features=features))

        roles = [
            EstimateRole(name=r.get('name', ''), description=r.get('description', ''))
            for r in data.get('roles', [])
        ]

        return cls(sections=sections, roles=roles)
