"""Area profile data types: raw period rows, derived signals and the profile itself."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class LeaseRiskLevel(Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEASE_RISK_ORDER.index(self)


_LEASE_RISK_ORDER = [
    LeaseRiskLevel.LOW,
    LeaseRiskLevel.MODERATE,
    LeaseRiskLevel.HIGH,
    LeaseRiskLevel.CRITICAL,
]


class Stability(Enum):
    STABLE = "stable"
    VOLATILE = "volatile"
    FRAGILE = "fragile"


class PricingResponse(Enum):
    EARLY_DISCOUNT = "early_discount"
    STABLE = "stable"
    PREMIUM = "premium"


@dataclass(frozen=True)
class PeriodStats:
    """Pre-aggregated transactions for one area, unit type and month."""
    period: str
    tx_count: int
    median_price: Decimal
    median_price_per_area: Decimal
    median_lease_years: float


@dataclass(frozen=True)
class LeaseRiskAssessment:
    level: LeaseRiskLevel
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class AreaSignals:
    lease_risk: LeaseRiskLevel
    lease_reasons: tuple[str, ...]
    stability: Stability
    pricing_response: PricingResponse


@dataclass(frozen=True)
class AreaProfile:
    area_id: str
    unit_type: str
    window_months: int | None

    # Price
    median_price: Decimal
    median_price_per_area: Decimal
    estimated_monthly_financing: Decimal

    # Lease
    median_remaining_lease: float
    frac_below_critical: float
    frac_below_high: float

    # Market
    volume_recent: int
    volatility: float

    signals: AreaSignals

    # Rent (optional)
    median_rent: Decimal | None = None
    rent_buy_gap: Decimal | None = None

    @property
    def lease_risk(self) -> LeaseRiskLevel:
        return self.signals.lease_risk
