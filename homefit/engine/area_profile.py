"""Area profile builder.

Aggregates per-period rows for one area and unit type into an AreaProfile.
All signals are derived here and nowhere else, so rebuilding from the same
rows always yields an equal profile.
"""

import math
from collections.abc import Callable
from decimal import Decimal
from operator import attrgetter

from homefit.engine.financing import estimated_financing
from homefit.engine.lease_risk import calculate_lease_risk
from homefit.engine.thresholds import (
    AVG_VOLATILITY,
    AVG_VOLUME,
    LEASE_CRITICAL,
    LEASE_HIGH,
    LEASE_MODERATE,
)
from homefit.models.area import (
    AreaProfile,
    AreaSignals,
    PeriodStats,
    PricingResponse,
    Stability,
)


def upper_median(values: list):
    """Upper median: element at len // 2 of the sorted values."""
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def coefficient_of_variation(values: list[float]) -> float:
    """Population standard deviation over mean. 0 when the mean is 0."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    if mean <= 0:
        return 0.0
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / mean


def _month_index(period: str) -> int:
    year, month = period[:7].split("-")
    return int(year) * 12 + int(month) - 1


def trailing_window(rows: list, months: int, period: Callable = attrgetter("period")) -> list:
    """Rows in the last `months` calendar months ending at the newest period, oldest first."""
    if not rows:
        return []
    latest = max(_month_index(period(r)) for r in rows)
    kept = [r for r in rows if _month_index(period(r)) > latest - months]
    return sorted(kept, key=period)


def window_median_rent(rentals: list, months: int) -> Decimal | None:
    """Median of monthly median rents over the trailing window; rows carry `month` and `median_rent`."""
    window = trailing_window(rentals, months, period=attrgetter("month"))
    if not window:
        return None
    return upper_median([r.median_rent for r in window])


def pricing_response(median_lease: float) -> PricingResponse:
    if median_lease < LEASE_HIGH:
        return PricingResponse.EARLY_DISCOUNT
    if median_lease < LEASE_MODERATE:
        return PricingResponse.STABLE
    return PricingResponse.PREMIUM


def market_stability(volatility: float, volume: int) -> Stability:
    if volatility > AVG_VOLATILITY and volume < AVG_VOLUME:
        return Stability.FRAGILE
    if volatility > AVG_VOLATILITY:
        return Stability.VOLATILE
    return Stability.STABLE


def build_area_profile(
    area_id: str,
    unit_type: str,
    rows: list[PeriodStats],
    *,
    median_rent: Decimal | None = None,
    window_months: int | None = None,
    loan_years: int | None = None,
    interest_rate: Decimal | None = None,
    ltv: Decimal | None = None,
) -> AreaProfile | None:
    """Build an AreaProfile from the window's per-period rows.

    Returns None when the window has no rows. Lease statistics ignore
    periods with no recorded lease.
    """
    if not rows:
        return None

    prices = [r.median_price for r in rows]
    median_price = upper_median(prices)

    per_area = [r.median_price_per_area for r in rows if r.median_price_per_area > 0]
    median_per_area = upper_median(per_area) if per_area else Decimal("0")

    leases = [r.median_lease_years for r in rows if r.median_lease_years > 0]
    median_lease = float(upper_median(leases)) if leases else 0.0
    frac_below_critical = sum(1 for y in leases if y < LEASE_CRITICAL) / len(leases) if leases else 0.0
    frac_below_high = sum(1 for y in leases if y < LEASE_HIGH) / len(leases) if leases else 0.0

    volume = sum(r.tx_count for r in rows)
    volatility = coefficient_of_variation([float(p) for p in prices])

    financing = estimated_financing(median_price, loan_years, interest_rate, ltv)
    rent_buy_gap = median_rent - financing if median_rent is not None else None

    lease_risk = calculate_lease_risk(median_lease, frac_below_critical, frac_below_high)
    signals = AreaSignals(
        lease_risk=lease_risk.level,
        lease_reasons=lease_risk.reasons,
        stability=market_stability(volatility, volume),
        pricing_response=pricing_response(median_lease),
    )

    return AreaProfile(
        area_id=area_id,
        unit_type=unit_type,
        window_months=window_months,
        median_price=median_price,
        median_price_per_area=median_per_area,
        estimated_monthly_financing=financing,
        median_remaining_lease=median_lease,
        frac_below_critical=frac_below_critical,
        frac_below_high=frac_below_high,
        volume_recent=volume,
        volatility=volatility,
        signals=signals,
        median_rent=median_rent,
        rent_buy_gap=rent_buy_gap,
    )
