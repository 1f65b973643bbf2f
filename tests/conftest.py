"""Canonical test fixtures used across engine and data tests.

Fixture areas (4 ROOM, 24-month window):
  ANG MO KIO: $520K, 58 yrs median lease, 20% below 55 yrs, EPI 40
  PUNGGOL:    $560K, 88 yrs median lease, none below 55 yrs,  EPI 20
"""

from decimal import Decimal

import pytest

from homefit.engine.lease_risk import calculate_lease_risk
from homefit.models.area import AreaProfile, AreaSignals, PeriodStats, PricingResponse, Stability
from homefit.models.commute import AccessRecord, BusDependency, MrtAccess, TransferComplexity
from homefit.models.education import EducationPressureIndex, PressureFactor, SchoolLandscape
from homefit.models.snapshot import Snapshot


def make_profile(
    area_id: str,
    price: int,
    lease: float,
    frac_below_critical: float = 0.0,
    frac_below_high: float = 0.0,
    volume: int = 200,
    volatility: float = 0.05,
    rent_buy_gap: Decimal | None = None,
) -> AreaProfile:
    risk = calculate_lease_risk(lease, frac_below_critical, frac_below_high)
    return AreaProfile(
        area_id=area_id,
        unit_type="4 ROOM",
        window_months=24,
        median_price=Decimal(price),
        median_price_per_area=Decimal(price) / 93,
        estimated_monthly_financing=Decimal("1800.00"),
        median_remaining_lease=lease,
        frac_below_critical=frac_below_critical,
        frac_below_high=frac_below_high,
        volume_recent=volume,
        volatility=volatility,
        signals=AreaSignals(
            lease_risk=risk.level,
            lease_reasons=risk.reasons,
            stability=Stability.STABLE,
            pricing_response=PricingResponse.PREMIUM,
        ),
        median_rent=Decimal("1800.00") + rent_buy_gap if rent_buy_gap is not None else None,
        rent_buy_gap=rent_buy_gap,
    )


def make_epi(area_id: str, value: float) -> EducationPressureIndex:
    """EPI whose four sub-scores all equal `value`, so the composite is `value`."""
    return EducationPressureIndex(
        area_id=area_id,
        demand_pressure=value,
        choice_constraint=value,
        uncertainty=value,
        crowding=value,
        dominant_factor=PressureFactor.DEMAND,
        explanation="",
    )


def make_access(
    area_id: str,
    stations: int,
    stops: int,
    access: MrtAccess,
    transfers: TransferComplexity,
    bus: BusDependency,
) -> AccessRecord:
    return AccessRecord(
        area_id=area_id,
        mrt_station_count=stations,
        bus_stop_count=stops,
        mrt_access=access,
        transfer_complexity=transfers,
        bus_dependency=bus,
    )


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def epi_factory():
    return make_epi


@pytest.fixture
def access_factory():
    return make_access


@pytest.fixture
def older_area() -> AreaProfile:
    """Cheaper area with an ageing lease profile."""
    return make_profile("ANG MO KIO", 520_000, 58.0, frac_below_critical=0.20, frac_below_high=0.45)


@pytest.fixture
def newer_area() -> AreaProfile:
    """Pricier area with long remaining leases."""
    return make_profile("PUNGGOL", 560_000, 88.0)


@pytest.fixture
def epi_older() -> EducationPressureIndex:
    return make_epi("ANG MO KIO", 40.0)


@pytest.fixture
def epi_newer() -> EducationPressureIndex:
    return make_epi("PUNGGOL", 20.0)


@pytest.fixture
def period_rows() -> list[PeriodStats]:
    """Six months of rows with stable prices around $500K."""
    prices = [480_000, 500_000, 510_000, 495_000, 505_000, 520_000]
    leases = [62.0, 60.5, 58.0, 61.0, 54.0, 59.5]
    return [
        PeriodStats(
            period=f"2024-{month:02d}",
            tx_count=30,
            median_price=Decimal(price),
            median_price_per_area=Decimal(price) / 93,
            median_lease_years=lease,
        )
        for month, price, lease in zip(range(1, 7), prices, leases)
    ]


@pytest.fixture
def landscape_pair() -> tuple[SchoolLandscape, SchoolLandscape]:
    return (
        SchoolLandscape(area_id="ANG MO KIO", school_count=10, high_demand_schools=3),
        SchoolLandscape(area_id="PUNGGOL", school_count=14, high_demand_schools=1),
    )


@pytest.fixture
def snapshot() -> Snapshot:
    """Two towns, one with quoted names in the school table."""
    transactions = []
    for month in range(1, 13):
        transactions.append({
            "town": "ANG MO KIO", "flat_type": "4 ROOM", "month": f"2024-{month:02d}",
            "tx_count": 40, "median_price": 520000 + month * 1000, "median_psm": 5600,
            "median_lease_years": 58.0,
        })
        transactions.append({
            "town": "ANG MO KIO", "flat_type": "3 ROOM", "month": f"2024-{month:02d}",
            "tx_count": 60, "median_price": 380000, "median_psm": 5500,
            "median_lease_years": 55.0,
        })
        transactions.append({
            "town": "PUNGGOL", "flat_type": "4 ROOM", "month": f"2024-{month:02d}",
            "tx_count": 50, "median_price": 560000, "median_psm": 6000,
            "median_lease_years": 88.0,
        })
    return Snapshot.model_validate({
        "transactions": transactions,
        "rentals": [
            {"town": "ANG MO KIO", "flat_type": "4 ROOM", "month": "2024-11", "median_rent": 3200},
            {"town": "ANG MO KIO", "flat_type": "4 ROOM", "month": "2024-12", "median_rent": 3300},
        ],
        "schools": [
            {"id": "s1", "school_name": "Ang Mo Kio Primary", "town": '"ANG MO KIO"'},
            {"id": "s2", "school_name": "Jing Shan Primary", "town": '"ANG MO KIO"'},
            {"id": "s3", "school_name": "Punggol Green Primary", "town": "PUNGGOL"},
        ],
        "cutoffs": [
            {"school_id": "s1", "year": 2022, "cutoff_max": 260},
            {"school_id": "s1", "year": 2023, "cutoff_max": 255},
            {"school_id": "s2", "year": 2023, "cutoff_range": "231-250"},
            {"school_id": "s3", "year": 2023, "cutoff_max": 220},
        ],
    })
