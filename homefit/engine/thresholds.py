"""Named thresholds used across the scoring engine.

These are carried over as fixed business constants. None of them has a
documented derivation; treat them as tunable, not calibrated.
"""

# Remaining-lease thresholds (years)
LEASE_CRITICAL = 55
LEASE_HIGH = 60
LEASE_MODERATE = 70

# Share of transactions below LEASE_CRITICAL / LEASE_HIGH
FRAC_BELOW_CRITICAL_HIGH = 0.30
FRAC_BELOW_CRITICAL_MODERATE = 0.15
FRAC_BELOW_HIGH_MAJORITY = 0.50

# Market stability
AVG_VOLATILITY = 0.12
AVG_VOLUME = 100

# Comparison significance
EPI_SIGNIFICANT = 15
EPI_MODERATE = 8
EPI_MINOR = 3
PRICE_SIGNIFICANT = 30_000
PRICE_MODERATE = 20_000
PRICE_MINOR = 10_000
# Lease gap between the two areas (years), not remaining lease
LEASE_MAJOR_GAP = 20
LEASE_MODERATE_GAP = 15
LEASE_MINOR_GAP = 2
CBI_SIGNIFICANT = 15
CBI_MODERATE = 8
CBI_MINOR = 3
SCHOOL_COUNT_SIGNIFICANT = 4
HIGH_DEMAND_SCHOOLS_SIGNIFICANT = 2
RENT_GAP_SIMILAR = 200

# Confidence bands on |overall_B - overall_A|
CONFIDENCE_CLEAR_WINNER = 12
CONFIDENCE_BALANCED = 5

# Family-profile weight adjustments
MAX_TOTAL_ADJUSTMENT = 0.30
