from homefit.engine.lease_risk import calculate_lease_risk, lease_risk_level
from homefit.models.area import LeaseRiskLevel


class TestCalculateLeaseRisk:
    def test_ageing_estate_is_critical(self):
        """52 yrs median, 35% below 55, 55% below 60: 3 + 2 + 1 points."""
        result = calculate_lease_risk(52, 0.35, 0.55)
        assert result.level is LeaseRiskLevel.CRITICAL
        assert result.reasons == (
            "Median remaining lease is below 55 years",
            "High share of transactions below 55 years",
            "Majority of transactions below 60 years",
        )

    def test_young_estate_is_low(self):
        result = calculate_lease_risk(88, 0.0, 0.0)
        assert result.level is LeaseRiskLevel.LOW
        assert result.reasons == ()

    def test_moderate_lease(self):
        result = calculate_lease_risk(65, 0.05, 0.10)
        assert result.level is LeaseRiskLevel.MODERATE
        assert result.reasons == ("Median remaining lease is below 70 years",)

    def test_high_from_mixed_signals(self):
        """58 yrs (+2) with a meaningful share below 55 (+1) and a majority below 60 (+1)."""
        result = calculate_lease_risk(58, 0.20, 0.60)
        assert result.level is LeaseRiskLevel.HIGH
        assert len(result.reasons) == 3

    def test_share_alone_can_raise_risk(self):
        """Healthy median but a concentrated tail of short leases."""
        result = calculate_lease_risk(75, 0.30, 0.40)
        assert result.level is LeaseRiskLevel.MODERATE
        assert result.reasons == ("High share of transactions below 55 years",)

    def test_boundaries_are_strict_below(self):
        """Exactly 55 years is not 'below 55'."""
        at = calculate_lease_risk(55, 0.0, 0.0)
        below = calculate_lease_risk(54.9, 0.0, 0.0)
        assert at.level is LeaseRiskLevel.MODERATE
        assert below.level is LeaseRiskLevel.HIGH
        assert below.reasons[0] == "Median remaining lease is below 55 years"
        assert at.reasons[0] == "Median remaining lease is below 60 years"

    def test_monotonic_in_median_lease(self):
        """Shorter median lease never lowers the risk level."""
        ranks = [calculate_lease_risk(lease, 0.1, 0.3).level.rank for lease in range(95, 40, -1)]
        assert ranks == sorted(ranks)

    def test_monotonic_in_critical_share(self):
        ranks = [calculate_lease_risk(62, frac / 100, 0.3).level.rank for frac in range(0, 101, 5)]
        assert ranks == sorted(ranks)


class TestLeaseRiskLevel:
    def test_score_bands(self):
        assert lease_risk_level(0) is LeaseRiskLevel.LOW
        assert lease_risk_level(1) is LeaseRiskLevel.MODERATE
        assert lease_risk_level(3) is LeaseRiskLevel.HIGH
        assert lease_risk_level(5) is LeaseRiskLevel.CRITICAL
        assert lease_risk_level(6) is LeaseRiskLevel.CRITICAL
