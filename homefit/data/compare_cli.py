"""CLI for comparing two areas.

Usage:
    python -m homefit.data.compare_cli "ANG MO KIO" "PUNGGOL" --snapshot data/snapshot.json
    python -m homefit.data.compare_cli BISHAN SENGKANG --unit-type "4 ROOM" --lens lease_safety
    python -m homefit.data.compare_cli BEDOK TAMPINES --stage primary_family --holding long --priority value
    python -m homefit.data.compare_cli --afford 9000 150000
"""

import argparse
import asyncio
import logging
from datetime import date
from decimal import Decimal

from homefit.config import settings
from homefit.data.postgrest import PostgrestClient
from homefit.data.resolver import ComparisonResolver
from homefit.data.snapshot_source import SnapshotSource
from homefit.engine.financing import calculate_affordability
from homefit.models.comparison import ComparisonResult
from homefit.models.preference import (
    CostVsValue,
    FamilyProfile,
    HoldingPeriod,
    Lens,
    LifeStage,
    PlanningHorizon,
    SchoolSensitivity,
)


def _values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def print_result(result: ComparisonResult) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {result.area_a}  vs  {result.area_b}")
    print(f"{'=' * 60}")
    print(f"  {result.headline}")
    print(f"  {result.lens_headline}")
    print()
    print(f"  Mode:        {result.mode.id.value} ({result.horizon.value} horizon)")
    print(f"  Confidence:  {result.confidence.value}")
    print(f"  Overall:     {result.area_a} {result.scores_a.overall:.1f}  |  {result.area_b} {result.scores_b.overall:.1f}")
    print()

    for line in result.tradeoffs:
        print(f"  {line}")
    print()
    print(f"  {result.decision_hint}")

    if result.warnings:
        print()
        for warning in result.warnings:
            print(f"  [{warning.effect.value.upper():>8}]  {warning.message}")
    if result.school_rule and result.school_rule.message:
        print(f"  [  SCHOOL]  {result.school_rule.message}")

    if result.education:
        print(f"\n  Education:   {result.education.comparison}")
        print(f"               {result.education.explanation}")
        if result.education.pressure_range_note:
            print(f"               {result.education.pressure_range_note}")
    if result.education_impact:
        impact = result.education_impact
        print(f"  Moving A→B:  {impact.epi_change_text}; {impact.school_count_text}; "
              f"choice flexibility {impact.choice_flexibility.value}")
    if result.commute:
        print(f"  Commute:     {result.commute.summary}")

    if result.bottom_line:
        print("\n  Bottom line:")
        for change in result.bottom_line.changes:
            print(f"    - {change}")
        print(f"    {result.bottom_line.best_for}")
    if result.moving_phrase:
        print(f"  {result.moving_phrase}")

    for side, tags in ((result.area_a, result.best_suited_for.area_a), (result.area_b, result.best_suited_for.area_b)):
        if tags:
            print(f"  Best for {side}: {', '.join(tags)}")
    for side, tags in ((result.area_a, result.be_cautious.area_a), (result.area_b, result.be_cautious.area_b)):
        if tags:
            print(f"  Caution {side}: {', '.join(tags)}")
    print()


def print_affordability(income: Decimal, down_payment: Decimal) -> None:
    result = calculate_affordability(
        income, down_payment, settings.default_loan_years, Decimal(str(settings.default_interest_rate)),
    )
    print(f"\n{'=' * 60}")
    print("  Affordability")
    print(f"{'=' * 60}")
    print(f"  Max monthly payment:  ${result.max_monthly_payment:,.0f}")
    print(f"  Max loan:             ${result.max_loan_amount:,.0f}")
    print(f"  Max property price:   ${result.max_property_price:,.0f}")
    print(f"  MSR cap:              ${result.msr_cap:,.0f}/mo")
    print(f"  TDSR cap:             ${result.tdsr_cap:,.0f}/mo")
    print(f"  LTV cap:              ${result.ltv_cap:,.0f}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare two residential areas")
    parser.add_argument("areas", nargs="*", metavar="AREA", help="Two area names, A then B")
    parser.add_argument("--snapshot", help="JSON snapshot file (default: query PostgREST)")
    parser.add_argument("--unit-type", default="4 ROOM", help="Unit type (default: 4 ROOM)")
    parser.add_argument("--months", type=int, default=None, help="Trailing window in months")
    parser.add_argument("--as-of-year", type=int, default=None, help="Reference year for school history")
    parser.add_argument("--lens", choices=_values(Lens), default=Lens.BALANCED.value, help="Preference lens")
    parser.add_argument("--long-term", action="store_true", help="Balanced lens with long-term holding")
    parser.add_argument("--horizon", choices=_values(PlanningHorizon), help="Planning horizon")
    parser.add_argument("--stage", choices=_values(LifeStage), help="Family life stage")
    parser.add_argument("--holding", choices=_values(HoldingPeriod), default=HoldingPeriod.MEDIUM.value)
    parser.add_argument("--priority", choices=_values(CostVsValue), default=CostVsValue.BALANCED.value)
    parser.add_argument("--sensitivity", choices=_values(SchoolSensitivity), default=SchoolSensitivity.NEUTRAL.value)
    parser.add_argument("--afford", nargs=2, type=Decimal, metavar=("INCOME", "DOWNPAYMENT"),
                        help="Monthly income and downpayment for the affordability check")
    return parser


async def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.afford:
        print_affordability(*args.afford)
        if not args.areas:
            return

    if len(args.areas) != 2:
        parser.error("exactly two areas are required")

    if args.snapshot:
        try:
            source = SnapshotSource.from_file(args.snapshot)
        except (OSError, ValueError) as e:
            parser.error(f"cannot load snapshot {args.snapshot}: {e}")
        resolver = ComparisonResolver(source, source, source.commute_table())
    else:
        client = PostgrestClient()
        try:
            resolver = ComparisonResolver(client, client)
        except (OSError, ValueError) as e:
            parser.error(f"cannot load commute table: {e}")

    family = None
    if args.stage:
        family = FamilyProfile(
            stage=LifeStage(args.stage),
            holding_period=HoldingPeriod(args.holding),
            cost_vs_value=CostVsValue(args.priority),
            school_sensitivity=SchoolSensitivity(args.sensitivity),
        )

    try:
        result = await resolver.compare(
            args.areas[0],
            args.areas[1],
            args.unit_type,
            args.as_of_year or date.today().year,
            lens=Lens(args.lens),
            long_term=args.long_term,
            family_profile=family,
            horizon=PlanningHorizon(args.horizon) if args.horizon else None,
            months=args.months,
        )
    except ValueError as e:
        parser.error(str(e))
    print_result(result)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
