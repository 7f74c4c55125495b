#!/usr/bin/env python3
"""Command-line interface for the calendar range resolver."""

from __future__ import annotations

import argparse
import logging
import sys

from calrange.types import Bucket, ComparisonType, Granularity, KPISummary

GRANULARITY_CHOICES = [g.value for g in Granularity]
COMPARISON_CHOICES = [c.value for c in ComparisonType]


def _print_header(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)


def _print_buckets(buckets: list[Bucket], limit: int) -> None:
    from calrange.formatting import format_display_date

    print(f"\nBuckets ({len(buckets)}):")
    for i, bucket in enumerate(buckets[:limit]):
        print(
            f"   {i+1:3}. {format_display_date(bucket.anchor_date)} | "
            f"{bucket.short_label:<8} {bucket.full_label}"
        )
    if len(buckets) > limit:
        print(f"   ... and {len(buckets) - limit} more buckets")


def _print_kpis(summary: KPISummary, changes: KPISummary | None = None) -> None:
    for family in ("adoption", "usage", "value", "credits"):
        print(f"\n{family.capitalize()}:")
        values = getattr(summary, family)
        deltas = getattr(changes, family) if changes is not None else {}
        for name, value in values.items():
            delta = f"  ({deltas[name]:+.1f}%)" if name in deltas else ""
            print(f"   {name:<26} {value:>14,.2f}{delta}")


def cmd_presets(args: argparse.Namespace) -> int:
    """List every preset with its resolved range."""
    from calrange.exceptions import InvalidDateError
    from calrange.formatting import format_range_display
    from calrange.presets import available_presets, resolve_preset

    _print_header("PRESETS")
    for name, label in available_presets():
        try:
            date_range = resolve_preset(name, args.as_of)
        except InvalidDateError as e:
            print(f"Error: {e}")
            return 1
        print(f"{name:<16} {label:<16} {format_range_display(date_range)}")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve a preset and show its comparison range and buckets."""
    from calrange.buckets import generate_buckets
    from calrange.comparison import resolve_comparison_range
    from calrange.exceptions import InvalidDateError
    from calrange.formatting import format_range_display
    from calrange.presets import resolve_preset

    try:
        date_range = resolve_preset(args.preset, args.as_of)
    except InvalidDateError as e:
        print(f"Error: {e}")
        return 1

    _print_header("RESOLVE")
    print(f"Preset:      {date_range.label}")
    print(f"Range:       {format_range_display(date_range)}")
    print(f"Start:       {date_range.start.isoformat()}")
    print(f"End:         {date_range.end.isoformat()}")

    comparison = resolve_comparison_range(date_range, args.compare)
    if comparison is not None:
        print(f"Comparison:  {comparison.label}: {format_range_display(comparison)}")

    _print_buckets(generate_buckets(date_range, args.granularity).to_list(), args.limit)
    return 0


def cmd_buckets(args: argparse.Namespace) -> int:
    """Subdivide an explicit range into buckets."""
    from calrange.buckets import generate_buckets
    from calrange.exceptions import InvalidDateError
    from calrange.presets import resolve_custom_range

    try:
        date_range = resolve_custom_range(args.start, args.end)
    except InvalidDateError as e:
        print(f"Error: {e}")
        return 1

    buckets = generate_buckets(date_range, args.granularity).to_list()
    if not buckets:
        print("No buckets: start date is after end date.")
        return 0

    _print_header("BUCKETS")
    _print_buckets(buckets, args.limit)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate an explicit range."""
    from calrange.exceptions import InvalidDateError
    from calrange.validation import validate_range

    try:
        result = validate_range(args.start, args.end, args.max_days, args.as_of)
    except InvalidDateError as e:
        print(f"Error: {e}")
        return 1

    if result.valid:
        print(f"Valid range: {args.start} to {args.end}")
        return 0
    print(f"Invalid range: {result.error}")
    return 1


def cmd_sources(args: argparse.Namespace) -> int:
    """List data sources and their capabilities."""
    from calrange.exceptions import ConfigError
    from calrange.sources import DEFAULT_CAPABILITIES, load_capabilities

    catalogue = DEFAULT_CAPABILITIES
    if args.config:
        try:
            catalogue = load_capabilities(args.config)
        except ConfigError as e:
            print(f"Configuration error: {e}")
            return 1

    _print_header("DATA SOURCES")
    for source_id, capability in catalogue.items():
        granularities = ", ".join(g.value for g in capability.supported_granularities)
        print(f"{source_id:<10} {capability.name:<20} {capability.max_historical_days:>4}d  "
              f"{capability.freshness:<16} {granularities}")
        if capability.limitations:
            print(f"{'':<10} {capability.limitations}")
    return 0


def cmd_kpis(args: argparse.Namespace) -> int:
    """Show mock KPIs for a preset, optionally against a comparison range."""
    from calrange.comparison import resolve_comparison_range
    from calrange.data import MockMetricsGenerator, compare_kpis
    from calrange.exceptions import InvalidDateError
    from calrange.formatting import format_range_display
    from calrange.presets import resolve_preset
    from calrange.sources import DEFAULT_CAPABILITIES, granularity_tooltip

    if args.source not in DEFAULT_CAPABILITIES:
        print(f"Error: Unknown data source '{args.source}'")
        print(f"Available sources: {', '.join(DEFAULT_CAPABILITIES)}")
        return 1
    tooltip = granularity_tooltip(args.source, args.granularity)
    if tooltip:
        print(f"Error: {tooltip}")
        return 1

    try:
        date_range = resolve_preset(args.preset, args.as_of)
    except InvalidDateError as e:
        print(f"Error: {e}")
        return 1

    generator = MockMetricsGenerator(seed=args.seed)
    current = generator.kpi_summary(date_range, args.granularity, args.source)

    _print_header("KPIS")
    print(f"Source:      {DEFAULT_CAPABILITIES[args.source].name}")
    print(f"Range:       {format_range_display(date_range)}")

    changes = None
    comparison = resolve_comparison_range(date_range, args.compare)
    if comparison is not None:
        previous = generator.kpi_summary(comparison, args.granularity, args.source)
        changes = compare_kpis(current, previous)
        print(f"Comparison:  {comparison.label}: {format_range_display(comparison)}")

    _print_kpis(current, changes)
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Resolve a dashboard configuration file."""
    from calrange.commands import load_dashboard_config, resolve_dashboard
    from calrange.data import MockMetricsGenerator, compare_kpis
    from calrange.exceptions import ConfigError
    from calrange.formatting import format_range_display

    try:
        config = load_dashboard_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    logging.getLogger().setLevel(config.log_level)
    resolution = resolve_dashboard(config)

    _print_header("DASHBOARD")
    print(f"Preset:      {config.preset}")
    print(f"Granularity: {config.granularity.value}")
    print(f"Source:      {config.data_source}")
    print(f"As of:       {resolution.reference_instant.isoformat()}")
    print(f"Range:       {format_range_display(resolution.date_range)}")
    if resolution.comparison_range is not None:
        print(
            f"Comparison:  {resolution.comparison_range.label}: "
            f"{format_range_display(resolution.comparison_range)}"
        )

    if not resolution.validation.valid:
        print(f"\nInvalid range: {resolution.validation.error}")
        return 1

    _print_buckets(resolution.buckets, args.limit)

    if args.kpis:
        generator = MockMetricsGenerator(seed=config.random_seed)
        current = generator.kpi_summary(
            resolution.date_range, config.granularity, config.data_source
        )
        changes = None
        if resolution.comparison_range is not None:
            previous = generator.kpi_summary(
                resolution.comparison_range, config.granularity, config.data_source
            )
            changes = compare_kpis(current, previous)
        _print_kpis(current, changes)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calendar range resolver CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Presets command
    presets_parser = subparsers.add_parser("presets", help="List presets")
    presets_parser.add_argument("--as-of", help="Reference date (YYYY-MM-DD)")

    # Resolve command
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a preset")
    resolve_parser.add_argument("preset", help="Preset name (e.g., last_7_days)")
    resolve_parser.add_argument("--as-of", help="Reference date (YYYY-MM-DD)")
    resolve_parser.add_argument(
        "-g",
        "--granularity",
        default="daily",
        choices=GRANULARITY_CHOICES,
        help="Bucket granularity (default: daily)",
    )
    resolve_parser.add_argument(
        "-c",
        "--compare",
        default="none",
        choices=COMPARISON_CHOICES,
        help="Comparison range (default: none)",
    )
    resolve_parser.add_argument(
        "--limit", type=int, default=40, help="Maximum buckets to print"
    )

    # Buckets command
    buckets_parser = subparsers.add_parser("buckets", help="Bucket an explicit range")
    buckets_parser.add_argument("start", help="Start date (YYYY-MM-DD)")
    buckets_parser.add_argument("end", help="End date (YYYY-MM-DD)")
    buckets_parser.add_argument(
        "-g",
        "--granularity",
        default="daily",
        choices=GRANULARITY_CHOICES,
        help="Bucket granularity (default: daily)",
    )
    buckets_parser.add_argument(
        "--limit", type=int, default=40, help="Maximum buckets to print"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a range")
    validate_parser.add_argument("start", help="Start date (YYYY-MM-DD)")
    validate_parser.add_argument("end", help="End date (YYYY-MM-DD)")
    validate_parser.add_argument(
        "--max-days", type=int, default=730, help="Maximum span in days"
    )
    validate_parser.add_argument("--as-of", help="Reference date (YYYY-MM-DD)")

    # Sources command
    sources_parser = subparsers.add_parser("sources", help="List data sources")
    sources_parser.add_argument(
        "--config", help="Path to YAML capability catalogue"
    )

    # KPIs command
    kpis_parser = subparsers.add_parser("kpis", help="Show mock KPIs for a preset")
    kpis_parser.add_argument("preset", help="Preset name (e.g., last_30_days)")
    kpis_parser.add_argument("--as-of", help="Reference date (YYYY-MM-DD)")
    kpis_parser.add_argument(
        "-g",
        "--granularity",
        default="daily",
        choices=GRANULARITY_CHOICES,
        help="Bucket granularity (default: daily)",
    )
    kpis_parser.add_argument(
        "-s", "--source", default="all_tools", help="Data source (default: all_tools)"
    )
    kpis_parser.add_argument(
        "-c",
        "--compare",
        default="previous_period",
        choices=COMPARISON_CHOICES,
        help="Comparison range (default: previous_period)",
    )
    kpis_parser.add_argument("--seed", type=int, help="Random seed")

    # Run command
    run_parser = subparsers.add_parser(
        "run", help="Resolve a dashboard configuration file"
    )
    run_parser.add_argument("config", help="Path to YAML configuration file")
    run_parser.add_argument(
        "--kpis", action="store_true", help="Also show mock KPIs"
    )
    run_parser.add_argument(
        "--limit", type=int, default=40, help="Maximum buckets to print"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "presets":
        return cmd_presets(args)
    elif args.command == "resolve":
        return cmd_resolve(args)
    elif args.command == "buckets":
        return cmd_buckets(args)
    elif args.command == "validate":
        return cmd_validate(args)
    elif args.command == "sources":
        return cmd_sources(args)
    elif args.command == "kpis":
        return cmd_kpis(args)
    elif args.command == "run":
        return cmd_run(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
