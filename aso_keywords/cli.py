"""CLI tool for the ASO keyword engine.

Usage:
    python -m aso_keywords.cli optimize --file keywords.csv [--app-name "..."] [--platform ios] [--json]
    python -m aso_keywords.cli annotate --file keywords.csv [--app-name "..."] [--output out.csv]
    python -m aso_keywords.cli check --platform ios --title "..." --subtitle "..." --keywords "a,b"
    python -m aso_keywords.cli check --listing listing.json [--json]
    python -m aso_keywords.cli density --file keywords.csv --listing listing.json
    python -m aso_keywords.cli competitors
"""
import argparse
import json
import logging
import sys

from aso_keywords.config import config


def cmd_optimize(args):
    """Annotate a keyword file and allocate keywords to store fields."""
    from aso_keywords.export import export_optimized_sets_csv, export_report_json
    from aso_keywords.pipeline import optimize_keywords

    records = _load_keywords(args.file)
    report = optimize_keywords(records, app_name=args.app_name)

    if args.json:
        output = export_report_json(report)
    elif args.platform == "ios":
        output = report.ios.summary()
    elif args.platform == "android":
        output = report.android.summary()
    else:
        output = report.summary()
    print(output)

    if args.output:
        data = (
            export_report_json(report) if args.output.endswith(".json")
            else export_optimized_sets_csv(report.ios, report.android)
        )
        _write_output(args.output, data)


def cmd_annotate(args):
    """Fill in category, priority and recommended field, then export CSV."""
    from aso_keywords.export import export_keywords_csv
    from aso_keywords.pipeline import annotate_keywords

    records = annotate_keywords(_load_keywords(args.file), app_name=args.app_name)
    data = export_keywords_csv(records)
    if args.output:
        _write_output(args.output, data)
    else:
        print(data)


def cmd_check(args):
    """Check authored store fields for keyword repetition."""
    from aso_keywords.models import StoreListing
    from aso_keywords.repetition_checker import check_listing, check_repetitions

    if args.listing:
        listing = StoreListing.from_dict(_load_json(args.listing))
        ios, android, summary = check_listing(listing)
        if args.json:
            print(json.dumps({
                "ios": ios.to_dict(),
                "android": android.to_dict(),
                "summary": summary.to_dict(),
            }, ensure_ascii=False, indent=2))
            return
        print(ios.summary())
        print()
        print(android.summary())
        print()
        print(f"📊 Overall: {summary.overall_score}/100")
        for rec in summary.recommendations:
            print(f"   {rec}")
        return

    if args.platform == "android":
        fields = {
            "title": args.title,
            "short_description": args.short_description,
            "full_description": args.full_description,
        }
    else:
        fields = {
            "title": args.title,
            "subtitle": args.subtitle,
            "keywords_field": args.keywords,
        }
    result = check_repetitions(fields, args.platform)
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(result.summary())


def cmd_density(args):
    """Keyword density of a keyword file over an authored listing."""
    from aso_keywords.density import calculate_individual_keyword_density, calculate_keyword_density
    from aso_keywords.models import StoreListing

    records = _load_keywords(args.file)
    listing = StoreListing.from_dict(_load_json(args.listing))
    result = calculate_keyword_density(records, listing)
    print("📈 Keyword density")
    print(f"   iOS: {result.ios}%  Android: {result.android}%  Overall: {result.overall}%")
    for k in records[:args.top]:
        print(f"   {k.text}: {calculate_individual_keyword_density(k.text, listing)}%")


def cmd_competitors(args):
    """List configured competitor names."""
    print(f"🏁 Competitor names ({len(config.COMPETITOR_BRANDS)}):")
    for name in config.COMPETITOR_BRANDS:
        print(f"  • {name}")


def _load_keywords(path):
    from aso_keywords.importer import parse_keywords

    fmt = "json" if path.lower().endswith(".json") else "csv"
    try:
        with open(path, encoding="utf-8-sig") as f:
            return parse_keywords(f.read(), fmt)
    except (OSError, ValueError) as e:
        print(f"❌ Cannot read keywords from {path}: {e}")
        sys.exit(1)


def _load_json(path):
    try:
        with open(path, encoding="utf-8-sig") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        print(f"❌ Cannot read {path}: {e}")
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"❌ {path} must contain a JSON object")
        sys.exit(1)
    return data


def _write_output(path, data):
    with open(path, "w", encoding="utf-8") as f:
        f.write(data)
    print(f"\n💾 Saved to {path}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="aso-keywords",
        description="ASO keyword engine — classify, prioritize and place store listing keywords",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", help="Command")

    # optimize
    p = sub.add_parser("optimize", help="Allocate keywords to store fields")
    p.add_argument("--file", "-f", required=True, help="Keyword CSV/JSON file")
    p.add_argument("--app-name", "-a", help="App name (branded keyword detection)")
    p.add_argument("--platform", choices=["ios", "android", "both"], default="both")
    p.add_argument("--json", action="store_true", help="Print the full JSON report")
    p.add_argument("--output", "-o", help="Save sets to .csv or report to .json")

    # annotate
    p = sub.add_parser("annotate", help="Annotate keywords and export CSV")
    p.add_argument("--file", "-f", required=True, help="Keyword CSV/JSON file")
    p.add_argument("--app-name", "-a", help="App name (branded keyword detection)")
    p.add_argument("--output", "-o", help="Output CSV file")

    # check
    p = sub.add_parser("check", help="Check keyword repetition between fields")
    p.add_argument("--listing", "-l", help="JSON file with the listing fields")
    p.add_argument("--platform", choices=["ios", "android"], default="ios")
    p.add_argument("--title", default="")
    p.add_argument("--subtitle", default="")
    p.add_argument("--keywords", default="", help="iOS keywords field")
    p.add_argument("--short-description", default="")
    p.add_argument("--full-description", default="")
    p.add_argument("--json", action="store_true", help="Print JSON")

    # density
    p = sub.add_parser("density", help="Keyword density over a listing")
    p.add_argument("--file", "-f", required=True, help="Keyword CSV/JSON file")
    p.add_argument("--listing", "-l", required=True, help="JSON file with the listing fields")
    p.add_argument("--top", type=int, default=10, help="Per-keyword lines to show")

    # competitors
    sub.add_parser("competitors", help="List configured competitor names")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config.validate()
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "optimize": cmd_optimize,
        "annotate": cmd_annotate,
        "check": cmd_check,
        "density": cmd_density,
        "competitors": cmd_competitors,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
