"""Command-line interface for the visit planner."""

from __future__ import annotations

import argparse

from visitplan.config import load_config
from visitplan.engine.orchestrator import build_visit_plan
from visitplan.io.import_roster import read_roster
from visitplan.validator import analyze_population, summarize_plan


def _cmd_analyze(args: argparse.Namespace) -> None:
    """Show head counts per birth year for a roster."""
    roster = read_roster(args.roster)
    counts = analyze_population(roster.people)
    if counts.empty:
        print("[WARN] No rows with a valid birth date")
        return
    print(counts.to_string())
    print(f"Total: {int(counts['total'].sum())}")


def _cmd_generate(args: argparse.Namespace) -> None:
    """Build the visit plan for a roster."""
    try:
        cfg = load_config(args.config)
        roster = read_roster(args.roster)
        result = build_visit_plan(
            roster.people,
            cfg,
            out_dir=args.out,
            db_url=args.db,
            field_order=roster.headers,
            id_column=roster.id_column,
        )
    except Exception as e:
        print(f"[ERROR] Generation failed: {e}")
        raise

    print(summarize_plan(result.plan))
    if result.warnings:
        print(f"\n{len(result.warnings)} warning(s):")
        for warning in result.warnings:
            print(f"  - {warning}")


def _cmd_check_config(args: argparse.Namespace) -> None:
    """Validate a configuration file without running the engine."""
    cfg = load_config(args.config)
    print(f"[OK] {args.config}: target year {cfg.target_year}, {len(cfg.cohorts)} cohorts, "
          f"{len(cfg.holidays)} holidays, Saturday working: {cfg.saturday_working}")
    for rule in cfg.cohorts:
        mode = "birthday" if rule.use_birthday else ("auto" if rule.auto_distribute else "manual")
        print(f"  {rule.label}: {rule.visit_count} visit(s), {mode} mode, planned {rule.planned_total}")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="visitplan",
        description="Annual visit calendar planner for population rosters",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="Count roster people per birth year and gender")
    a.add_argument("--roster", required=True, help="Roster .xlsx or .csv")
    a.set_defaults(func=_cmd_analyze)

    g = sub.add_parser("generate", help="Generate the visit plan")
    g.add_argument("--roster", required=True, help="Roster .xlsx or .csv")
    g.add_argument("--config", required=True, help="Path to config YAML/JSON")
    g.add_argument("--out", help="Directory for the output zip archive")
    g.add_argument("--db", help="Optional: database URL to store the consolidated plan")
    g.set_defaults(func=_cmd_generate)

    c = sub.add_parser("check-config", help="Validate a configuration file")
    c.add_argument("--config", required=True, help="Path to config YAML/JSON")
    c.set_defaults(func=_cmd_check_config)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
