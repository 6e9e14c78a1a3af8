"""Visit planner: turns a population roster and cohort rules into an annual visit calendar.

Modules:
- config: load and validate run configuration (YAML or JSON)
- errors: capacity, configuration and cancellation errors
- domain: person/result/plan models and plan persistence
- services: working-day calendar, even allocation, visit date projection, eligibility
- engine: cohort schedulers, consolidator and orchestrator
- io: roster import and workbook/archive export
- validator: post-run checks, plan summary, population analysis
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "errors",
    "domain",
    "services",
    "engine",
    "io",
    "validator",
    "cli",
]
