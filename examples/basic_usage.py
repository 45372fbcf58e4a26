"""Print monthly usage for the default OpenCode storage directory."""

from opencode_stats import FilterOptions, MessageLoader, create_period_accumulator
from opencode_stats.analytics.aggregator import run_accumulator


def main() -> None:
    accumulator = create_period_accumulator("monthly", FilterOptions(from_date="2026-01-01"))
    report = run_accumulator(accumulator, MessageLoader())

    for period in report.periods:
        print(period.period, period.total_requests, f"${period.total_cost:.2f}")
    print("Total:", report.overall.total_requests, f"${report.overall.total_cost:.2f}")


if __name__ == "__main__":
    main()
