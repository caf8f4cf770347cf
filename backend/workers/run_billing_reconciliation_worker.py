import argparse

from common.core.config import settings
from common.workers.launcher import WorkerLauncher
from packages.billing.workers.reconciliation_worker import BillingReconciliationWorker


def setup_cli(argv=None):
    """Parse CLI arguments and return them with the worker's constructor kwargs."""
    parser = argparse.ArgumentParser(description="Billing Reconciliation Worker")
    parser.add_argument(
        "--interval",
        type=float,
        default=float(settings.reconciliation_interval_seconds),
        help="Seconds between reconciliation passes (default: from settings)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single reconciliation pass and exit (for cron-style scheduling)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )

    args = parser.parse_args(argv)
    return args, {"interval_seconds": args.interval}


def main():
    WorkerLauncher().run_with_cli(
        worker_factory=BillingReconciliationWorker,
        worker_name="Billing Reconciliation Worker",
        cli_setup_func=setup_cli,
    )


if __name__ == "__main__":
    main()
