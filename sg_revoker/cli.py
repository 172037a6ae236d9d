"""
Command line entry point: revoke all rules of the default security groups.

Defaults come from sg_revoker.config (environment); flags override them.
Runs in dry-run mode unless --execute is given or SG_REVOKER_DRY_RUN=false.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from botocore.exceptions import BotoCoreError

from sg_revoker.config import load_settings
from sg_revoker.regions import KNOWN_REGIONS, get_regions
from sg_revoker.revoker import RunReport, revoke_all_regions

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    # botocore is very chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sg-revoker",
        description="Revoke every ingress and egress rule of the default security groups.",
    )
    parser.add_argument(
        "--regions",
        nargs="+",
        default=None,
        metavar="REGION",
        help=f"Regions to process (default: SG_REVOKER_REGIONS or built-in list; {len(KNOWN_REGIONS)} known).",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="AWS profile name (default: AWS_PROFILE).",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=None,
        help="Only log the rules that would be revoked.",
    )
    mode.add_argument(
        "--execute",
        dest="dry_run",
        action="store_false",
        help="Actually revoke the rules.",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the next region after a failure instead of aborting.",
    )
    parser.add_argument(
        "--output",
        choices=("table", "json"),
        default="table",
        help="Output format: table (human) or json.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def print_table(report: RunReport) -> None:
    for r in report.results:
        if r.error:
            print(f"[{r.region}] ERROR: {r.error}")
            if r.revoked:
                print(f"  {len(r.revoked)} rule(s) were revoked before the error.")
            continue
        print(f"[{r.region}] {r.summary()}")
        for group in r.groups:
            vpc = group.vpc_id or "EC2-Classic"
            print(f"  - {group.group_id}  (VPC: {vpc})")
            print(f"    {group.console_url}")

    print()
    verb = "Would revoke" if report.dry_run else "Revoked"
    print(
        f"{verb} {report.total_ingress} ingress and {report.total_egress} egress rules "
        f"across {len(report.results)} region(s)."
    )
    if report.failed:
        regions = ", ".join(r.region for r in report.failed)
        print(f"{len(report.failed)} region(s) failed: {regions}")
    if report.aborted:
        print("Run aborted after the first failing region.")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = load_settings()
        if args.regions is not None:
            settings.regions = get_regions(args.regions)
        if args.profile:
            settings.profile = args.profile
        if args.dry_run is not None:
            settings.dry_run = args.dry_run
        if args.keep_going:
            settings.fail_fast = False
        session = settings.session()
    except (ValueError, BotoCoreError) as e:
        logger.error("configuration error: %s", e)
        return 2

    report = revoke_all_regions(
        regions=settings.regions,
        dry_run=settings.dry_run,
        session=session,
        fail_fast=settings.fail_fast,
    )

    if args.output == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_table(report)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
