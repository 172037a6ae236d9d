"""Settings from environment variables. CLI flags override these."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

import boto3

from sg_revoker.regions import REGIONS, get_regions

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(name: str, value: str | None, default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    v = value.strip().lower()
    if v in TRUE_VALUES:
        return True
    if v in FALSE_VALUES:
        return False
    raise ValueError(f"Set {name} to one of true/false/yes/no/on/off/1/0 (got {value!r})")


def parse_regions(value: str | None) -> list[str]:
    if value is None or value.strip() == "":
        return list(REGIONS)
    try:
        return get_regions([r.strip() for r in value.split(",") if r.strip()])
    except ValueError as e:
        raise ValueError(f"SG_REVOKER_REGIONS: {e}") from e


@dataclass
class Settings:
    regions: list[str] = field(default_factory=lambda: list(REGIONS))
    # Dry run unless explicitly turned off
    dry_run: bool = True
    profile: str | None = None
    fail_fast: bool = True

    def session(self) -> boto3.Session:
        if self.profile:
            return boto3.Session(profile_name=self.profile)
        return boto3.Session()


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read SG_REVOKER_REGIONS, SG_REVOKER_DRY_RUN, SG_REVOKER_FAIL_FAST and AWS_PROFILE."""
    env = os.environ if environ is None else environ
    return Settings(
        regions=parse_regions(env.get("SG_REVOKER_REGIONS")),
        dry_run=parse_bool("SG_REVOKER_DRY_RUN", env.get("SG_REVOKER_DRY_RUN"), True),
        profile=env.get("AWS_PROFILE") or None,
        fail_fast=parse_bool("SG_REVOKER_FAIL_FAST", env.get("SG_REVOKER_FAIL_FAST"), True),
    )
