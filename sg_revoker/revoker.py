"""Revoker for the rules of default security groups. Reusable by CLI and FastAPI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sg_revoker.pagination import iter_items
from sg_revoker.regions import get_regions

logger = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = "default"

INGRESS = "ingress"
EGRESS = "egress"

AWS_ERRORS = (ClientError, BotoCoreError)


def security_group_console_url(region: str, group_id: str) -> str:
    """AWS EC2 console URL for a security group (for hyperlinks in reports)."""
    return (
        f"https://{region}.console.aws.amazon.com/ec2/home"
        f"?region={region}#SecurityGroup:groupId={group_id}"
    )


@dataclass
class DefaultSecurityGroup:
    """A security group named "default" (one per VPC)."""

    region: str
    group_id: str
    group_name: str
    vpc_id: str | None

    @property
    def console_url(self) -> str:
        return security_group_console_url(self.region, self.group_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "region": self.region,
            "group_id": self.group_id,
            "group_name": self.group_name,
            "vpc_id": self.vpc_id,
            "console_url": self.console_url,
        }


@dataclass
class SecurityGroupRule:
    """One ingress or egress rule of a security group."""

    region: str
    rule_id: str
    group_id: str
    is_egress: bool
    ip_protocol: str = ""
    from_port: int | None = None
    to_port: int | None = None
    cidr: str = ""

    @classmethod
    def from_api(cls, region: str, rule: dict[str, Any]) -> "SecurityGroupRule":
        """Build from a DescribeSecurityGroupRules entry. Missing IsEgress means ingress."""
        cidr = (
            rule.get("CidrIpv4")
            or rule.get("CidrIpv6")
            or rule.get("PrefixListId")
            or rule.get("ReferencedGroupInfo", {}).get("GroupId")
            or ""
        )
        return cls(
            region=region,
            rule_id=rule["SecurityGroupRuleId"],
            group_id=rule.get("GroupId", ""),
            is_egress=bool(rule.get("IsEgress")),
            ip_protocol=rule.get("IpProtocol", ""),
            from_port=rule.get("FromPort"),
            to_port=rule.get("ToPort"),
            cidr=cidr,
        )

    @property
    def direction(self) -> str:
        return EGRESS if self.is_egress else INGRESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "region": self.region,
            "rule_id": self.rule_id,
            "group_id": self.group_id,
            "direction": self.direction,
            "ip_protocol": self.ip_protocol,
            "from_port": self.from_port,
            "to_port": self.to_port,
            "cidr": self.cidr,
        }


@dataclass
class RegionRevokeResult:
    """Result of emptying the default security groups of one region."""

    region: str
    dry_run: bool
    groups: list[DefaultSecurityGroup] = field(default_factory=list)
    rules: list[SecurityGroupRule] = field(default_factory=list)
    revoked: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def ingress_rule_ids(self) -> list[str]:
        return [r.rule_id for r in self.rules if not r.is_egress]

    @property
    def egress_rule_ids(self) -> list[str]:
        return [r.rule_id for r in self.rules if r.is_egress]

    def _count(self, rule_ids: list[str]) -> int:
        # Dry run counts what would be revoked; otherwise only calls that succeeded
        if self.dry_run:
            return len(rule_ids)
        revoked = set(self.revoked)
        return sum(1 for rule_id in rule_ids if rule_id in revoked)

    @property
    def ingress_count(self) -> int:
        return self._count(self.ingress_rule_ids)

    @property
    def egress_count(self) -> int:
        return self._count(self.egress_rule_ids)

    def summary(self) -> str:
        text = (
            f"{self.ingress_count} ingress and {self.egress_count} egress rules "
            f"in region {self.region}"
        )
        if self.dry_run:
            return f"dry run: would have revoked {text}"
        return f"Revoked {text}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "region": self.region,
            "dry_run": self.dry_run,
            "groups": [g.to_dict() for g in self.groups],
            "rules": [r.to_dict() for r in self.rules],
            "ingress_count": self.ingress_count,
            "egress_count": self.egress_count,
            "revoked": list(self.revoked),
            "error": self.error,
        }


@dataclass
class RunReport:
    """Per-region results of one run."""

    dry_run: bool
    results: list[RegionRevokeResult] = field(default_factory=list)
    aborted: bool = False

    @property
    def failed(self) -> list[RegionRevokeResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def total_ingress(self) -> int:
        return sum(r.ingress_count for r in self.results)

    @property
    def total_egress(self) -> int:
        return sum(r.egress_count for r in self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "aborted": self.aborted,
            "ok": self.ok,
            "total_ingress": self.total_ingress,
            "total_egress": self.total_egress,
            "results": [r.to_dict() for r in self.results],
        }


def find_default_security_groups(ec2_client: Any, region: str) -> list[DefaultSecurityGroup]:
    """
    Find the security groups named "default" in a region.

    DescribeSecurityGroups is scanned in full (all pages, no filter) and
    matched on the group name client-side.
    """
    groups: list[DefaultSecurityGroup] = []
    for sg in iter_items(ec2_client, "describe_security_groups", "SecurityGroups"):
        if sg.get("GroupName") != DEFAULT_GROUP_NAME:
            continue
        group = DefaultSecurityGroup(
            region=region,
            group_id=sg["GroupId"],
            group_name=sg["GroupName"],
            vpc_id=sg.get("VpcId"),
        )
        logger.info(
            "found default security group in VPC %s: %s - %r",
            group.vpc_id,
            group.group_id,
            group.group_name,
        )
        groups.append(group)
    return groups


def list_security_group_rules(
    ec2_client: Any, region: str, group_id: str
) -> list[SecurityGroupRule]:
    """List every rule of one security group (filtered server-side by group ID)."""
    return [
        SecurityGroupRule.from_api(region, rule)
        for rule in iter_items(
            ec2_client,
            "describe_security_group_rules",
            "SecurityGroupRules",
            Filters=[{"Name": "group-id", "Values": [group_id]}],
        )
    ]


def revoke_rule(ec2_client: Any, rule: SecurityGroupRule, *, dry_run: bool) -> bool:
    """
    Revoke a single rule, or only log it in dry run.

    Returns True when a revoke call was issued. API errors propagate.
    """
    if dry_run:
        logger.info(
            "dry run: would have deleted %s rule %s from security group %s",
            rule.direction,
            rule.rule_id,
            rule.group_id,
        )
        return False

    logger.info(
        "deleting %s rule %s from security group %s",
        rule.direction,
        rule.rule_id,
        rule.group_id,
    )
    if rule.is_egress:
        ec2_client.revoke_security_group_egress(
            GroupId=rule.group_id, SecurityGroupRuleIds=[rule.rule_id]
        )
    else:
        ec2_client.revoke_security_group_ingress(
            GroupId=rule.group_id, SecurityGroupRuleIds=[rule.rule_id]
        )
    return True


def revoke_default_rules(ec2_client: Any, region: str, *, dry_run: bool) -> RegionRevokeResult:
    """
    Revoke every rule of every default security group in one region.

    AWS errors stop the region and are recorded on the result; whatever was
    revoked before the error stays revoked.
    """
    result = RegionRevokeResult(region=region, dry_run=dry_run)
    try:
        result.groups = find_default_security_groups(ec2_client, region)
        for group in result.groups:
            for rule in list_security_group_rules(ec2_client, region, group.group_id):
                # Rules list their own GroupId; keep the group we asked for
                rule.group_id = group.group_id
                result.rules.append(rule)
                if revoke_rule(ec2_client, rule, dry_run=dry_run):
                    result.revoked.append(rule.rule_id)
    except AWS_ERRORS as e:
        logger.exception("EC2 API error in %s: %s", region, e)
        result.error = str(e)
        return result

    logger.info("%s", result.summary())
    return result


def revoke_region(
    region: str,
    *,
    dry_run: bool,
    session: boto3.Session | None = None,
) -> RegionRevokeResult:
    """Empty the default security groups of a single region."""
    logger.info("running in region: %s", region)
    session = session or boto3.Session()
    try:
        ec2 = session.client("ec2", region_name=region)
    except AWS_ERRORS as e:
        logger.exception("Unable to create EC2 client for %s", region)
        return RegionRevokeResult(region=region, dry_run=dry_run, error=str(e))
    return revoke_default_rules(ec2, region, dry_run=dry_run)


def revoke_all_regions(
    regions: list[str] | None = None,
    *,
    dry_run: bool,
    session: boto3.Session | None = None,
    fail_fast: bool = True,
) -> RunReport:
    """
    Empty the default security groups of several regions, one after another.

    Args:
        regions: Region codes. If None, uses REGIONS from sg_revoker.regions.
        dry_run: Only log what would be revoked.
        session: Optional boto3 session (for custom profile/credentials).
        fail_fast: Stop at the first failing region and mark the report aborted.

    Returns:
        RunReport with one RegionRevokeResult per processed region.
    """
    regions = get_regions(regions)
    session = session or boto3.Session()
    report = RunReport(dry_run=dry_run)
    for region in regions:
        result = revoke_region(region, dry_run=dry_run, session=session)
        report.results.append(result)
        if not result.ok and fail_fast:
            logger.error("aborting run after failure in %s", region)
            report.aborted = True
            break
    return report
