"""
tests/test_moto_discovery.py - default group discovery against a moto account
"""

import boto3
from moto import mock_aws

from sg_revoker.revoker import find_default_security_groups


@mock_aws
def test_one_default_group_per_vpc():
    ec2 = boto3.client("ec2", region_name="us-east-1")
    vpc_id = ec2.create_vpc(CidrBlock="10.1.0.0/16")["Vpc"]["VpcId"]
    ec2.create_security_group(GroupName="web", Description="web tier", VpcId=vpc_id)

    groups = find_default_security_groups(ec2, "us-east-1")

    assert groups
    assert all(g.group_name == "default" for g in groups)
    assert vpc_id in {g.vpc_id for g in groups}
    assert len({g.vpc_id for g in groups}) == len(groups)
