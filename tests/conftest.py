"""
tests/conftest.py - shared fixtures

Fake EC2 clients for the revoker:
    fake_ec2: MagicMock client whose paginators serve canned pages
    stubbed_ec2: real boto3 EC2 client wrapped in botocore Stubber
"""

import os
from typing import Any, Dict, List
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.stub import Stubber


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """No real credentials or profiles leak into tests."""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    for name in ("AWS_PROFILE", "SG_REVOKER_REGIONS", "SG_REVOKER_DRY_RUN", "SG_REVOKER_FAIL_FAST"):
        monkeypatch.delenv(name, raising=False)
    yield


def sg(group_id: str, name: str = "default", vpc_id: str = "vpc-1") -> Dict[str, Any]:
    return {"GroupId": group_id, "GroupName": name, "VpcId": vpc_id}


def rule(rule_id: str, group_id: str, is_egress: bool = False) -> Dict[str, Any]:
    return {
        "SecurityGroupRuleId": rule_id,
        "GroupId": group_id,
        "IsEgress": is_egress,
        "IpProtocol": "-1",
        "CidrIpv4": "0.0.0.0/0",
    }


class FakeEC2:
    """Builds a MagicMock EC2 client with paged describe responses.

    group_pages: list of SecurityGroups pages.
    rule_pages: group ID -> list of SecurityGroupRules pages.
    """

    def __init__(self, group_pages: List[List[dict]], rule_pages: Dict[str, List[List[dict]]]):
        self.group_pages = group_pages
        self.rule_pages = rule_pages
        self.client = MagicMock()
        self.client.get_paginator.side_effect = self._paginator

    @staticmethod
    def _pages(key: str, pages: List[List[dict]]) -> List[dict]:
        out = []
        for i, items in enumerate(pages):
            page = {key: items}
            if i < len(pages) - 1:
                page["NextToken"] = f"token-{i + 1}"
            out.append(page)
        return out

    def _paginator(self, operation: str):
        paginator = MagicMock()
        if operation == "describe_security_groups":
            paginator.paginate.side_effect = lambda **kw: iter(
                self._pages("SecurityGroups", self.group_pages)
            )
        elif operation == "describe_security_group_rules":
            def paginate(**kw):
                group_id = kw["Filters"][0]["Values"][0]
                return iter(self._pages("SecurityGroupRules", self.rule_pages.get(group_id, [[]])))

            paginator.paginate.side_effect = paginate
        else:
            raise AssertionError(f"unexpected paginator {operation}")
        return paginator


@pytest.fixture
def fake_ec2():
    """Factory: fake_ec2(group_pages, rule_pages) -> FakeEC2."""
    return FakeEC2


@pytest.fixture
def stubbed_ec2():
    """Real EC2 client with a botocore Stubber; asserts no responses are left over."""
    client = boto3.client(
        "ec2",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()
