"""AWS regions whose default security groups get emptied."""

from __future__ import annotations

# Regions processed when nothing else is configured
REGIONS = [
    "us-east-1",  # N. Virginia
    "eu-west-1",  # Ireland
    "eu-west-2",  # London
]

# Commercial regions accepted on the command line / in SG_REVOKER_REGIONS
KNOWN_REGIONS = [
    # United States
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
    # Asia Pacific
    "ap-east-1",
    "ap-south-1",
    "ap-south-2",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-southeast-3",
    "ap-southeast-4",
    "ap-southeast-5",
    "ap-northeast-1",
    "ap-northeast-2",
    "ap-northeast-3",
    # Canada
    "ca-central-1",
    "ca-west-1",
    # Europe
    "eu-central-1",
    "eu-central-2",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "eu-south-1",
    "eu-south-2",
    "eu-north-1",
    # Middle East / Africa
    "me-south-1",
    "me-central-1",
    "il-central-1",
    "af-south-1",
    # South America
    "sa-east-1",
]


def get_regions(subset: list[str] | None = None) -> list[str]:
    """Return regions to process.

    None gives the defaults. Otherwise the subset is returned in order with
    duplicates dropped. Unknown codes or an empty subset raise ValueError.
    """
    if subset is None:
        return list(REGIONS)
    valid = set(KNOWN_REGIONS)
    unknown = [r for r in subset if r not in valid]
    if unknown:
        raise ValueError(f"Unknown region(s): {', '.join(unknown)}")
    regions: list[str] = []
    for r in subset:
        if r not in regions:
            regions.append(r)
    if not regions:
        raise ValueError("No regions given")
    return regions
