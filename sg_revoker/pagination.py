"""Page iteration over boto3 list/describe calls."""

from __future__ import annotations

import logging
from typing import Any, Iterator

logger = logging.getLogger(__name__)


def iter_pages(
    client: Any,
    operation: str,
    *,
    starting_token: str | None = None,
    **params: Any,
) -> Iterator[dict[str, Any]]:
    """
    Lazily yield response pages of a paginated EC2 operation.

    The NextToken of each page is sent with the following request until a
    page comes back without one. Passing starting_token resumes from a token
    returned earlier.

    Args:
        client: boto3 client (or anything with get_paginator).
        operation: Operation name, e.g. "describe_security_groups".
        starting_token: Continuation token to resume from.
        **params: Request parameters passed on every page request.
    """
    paginator = client.get_paginator(operation)
    pagination_config: dict[str, Any] = {}
    if starting_token:
        pagination_config["StartingToken"] = starting_token
    if pagination_config:
        params["PaginationConfig"] = pagination_config

    for number, page in enumerate(paginator.paginate(**params), start=1):
        logger.debug(
            "%s page %d (more: %s)", operation, number, bool(page.get("NextToken"))
        )
        yield page


def iter_items(
    client: Any,
    operation: str,
    result_key: str,
    *,
    starting_token: str | None = None,
    **params: Any,
) -> Iterator[dict[str, Any]]:
    """Yield the items under result_key from every page of an operation."""
    for page in iter_pages(client, operation, starting_token=starting_token, **params):
        yield from page.get(result_key, [])
