"""
Batch — Resolve many requests on a thread pool

Each request still runs through ContentResolver.resolve on its own:
no snapshot spans the batch, and disk or index state may change
between two files. Results come back in input order.

Usage:
    from gitcontent.services.batch import resolve_many

    results = resolve_many(resolver, requests, max_workers=4)
    for result in results:
        if result.failed:
            print(result.error)
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from ..core.errors import CommandFailure
from ..core.models import ContentRequest, ContentResult


def resolve_one(
    resolver,
    request: ContentRequest,
    cancel: Optional[threading.Event] = None,
) -> ContentResult:
    """Resolve a single request into a ContentResult instead of raising."""
    try:
        content = resolver.resolve(request, cancel=cancel)
    except CommandFailure as e:
        return ContentResult.failure(request, e)
    return ContentResult.ok(request, content)


def resolve_many(
    resolver,
    requests: Sequence[ContentRequest],
    max_workers: int = 4,
    cancel: Optional[threading.Event] = None,
) -> List[ContentResult]:
    """
    Resolve every request, in parallel when max_workers > 1.

    Args:
        resolver: ContentResolver
        requests: Requests to resolve
        max_workers: Thread pool size; 1 or less runs sequentially
        cancel: Shared event; setting it kills running git processes and
            fails the requests not yet finished

    Returns:
        One ContentResult per request, same order as requests
    """
    if max_workers <= 1 or len(requests) <= 1:
        return [resolve_one(resolver, r, cancel) for r in requests]

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="gitcontent") as pool:
        futures = [pool.submit(resolve_one, resolver, r, cancel) for r in requests]
        return [f.result() for f in futures]
