"""
Shared fixtures for the harvester tests.
"""

import pytest

from harvester.exceptions import FetchFailed
from harvester.models import CommentPage


class FakeFetcher:
    """Serves pre-built pages and records the continuation tokens it was given."""

    def __init__(self, pages, fail_at=None):
        self.pages = pages
        self.fail_at = fail_at
        self.tokens = []

    async def fetch_page(self, video_id, page_token=""):
        self.tokens.append(page_token)
        index = len(self.tokens)
        if self.fail_at == index:
            raise FetchFailed(video_id, "boom")
        next_token = f"token-{index}" if index < len(self.pages) else None
        return CommentPage(items=list(self.pages[index - 1]), next_page_token=next_token)


def split_pages(comments, per_page):
    return [comments[i:i + per_page] for i in range(0, len(comments), per_page)] or [[]]


@pytest.fixture
def fake_fetcher():
    """Factory for FakeFetcher instances"""
    return FakeFetcher


@pytest.fixture
def make_pages():
    """Split a list of comments into pages"""
    return split_pages
