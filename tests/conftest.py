"""Shared fixtures for urlpat tests."""

from __future__ import annotations

import pytest

from urlpat import Router, UrlPattern


@pytest.fixture
def blog_router() -> Router:
    """A small route table with an overlapping static/dynamic pair."""
    return Router(
        {
            "home": "/",
            "posts": "/posts?page&tag[]",
            "profile": "/users/profile",
            "user": "/users/:id",
            "post": "/posts/:id",
        }
    )


@pytest.fixture
def post_pattern() -> UrlPattern:
    return UrlPattern("/posts/:id")
