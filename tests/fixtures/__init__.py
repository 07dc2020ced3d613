"""Test fixtures for Bitbucket client tests.

This module provides sample Bitbucket Server REST responses for webhooks,
projects and repositories, plus the URL helpers that address them.
"""

from .bitbucket_responses import (
    BITBUCKET_BASE_URL,
    PROJECT_KEY,
    REPO_SLUG,
    REPO_REF_EVENT,
    MIRROR_SYNC_EVENT,
    WEB_HOOKS_IN_SYSTEM,
    WEB_HOOKS_FIRST_PAGE,
    WEB_HOOKS_IN_SYSTEM_LAST_PAGE,
    WEBHOOK_CREATION_REQUEST,
    WEBHOOK_CREATED_RESPONSE,
    VALIDATION_ERROR_RESPONSE,
    NOT_FOUND_RESPONSE,
    PROJECT_RESPONSE,
    REPOSITORY_RESPONSE,
    PROJECTS_PAGE,
    REPOSITORIES_PAGE,
    webhooks_url,
)

__all__ = [
    "BITBUCKET_BASE_URL",
    "PROJECT_KEY",
    "REPO_SLUG",
    "REPO_REF_EVENT",
    "MIRROR_SYNC_EVENT",
    "WEB_HOOKS_IN_SYSTEM",
    "WEB_HOOKS_FIRST_PAGE",
    "WEB_HOOKS_IN_SYSTEM_LAST_PAGE",
    "WEBHOOK_CREATION_REQUEST",
    "WEBHOOK_CREATED_RESPONSE",
    "VALIDATION_ERROR_RESPONSE",
    "NOT_FOUND_RESPONSE",
    "PROJECT_RESPONSE",
    "REPOSITORY_RESPONSE",
    "PROJECTS_PAGE",
    "REPOSITORIES_PAGE",
    "webhooks_url",
]
