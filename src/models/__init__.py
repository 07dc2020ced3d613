"""Data models for Bitbucket pages, webhooks, projects and repositories."""

from src.models.page import Page
from src.models.project import Project, Repository
from src.models.webhook import Webhook, WebhookRequest, WebhookRequestBuilder

__all__ = ['Page', 'Project', 'Repository', 'Webhook', 'WebhookRequest', 'WebhookRequestBuilder']
