"""Services for the Newsdesk API."""

from newsdesk.services.article_store import ArticlePage, ArticleStore
from newsdesk.services.identity_store import IdentityStore
from newsdesk.services.rewards import RewardsClient, get_rewards_client
from newsdesk.services.storage import ObjectStorage, S3ObjectStorage, get_object_storage, upload_image
from newsdesk.services.taxonomy import CategoryStore, TagStore
from newsdesk.services.views import ViewCounter, get_view_counter
from newsdesk.services.workflow import (
    ApprovalResult,
    ArticleDraft,
    ArticlePatch,
    ArticleWorkflow,
    EditResult,
    RewardOutcome,
    get_workflow,
)

__all__ = [
    "ApprovalResult",
    "ArticleDraft",
    "ArticlePage",
    "ArticlePatch",
    "ArticleStore",
    "ArticleWorkflow",
    "CategoryStore",
    "EditResult",
    "IdentityStore",
    "ObjectStorage",
    "RewardOutcome",
    "RewardsClient",
    "S3ObjectStorage",
    "TagStore",
    "ViewCounter",
    "get_object_storage",
    "get_rewards_client",
    "get_view_counter",
    "get_workflow",
    "upload_image",
]
