"""FastAPI dependencies (composition root). Routes depend only on these."""

from portal.api.v1.dependencies.db import (
    get_after_commit,
    get_cache,
    get_catalog_service,
    get_file_repo,
    get_file_scope,
    get_file_service,
    get_profile_repo,
    get_profile_service,
    get_project_repo,
    get_project_service,
    get_storage_service,
)
from portal.api.v1.dependencies.session import (
    AdminActor,
    CurrentActor,
    SessionContext,
    get_auth_service,
    get_bearer_token,
    get_identity_provider,
    get_resolver_profiles,
    get_session_context,
    require,
    require_admin,
    require_authenticated,
)

__all__ = [
    "AdminActor",
    "CurrentActor",
    "SessionContext",
    "get_after_commit",
    "get_auth_service",
    "get_bearer_token",
    "get_cache",
    "get_catalog_service",
    "get_file_repo",
    "get_file_scope",
    "get_file_service",
    "get_identity_provider",
    "get_profile_repo",
    "get_profile_service",
    "get_project_repo",
    "get_project_service",
    "get_resolver_profiles",
    "get_session_context",
    "get_storage_service",
    "require",
    "require_admin",
    "require_authenticated",
]
