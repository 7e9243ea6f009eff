"""Application use cases: one entry point per workflow."""

from portal.application.use_cases.auth import AuthService
from portal.application.use_cases.catalog import CatalogService
from portal.application.use_cases.files import FileService
from portal.application.use_cases.profiles import ProfileService
from portal.application.use_cases.projects import ProjectService

__all__ = [
    "AuthService",
    "CatalogService",
    "FileService",
    "ProfileService",
    "ProjectService",
]
