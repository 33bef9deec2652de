from fastapi import Depends

from app.core.config import Settings, get_settings
from app.services.admin_registry import AdminRegistry
from app.services.identity import get_identity_provider
from app.services.listings import ListingService
from app.services.moderation import ModerationService
from app.services.object_store import get_object_store
from app.services.profiles import ProfileService
from app.services.repository import get_repository
from app.services.submissions import SubmissionService
from app.services.uploads import UploadService
from app.services.verification import CompanyEmailVerificationService


def get_admin_registry(
    settings: Settings = Depends(get_settings),
    repository=Depends(get_repository),
) -> AdminRegistry:
    return AdminRegistry(repository, bootstrap_emails=settings.bootstrap_admins)


def get_listing_service(
    repository=Depends(get_repository),
    identity=Depends(get_identity_provider),
) -> ListingService:
    return ListingService(repository, identity)


def get_submission_service(repository=Depends(get_repository)) -> SubmissionService:
    return SubmissionService(repository)


def get_moderation_service(
    repository=Depends(get_repository),
    identity=Depends(get_identity_provider),
) -> ModerationService:
    return ModerationService(repository, identity)


def get_verification_service(
    repository=Depends(get_repository),
    identity=Depends(get_identity_provider),
    moderation: ModerationService = Depends(get_moderation_service),
) -> CompanyEmailVerificationService:
    return CompanyEmailVerificationService(repository, identity, moderation)


def get_profile_service(identity=Depends(get_identity_provider)) -> ProfileService:
    return ProfileService(identity)


def get_upload_service(object_store=Depends(get_object_store)) -> UploadService:
    return UploadService(object_store)
