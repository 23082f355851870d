"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from race_photos.adapters.openai_vision_client import OpenAIVisionClient
from race_photos.adapters.stripe_payments_client import StripePaymentsClient
from race_photos.adapters.supabase_identity_provider import SupabaseIdentityProvider
from race_photos.adapters.supabase_photo_repository import SupabasePhotoRepository
from race_photos.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from race_photos.adapters.supabase_purchase_repository import (
    SupabasePurchaseRepository,
)
from race_photos.adapters.supabase_sales_repository import SupabaseSalesRepository
from race_photos.adapters.supabase_storage import SupabaseStorage
from race_photos.config import Settings
from race_photos.services.auth import AuthService
from race_photos.services.bibs import BibDetectionService
from race_photos.services.checkout import CheckoutService
from race_photos.services.connect import ConnectService
from race_photos.services.gallery import GalleryService
from race_photos.services.profiles import ProfileService
from race_photos.services.sales import SalesService
from race_photos.services.webhooks import WebhookService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    profile_service: ProfileService
    checkout_service: CheckoutService
    connect_service: ConnectService
    webhook_service: WebhookService
    bib_detection_service: BibDetectionService
    gallery_service: GalleryService
    sales_service: SalesService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Settings are resolved eagerly so missing configuration fails at startup.
    """
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_role_key
    )
    identity_provider = SupabaseIdentityProvider(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    purchase_repository = SupabasePurchaseRepository(supabase_client)
    storage = SupabaseStorage(supabase_client, resolved_settings.storage_bucket)
    payments_client = StripePaymentsClient(
        api_key=resolved_settings.stripe_secret_key,
        webhook_secret=resolved_settings.stripe_webhook_secret,
    )
    openai_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)

    checkout_service = CheckoutService(
        photo_repository=photo_repository,
        gateway=payments_client,
        base_url=resolved_settings.base_url,
        currency=resolved_settings.currency,
        fee_percent=resolved_settings.platform_fee_percent,
    )
    connect_service = ConnectService(
        profile_repository=profile_repository,
        gateway=payments_client,
        base_url=resolved_settings.base_url,
    )
    webhook_service = WebhookService(
        verifier=payments_client,
        purchase_repository=purchase_repository,
        profile_repository=profile_repository,
    )
    bib_detection_service = BibDetectionService(
        client=openai_client,
        model=resolved_settings.openai_model,
    )
    gallery_service = GalleryService(
        photo_repository=photo_repository,
        purchase_repository=purchase_repository,
        profile_repository=profile_repository,
        storage=storage,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(identity_provider),
        profile_service=ProfileService(profile_repository),
        checkout_service=checkout_service,
        connect_service=connect_service,
        webhook_service=webhook_service,
        bib_detection_service=bib_detection_service,
        gallery_service=gallery_service,
        sales_service=SalesService(SupabaseSalesRepository(supabase_client)),
        close_resources=close_resources,
    )
