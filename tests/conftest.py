"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from race_photos.config import Settings
from race_photos.containers import AppContainer
from race_photos.domain.checkout import CheckoutRequest, CheckoutSession
from race_photos.domain.photos import CheckoutPhoto, GalleryPhoto
from race_photos.domain.profiles import AccountStatus, AuthUser, Profile
from race_photos.domain.purchases import NewPurchase, PurchaseRecord
from race_photos.domain.sales import PhotoSales, Sale
from race_photos.errors import VerificationFailed
from race_photos.services.auth import AuthService, IdentityProvider
from race_photos.services.bibs import BibDetectionService, VisionClient
from race_photos.services.checkout import (
    CheckoutGateway,
    CheckoutPhotoRepository,
    CheckoutService,
)
from race_photos.services.connect import ConnectGateway, ConnectService
from race_photos.services.gallery import (
    GalleryPhotoRepository,
    GalleryService,
    ObjectStorage,
    PurchaseHistoryRepository,
)
from race_photos.services.profiles import ProfileRepository, ProfileService
from race_photos.services.sales import SalesRepository, SalesService
from race_photos.services.webhooks import (
    PurchaseRepository,
    WebhookService,
    WebhookVerifier,
)

VALID_TOKEN = "valid-token"
VALID_SIGNATURE = "valid-signature"
BASE_URL = "https://photos.example.com"


@dataclass
class InMemoryIdentityProvider(IdentityProvider):
    """Identity provider resolving a fixed set of tokens."""

    users: dict[str, AuthUser] = field(
        default_factory=lambda: {
            VALID_TOKEN: AuthUser(id="u1", email="runner@example.com")
        }
    )
    calls: list[str] = field(default_factory=list)

    def get_user(self, token: str) -> AuthUser | None:
        self.calls.append(token)
        return self.users.get(token)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, Profile] = field(default_factory=dict)

    def get_profile(self, user_id: str) -> Profile | None:
        return self.profiles.get(user_id)

    def create_profile(self, user_id: str, username: str) -> Profile:
        profile = Profile(id=user_id, username=username)
        self.profiles[user_id] = profile
        return profile

    def set_stripe_account(self, user_id: str, account_id: str) -> None:
        current = self.profiles[user_id]
        self.profiles[user_id] = Profile(
            id=current.id,
            username=current.username,
            stripe_account_id=account_id,
            stripe_account_status=current.stripe_account_status,
        )

    def update_stripe_account(
        self, user_id: str, account_id: str, status: AccountStatus
    ) -> None:
        current = self.profiles[user_id]
        self.profiles[user_id] = Profile(
            id=current.id,
            username=current.username,
            stripe_account_id=account_id,
            stripe_account_status=status,
        )


@dataclass
class InMemoryPhotoRepository(CheckoutPhotoRepository, GalleryPhotoRepository):
    """In-memory photo repository that records checkout lookups."""

    checkout_photos: dict[str, CheckoutPhoto] = field(default_factory=dict)
    gallery_photos: list[GalleryPhoto] = field(default_factory=list)
    fetch_calls: list[list[str]] = field(default_factory=list)
    error: Exception | None = None

    def add(self, photo_id: str, price: str, account_id: str | None) -> None:
        self.checkout_photos[photo_id] = CheckoutPhoto(
            id=photo_id,
            price=Decimal(price),
            photographer_id=f"photographer-{account_id}",
            stripe_account_id=account_id,
        )

    def get_checkout_photos(self, photo_ids: list[str]) -> list[CheckoutPhoto]:
        self.fetch_calls.append(photo_ids)
        if self.error:
            raise self.error
        # Stores return rows in their own order, not the request order.
        return [
            self.checkout_photos[photo_id]
            for photo_id in sorted(photo_ids, reverse=True)
            if photo_id in self.checkout_photos
        ]

    def list_published_photos(self) -> list[GalleryPhoto]:
        return [photo for photo in self.gallery_photos if photo.url]

    def list_event_photos(self, event_name: str) -> list[GalleryPhoto]:
        return [
            photo for photo in self.gallery_photos if photo.event_name == event_name
        ]

    def list_photographer_photos(self, photographer_id: str) -> list[GalleryPhoto]:
        return [
            photo
            for photo in self.gallery_photos
            if photo.url
            and photo.photographer is not None
            and photo.photographer.id == photographer_id
        ]


@dataclass
class InMemoryPurchaseRepository(PurchaseRepository, PurchaseHistoryRepository):
    """In-memory purchase table unique on photo and payment intent."""

    rows: list[NewPurchase] = field(default_factory=list)
    fail_after: int | None = None

    def list_recorded_photo_ids(self, payment_intent: str) -> set[str]:
        return {
            row.photo_id
            for row in self.rows
            if row.stripe_payment_intent == payment_intent
        }

    def insert_purchases(self, purchases: list[NewPurchase]) -> None:
        for index, purchase in enumerate(purchases):
            if self.fail_after is not None and index >= self.fail_after:
                raise RuntimeError("insert failed mid-batch")
            if purchase.photo_id in self.list_recorded_photo_ids(
                purchase.stripe_payment_intent
            ):
                continue
            self.rows.append(purchase)

    def list_purchases_for_buyer(self, buyer_id: str) -> list[PurchaseRecord]:
        return [
            PurchaseRecord(
                id=str(uuid4()),
                photo_id=row.photo_id,
                amount=row.amount,
                created_at=None,
                event_name="City Marathon",
                url=f"originals/{row.photo_id}.jpg",
            )
            for row in self.rows
            if row.buyer_id == buyer_id
        ]


@dataclass
class InMemorySalesRepository(SalesRepository):
    """In-memory sales keyed by photographer id."""

    sales: dict[str, list[Sale]] = field(default_factory=dict)
    photo_sales: dict[tuple[str, str], list[PhotoSales]] = field(default_factory=dict)
    since_calls: list[datetime | None] = field(default_factory=list)

    def list_sales(
        self, photographer_id: str, since: datetime | None = None
    ) -> list[Sale]:
        self.since_calls.append(since)
        return sorted(
            (
                sale
                for sale in self.sales.get(photographer_id, [])
                if since is None or sale.created_at >= since
            ),
            key=lambda sale: sale.created_at,
            reverse=True,
        )

    def list_photo_sales(
        self, photographer_id: str, event_name: str
    ) -> list[PhotoSales]:
        return self.photo_sales.get((photographer_id, event_name), [])


@dataclass
class FakeStorage(ObjectStorage):
    """Storage that builds predictable public URLs."""

    def public_url(self, path: str) -> str:
        return f"https://cdn.example.com/race-photos/{path}"


@dataclass
class FakePaymentsClient(CheckoutGateway, ConnectGateway, WebhookVerifier):
    """Fake payment provider recording every call."""

    checkout_requests: list[CheckoutRequest] = field(default_factory=list)
    accounts: list[dict[str, object]] = field(default_factory=list)
    links: list[dict[str, str]] = field(default_factory=list)
    checkout_error: Exception | None = None

    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        if self.checkout_error:
            raise self.checkout_error
        self.checkout_requests.append(request)
        return CheckoutSession(
            id="cs_test_123", url="https://checkout.stripe.test/cs_test_123"
        )

    def create_connected_account(
        self, *, email: str | None, user_id: str, idempotency_key: str
    ) -> str:
        self.accounts.append(
            {"email": email, "user_id": user_id, "idempotency_key": idempotency_key}
        )
        return f"acct_{len(self.accounts)}"

    def create_onboarding_link(
        self, *, account_id: str, refresh_url: str, return_url: str
    ) -> str:
        self.links.append(
            {
                "account_id": account_id,
                "refresh_url": refresh_url,
                "return_url": return_url,
            }
        )
        return f"https://connect.stripe.test/setup/{account_id}"

    def verify_event(self, payload: bytes, signature: str | None) -> dict[str, object]:
        if signature != VALID_SIGNATURE:
            raise VerificationFailed()
        return json.loads(payload)


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed answer."""

    answer: str = "1234, 567"
    prompts: list[str] = field(default_factory=list)

    async def describe(self, *, model: str, image_data_url: str, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


def checkout_completed_event(
    photo_ids: str = "p1,p2",
    amount_total: int = 1500,
    payment_intent: str = "pi_123",
) -> dict[str, object]:
    return {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_123",
                "object": "checkout.session",
                "amount_total": amount_total,
                "payment_intent": payment_intent,
                "metadata": {"user_id": "u1", "photo_ids": photo_ids},
            }
        },
    }


def account_updated_event(
    charges_enabled: bool, user_id: str | None = "u1"
) -> dict[str, object]:
    metadata = {"user_id": user_id} if user_id else {}
    return {
        "id": "evt_2",
        "type": "account.updated",
        "data": {
            "object": {
                "id": "acct_A",
                "object": "account",
                "charges_enabled": charges_enabled,
                "metadata": metadata,
            }
        },
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret="whsec_test",
        stripe_publishable_key="pk_test_123",
        supabase_url="https://example.supabase.co",
        supabase_service_role_key="header.payload.signature",
        site_url=f"{BASE_URL}/",
        openai_api_key="openai-key",
    )


@pytest.fixture
def identity_provider() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    repository = InMemoryPhotoRepository()
    repository.add("p1", "10.00", "acct_A")
    repository.add("p2", "5.00", "acct_B")
    return repository


@pytest.fixture
def purchase_repository() -> InMemoryPurchaseRepository:
    return InMemoryPurchaseRepository()


@pytest.fixture
def payments_client() -> FakePaymentsClient:
    return FakePaymentsClient()


@pytest.fixture
def sales_repository() -> InMemorySalesRepository:
    return InMemorySalesRepository()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    identity_provider: InMemoryIdentityProvider,
    profile_repository: InMemoryProfileRepository,
    photo_repository: InMemoryPhotoRepository,
    purchase_repository: InMemoryPurchaseRepository,
    payments_client: FakePaymentsClient,
    vision_client: FakeVisionClient,
    sales_repository: InMemorySalesRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(identity_provider),
        profile_service=ProfileService(profile_repository),
        checkout_service=CheckoutService(
            photo_repository=photo_repository,
            gateway=payments_client,
            base_url=settings.base_url,
        ),
        connect_service=ConnectService(
            profile_repository=profile_repository,
            gateway=payments_client,
            base_url=settings.base_url,
        ),
        webhook_service=WebhookService(
            verifier=payments_client,
            purchase_repository=purchase_repository,
            profile_repository=profile_repository,
        ),
        bib_detection_service=BibDetectionService(
            client=vision_client, model=settings.openai_model
        ),
        gallery_service=GalleryService(
            photo_repository=photo_repository,
            purchase_repository=purchase_repository,
            profile_repository=profile_repository,
            storage=FakeStorage(),
        ),
        sales_service=SalesService(sales_repository),
        close_resources=close_resources,
    )
