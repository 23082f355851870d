"""Tests for checkout session creation."""

import pytest

from race_photos.domain.profiles import AuthUser
from race_photos.errors import BadRequest
from race_photos.services.checkout import CheckoutService
from tests.conftest import BASE_URL, FakePaymentsClient, InMemoryPhotoRepository

BUYER = AuthUser(id="u1", email="runner@example.com")


def _service(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> CheckoutService:
    return CheckoutService(
        photo_repository=photo_repository,
        gateway=payments_client,
        base_url=BASE_URL,
    )


def test_multi_photographer_cart_routes_to_first_photo(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    service = _service(photo_repository, payments_client)

    session = service.create_session(BUYER, ["p1", "p2"])

    assert session.id == "cs_test_123"
    request = payments_client.checkout_requests[0]
    assert request.destination_account_id == "acct_A"
    assert request.application_fee_amount == 150
    assert request.metadata == {"user_id": "u1", "photo_ids": "p1,p2"}


def test_line_items_follow_request_order_with_item_fees(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    service = _service(photo_repository, payments_client)

    service.create_session(BUYER, ["p2", "p1"])

    request = payments_client.checkout_requests[0]
    assert [item.photo_id for item in request.line_items] == ["p2", "p1"]
    assert [item.unit_amount for item in request.line_items] == [500, 1000]
    assert [item.application_fee_amount for item in request.line_items] == [50, 100]
    assert request.line_items[0].name == "Race Photo #p2"
    assert request.destination_account_id == "acct_B"


def test_redirect_urls_use_deployment_origin(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    service = _service(photo_repository, payments_client)

    service.create_session(BUYER, ["p1"])

    request = payments_client.checkout_requests[0]
    assert request.success_url == (
        f"{BASE_URL}/profile?session_id={{CHECKOUT_SESSION_ID}}"
    )
    assert request.cancel_url == f"{BASE_URL}/gallery"
    assert request.currency == "usd"


def test_duplicate_photo_ids_are_collapsed(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    service = _service(photo_repository, payments_client)

    service.create_session(BUYER, ["p1", "p1", "p2"])

    request = payments_client.checkout_requests[0]
    assert len(request.line_items) == 2
    assert request.metadata["photo_ids"] == "p1,p2"
    assert photo_repository.fetch_calls == [["p1", "p2"]]


def test_boundary_price_rounds_to_minor_units(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    photo_repository.add("p3", "9.995", "acct_C")
    photo_repository.add("p4", "0.001", "acct_C")
    service = _service(photo_repository, payments_client)

    service.create_session(BUYER, ["p3", "p4"])

    request = payments_client.checkout_requests[0]
    assert [item.unit_amount for item in request.line_items] == [1000, 0]
    assert request.application_fee_amount == 100


def test_missing_photo_is_rejected(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    service = _service(photo_repository, payments_client)

    with pytest.raises(BadRequest):
        service.create_session(BUYER, ["p1", "unknown"])

    assert payments_client.checkout_requests == []


def test_no_rows_is_rejected(payments_client: FakePaymentsClient) -> None:
    service = _service(InMemoryPhotoRepository(), payments_client)

    with pytest.raises(BadRequest):
        service.create_session(BUYER, ["p1"])


def test_lookup_error_is_a_bad_request(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    photo_repository.error = RuntimeError("postgrest down")
    service = _service(photo_repository, payments_client)

    with pytest.raises(BadRequest, match="Failed to fetch photo data"):
        service.create_session(BUYER, ["p1"])


@pytest.mark.parametrize("photo_ids", [[], ["a,b"], ["  "]])
def test_invalid_photo_ids_never_reach_the_store(
    photo_ids: list[str],
    photo_repository: InMemoryPhotoRepository,
    payments_client: FakePaymentsClient,
) -> None:
    service = _service(photo_repository, payments_client)

    with pytest.raises(BadRequest):
        service.create_session(BUYER, photo_ids)

    assert photo_repository.fetch_calls == []


def test_photographer_without_account_is_rejected(
    photo_repository: InMemoryPhotoRepository, payments_client: FakePaymentsClient
) -> None:
    photo_repository.add("p9", "12.00", None)
    service = _service(photo_repository, payments_client)

    with pytest.raises(BadRequest):
        service.create_session(BUYER, ["p9", "p1"])

    assert payments_client.checkout_requests == []
