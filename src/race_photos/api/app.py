"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from race_photos.api.dependencies import get_container, require_user
from race_photos.api.gallery import router as gallery_router
from race_photos.api.models import CreateCheckoutSessionBody
from race_photos.api.sales import router as sales_router
from race_photos.app_logging import configure_logging
from race_photos.containers import AppContainer
from race_photos.domain.profiles import AuthUser
from race_photos.errors import (
    BadRequest,
    InternalError,
    MarketplaceError,
    VerificationFailed,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(gallery_router)
    app.include_router(sales_router)

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(
        request: Request, exc: MarketplaceError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/create-checkout-session")
    async def create_checkout_session(
        request: Request, user: AuthUser = Depends(require_user)
    ) -> dict[str, str]:
        """Create a hosted checkout session for the photos in the cart."""
        try:
            body = CreateCheckoutSessionBody.model_validate_json(await request.body())
        except ValidationError as exc:
            raise BadRequest("Invalid request body") from exc
        try:
            session = get_container(request).checkout_service.create_session(
                user, [photo.id for photo in body.photos]
            )
        except MarketplaceError:
            raise
        except Exception as exc:
            logger.exception(
                "Stripe session creation failed", extra={"user_id": user.id}
            )
            raise InternalError("Failed to create checkout session") from exc
        return {"sessionId": session.id, "url": session.url}

    @app.post("/create-connect-account")
    async def create_connect_account(
        request: Request, user: AuthUser = Depends(require_user)
    ) -> dict[str, str]:
        """Ensure the caller has a connected account and return onboarding url."""
        try:
            url = get_container(request).connect_service.ensure_onboarding_link(user)
        except MarketplaceError:
            raise
        except Exception as exc:
            logger.exception(
                "Stripe connect account creation failed", extra={"user_id": user.id}
            )
            raise InternalError("Failed to create connect account") from exc
        return {"url": url}

    @app.post("/stripe-webhook")
    async def stripe_webhook(
        request: Request, stripe_signature: str | None = Header(default=None)
    ) -> dict[str, bool]:
        """Apply a signed Stripe event; any failure asks Stripe to retry."""
        payload = await request.body()
        try:
            get_container(request).webhook_service.handle(payload, stripe_signature)
        except VerificationFailed:
            logger.warning("Rejected webhook with an invalid signature")
            raise
        except Exception as exc:
            logger.exception("Stripe webhook processing failed")
            raise BadRequest("Webhook error") from exc
        return {"received": True}

    @app.post("/detect-bibs")
    async def detect_bibs(
        request: Request, user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Detect bib numbers in a raw image body."""
        image_bytes = await request.body()
        if not image_bytes:
            raise BadRequest("Image body is required")
        try:
            detection = await get_container(request).bib_detection_service.detect(
                image_bytes
            )
        except Exception as exc:
            logger.exception("Bib detection failed", extra={"user_id": user.id})
            raise InternalError(
                "Failed to detect bib numbers. Please try again."
            ) from exc
        return {"bibNumbers": detection.bib_numbers, "status": detection.status.value}

    return app
