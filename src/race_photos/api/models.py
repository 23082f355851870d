"""Pydantic models for marketplace request payloads."""

from pydantic import BaseModel, Field


class CheckoutPhotoItem(BaseModel):
    """Photo selected in the cart.

    The client-side price is accepted for compatibility but never trusted;
    checkout prices come from the store.
    """

    id: str = Field(min_length=1)
    price: float | None = None


class CreateCheckoutSessionBody(BaseModel):
    """Body of the create-checkout-session endpoint."""

    photos: list[CheckoutPhotoItem] = Field(min_length=1)
