"""Argument and mode checks shared by the unary services."""

from datetime import datetime

from ..exceptions import (
    ReadonlyModeViolationError,
    SandboxModeViolationError,
    ValidationError,
)

MAX_ORDER_ID_LENGTH = 36

TO_IS_NOT_AFTER_FROM_MESSAGE = "The end of the period cannot be earlier than its start."
WRONG_PAGE_MESSAGE = "Page numbers must be non-negative."


def check_page(page: int) -> None:
    if page < 0:
        raise ValidationError(WRONG_PAGE_MESSAGE)


def check_from_to(from_: datetime, to: datetime) -> None:
    if from_ > to:
        raise ValidationError(TO_IS_NOT_AFTER_FROM_MESSAGE)


def check_readonly(readonly_mode: bool) -> None:
    if readonly_mode:
        raise ReadonlyModeViolationError()


def check_sandbox(sandbox_mode: bool) -> None:
    if sandbox_mode:
        raise SandboxModeViolationError()


def preprocess_order_id(order_id: str) -> str:
    """
    Normalize a caller-supplied idempotency key for an order.

    Blank ids are trimmed to the empty string; other ids are cut to the
    maximum length accepted by the exchange.
    """
    if not order_id.strip():
        return order_id.strip()
    return order_id[:MAX_ORDER_ID_LENGTH]
