"""Validation Coordinator - debounced, de-duplicated, race-free price validation per cart.

Invariants:
    - At most one pending timer (asyncio.TimerHandle) and one in-flight validation task
    - update_items reschedules only on a genuine content-key change (cancel-and-replace)
    - Timer fire skips the call if the key equals the last successfully resolved key,
      or if a request is already in flight (no queueing)
    - refresh() bypasses the content-equality skip but not the in-flight guard
    - Responses are tagged with the content key they were computed for; a response whose
      key no longer matches the current items is dropped and the timer is re-armed once
    - An empty item list clears state immediately: no call, no retained validity
    - Any failure (network or unexpected) clears the response, ends in FAILED
      and never leaves is_valid=True
    - close() cancels the pending timer and any in-flight task

Design Decisions:
    - One coordinator object per cart/session owns all mutable state (no module globals)
    - Single event loop, no locks: every state change happens between awaits
    - State exposed as frozen ValidationState snapshots replaced on every change
"""

import logging
from asyncio import Task, TimerHandle, get_running_loop
from collections.abc import Callable, Sequence
from dataclasses import replace

from cart_pricing.config import Settings
from cart_pricing.core.boundary_protocols import ValidationItemLike
from cart_pricing.core.domain_types import ValidationPhase
from cart_pricing.core.errors import PricingError
from cart_pricing.core.pricing_constants import PRICE_VALIDATION_DEBOUNCE_MS
from cart_pricing.core.validation_state import (
    EMPTY_CONTENT_KEY,
    ValidationState,
    build_content_key,
)
from cart_pricing.schemas.pricing import PriceValidationResponse
from cart_pricing.services.price_validation import PriceValidationService

logger = logging.getLogger(__name__)

CompleteCallback = Callable[[PriceValidationResponse | None], None]
ErrorCallback = Callable[[str], None]


class ValidationCoordinator:
    """Owns debounce timing, de-duplication and staleness for one cart's validation."""

    def __init__(
        self,
        service: PriceValidationService,
        *,
        debounce_seconds: float = PRICE_VALIDATION_DEBOUNCE_MS / 1000,
        on_validation_complete: CompleteCallback | None = None,
        on_validation_error: ErrorCallback | None = None,
    ):
        self._service = service
        self._delay = debounce_seconds
        self._on_complete = on_validation_complete
        self._on_error = on_validation_error

        self._state = ValidationState()
        self._items: tuple[ValidationItemLike, ...] = ()
        self._current_key = EMPTY_CONTENT_KEY
        self._last_validated_key: str | None = None
        self._timer: TimerHandle | None = None
        self._in_flight: Task | None = None
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        service: PriceValidationService,
        settings: Settings,
        *,
        on_validation_complete: CompleteCallback | None = None,
        on_validation_error: ErrorCallback | None = None,
    ) -> "ValidationCoordinator":
        """Build a coordinator whose debounce delay comes from configuration."""
        return cls(
            service,
            debounce_seconds=settings.price_validation_debounce_ms / 1000,
            on_validation_complete=on_validation_complete,
            on_validation_error=on_validation_error,
        )

    # ─── read side ───────────────────────────────────────────────

    @property
    def state(self) -> ValidationState:
        return self._state

    @property
    def debounce_seconds(self) -> float:
        return self._delay

    @property
    def is_debouncing(self) -> bool:
        return self._timer is not None

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    # ─── triggers ────────────────────────────────────────────────

    def update_items(self, items: Sequence[ValidationItemLike]) -> None:
        """Record the current item list; must be called from the running event loop."""
        if self._closed:
            return
        key = build_content_key(items)
        if key == self._current_key:
            return

        self._items = tuple(items)
        self._current_key = key
        if not self._items:
            self._clear()
            return

        self._set_state(items_key=key)
        self._schedule()

    async def refresh(self) -> ValidationState:
        """Manual retry: validate now, ignoring the last-validated key."""
        self._cancel_timer()
        task = self._start_validation(force=True)
        if task is not None:
            await task
        return self._state

    async def flush(self) -> ValidationState:
        """Run a pending debounced validation immediately and wait for the in-flight call."""
        if self._timer is not None:
            self._cancel_timer()
            self._start_validation(force=False)
        if self._in_flight is not None:
            await self._in_flight
        return self._state

    def close(self) -> None:
        """Teardown: cancel the pending timer and any in-flight validation."""
        self._closed = True
        self._cancel_timer()
        if self._in_flight is not None:
            self._in_flight.cancel()
            self._in_flight = None

    # ─── internals ───────────────────────────────────────────────

    def _set_state(self, **changes) -> None:
        self._state = replace(self._state, **changes)

    def _clear(self) -> None:
        self._cancel_timer()
        self._last_validated_key = None
        self._state = ValidationState(items_key=EMPTY_CONTENT_KEY)
        if self._on_complete:
            self._on_complete(None)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self) -> None:
        self._cancel_timer()
        self._timer = get_running_loop().call_later(self._delay, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        self._start_validation(force=False)

    def _start_validation(self, *, force: bool) -> Task | None:
        if not self._items or self._closed:
            return None
        key = self._current_key
        if self._in_flight is not None:
            logger.debug("Validation already in flight, skipping", extra={"content_key": key})
            return None
        if not force and key == self._last_validated_key:
            logger.debug("Items unchanged since last validation, skipping", extra={"content_key": key})
            return None

        self._set_state(phase=ValidationPhase.VALIDATING, validation_error=None)
        task = get_running_loop().create_task(self._run(self._items, key))
        self._in_flight = task
        return task

    async def _run(self, items: tuple[ValidationItemLike, ...], key: str) -> None:
        stale = False
        try:
            response = await self._service.validate(items)
        except PricingError as e:
            stale = key != self._current_key
            if not stale:
                self._fail(e.message, key)
        except Exception as e:
            logger.error(f"Unexpected validation task error: {e}", exc_info=True)
            stale = key != self._current_key
            if not stale:
                self._fail(f"Price validation request failed: unexpected {type(e).__name__}", key)
        else:
            stale = key != self._current_key
            if not stale:
                self._resolve(response, key)
        finally:
            self._in_flight = None

        if stale:
            self._drop_stale(key)

    def _resolve(self, response: PriceValidationResponse, key: str) -> None:
        self._last_validated_key = key
        self._set_state(
            phase=ValidationPhase.VALID if response.is_valid else ValidationPhase.INVALID,
            validation_response=response,
            validation_error=None,
            response_key=key,
        )
        logger.info(
            "Price validation resolved",
            extra={"content_key": key, "phase": self._state.phase.value},
        )
        if self._on_complete:
            self._on_complete(response)

    def _fail(self, message: str, key: str) -> None:
        self._set_state(
            phase=ValidationPhase.FAILED,
            validation_response=None,
            validation_error=message,
            response_key=None,
        )
        logger.warning(
            f"Price validation failed: {message}",
            extra={"content_key": key, "phase": ValidationPhase.FAILED.value},
        )
        if self._on_error:
            self._on_error(message)
        if self._on_complete:
            self._on_complete(None)

    def _drop_stale(self, key: str) -> None:
        logger.info("Dropping superseded validation response", extra={"content_key": key})
        if self._state.phase is ValidationPhase.VALIDATING:
            self._set_state(phase=ValidationPhase.IDLE)
        if self._items and self._timer is None and not self._closed:
            self._schedule()
