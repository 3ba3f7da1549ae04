"""Order sequencer — checkpointed, strictly sequential order creation.

One order is created per restaurant group, in decomposition order, with at
most one create request in flight. Each success is written to the checkpoint
ledger before the next group is attempted; a failure halts the run and leaves
the ledger as it was, so a retry (or a reload) resumes at the failed group.

State Machine:
    idle → creating(i) → succeeded(i) → creating(i+1) → ... → complete
    creating(i) → failed(i)
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from checkout.cart import clear_cart
from checkout.decomposer import CartDecomposer, Decomposition
from checkout.draft import DeliveryDetails
from checkout.exceptions import CheckoutInProgress, OrderGatewayError, SequenceStepFailure
from checkout.gateway.port import OrderGateway
from checkout.ledger import CheckpointLedger
from checkout.store import KeyValueStore

logger = structlog.get_logger(__name__)


class SequencerState(Enum):
    IDLE = "idle"
    CREATING = "creating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SequenceProgress:
    state: SequencerState
    index: int | None
    total: int
    restaurant_id: str | None = None

    @property
    def message(self) -> str:
        if self.state is SequencerState.COMPLETE:
            return f"All {self.total} orders submitted"
        if self.index is None:
            return ""
        verb = {
            SequencerState.CREATING: "Submitting",
            SequencerState.SUCCEEDED: "Submitted",
            SequencerState.FAILED: "Failed to submit",
        }.get(self.state, "")
        return f"{verb} order {self.index + 1} of {self.total}"


@dataclass(frozen=True)
class CheckoutResult:
    order_ids: tuple[str, ...]
    created: int
    resumed: int


ProgressListener = Callable[[SequenceProgress], None]
Handoff = Callable[[list[str]], Awaitable[None]]


class OrderSequencer:
    def __init__(
        self,
        gateway: OrderGateway,
        store: KeyValueStore,
        on_progress: ProgressListener | None = None,
        handoff: Handoff | None = None,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._decomposer = CartDecomposer(store)
        self._ledger = CheckpointLedger(store)
        self._on_progress = on_progress
        self._handoff = handoff
        self._running = asyncio.Lock()
        self.progress = SequenceProgress(state=SequencerState.IDLE, index=None, total=0)

    def _transition(self, state: SequencerState, index: int | None, total: int, restaurant_id: str | None = None):
        self.progress = SequenceProgress(state=state, index=index, total=total, restaurant_id=restaurant_id)
        if self._on_progress is not None:
            self._on_progress(self.progress)

    async def run(self, details: DeliveryDetails) -> CheckoutResult:
        """Create every outstanding order for the persisted cart.

        Raises:
            EmptyCartError: the cart has no valid restaurant group.
            SequenceStepFailure: group ``index`` could not be created; later
                groups were not attempted.
            CheckoutInProgress: another run on this sequencer has not finished.
        """
        if self._running.locked():
            raise CheckoutInProgress("Checkout is already submitting orders")

        async with self._running:
            decomposition = self._decomposer.decompose()
            return await self._submit_all(decomposition, details)

    async def _submit_all(self, decomposition: Decomposition, details: DeliveryDetails) -> CheckoutResult:
        total = decomposition.restaurant_count
        order_ids: list[str] = []
        created = resumed = 0

        for group in decomposition:
            # Ledger is re-read for every group so entries from an earlier run count
            existing = self._ledger.order_id_for(group.restaurant_id)
            if existing is not None:
                logger.info(
                    "checkout.order_already_submitted",
                    index=group.index,
                    restaurant_id=group.restaurant_id,
                    order_id=existing,
                )
                order_ids.append(existing)
                resumed += 1
                continue

            self._transition(SequencerState.CREATING, group.index, total, group.restaurant_id)
            try:
                order = await self._gateway.create_order(group.draft, details)
            except OrderGatewayError as exc:
                self._transition(SequencerState.FAILED, group.index, total, group.restaurant_id)
                logger.error(
                    "checkout.order_submission_failed",
                    index=group.index,
                    total=total,
                    restaurant_id=group.restaurant_id,
                    exc_info=True,
                )
                raise SequenceStepFailure(group.index, group.restaurant_id, exc) from exc

            self._ledger.append(group.restaurant_id, order.order_id)
            order_ids.append(order.order_id)
            created += 1
            self._transition(SequencerState.SUCCEEDED, group.index, total, group.restaurant_id)
            logger.info(
                "checkout.order_submitted",
                index=group.index,
                total=total,
                restaurant_id=group.restaurant_id,
                order_id=order.order_id,
            )

        clear_cart(self._store)
        self._ledger.clear()
        self._transition(SequencerState.COMPLETE, None, total)
        logger.info("checkout.complete", order_count=len(order_ids), created=created, resumed=resumed)

        if self._handoff is not None:
            await self._handoff(list(order_ids))

        return CheckoutResult(order_ids=tuple(order_ids), created=created, resumed=resumed)

    def abandon(self) -> None:
        """Drop the cart and any partial progress of the current checkout."""
        clear_cart(self._store)
        self._ledger.clear()
        self._transition(SequencerState.IDLE, None, 0)
        logger.info("checkout.abandoned")
