"""
Per-identity submission cooldown backed by Redis.

A gate admits at most one action per identity per window. The only state is a
Redis key per identity (``<prefix>:<identity>``) that expires on its own after
the window; the key's existence means "cooling down". Admission is decided by a
single ``SET key marker NX EX window``, so concurrent requests for the same
identity, from any number of processes, produce exactly one winner.

``AdmissionChain`` runs several gates in order and stops at the first decision
that does not admit.
"""

import asyncio
import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

COOLDOWN_MARKER = "cooldown_active"
STORE_UNAVAILABLE_MESSAGE = "Server error, please try again later"
STORE_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


class Outcome(str, Enum):
    ADMITTED = "admitted"
    REJECTED = "rejected"
    STORE_UNAVAILABLE = "store_unavailable"


_STATUS_CODES = {
    Outcome.ADMITTED: 200,
    Outcome.REJECTED: 429,
    Outcome.STORE_UNAVAILABLE: 500,
}


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    message: Optional[str] = None

    @property
    def admitted(self) -> bool:
        return self.outcome is Outcome.ADMITTED

    @property
    def status_code(self) -> int:
        """HTTP status the caller should answer with when not admitted."""
        return _STATUS_CODES[self.outcome]

    @classmethod
    def admit(cls) -> "Decision":
        return cls(Outcome.ADMITTED)

    @classmethod
    def reject(cls, message: str) -> "Decision":
        return cls(Outcome.REJECTED, message)

    @classmethod
    def store_unavailable(cls) -> "Decision":
        return cls(Outcome.STORE_UNAVAILABLE, STORE_UNAVAILABLE_MESSAGE)


class Gate(Protocol):
    async def admit(self, identity_id: str) -> Decision: ...


class CooldownGate:
    """
    Allow one action per identity per ``window_seconds``.

    ``precheck`` enables an ``EXISTS`` round trip before the conditional write.
    It only shortcuts rejections; the ``SET NX`` result is what admits.
    """

    def __init__(
        self,
        store: Redis,
        prefix: str = "submit_cooldown",
        window_seconds: int = 10,
        precheck: bool = False,
    ):
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._store = store
        self.prefix = prefix
        self.window_seconds = window_seconds
        self.precheck = precheck
        self.rejection_message = (
            f"Please wait for {window_seconds} seconds before submitting again"
        )

    def key_for(self, identity_id: str) -> str:
        return f"{self.prefix}:{identity_id}"

    async def admit(self, identity_id: str) -> Decision:
        if not identity_id:
            raise ValueError("identity_id must be a non-empty string")

        key = self.key_for(identity_id)
        # A cancelled request must not abandon a write already on the wire.
        reservation = asyncio.ensure_future(self._reserve(key))
        try:
            created = await asyncio.shield(reservation)
        except asyncio.CancelledError:
            reservation.add_done_callback(
                functools.partial(_log_detached_failure, identity_id)
            )
            raise
        except STORE_ERRORS as exc:
            _log_store_unavailable(identity_id, exc)
            return Decision.store_unavailable()

        if not created:
            logger.info(
                "Submission rejected, cooldown active",
                extra={"user_id": identity_id, "cooldown_outcome": "rejected"},
            )
            return Decision.reject(self.rejection_message)

        logger.debug(
            "Submission admitted",
            extra={"user_id": identity_id, "cooldown_outcome": "admitted"},
        )
        return Decision.admit()

    async def _reserve(self, key: str) -> bool:
        if self.precheck and await self._store.exists(key):
            return False
        # SET returns None when NX finds the key already present
        result = await self._store.set(
            key, COOLDOWN_MARKER, ex=self.window_seconds, nx=True
        )
        return bool(result)


def _log_store_unavailable(identity_id: str, exc: BaseException) -> None:
    logger.error(
        f"Cooldown store unavailable: {exc!r}",
        exc_info=exc,
        extra={"user_id": identity_id, "cooldown_outcome": "store_unavailable"},
    )


def _log_detached_failure(identity_id: str, reservation: asyncio.Future) -> None:
    """Collect the outcome of a write whose request was cancelled."""
    if reservation.cancelled():
        return
    exc = reservation.exception()
    if exc is not None:
        _log_store_unavailable(identity_id, exc)


class AdmissionChain:
    """
    Ordered gates; the first non-admitting decision short-circuits.

    A chain is not itself a gate. Each gate leaves the store untouched when it
    refuses, but records written by gates that admitted earlier in the same
    call are kept: a refusal further down the chain does not undo them.
    """

    def __init__(self, gates: Sequence[Gate] = ()):
        self._gates = tuple(gates)

    def __len__(self) -> int:
        return len(self._gates)

    async def admit(self, identity_id: str) -> Decision:
        for gate in self._gates:
            decision = await gate.admit(identity_id)
            if not decision.admitted:
                return decision
        return Decision.admit()
