"""In-process claim registry with reserve/commit/release semantics.

The registry records which wallet addresses have received the airdrop.  It
is the admission-control table for the claim endpoint and is shared by every
request thread of the process.

Design notes
------------
- Each address is in one of three states: absent, ``pending`` (reserved by
  an in-flight claim) or ``claimed``.
- :meth:`ClaimRegistry.reserve` is an atomic check-and-insert.  A claim
  reserves its address *before* any network call, so two concurrent requests
  for the same address can never both reach the ledger.
- :meth:`ClaimRegistry.release` only drops ``pending`` entries.  ``claimed``
  entries are never removed: membership is monotonic for the life of the
  process.
- State lives in memory and is lost on restart.  A durable store would
  replace this class behind the same four methods.
"""

from __future__ import annotations

import enum
import threading


class ClaimState(str, enum.Enum):
    """Lifecycle state of an address inside the registry."""

    PENDING = "pending"
    CLAIMED = "claimed"


class ClaimRegistry:
    """Thread-safe set of addresses that have claimed (or are claiming) the airdrop."""

    def __init__(self) -> None:
        self._entries: dict[str, ClaimState] = {}
        self._lock = threading.Lock()

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def state_of(self, address: str) -> ClaimState | None:
        """Return the current state of *address*, or ``None`` if unknown."""
        with self._lock:
            return self._entries.get(address)

    def is_claimed(self, address: str) -> bool:
        """Return ``True`` once a claim for *address* has been committed."""
        return self.state_of(address) is ClaimState.CLAIMED

    def reserve(self, address: str) -> bool:
        """Atomically mark *address* as pending if it is not already known.

        Parameters
        ----------
        address:
            Base58 wallet address of the recipient.

        Returns
        -------
        bool
            ``True`` if the reservation was taken; ``False`` if the address is
            already pending or claimed.
        """
        with self._lock:
            if address in self._entries:
                return False
            self._entries[address] = ClaimState.PENDING
            return True

    def commit(self, address: str) -> None:
        """Promote a reservation to a permanent claim.

        Raises
        ------
        KeyError
            If *address* was never reserved.
        """
        with self._lock:
            if address not in self._entries:
                raise KeyError(address)
            self._entries[address] = ClaimState.CLAIMED

    def release(self, address: str) -> None:
        """Drop a pending reservation so the address may claim again.

        Committed claims are left untouched.
        """
        with self._lock:
            if self._entries.get(address) is ClaimState.PENDING:
                del self._entries[address]

    def claimed_addresses(self) -> frozenset[str]:
        """Return a snapshot of all committed addresses."""
        with self._lock:
            return frozenset(
                address
                for address, state in self._entries.items()
                if state is ClaimState.CLAIMED
            )
