"""
Per-conversation locks.

Turns for the same conversation must run one at a time: two concurrent turns
would both read the same "missing" fields and race to write them. Locks are
held weakly, so a conversation's lock disappears once no turn holds or waits
on it. Different conversations never contend.
"""

import asyncio
import weakref


class ConversationLocks:
    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def lock_for(self, conversation_id: str) -> asyncio.Lock:
        """
        Return the lock for a conversation, creating it if needed.

        Callers must keep the returned reference while using it
        (``async with locks.lock_for(cid):`` does).
        """
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


# Process-wide registry shared by every request
conversation_locks = ConversationLocks()
