"""Authentication state stream from the Supabase auth client."""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from checkmeout.domain.models import AuthState, UserIdentity

_TRACKED_EVENTS = {"INITIAL_SESSION", "SIGNED_IN", "SIGNED_OUT"}


@dataclass
class SupabaseAuthStateSource:
    """Turns auth change callbacks into an async stream of auth states."""

    client: Client

    async def states(self) -> AsyncIterator[AuthState]:
        """Yield an AuthState for each tracked auth event."""
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[AuthState] = asyncio.Queue()

        def on_change(event: str, session: object | None) -> None:
            if str(event) not in _TRACKED_EVENTS:
                return
            state = auth_state_from_session(session)
            loop.call_soon_threadsafe(queue.put_nowait, state)

        subscription = self.client.auth.on_auth_state_change(on_change)
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.unsubscribe()


def auth_state_from_session(session: object | None) -> AuthState:
    """Build an AuthState from a Supabase session object."""
    user = getattr(session, "user", None)
    if user is None:
        return AuthState(signed_in=False)
    return AuthState(
        signed_in=True,
        user=UserIdentity(id=UUID(str(user.id)), email=getattr(user, "email", None)),
    )
