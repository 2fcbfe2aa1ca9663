"""Signed session tokens and the in-memory table store."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config
from core.game import RoundEngine

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def new_table() -> RoundEngine:
    """Build a table from the configured game defaults."""
    return RoundEngine(
        num_decks=config.game.num_decks,
        starting_bankroll=config.game.starting_bankroll,
        chip_values=config.game.chip_values,
    )


class TableStore(ABC):
    """Abstract store of one table per session."""

    @abstractmethod
    async def get(self, session_id: str) -> RoundEngine | None:
        """Get the session's table."""
        ...

    @abstractmethod
    async def set(self, session_id: str, table: RoundEngine, ttl: int | None = None) -> None:
        """Store a table for the session."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete the session's table."""
        ...

    async def exists(self, session_id: str) -> bool:
        """Check if the session has a live table."""
        return await self.get(session_id) is not None


class InMemoryTableStore(TableStore):
    """
    Tables kept in process memory.

    Nothing survives a restart; every read pushes the expiry forward.
    """

    def __init__(self) -> None:
        self._tables: dict[str, tuple[RoundEngine, datetime]] = {}

    async def get(self, session_id: str) -> RoundEngine | None:
        if session_id not in self._tables:
            return None

        table, expiry = self._tables[session_id]
        if expiry < datetime.now():
            await self.delete(session_id)
            return None

        await self.set(session_id, table)
        return table

    async def set(
        self,
        session_id: str,
        table: RoundEngine,
        ttl: int | None = None,
    ) -> None:
        ttl = ttl or config.session_ttl
        expiry = datetime.now() + timedelta(seconds=ttl)
        self._tables[session_id] = (table, expiry)

    async def delete(self, session_id: str) -> None:
        self._tables.pop(session_id, None)

    async def cleanup_expired(self) -> int:
        """Remove expired tables."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._tables.items() if expiry < now]
        for sid in expired:
            del self._tables[sid]
        if expired:
            logger.info("Dropped %d expired tables", len(expired))
        return len(expired)


# Global table store instance
_table_store: InMemoryTableStore | None = None


def get_table_store() -> InMemoryTableStore:
    """Get or create the table store."""
    global _table_store
    if _table_store is None:
        _table_store = InMemoryTableStore()
    return _table_store


async def create_session(table: RoundEngine | None = None) -> tuple[str, RoundEngine]:
    """
    Open a session with a fresh table.

    Expired tables are dropped first so abandoned sessions do not pile up.

    Returns:
        The signed session token and the table
    """
    store = get_table_store()
    await store.cleanup_expired()

    session_id = str(uuid4())
    table = table or new_table()
    await store.set(session_id, table)
    return get_session_signer().sign(session_id), table


async def get_table(token: str) -> RoundEngine | None:
    """Resolve a signed token to its table."""
    session_id = extract_session_id(token)
    if session_id is None:
        return None
    return await get_table_store().get(session_id)


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)
