from pathlib import Path
import aiosqlite

from shop_assistant.exceptions import StorageError
from shop_assistant.models.schemas import ChatTurn


async def init_db(db_path: str):
    """Create tables if they don't exist. Called once on app startup."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    async with aiosqlite.connect(db_path) as db:
        await db.executescript("""
            CREATE TABLE IF NOT EXISTS products (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                sku         TEXT NOT NULL,
                name        TEXT NOT NULL,
                description TEXT,
                category    TEXT,
                price       REAL NOT NULL,
                currency    TEXT NOT NULL DEFAULT 'GBP',
                image_url   TEXT,
                is_active   INTEGER NOT NULL DEFAULT 1
            );

            CREATE UNIQUE INDEX IF NOT EXISTS idx_products_sku
                ON products(sku);

            CREATE TABLE IF NOT EXISTS chat_messages (
                id                      INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id              TEXT NOT NULL,
                role                    TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
                content                 TEXT NOT NULL,
                timestamp               TEXT NOT NULL,
                recommended_product_ids TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_chat_messages_session
                ON chat_messages(session_id, timestamp);
        """)
        await db.commit()


# --- Chat history ---

async def save_turns(db_path: str, turns: list[ChatTurn]) -> list[int]:
    """Append turns in a single transaction. Returns the new row ids.

    Either every turn is committed or none is.
    """
    ids: list[int] = []
    try:
        async with aiosqlite.connect(db_path) as db:
            for turn in turns:
                cursor = await db.execute(
                    "INSERT INTO chat_messages "
                    "(session_id, role, content, timestamp, recommended_product_ids) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        turn.session_id,
                        turn.role,
                        turn.content,
                        turn.timestamp.isoformat(),
                        ",".join(str(i) for i in turn.recommended_product_ids) or None,
                    ),
                )
                ids.append(cursor.lastrowid)
            await db.commit()
    except aiosqlite.Error as e:
        raise StorageError(f"Failed to save chat turns: {e}") from e
    return ids


async def get_recent_turns(db_path: str, session_id: str, limit: int) -> list[ChatTurn]:
    """Load the `limit` most recent turns for a session, NEWEST FIRST.

    Callers that need chronological order must reverse the result.
    """
    if limit <= 0:
        return []
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM chat_messages WHERE session_id = ? "
                "ORDER BY timestamp DESC, id DESC LIMIT ?",
                (session_id, limit),
            )
            rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        raise StorageError(f"Failed to load chat history: {e}") from e
    return [ChatTurn(**dict(row)) for row in rows]


async def count_turns(db_path: str, session_id: str | None = None) -> int:
    """Count stored turns, optionally for one session."""
    try:
        async with aiosqlite.connect(db_path) as db:
            if session_id is None:
                cursor = await db.execute("SELECT COUNT(*) FROM chat_messages")
            else:
                cursor = await db.execute(
                    "SELECT COUNT(*) FROM chat_messages WHERE session_id = ?",
                    (session_id,),
                )
            row = await cursor.fetchone()
    except aiosqlite.Error as e:
        raise StorageError(f"Failed to count chat turns: {e}") from e
    return row[0]
