import aiosqlite

from minbar.config import settings

CREATE_KHUTBAHS = """
CREATE TABLE IF NOT EXISTS khutbahs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    author TEXT NOT NULL DEFAULT '',
    topic TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL DEFAULT '',
    source_path TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

CREATE_KHUTBAH_CARDS = """
CREATE TABLE IF NOT EXISTS khutbah_cards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    khutbah_id INTEGER NOT NULL,
    card_number INTEGER NOT NULL,
    section_label TEXT NOT NULL DEFAULT '',
    title TEXT NOT NULL,
    bullet_points_json TEXT NOT NULL DEFAULT '[]',
    script TEXT NOT NULL DEFAULT '',
    arabic_text TEXT,
    key_quote TEXT,
    quote_source TEXT,
    transition_text TEXT,
    notes TEXT,
    time_estimate_seconds INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (khutbah_id) REFERENCES khutbahs(id),
    UNIQUE(khutbah_id, card_number)
)
"""

_DDL = [CREATE_KHUTBAHS, CREATE_KHUTBAH_CARDS]


async def init_db() -> None:
    """Create all tables. Called once at server startup via FastAPI lifespan."""
    async with aiosqlite.connect(settings.database_path) as db:
        for stmt in _DDL:
            await db.execute(stmt)
        await db.commit()


async def get_async_conn() -> aiosqlite.Connection:
    """Async connection for use in FastAPI route handlers."""
    conn = await aiosqlite.connect(settings.database_path)
    await conn.execute("PRAGMA busy_timeout = 5000")
    conn.row_factory = aiosqlite.Row
    return conn
