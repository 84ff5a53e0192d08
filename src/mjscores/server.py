"""
Reference tournament server.

Stores tournaments pushed by devices and serves them back for download:

    POST   /tournaments        -> 201 + stored tournament
    GET    /tournaments        -> 200 + list of tournaments
    GET    /tournaments/{id}   -> 200 | 404
    PUT    /tournaments/{id}   -> 200 | 404
    DELETE /tournaments/{id}   -> 204 | 404
"""

import json
import logging
import sqlite3
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Response
import uvicorn

from mjscores.config import ServerConfig
from mjscores.log import init_logging
from mjscores.models import TournamentDTO

logger = logging.getLogger("mjscores.server")


# ---------- Database Configuration ----------
SERVER_DB_PATH = ServerConfig.DB_PATH


def get_db():
    """Get database connection, creating the schema on first use."""
    conn = sqlite3.connect(SERVER_DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("""
        CREATE TABLE IF NOT EXISTS tournaments (
            id TEXT PRIMARY KEY,
            payload TEXT NOT NULL,
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
    """)
    return conn


def _row_to_tournament(row) -> TournamentDTO:
    return TournamentDTO.model_validate(json.loads(row["payload"]))


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info(f"Starting tournament server (db: {SERVER_DB_PATH})...")
    get_db().close()
    yield
    logger.info("Tournament server shutting down")


app = FastAPI(
    title="MahJong Scores Tournament Server",
    version="1.0.0",
    lifespan=lifespan
)


# ---------- API Endpoints ----------

@app.post(
    "/tournaments",
    status_code=201,
    response_model=TournamentDTO,
    response_model_exclude_none=True,
)
async def create_tournament(tournament: TournamentDTO):
    """
    Store an uploaded tournament.

    The client's id is kept unless it is already taken, in which case a new
    one is assigned.
    """
    db = get_db()
    now = int(time.time())

    existing = db.execute("SELECT id FROM tournaments WHERE id = ?", (tournament.id,)).fetchone()
    if existing:
        new_id = str(uuid.uuid4())
        logger.info(f"Tournament id {tournament.id} already taken, assigning {new_id}")
        tournament = tournament.model_copy(update={"id": new_id})

    db.execute(
        "INSERT INTO tournaments (id, payload, created_at, updated_at) VALUES (?, ?, ?, ?)",
        (tournament.id, tournament.to_json(), now, now)
    )
    db.commit()
    db.close()

    logger.info(f"Stored tournament {tournament.id} ({tournament.summary()})")
    return tournament


@app.get(
    "/tournaments",
    response_model=list[TournamentDTO],
    response_model_exclude_none=True,
)
async def list_tournaments():
    """List all tournaments in the order they were uploaded."""
    db = get_db()
    rows = db.execute("SELECT payload FROM tournaments ORDER BY created_at, rowid").fetchall()
    db.close()

    logger.info(f"Returning {len(rows)} tournament(s)")
    return [_row_to_tournament(r) for r in rows]


@app.get(
    "/tournaments/{tournament_id}",
    response_model=TournamentDTO,
    response_model_exclude_none=True,
)
async def get_tournament(tournament_id: str):
    """Fetch one tournament."""
    db = get_db()
    row = db.execute("SELECT payload FROM tournaments WHERE id = ?", (tournament_id,)).fetchone()
    db.close()

    if not row:
        raise HTTPException(status_code=404, detail=f"Tournament {tournament_id} not found")
    return _row_to_tournament(row)


@app.put(
    "/tournaments/{tournament_id}",
    response_model=TournamentDTO,
    response_model_exclude_none=True,
)
async def update_tournament(tournament_id: str, tournament: TournamentDTO):
    """Replace a stored tournament. The path id wins over the body id."""
    db = get_db()
    row = db.execute("SELECT id FROM tournaments WHERE id = ?", (tournament_id,)).fetchone()
    if not row:
        db.close()
        raise HTTPException(status_code=404, detail=f"Tournament {tournament_id} not found")

    tournament = tournament.model_copy(update={"id": tournament_id})
    db.execute(
        "UPDATE tournaments SET payload = ?, updated_at = ? WHERE id = ?",
        (tournament.to_json(), int(time.time()), tournament_id)
    )
    db.commit()
    db.close()

    logger.info(f"Updated tournament {tournament_id}")
    return tournament


@app.delete("/tournaments/{tournament_id}", status_code=204)
async def delete_tournament(tournament_id: str):
    """Delete a stored tournament."""
    db = get_db()
    cursor = db.execute("DELETE FROM tournaments WHERE id = ?", (tournament_id,))
    db.commit()
    db.close()

    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail=f"Tournament {tournament_id} not found")

    logger.info(f"Deleted tournament {tournament_id}")
    return Response(status_code=204)


def main():
    """Run the tournament server."""
    init_logging("server", color="dim magenta")
    logger.info("Starting MahJong Scores tournament server")
    uvicorn.run(app, host=ServerConfig.HOST, port=ServerConfig.PORT, log_config=None)


if __name__ == "__main__":
    main()
