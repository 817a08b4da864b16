from __future__ import annotations

import json
import os
import sqlite3
import uuid
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Sequence
from contextlib import contextmanager

from judging.cohorts import PrizeCohort
from judging.judges import Judge


DATA_DIR = Path(__file__).resolve().parents[1] / "data"

DEFAULT_DB_PATH = DATA_DIR / "judging.db"

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

_DB_PATH: Path = Path(os.getenv("HACKATHON_DB_PATH", str(DEFAULT_DB_PATH)))


def set_db_path(path: Path | str) -> None:
    global _DB_PATH
    _DB_PATH = Path(path)
    _DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def get_db_path() -> Path:
    return _DB_PATH


def _connect(path: Optional[Path] = None) -> sqlite3.Connection:
    target = Path(path) if path else get_db_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(target, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # Enforce foreign keys
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@contextmanager
def get_connection(path: Optional[Path] = None) -> Iterator[sqlite3.Connection]:
    conn = _connect(path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _ensure_schema_migrations_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version TEXT PRIMARY KEY,
            applied_at TEXT NOT NULL DEFAULT (datetime('now'))
        );
        """
    )


def _get_applied_versions(conn: sqlite3.Connection) -> set[str]:
    _ensure_schema_migrations_table(conn)
    cur = conn.execute("SELECT version FROM schema_migrations")
    return {row[0] for row in cur.fetchall()}


def _record_applied(conn: sqlite3.Connection, version: str) -> None:
    conn.execute("INSERT OR IGNORE INTO schema_migrations(version) VALUES (?)", (version,))


def _migration_files() -> Sequence[Path]:
    return sorted(p for p in MIGRATIONS_DIR.iterdir() if p.suffix == ".sql")


def run_migrations(path: Optional[Path] = None) -> None:
    """Run pending SQL migrations found in models/migrations/*.sql in sorted order."""
    with get_connection(path) as conn:
        applied = _get_applied_versions(conn)
        for sql_file in _migration_files():
            version = sql_file.stem
            if version in applied:
                continue
            conn.executescript(sql_file.read_text(encoding="utf-8"))
            _record_applied(conn, version)


def init_db(path: Optional[Path] = None) -> None:
    """Initialize database by running migrations. Safe to call multiple times."""
    run_migrations(path)


# --- Hackathons and prize cohorts ---

def create_hackathon(
    name: str,
    description: Optional[str] = None,
    prize_cohorts: Sequence[PrizeCohort] = (),
    judges: Sequence[Judge] = (),
    hackathon_id: Optional[str] = None,
) -> str:
    """Insert a hackathon together with its prize cohorts and judges in one transaction."""
    hid = hackathon_id or uuid.uuid4().hex
    with get_connection() as conn:
        conn.execute(
            "INSERT INTO hackathons(id, name, description) VALUES(?, ?, ?)",
            (hid, name, description),
        )
        for position, cohort in enumerate(prize_cohorts):
            _insert_prize_cohort(conn, hid, cohort, position)
        for position, judge in enumerate(judges):
            conn.execute(
                "INSERT INTO judges(hackathon_id, position, judge_identity, email, status) VALUES(?, ?, ?, ?, ?)",
                (hid, position, judge.judge_identity, judge.email, judge.status.value),
            )
    return hid


def _insert_prize_cohort(conn: sqlite3.Connection, hackathon_id: str, cohort: PrizeCohort, position: int) -> None:
    criteria = [c.model_dump() for c in cohort.evaluation_criteria]
    conn.execute(
        """
        INSERT INTO prize_cohorts(
            id, hackathon_id, position, name, description, number_of_winners, prize_amount,
            judging_mode, voting_mode, max_votes_per_judge, evaluation_criteria
        ) VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            cohort.id,
            hackathon_id,
            position,
            cohort.name,
            cohort.description,
            cohort.number_of_winners,
            cohort.prize_amount,
            cohort.judging_mode.value,
            cohort.voting_mode.value,
            cohort.max_votes_per_judge,
            json.dumps(criteria),
        ),
    )


def get_hackathon(hackathon_id: str) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute("SELECT * FROM hackathons WHERE id = ?", (hackathon_id,))
        return cur.fetchone()


def list_hackathons(limit: int = 50) -> list[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM hackathons ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (limit,),
        )
        return list(cur.fetchall())


def list_prize_cohort_rows(hackathon_id: str) -> list[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM prize_cohorts WHERE hackathon_id = ? ORDER BY position ASC",
            (hackathon_id,),
        )
        return list(cur.fetchall())


def get_prize_cohort_row(hackathon_id: str, cohort_id: str) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM prize_cohorts WHERE hackathon_id = ? AND id = ?",
            (hackathon_id, cohort_id),
        )
        return cur.fetchone()


# --- Judges ---

def list_judge_rows(hackathon_id: str) -> list[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM judges WHERE hackathon_id = ? ORDER BY position ASC, id ASC",
            (hackathon_id,),
        )
        return list(cur.fetchall())


def get_judge_row(hackathon_id: str, judge_identity: str) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM judges WHERE hackathon_id = ? AND judge_identity = ?",
            (hackathon_id, judge_identity),
        )
        return cur.fetchone()


def update_judge_status(hackathon_id: str, judge_identity: str, status: str) -> bool:
    with get_connection() as conn:
        cur = conn.execute(
            "UPDATE judges SET status = ?, updated_at = datetime('now') WHERE hackathon_id = ? AND judge_identity = ?",
            (status, hackathon_id, judge_identity),
        )
        return cur.rowcount > 0


# --- Judge evaluations ---

def upsert_judge_evaluation(payload: Dict[str, Any]) -> int:
    """Store an accepted evaluation. A judge re-scoring the same project and
    cohort overwrites the previous row. Returns the row id."""
    with get_connection() as conn:
        conn.execute(
            """
            INSERT INTO judge_evaluations(
                project_id, hackathon_id, prize_cohort_id, judge_identity, scores, feedback,
                overall_feedback, total_score, max_possible_score
            ) VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(project_id, prize_cohort_id, judge_identity) DO UPDATE SET
                scores = excluded.scores,
                feedback = excluded.feedback,
                overall_feedback = excluded.overall_feedback,
                total_score = excluded.total_score,
                max_possible_score = excluded.max_possible_score,
                updated_at = datetime('now')
            """,
            (
                payload["project_id"],
                payload["hackathon_id"],
                payload["prize_cohort_id"],
                payload["judge_identity"],
                json.dumps(payload["scores"]),
                json.dumps(payload["feedback"]),
                payload["overall_feedback"],
                payload["total_score"],
                payload["max_possible_score"],
            ),
        )
        cur = conn.execute(
            "SELECT id FROM judge_evaluations WHERE project_id = ? AND prize_cohort_id = ? AND judge_identity = ?",
            (payload["project_id"], payload["prize_cohort_id"], payload["judge_identity"]),
        )
        return int(cur.fetchone()["id"])


def get_judge_evaluation(project_id: str, prize_cohort_id: str, judge_identity: str) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM judge_evaluations WHERE project_id = ? AND prize_cohort_id = ? AND judge_identity = ?",
            (project_id, prize_cohort_id, judge_identity),
        )
        return cur.fetchone()


def list_judge_evaluations(
    hackathon_id: str,
    project_id: str,
    prize_cohort_id: Optional[str] = None,
) -> list[sqlite3.Row]:
    query = "SELECT * FROM judge_evaluations WHERE hackathon_id = ? AND project_id = ?"
    params: list[Any] = [hackathon_id, project_id]
    if prize_cohort_id is not None:
        query += " AND prize_cohort_id = ?"
        params.append(prize_cohort_id)
    query += " ORDER BY updated_at DESC, id DESC"
    with get_connection() as conn:
        cur = conn.execute(query, params)
        return list(cur.fetchall())


def list_judge_evaluations_by_judge(
    hackathon_id: str,
    judge_identity: str,
    prize_cohort_id: Optional[str] = None,
) -> list[sqlite3.Row]:
    query = "SELECT * FROM judge_evaluations WHERE hackathon_id = ? AND judge_identity = ?"
    params: list[Any] = [hackathon_id, judge_identity]
    if prize_cohort_id is not None:
        query += " AND prize_cohort_id = ?"
        params.append(prize_cohort_id)
    query += " ORDER BY updated_at DESC, id DESC"
    with get_connection() as conn:
        cur = conn.execute(query, params)
        return list(cur.fetchall())
