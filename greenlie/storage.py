"""
Analysis Store — Append-Only Local Collections

Four independent collections, each serialized as one JSON list under
its own namespaced key:

  - green_lie_analyses:           completed evaluation sessions
  - green_lie_votes:              per-criterion votes on curated statements
  - green_lie_custom_statements:  user-submitted statements
  - green_lie_custom_votes:       whole-statement votes on custom statements

Every read loads the full list. Every write rewrites it. There is no
incremental update and no index. A blob that fails to parse reads as
an empty collection and is logged, never raised.

Writes are serialized by a process-local lock only. Two processes
sharing a database can still lose updates (last write wins).
"""

from __future__ import annotations

import json
import logging
import random
import sqlite3
import string
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

from greenlie.models import (
    CRITERIA_ORDER,
    CustomAnalysis,
    CustomStatement,
    CustomVote,
    CustomVoteType,
    Criterion,
    StoredAnalysis,
    Verdict,
    Vote,
    VoteType,
)

logger = logging.getLogger(__name__)

ANALYSES_KEY = "green_lie_analyses"
VOTES_KEY = "green_lie_votes"
CUSTOM_STATEMENTS_KEY = "green_lie_custom_statements"
CUSTOM_VOTES_KEY = "green_lie_custom_votes"

T = TypeVar("T")


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id(prefix: str) -> str:
    """Time-derived id: <prefix>_<epoch ms>_<9 base36 chars>."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{now_ms()}_{suffix}"


class AnalysisStore:
    """Key/value blob store backed by SQLite."""

    def __init__(self, db_path: str = "greenlie_store.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    # --------------------------------------------------------
    # Raw blob access
    # --------------------------------------------------------

    def read_raw(self, key: str) -> Optional[str]:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def write_raw(self, key: str, value: str) -> None:
        with self._get_conn() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                   VALUES (?, ?, ?)""",
                (key, value, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()

    def _load(self, key: str, parse: Callable[[dict], T]) -> list[T]:
        stored = self.read_raw(key)
        if not stored:
            return []
        try:
            items = json.loads(stored)
            if not isinstance(items, list):
                raise ValueError(f"expected a list, got {type(items).__name__}")
            for item in items:
                if not isinstance(item, dict):
                    raise ValueError(f"expected a record, got {type(item).__name__}")
            return [parse(item) for item in items]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(
                "Stored collection is malformed, treating as empty",
                extra={"store_key": key, "error": str(e)},
            )
            return []

    def _save(self, key: str, records: list) -> None:
        self.write_raw(key, json.dumps([r.to_dict() for r in records]))

    def _append(self, key: str, parse: Callable[[dict], T], record: T) -> None:
        with self._lock:
            existing = self._load(key, parse)
            existing.append(record)
            self._save(key, existing)

    def clear(self) -> None:
        """Wipe every collection."""
        with self._lock:
            with self._get_conn() as conn:
                conn.execute("DELETE FROM kv_store")
                conn.commit()

    # --------------------------------------------------------
    # Analyses
    # --------------------------------------------------------

    def save_analysis(self, analysis: StoredAnalysis) -> None:
        self._append(ANALYSES_KEY, StoredAnalysis.from_dict, analysis)
        logger.info(
            "Analysis saved",
            extra={"statement_id": analysis.statement_id, "verdict": analysis.verdict},
        )

    def get_analyses(self) -> list[StoredAnalysis]:
        return self._load(ANALYSES_KEY, StoredAnalysis.from_dict)

    # --------------------------------------------------------
    # Votes on curated statements
    # --------------------------------------------------------

    def save_vote(self, statement_id: str, criterion: Criterion, vote_type: VoteType) -> Vote:
        vote = Vote(
            statement_id=statement_id,
            criterion=Criterion(criterion),
            vote_type=VoteType(vote_type),
            timestamp=now_ms(),
        )
        self._append(VOTES_KEY, Vote.from_dict, vote)
        return vote

    def get_votes(self) -> list[Vote]:
        return self._load(VOTES_KEY, Vote.from_dict)

    def get_votes_for_statement(self, statement_id: str) -> dict[Criterion, dict[str, int]]:
        """Per-criterion tallies. Every vote counts; nothing is deduplicated."""
        result = {c: {VoteType.MISSING.value: 0, VoteType.AVAILABLE.value: 0} for c in CRITERIA_ORDER}
        for vote in self.get_votes():
            if vote.statement_id == statement_id:
                result[vote.criterion][vote.vote_type.value] += 1
        return result

    # --------------------------------------------------------
    # Votes on custom statements
    # --------------------------------------------------------

    def save_custom_vote(self, statement_id: str, vote_type: CustomVoteType) -> CustomVote:
        vote = CustomVote(
            statement_id=statement_id,
            vote_type=CustomVoteType(vote_type),
            timestamp=now_ms(),
        )
        self._append(CUSTOM_VOTES_KEY, CustomVote.from_dict, vote)
        return vote

    def get_custom_votes(self) -> list[CustomVote]:
        return self._load(CUSTOM_VOTES_KEY, CustomVote.from_dict)

    def get_votes_for_custom_statement(self, statement_id: str) -> dict[str, int]:
        result = {t.value: 0 for t in CustomVoteType}
        for vote in self.get_custom_votes():
            if vote.statement_id == statement_id:
                result[vote.vote_type.value] += 1
        return result

    # --------------------------------------------------------
    # Custom statements
    # --------------------------------------------------------

    def save_custom_statement(self, statement: str, source_type: str, target_group: str) -> str:
        """Store a new, unanalysed custom statement. Returns its generated id."""
        record = CustomStatement(
            id=new_id("custom"),
            statement=statement,
            source_type=source_type,
            target_group=target_group,
            timestamp=now_ms(),
        )
        self._append(CUSTOM_STATEMENTS_KEY, CustomStatement.from_dict, record)
        logger.info("Custom statement saved", extra={"statement_id": record.id})
        return record.id

    def get_custom_statements(self) -> list[CustomStatement]:
        return self._load(CUSTOM_STATEMENTS_KEY, CustomStatement.from_dict)

    def get_custom_statement(self, statement_id: str) -> Optional[CustomStatement]:
        for record in self.get_custom_statements():
            if record.id == statement_id:
                return record
        return None

    def update_custom_statement_analysis(self, statement_id: str, analysis: CustomAnalysis) -> bool:
        """Attach an analysis result. Returns False for an unknown id."""
        with self._lock:
            records = self._load(CUSTOM_STATEMENTS_KEY, CustomStatement.from_dict)
            for record in records:
                if record.id == statement_id:
                    record.analyzed = True
                    record.analysis_result = analysis
                    self._save(CUSTOM_STATEMENTS_KEY, records)
                    return True
        logger.warning("Custom statement not found for update", extra={"statement_id": statement_id})
        return False

    def get_all_analyzed_statements(self) -> list[dict]:
        """Analysed custom statements with the verdict in display form."""
        result = []
        for record in self.get_custom_statements():
            if not (record.analyzed and record.analysis_result):
                continue
            label = record.analysis_result.verdict
            verdict = Verdict.parse(label)
            result.append({
                "id": record.id,
                "statement": record.statement,
                "source_type": record.source_type,
                "target_group": record.target_group,
                "verdict": verdict.label if verdict else label,
                "missing_conditions": list(record.analysis_result.missing_conditions),
                "is_custom": True,
            })
        return result


_store: Optional[AnalysisStore] = None


def get_store() -> AnalysisStore:
    """Factory — reads db path from config. One store per process."""
    global _store
    if _store is None:
        from greenlie.config import settings
        _store = AnalysisStore(db_path=settings.DB_PATH)
    return _store
