import sqlite3
from contextlib import contextmanager
from pathlib import Path

from BackEnd.core.errors import PersistenceError
from BackEnd.core.log import setup_logger
from BackEnd.core.paths import db_path

logger = setup_logger(__name__)

SCHEMA_PATH = Path(__file__).parent.parent.parent / "SQL" / "schema.sql"

# Columns added after the first release: (table, column, DDL)
MIGRATIONS = [
	("sessions", "project_name", "ALTER TABLE sessions ADD COLUMN project_name TEXT NOT NULL DEFAULT 'No Project'"),
	("sessions", "task_name", "ALTER TABLE sessions ADD COLUMN task_name TEXT"),
	("tasks", "project_name", "ALTER TABLE tasks ADD COLUMN project_name TEXT NOT NULL DEFAULT 'No Project'"),
]


def _open(dbfile):
	conn = sqlite3.connect(dbfile)
	conn.row_factory = sqlite3.Row
	try:
		with open(SCHEMA_PATH, encoding="utf-8") as f:
			conn.executescript(f.read())

		# Migration: ensure new columns exist on older DBs
		for table, column, ddl in MIGRATIONS:
			cur = conn.execute(f"PRAGMA table_info({table})")
			cols = {r['name'] for r in cur.fetchall()}
			if column not in cols:
				logger.info("Migrating %s: adding column %s", table, column)
				conn.execute(ddl)
	except sqlite3.Error:
		conn.close()
		raise
	return conn


@contextmanager
def connect(dbfile=None):
	"""Open SQLite connection with the schema applied; commit on success, always close.

	Any sqlite3 error is re-raised as PersistenceError.
	"""
	dbfile = dbfile or db_path()
	try:
		conn = _open(dbfile)
	except sqlite3.Error as e:
		raise PersistenceError(f"cannot open database {dbfile}: {e}") from e
	try:
		with conn:
			yield conn
	except sqlite3.Error as e:
		raise PersistenceError(str(e)) from e
	finally:
		conn.close()
