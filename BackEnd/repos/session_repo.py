from BackEnd.core.models import Session, Phase, NO_PROJECT
from BackEnd.core.clock import parse_iso
from BackEnd.repos.db import connect


def _row_to_session(row):
	return Session(
		id=row["id"],
		task_id=row["task_id"],
		project_name=row["project_name"] or NO_PROJECT,
		task_name=row["task_name"],
		phase=Phase(row["phase"]),
		start_time=parse_iso(row["start_utc"]),
		end_time=parse_iso(row["end_utc"]),
		duration_minutes=row["duration_minutes"],
	)

def create_session(user_id, session, dbfile=None):
	"""Append a finished session for the user. Sessions are never updated afterwards."""
	with connect(dbfile) as conn:
		conn.execute(
			"""
			INSERT INTO sessions (id, user_id, task_id, project_name, task_name, phase, start_utc, end_utc, duration_minutes)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(
				session.id, user_id, session.task_id, session.project_name, session.task_name,
				session.phase.value, session.start_time.isoformat(), session.end_time.isoformat(),
				int(session.duration_minutes),
			)
		)
	return session

def load_sessions(user_id, dbfile=None):
	"""Return all of the user's sessions, newest first."""
	with connect(dbfile) as conn:
		cur = conn.execute(
			"SELECT * FROM sessions WHERE user_id=? ORDER BY start_utc DESC",
			(user_id,)
		)
		return [_row_to_session(row) for row in cur.fetchall()]

def count_work_sessions(user_id, dbfile=None):
	"""Number of completed focus intervals the user has logged."""
	with connect(dbfile) as conn:
		cur = conn.execute(
			"SELECT COUNT(*) AS total FROM sessions WHERE user_id=? AND phase=?",
			(user_id, Phase.WORK.value)
		)
		row = cur.fetchone()
		return row["total"] if row else 0

def delete_user_sessions(user_id, dbfile=None):
	with connect(dbfile) as conn:
		cur = conn.execute("DELETE FROM sessions WHERE user_id=?", (user_id,))
		return cur.rowcount
