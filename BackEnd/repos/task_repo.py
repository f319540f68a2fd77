from BackEnd.core.errors import NotFoundError
from BackEnd.core.models import Task, NO_PROJECT
from BackEnd.core.clock import parse_iso
from BackEnd.repos.db import connect

# Task fields that map 1:1 onto columns and may be changed after creation
UPDATABLE = ("project_name", "title", "notes", "estimated_intervals", "completed_intervals", "is_done")


def _row_to_task(row):
	return Task(
		id=row["id"],
		project_name=row["project_name"] or NO_PROJECT,
		title=row["title"],
		notes=row["notes"] or "",
		estimated_intervals=row["estimated_intervals"],
		completed_intervals=row["completed_intervals"],
		is_done=bool(row["is_done"]),
		created_at=parse_iso(row["created_at"]),
	)

def load_tasks(user_id, dbfile=None):
	"""Return the user's tasks, newest first."""
	with connect(dbfile) as conn:
		cur = conn.execute(
			"SELECT * FROM tasks WHERE user_id=? ORDER BY created_at DESC",
			(user_id,)
		)
		return [_row_to_task(row) for row in cur.fetchall()]

def create_task(user_id, task, dbfile=None):
	with connect(dbfile) as conn:
		conn.execute(
			"""
			INSERT INTO tasks (id, user_id, project_name, title, notes, estimated_intervals, completed_intervals, is_done, created_at)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(
				task.id, user_id, task.project_name, task.title, task.notes,
				task.estimated_intervals, task.completed_intervals, int(task.is_done),
				task.created_at.isoformat(),
			)
		)
	return task

def update_task(user_id, task_id, fields, dbfile=None):
	"""Set the given columns on one of the user's tasks. Ids and owners are never rewritten."""
	updates = {k: v for k, v in fields.items() if k in UPDATABLE}
	if not updates:
		return
	if "is_done" in updates:
		updates["is_done"] = int(updates["is_done"])
	assignments = ", ".join(f"{name}=?" for name in updates)
	with connect(dbfile) as conn:
		cur = conn.execute(
			f"UPDATE tasks SET {assignments} WHERE id=? AND user_id=?",
			(*updates.values(), task_id, user_id)
		)
		if cur.rowcount == 0:
			raise NotFoundError(f"task {task_id} not found")

def delete_task(user_id, task_id, dbfile=None):
	with connect(dbfile) as conn:
		cur = conn.execute("DELETE FROM tasks WHERE id=? AND user_id=?", (task_id, user_id))
		return cur.rowcount
