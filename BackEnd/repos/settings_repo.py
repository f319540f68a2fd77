import json

from BackEnd.core.clock import utc_now_iso
from BackEnd.repos.db import connect

SETTINGS_KEY = "settings"
TIMER_STATE_KEY = "timer_state"


def load_value(user_id, key, dbfile=None):
	"""Return the JSON document stored under `key` for the user, or None."""
	with connect(dbfile) as conn:
		cur = conn.execute(
			"SELECT value FROM user_settings WHERE user_id=? AND key=?",
			(user_id, key)
		)
		row = cur.fetchone()
		return json.loads(row["value"]) if row else None

def save_value(user_id, key, value, dbfile=None):
	with connect(dbfile) as conn:
		conn.execute(
			"""
			INSERT INTO user_settings (user_id, key, value, updated_at) VALUES (?, ?, ?, ?)
			ON CONFLICT(user_id, key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
			""",
			(user_id, key, json.dumps(value), utc_now_iso())
		)

def load_settings(user_id, dbfile=None):
	return load_value(user_id, SETTINGS_KEY, dbfile)

def save_settings(user_id, settings, dbfile=None):
	save_value(user_id, SETTINGS_KEY, settings, dbfile)

def load_timer_state(user_id, dbfile=None):
	return load_value(user_id, TIMER_STATE_KEY, dbfile)

def save_timer_state(user_id, state, dbfile=None):
	save_value(user_id, TIMER_STATE_KEY, state, dbfile)

def delete_user_settings(user_id, dbfile=None):
	with connect(dbfile) as conn:
		cur = conn.execute("DELETE FROM user_settings WHERE user_id=?", (user_id,))
		return cur.rowcount
