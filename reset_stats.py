"""
Reset a user's Pomodoro stats by clearing their rows from the database.
This deletes the session history, saved settings and the saved timer.
Tasks are kept unless you also confirm deleting them.
"""

import argparse
import os

from BackEnd.core.errors import PersistenceError
from BackEnd.core.paths import db_path
from BackEnd.repos import session_repo, settings_repo, task_repo


def reset_user_stats(user_id, dbfile=None, ask=input):
    """Delete one user's history. Returns True if anything was removed."""
    db_file = dbfile or db_path()

    if not os.path.exists(db_file):
        print("No database found. Stats are already at 0.")
        return False

    print(f"Found database at: {db_file}")
    try:
        focus_count = session_repo.count_work_sessions(user_id, db_file)
    except PersistenceError as e:
        print(f"✗ Could not read the database: {e}")
        return False
    print(f"User '{user_id}' has {focus_count} completed pomodoros.")

    # Ask for confirmation
    confirm = ask("Are you sure you want to reset all stats? This cannot be undone. (yes/no): ")
    if confirm.lower() not in ['yes', 'y']:
        print("Reset cancelled.")
        return False

    try:
        removed = session_repo.delete_user_sessions(user_id, db_file)
        settings_repo.delete_user_settings(user_id, db_file)
        print(f"✓ Deleted {removed} sessions")
        print("✓ All stats have been reset to 0")
    except PersistenceError as e:
        print(f"✗ Error resetting stats: {e}")
        return False

    # Also delete tasks if the user wants
    confirm_tasks = ask("\nAlso delete your task list? (yes/no): ")
    if confirm_tasks.lower() in ['yes', 'y']:
        try:
            for task in task_repo.load_tasks(user_id, db_file):
                task_repo.delete_task(user_id, task.id, db_file)
            print("✓ Task list deleted successfully!")
        except PersistenceError as e:
            print(f"✗ Error deleting task list: {e}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset Pomodoro stats for one user")
    parser.add_argument("--user", default=os.environ.get("POMODORO_USER"), required=not os.environ.get("POMODORO_USER"))
    parser.add_argument("--db", default=None)
    args = parser.parse_args()

    print("=" * 50)
    print("Pomodoro Tracker - Reset All Stats")
    print("=" * 50)
    reset_user_stats(args.user, args.db)
    print("\nPress Enter to exit...")
    input()
