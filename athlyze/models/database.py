import json
import logging
import os
import sqlite3
import time

from athlyze.utils.query_builder import QueryFilter, activity_filters, suggestion_filters, period_start

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = ('exercise', 'nutrition', 'measurements')
SUGGESTION_TYPES = ('exercise', 'nutrition', 'measurements', 'general')


class FitnessDatabase:
    def __init__(self, db_path='data/athlyze.db'):
        self.db_path = db_path
        self.init_database()

    def get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute('PRAGMA foreign_keys = ON')
        return conn

    def init_database(self):
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = self.get_connection()
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS users (
                user_id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                plan TEXT NOT NULL DEFAULT 'starter',
                active INTEGER NOT NULL DEFAULT 1,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS activities (
                activity_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                activity_type TEXT NOT NULL
                    CHECK (activity_type IN ('exercise', 'nutrition', 'measurements')),
                description TEXT NOT NULL,
                activity_date DATE NOT NULL,
                calories INTEGER,
                measurements TEXT NOT NULL DEFAULT '{}',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS suggestions (
                suggestion_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                text TEXT NOT NULL,
                suggestion_type TEXT NOT NULL DEFAULT 'general',
                is_read INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_activities_user_date ON activities (user_id, activity_date)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_suggestions_user ON suggestions (user_id, is_read)')

        conn.commit()
        conn.close()

    def _run(self, sql, params=(), fetch=None):
        """Execute one statement on a fresh connection.

        ``fetch`` is 'one', 'all' or None; for None the cursor's rowcount and
        lastrowid are returned instead of rows.
        """
        conn = self.get_connection()
        start = time.perf_counter()
        try:
            cursor = conn.execute(sql, params)
            if fetch == 'one':
                row = cursor.fetchone()
                result = dict(row) if row else None
                rows = 0 if row is None else 1
            elif fetch == 'all':
                result = [dict(row) for row in cursor.fetchall()]
                rows = len(result)
            else:
                conn.commit()
                result = (cursor.rowcount, cursor.lastrowid)
                rows = cursor.rowcount
        except sqlite3.Error as e:
            logger.error('Query failed: %s (%s)', ' '.join(sql.split()), e)
            raise
        finally:
            conn.close()
        duration = (time.perf_counter() - start) * 1000
        logger.debug('Query executed: %s duration=%.1fms rows=%s', ' '.join(sql.split()), duration, rows)
        return result

    # users

    def create_user(self, name, email, password_hash, plan='starter'):
        try:
            _, user_id = self._run('''
                INSERT INTO users (name, email, password_hash, plan)
                VALUES (?, ?, ?, ?)
            ''', (name, email, password_hash, plan))
        except sqlite3.IntegrityError:
            return None
        return {'user_id': user_id, 'name': name, 'email': email, 'plan': plan}

    def email_exists(self, email):
        return self._run('SELECT user_id FROM users WHERE email = ?', (email,), fetch='one') is not None

    def get_active_user_by_email(self, email):
        return self._run('''
            SELECT user_id, name, email, password_hash, plan
            FROM users WHERE email = ? AND active = 1
        ''', (email,), fetch='one')

    def set_user_active(self, user_id, active):
        rowcount, _ = self._run('UPDATE users SET active = ? WHERE user_id = ?', (1 if active else 0, user_id))
        return rowcount > 0

    # activities

    def add_activity(self, user_id, activity_type, description, activity_date, calories=None, measurements=None):
        _, activity_id = self._run('''
            INSERT INTO activities (user_id, activity_type, description, activity_date, calories, measurements)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (user_id, activity_type, description, activity_date, calories, json.dumps(measurements or {})))
        return activity_id

    def count_activities(self, user_id, filters=None):
        query = activity_filters(user_id, filters)
        row = self._run(f'SELECT COUNT(*) AS total FROM activities {query.where}', query.params, fetch='one')
        return row['total']

    def list_activities(self, user_id, filters=None, limit=10, offset=0):
        query = activity_filters(user_id, filters)
        tail, params = query.paginated(limit, offset)
        rows = self._run(f'''
            SELECT activity_id, activity_type, description, activity_date, calories, measurements, created_at
            FROM activities {query.where}
            ORDER BY activity_date DESC, created_at DESC, activity_id DESC
            {tail}
        ''', params, fetch='all')
        return [_decode_measurements(row) for row in rows]

    def get_activity(self, activity_id, user_id):
        row = self._run('''
            SELECT * FROM activities WHERE activity_id = ? AND user_id = ?
        ''', (activity_id, user_id), fetch='one')
        return _decode_measurements(row) if row else None

    def delete_activity(self, activity_id, user_id):
        rowcount, _ = self._run(
            'DELETE FROM activities WHERE activity_id = ? AND user_id = ?',
            (activity_id, user_id)
        )
        return rowcount > 0

    def get_activities_since(self, user_id, since, activity_type=None):
        """Activities dated on or after ``since`` (ISO date), newest first."""
        query = activity_filters(user_id, {'type': activity_type, 'date_from': since})
        rows = self._run(f'''
            SELECT activity_id, activity_type, description, activity_date, calories, measurements
            FROM activities {query.where}
            ORDER BY activity_date DESC, created_at DESC, activity_id DESC
        ''', query.params, fetch='all')
        return [_decode_measurements(row) for row in rows]

    def get_recent_activities(self, user_id, days, today=None):
        return self.get_activities_since(user_id, period_start(days, today))

    # dashboard

    def get_activity_stats(self, user_id, today=None):
        return self._run('''
            SELECT
                COUNT(*) AS total,
                COUNT(CASE WHEN activity_type = 'exercise' THEN 1 END) AS exercise,
                COUNT(CASE WHEN activity_type = 'nutrition' THEN 1 END) AS nutrition,
                COUNT(CASE WHEN activity_type = 'measurements' THEN 1 END) AS measurements,
                COUNT(CASE WHEN activity_date >= ? THEN 1 END) AS this_week
            FROM activities
            WHERE user_id = ?
        ''', (period_start(7, today), user_id), fetch='one')

    def get_latest_activities(self, user_id, limit=5):
        return self._run('''
            SELECT activity_id, activity_type, description, activity_date, calories
            FROM activities
            WHERE user_id = ?
            ORDER BY activity_date DESC, created_at DESC, activity_id DESC
            LIMIT ?
        ''', (user_id, limit), fetch='all')

    def get_daily_chart(self, user_id, days=7, today=None):
        return self._run('''
            SELECT
                activity_date,
                COUNT(*) AS total,
                COUNT(CASE WHEN activity_type = 'exercise' THEN 1 END) AS exercise,
                SUM(COALESCE(calories, 0)) AS total_calories
            FROM activities
            WHERE user_id = ? AND activity_date >= ?
            GROUP BY activity_date
            ORDER BY activity_date ASC
        ''', (user_id, period_start(days, today)), fetch='all')

    # suggestions

    def add_suggestion(self, user_id, text, suggestion_type='general'):
        _, suggestion_id = self._run('''
            INSERT INTO suggestions (user_id, text, suggestion_type)
            VALUES (?, ?, ?)
        ''', (user_id, text, suggestion_type))
        return suggestion_id

    def get_unread_suggestions(self, user_id, limit=3):
        return self._run('''
            SELECT suggestion_id, text, created_at, suggestion_type
            FROM suggestions
            WHERE user_id = ? AND is_read = 0
            ORDER BY created_at DESC, suggestion_id DESC
            LIMIT ?
        ''', (user_id, limit), fetch='all')

    def count_suggestions(self, user_id, filters=None):
        query = suggestion_filters(user_id, filters)
        row = self._run(f'SELECT COUNT(*) AS total FROM suggestions {query.where}', query.params, fetch='one')
        return row['total']

    def list_suggestions(self, user_id, filters=None, limit=10, offset=0):
        query = suggestion_filters(user_id, filters)
        tail, params = query.paginated(limit, offset)
        return self._run(f'''
            SELECT suggestion_id, text, created_at, suggestion_type, is_read
            FROM suggestions {query.where}
            ORDER BY created_at DESC, suggestion_id DESC
            {tail}
        ''', params, fetch='all')

    def mark_suggestions_read(self, user_id, suggestion_ids):
        if not suggestion_ids:
            return 0
        query = QueryFilter('user_id', user_id).add_in('suggestion_id', suggestion_ids)
        rowcount, _ = self._run(f'UPDATE suggestions SET is_read = 1 {query.where}', query.params)
        return rowcount

    def mark_suggestion_unread(self, suggestion_id, user_id):
        rowcount, _ = self._run(
            'UPDATE suggestions SET is_read = 0 WHERE suggestion_id = ? AND user_id = ?',
            (suggestion_id, user_id)
        )
        return rowcount > 0

    def delete_suggestion(self, suggestion_id, user_id):
        rowcount, _ = self._run(
            'DELETE FROM suggestions WHERE suggestion_id = ? AND user_id = ?',
            (suggestion_id, user_id)
        )
        return rowcount > 0

    def get_suggestion_stats(self, user_id):
        return self._run('''
            SELECT
                COUNT(*) AS total,
                COUNT(CASE WHEN is_read = 0 THEN 1 END) AS unread,
                COUNT(CASE WHEN suggestion_type = 'exercise' THEN 1 END) AS exercise,
                COUNT(CASE WHEN suggestion_type = 'nutrition' THEN 1 END) AS nutrition,
                COUNT(CASE WHEN suggestion_type = 'measurements' THEN 1 END) AS measurements,
                COUNT(CASE WHEN suggestion_type = 'general' THEN 1 END) AS general
            FROM suggestions
            WHERE user_id = ?
        ''', (user_id,), fetch='one')


def _decode_measurements(row):
    raw = row.get('measurements')
    if isinstance(raw, str):
        try:
            row['measurements'] = json.loads(raw) if raw else {}
        except ValueError:
            row['measurements'] = {}
    return row
