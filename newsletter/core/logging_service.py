"""
Centralized logging service for the newsletter service.
Console logging through the stdlib, plus an optional persistent SQLite log
store (LOG_DB) that survives container rebuilds.
"""

import json
import logging
import sqlite3
import sys
import traceback
from datetime import datetime
from flask import current_app, has_app_context, has_request_context, request

from .config import Config

_console = logging.getLogger('newsletter')


def setup_logging(level=None):
    """Configure root logging once for the process."""
    level = level or Config.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Silence noisy libraries
    for name in ("sqlalchemy.engine", "sqlalchemy.pool", "werkzeug"):
        logging.getLogger(name).setLevel(logging.WARNING)


class LoggingService:
    """
    Persistent application log store.

    The store location is read from the current app's LOG_DB config, so each
    app keeps its own log file. Outside an app context, or with no LOG_DB,
    entries go to the console only.
    """

    @staticmethod
    def init_app(app):
        db_path = app.config.get('LOG_DB')
        if db_path:
            LoggingService._ensure_logs_table(db_path)
            _console.info(f"Persistent logging enabled: {db_path}")

    @staticmethod
    def _get_db_path():
        if not has_app_context():
            return None
        return current_app.config.get('LOG_DB')

    @staticmethod
    def _ensure_logs_table(db_path):
        """Ensure the app_logs table exists"""
        try:
            with sqlite3.connect(db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(f"""
                    CREATE TABLE IF NOT EXISTS {Config.LOGS_TABLE} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        timestamp TEXT NOT NULL,
                        level TEXT NOT NULL,
                        source TEXT NOT NULL,
                        message TEXT NOT NULL,
                        details TEXT,
                        ip_address TEXT,
                        user_agent TEXT,
                        request_path TEXT
                    )
                """)
                cursor.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                    ON {Config.LOGS_TABLE}(timestamp DESC)
                """)
                conn.commit()
        except sqlite3.Error as e:
            _console.error(f"Failed to ensure logs table: {e}")

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')[:500]
        return ip_address, user_agent, request.path

    @classmethod
    def log(cls, level, source, message, details=None):
        """
        Log a message to the console and, if configured, to the log database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (subscribers, email, system)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        level = level.upper()
        _console.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

        db_path = cls._get_db_path()
        if not db_path:
            return

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        ip_address, user_agent, request_path = cls._get_request_context()

        try:
            with sqlite3.connect(db_path) as conn:
                conn.execute(f"""
                    INSERT INTO {Config.LOGS_TABLE}
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    ip_address, user_agent, request_path
                ))
                conn.commit()
        except sqlite3.Error as e:
            # A broken log store must never fail the request being logged
            _console.error(f"Logging service error: {e}")

    @classmethod
    def info(cls, source, message, details=None):
        cls.log('INFO', source, message, details)

    @classmethod
    def warning(cls, source, message, details=None):
        cls.log('WARNING', source, message, details)

    @classmethod
    def error(cls, source, message, details=None):
        cls.log('ERROR', source, message, details)

    @classmethod
    def log_error_with_traceback(cls, source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        cls.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @classmethod
    def recent(cls, limit=50, source=None):
        """Most recent persisted log entries of the current app, newest first"""
        db_path = cls._get_db_path()
        if not db_path:
            return []

        query = f"SELECT timestamp, level, source, message, details FROM {Config.LOGS_TABLE}"
        params = []
        if source:
            query += " WHERE source = ?"
            params.append(source)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        with sqlite3.connect(db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(query, params).fetchall()
        return [dict(row) for row in rows]
