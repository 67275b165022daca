"""
Runtime configuration.

Read once from environment variables at import time, so every layer sees the same values.
"""

import os

DATABASE_URL = os.getenv("CHESS_DATABASE_URL", "sqlite:///./chess.db")

# echo all SQL statements (handy while developing, noisy otherwise)
DATABASE_ECHO = os.getenv("CHESS_DB_ECHO", "false").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("CHESS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
