"""
Categorized logging for MediaVault.

Modules log through ``logging.getLogger(__name__)``. Each logger package
belongs to a category whose level can be changed at runtime and is
remembered in the config table as ``log_level_<category>``.
"""
import logging
from typing import Dict, Optional
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = "mediavault.log"
LOG_BACKUP_DAYS = 7


class LoggerCategory:
    CORE = "core"                  # context, managers
    API = "api"                    # endpoint clients
    NETWORK = "network"            # shared HTTP session
    DATABASE = "database"          # sqlite settings store
    SESSION = "session"            # token and cached user
    MEDIA = "media"                # image compression
    UI = "ui"                      # controllers, router, workers


DEFAULT_LOG_LEVELS = {
    LoggerCategory.CORE: logging.INFO,
    LoggerCategory.API: logging.INFO,
    LoggerCategory.NETWORK: logging.INFO,
    LoggerCategory.DATABASE: logging.WARNING,
    LoggerCategory.SESSION: logging.INFO,
    LoggerCategory.MEDIA: logging.INFO,
    LoggerCategory.UI: logging.INFO,
}

# Logger name -> category. Child loggers inherit through the logging hierarchy.
MODULE_TO_CATEGORY = {
    'mediavault.core.context': LoggerCategory.CORE,
    'mediavault.core.auth_manager': LoggerCategory.CORE,
    'mediavault.core.resources_manager': LoggerCategory.CORE,
    'mediavault.core.api': LoggerCategory.API,
    'mediavault.core.http_client': LoggerCategory.NETWORK,
    'mediavault.core.database': LoggerCategory.DATABASE,
    'mediavault.core.session_store': LoggerCategory.SESSION,
    'mediavault.media': LoggerCategory.MEDIA,
    'mediavault.ui': LoggerCategory.UI,
}

# Third-party loggers kept at WARNING regardless of category settings
QUIET_LOGGERS = ('urllib3', 'requests', 'asyncio', 'keyring')


class LoggingManager:
    """Owns handler setup and the per-category levels"""

    def __init__(self, log_dir: Optional[Path] = None, db_manager=None):
        """
        Args:
            log_dir: Where the rotating log file goes. Defaults to ~/.mediavault/logs
            db_manager: DatabaseManager used to persist category levels, optional
        """
        self.log_dir = log_dir or (Path.home() / ".mediavault" / "logs")
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.db_manager = db_manager
        self._category_levels: Dict[str, int] = self._read_levels()

    @staticmethod
    def _config_key(category: str) -> str:
        return f'log_level_{category}'

    def _read_levels(self) -> Dict[str, int]:
        if not self.db_manager:
            return dict(DEFAULT_LOG_LEVELS)

        levels = {}
        for category, fallback in DEFAULT_LOG_LEVELS.items():
            stored = self.db_manager.get_config(self._config_key(category))
            level = logging.getLevelName(stored) if stored else fallback
            # getLevelName returns a string for names it does not know
            levels[category] = level if isinstance(level, int) else fallback
        return levels

    def attach_database(self, db_manager):
        """
        Start persisting levels in ``db_manager`` and apply the stored ones.

        Logging comes up before the settings database is open, so the
        launcher binds it here once the app context exists.
        """
        self.db_manager = db_manager
        self._category_levels = self._read_levels()
        for category, level in self._category_levels.items():
            self._apply(category, level)

    def get_category_level(self, category: str) -> int:
        return self._category_levels.get(category, logging.INFO)

    def get_all_levels(self) -> Dict[str, int]:
        return dict(self._category_levels)

    def set_category_level(self, category: str, level: int):
        """Change a category's level now and remember it for the next start"""
        self._category_levels[category] = level
        if self.db_manager:
            self.db_manager.set_config(self._config_key(category), logging.getLevelName(level))
        self._apply(category, level)

    def _apply(self, category: str, level: int):
        for name, cat in MODULE_TO_CATEGORY.items():
            if cat == category:
                logging.getLogger(name).setLevel(level)

    def setup_logging(self, root_level: int = logging.INFO):
        """Install the file + console handlers on the root logger"""
        formatter = logging.Formatter(LOG_FORMAT)

        file_handler = TimedRotatingFileHandler(
            self.log_dir / LOG_FILE_NAME,
            when="midnight",
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
        console_handler = logging.StreamHandler()

        root = logging.getLogger()
        root.setLevel(root_level)
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in (file_handler, console_handler):
            handler.setFormatter(formatter)
            root.addHandler(handler)

        for category, level in self._category_levels.items():
            self._apply(category, level)
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


_logging_manager: Optional[LoggingManager] = None


def get_logging_manager(db_manager=None, log_dir: Optional[Path] = None) -> LoggingManager:
    """Process-wide LoggingManager, created on first use"""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager(log_dir=log_dir, db_manager=db_manager)
    return _logging_manager


def setup_logging(db_manager=None, log_dir: Optional[Path] = None) -> LoggingManager:
    manager = get_logging_manager(db_manager, log_dir)
    manager.setup_logging()
    return manager
