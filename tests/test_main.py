import logging

from main import create_context
from mediavault.core import CacheConfig
from mediavault.utils.logging_config import MODULE_TO_CATEGORY, LoggerCategory, LoggingManager


def test_launcher_applies_stored_log_levels(tmp_path, db):
    db.set_config("log_level_network", "DEBUG")
    manager = LoggingManager(log_dir=tmp_path / "logs")
    previous = {name: logging.getLogger(name).level for name in MODULE_TO_CATEGORY}

    core = create_context(manager, CacheConfig(tmp_path / "data"), db=db)
    try:
        assert manager.db_manager is core.db
        assert manager.get_category_level(LoggerCategory.NETWORK) == logging.DEBUG
        assert logging.getLogger("mediavault.core.http_client").level == logging.DEBUG

        manager.set_category_level(LoggerCategory.UI, logging.WARNING)
        assert db.get_config("log_level_ui") == "WARNING"
    finally:
        for name, level in previous.items():
            logging.getLogger(name).setLevel(level)
        core.close()


def test_log_files_live_under_the_data_root(tmp_path):
    cache = CacheConfig(tmp_path / "data")

    manager = LoggingManager(log_dir=cache.logs)

    assert manager.log_dir == tmp_path / "data" / "logs"
    assert manager.log_dir.is_dir()
