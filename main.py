"""
Main entry point for MediaVault.

Opens one client route headlessly, loads its data through the page
controller and logs the resulting view state:

    python main.py /resources
    python main.py /admin
"""
import sys

import logging
import asyncio
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtCore import QtMsgType, qInstallMessageHandler
import qasync

from mediavault import __version__


def qt_message_handler(mode, context, message):
    """Route Qt messages into Python logging."""
    if mode == QtMsgType.QtDebugMsg:
        logging.debug(f"Qt: {message}")
    elif mode == QtMsgType.QtInfoMsg:
        logging.info(f"Qt: {message}")
    elif mode == QtMsgType.QtWarningMsg:
        logging.warning(f"Qt: {message}")
    elif mode == QtMsgType.QtCriticalMsg:
        logging.error(f"Qt: {message}")
    elif mode == QtMsgType.QtFatalMsg:
        logging.critical(f"Qt: {message}")


def setup_logging(log_dir=None):
    """Configure application logging"""
    from mediavault.utils.logging_config import setup_logging as setup_categorized_logging

    logging_manager = setup_categorized_logging(log_dir=log_dir)
    qInstallMessageHandler(qt_message_handler)

    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("MediaVault Starting")
    logger.info("="*50)

    return logging_manager


def describe(controller) -> str:
    """One-line summary of a controller's state for the log."""
    parts = [f"status={controller.status.value}"]
    if controller.error:
        parts.append(f"error={controller.error!r}")
    for attr in ("items", "resource", "stats"):
        value = getattr(controller, attr, None)
        if isinstance(value, list):
            parts.append(f"{attr}={len(value)}")
        elif value is not None:
            parts.append(f"{attr}={value!r}")
    return ", ".join(parts)


def create_context(logging_manager, cache_config, db=None):
    """Build the app context and hand its settings database to logging."""
    from mediavault.core import AppContext

    core = AppContext(db=db, cache_config=cache_config)
    logging_manager.attach_database(core.db)
    return core


async def async_main(path: str, done: asyncio.Future, logging_manager, cache_config):
    """Open ``path`` and resolve ``done`` once its first load settles."""
    logger = logging.getLogger(__name__)

    from mediavault.ui import Router

    core = create_context(logging_manager, cache_config)
    app = QGuiApplication.instance()
    app._core_context = core

    router = Router(
        core.auth,
        core.resources,
        compressor=core.image_compressor(),
        background=True,
    )
    match, controller = router.open(path)
    if controller is None:
        logger.error(f"Unknown route: {path}")
        done.set_result(2)
        return

    logger.info(f"Opened {match.name} ({match.path})")
    app._controller = controller

    def on_changed():
        logger.info(f"{match.name}: {describe(controller)}")
        if not controller.loading and not done.done():
            done.set_result(1 if controller.error else 0)

    controller.changed.connect(on_changed)

    load = getattr(controller, "load", None)
    if load is None:
        # Form pages have nothing to fetch
        logger.info(f"{match.name} is a form page, nothing to load")
        done.set_result(0)
        return
    load()
    if match.name == "admin":
        controller.load_stats()


def main():
    """Main application entry point"""
    from mediavault.core import CacheConfig

    cache_config = CacheConfig()
    logging_manager = setup_logging(cache_config.logs)
    logger = logging.getLogger(__name__)
    path = sys.argv[1] if len(sys.argv) > 1 else "/resources"
    exit_code = 0

    try:
        app = QGuiApplication(sys.argv)
        app.setApplicationName("MediaVault")
        app.setApplicationVersion(__version__)
        app.setOrganizationName("MediaVault")

        loop = qasync.QEventLoop(app)
        asyncio.set_event_loop(loop)

        logger.info("Starting application with asyncio event loop integration")

        with loop:
            done = loop.create_future()
            loop.run_until_complete(async_main(path, done, logging_manager, cache_config))
            exit_code = loop.run_until_complete(done)

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        exit_code = 1
    finally:
        logger.info("Shutting down...")
        if 'app' in locals() and hasattr(app, '_core_context'):
            app._core_context.close()
        logger.info("Application closed")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
