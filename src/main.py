import logging
import os
import signal
from typing import Optional

from app_config import (
    CONFIG_ENV_VAR,
    AppConfig,
    AppConfigurationError,
    default_app_config,
    load_app_config,
    resolve_config_path,
)
from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from server import ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("phase_timer")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logging.getLogger("phase_timer").info(
            "%s received, stopping...",
            signal.Signals(signum).name,
        )
        engine.request_shutdown()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load config.toml; defaults apply only when no path was named at all."""
    named = config_path or os.getenv(CONFIG_ENV_VAR)
    if not named and not resolve_config_path().exists():
        return default_app_config()
    return load_app_config(config_path)


def start_ui_server(app_config: AppConfig, logger: logging.Logger) -> Optional[UIServer]:
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    if not ui_server_config.enabled:
        return None

    ui_server = UIServer(
        config=ui_server_config,
        logger=logging.getLogger("ui_server"),
    )
    try:
        logger.info("Starting UI server...")
        ui_server.start(timeout_seconds=5.0)
    except Exception as error:
        logger.error("UI server startup failed: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    logger.info("UI server ready at %s", ui_server_config.base_url)
    return ui_server


def main() -> int:
    """Run the phase timer until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_config()
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(app_config.logging.level)
    if app_config.source_file:
        logger.info("Loaded runtime config: %s", app_config.source_file)
    else:
        logger.info("No config file found, using defaults.")

    ui_server = start_ui_server(app_config, logger)
    if ui_server is None and not app_config.timer.auto_start:
        logger.warning(
            "UI server is unavailable and timer.auto_start is false; "
            "the timer will stay idle."
        )

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            app_config=app_config,
            ui_server=ui_server,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        )
    )
    return engine.run()


if __name__ == "__main__":
    raise SystemExit(main())
