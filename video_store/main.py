"""
Main Application Coordinator for the Video Store service.

Wires configuration, logging, the video module and the API server together
and handles startup checks and graceful shutdown.
"""

import signal
import time
import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

from .core.config import Config
from .core.logging_config import setup_logging, get_error_tracker, get_performance_logger
from .video.integration import create_video_module
from .api.server import APIServer


class VideoStoreSystem:
    """Main application coordinator for the Video Store service"""

    def __init__(self, config_file: Optional[str] = None, log_level: Optional[str] = None):
        self.config = Config(config_file)

        self.logger_setup = setup_logging(log_level=log_level or self.config.system.log_level, log_file=self.config.system.log_file)
        self.logger = logging.getLogger(__name__)

        self.error_tracker = get_error_tracker("video_store")
        self.performance_logger = get_performance_logger("video_store")

        self.video_module = create_video_module(self.config)
        self.api_server = APIServer(self.config, self.video_module)

        self.running = False
        self.start_time: Optional[datetime] = None

        self._install_signal_handlers()

        self.logger.info("Video Store initialized")

    def _install_signal_handlers(self) -> None:
        def handle_signal(signum, frame):
            self.logger.info(f"Received signal {signum}, shutting down...")
            self.stop()

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

    def check_environment(self) -> bool:
        """Verify the upload directory is usable and report FFmpeg availability"""
        upload_path = Path(self.config.storage.upload_path)
        try:
            upload_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.error_tracker.log_error(e, "upload_directory")
            return False

        status = self.video_module.get_module_status()
        self.logger.info(f"Uploads: {upload_path.resolve()} | Thumbnails: {status['thumbnail_path']}")
        self.logger.info(f"Accepting {', '.join(status['allowed_extensions'])} up to {status['max_file_size_mb']} MB")

        if not status["ffmpeg_available"]:
            self.error_tracker.log_warning("FFmpeg not available, every thumbnail will be a placeholder", "ffmpeg_check")

        return True

    def start(self) -> bool:
        """Run startup checks and start the API server"""
        if self.running:
            self.logger.warning("Video Store is already running")
            return True

        self.logger.info("Starting Video Store...")
        self.performance_logger.start_timer("startup")
        self.start_time = datetime.now()

        if not self.check_environment():
            self.logger.error("Environment check failed")
            return False

        try:
            if not self.api_server.start():
                self.error_tracker.log_error(Exception("API server failed to start"), "api_startup")
                return False
        except Exception as e:
            self.error_tracker.log_error(e, "api_startup")
            return False

        self.running = True
        elapsed = self.performance_logger.end_timer("startup")
        self.logger.info(f"Video Store started in {elapsed:.2f}s on {self.config.system.api_host}:{self.config.system.api_port}")
        return True

    def stop(self) -> None:
        """Stop the API server"""
        if not self.running:
            return

        self.logger.info("Stopping Video Store...")
        self.running = False

        try:
            self.api_server.stop()
        except Exception as e:
            self.logger.error(f"Error stopping API server: {e}")

        if self.start_time:
            self.logger.info(f"Uptime: {(datetime.now() - self.start_time).total_seconds():.1f} seconds")
        self.logger.info("Video Store stopped")

    def run(self) -> None:
        """Start and block until stopped"""
        if not self.start():
            self.logger.error("Failed to start Video Store")
            return

        try:
            self.logger.info("Serving... Press Ctrl+C to stop")
            while self.running:
                time.sleep(1)
                if not self.api_server.is_running():
                    self.error_tracker.log_warning("API server exited unexpectedly", "main_loop")
                    break
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        except Exception as e:
            self.logger.error(f"Unexpected error in main loop: {e}")
        finally:
            self.stop()

    def get_system_status(self) -> dict:
        return {
            "running": self.running,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "api_server": self.api_server.get_server_info(),
            "video_module": self.video_module.get_module_status(),
            "errors": self.error_tracker.get_error_stats(),
        }

    def is_running(self) -> bool:
        return self.running


def main():
    """Command line entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Video Store - upload, thumbnail and stream videos")
    parser.add_argument("--config", type=str, default="config.json", help="Path to configuration file")
    parser.add_argument("--log-level", type=str, default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Override the configured log level")
    args = parser.parse_args()

    system = VideoStoreSystem(args.config, log_level=args.log_level)

    try:
        system.run()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
