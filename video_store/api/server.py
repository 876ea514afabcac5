"""
FastAPI Server for the Video Store service.

This module provides the REST API for uploading, listing and streaming videos
and serves generated thumbnails as static files.
"""

import asyncio
import logging
import threading
from datetime import datetime
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ..core.config import Config
from ..video.presentation.controllers import THUMBNAIL_URL_PREFIX
from ..video.integration import VideoModule


class APIServer:
    """FastAPI server for the Video Store service"""

    def __init__(self, config: Config, video_module: VideoModule):
        self.config = config
        self.video_module = video_module
        self.logger = logging.getLogger(__name__)

        # FastAPI app
        self.app = FastAPI(title="Video Store API", description="API for uploading, cataloguing and streaming videos", version="1.0.0")

        # Server state
        self.server_start_time = datetime.now()
        self.running = False
        self._server: Optional[uvicorn.Server] = None
        self._server_thread: Optional[threading.Thread] = None

        # Setup CORS
        self.app.add_middleware(CORSMiddleware, allow_origins=list(self.config.system.cors_origins), allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

        # Setup routes
        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes"""

        @self.app.get("/health")
        async def health_check():
            return {"status": "healthy", "timestamp": datetime.now().isoformat()}

        @self.app.get("/system/status")
        async def get_system_status():
            """Get video module and server status"""
            return {"server": self.get_server_info(), "video_module": self.video_module.get_module_status()}

        for router in self.video_module.get_api_routes():
            self.app.include_router(router)

        self.app.mount(THUMBNAIL_URL_PREFIX, StaticFiles(directory=str(self.video_module.thumbnail_directory())), name="thumbnails")

    def start(self) -> bool:
        """Start the API server"""
        if self.running:
            self.logger.warning("API server is already running")
            return True

        if not self.config.system.enable_api:
            self.logger.info("API server disabled in configuration")
            return False

        try:
            self.logger.info(f"Starting API server on {self.config.system.api_host}:{self.config.system.api_port}")
            self.running = True

            # Start server in separate thread
            self._server_thread = threading.Thread(target=self._run_server, daemon=True)
            self._server_thread.start()

            return True

        except Exception as e:
            self.logger.error(f"Error starting API server: {e}")
            self.running = False
            return False

    def stop(self) -> None:
        """Stop the API server"""
        if not self.running:
            return

        self.logger.info("Stopping API server...")
        self.running = False

        if self._server is not None:
            self._server.should_exit = True
        if self._server_thread is not None:
            self._server_thread.join(timeout=10)

        self.logger.info("API server stopped")

    def _run_server(self) -> None:
        """Run the uvicorn server"""
        try:
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)

            server_config = uvicorn.Config(self.app, host=self.config.system.api_host, port=self.config.system.api_port, log_level="info")
            self._server = uvicorn.Server(server_config)
            loop.run_until_complete(self._server.serve())
            loop.close()
        except Exception as e:
            self.logger.error(f"Error running API server: {e}")
        finally:
            self.running = False
            self._server = None

    def is_running(self) -> bool:
        """Check if API server is running"""
        return self.running

    def get_server_info(self) -> Dict[str, Any]:
        """Get server information"""
        return {"running": self.running, "host": self.config.system.api_host, "port": self.config.system.api_port, "start_time": self.server_start_time.isoformat(), "uptime_seconds": (datetime.now() - self.server_start_time).total_seconds()}
