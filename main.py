#!/usr/bin/env python3
"""
Main entry point for the Video Store service.

This script starts the HTTP API for uploading, cataloguing and streaming
videos.
"""

import sys
import os

# Add the current directory to Python path to import our modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from video_store.main import main

if __name__ == "__main__":
    main()
