"""
Entry point for running the Video Store service as a module.
"""

from .main import main

if __name__ == "__main__":
    main()
