"""
This app runs a batch conversion on one machine. It:
1. Finds source images under a directory
2. Feeds them to a pool of worker threads
3. Runs the conversion (using the imgconv-converter package)
4. Reports each file and the totals

Deployment:
    pip install image-convert
    image-convert -D <directory> [--trim] [--thumbnail 25]
"""

from .config import BatchConfig
from .pool import WorkerPool
from .runner import BatchReport, BatchRunner

__all__ = ["BatchConfig", "BatchReport", "BatchRunner", "WorkerPool"]
