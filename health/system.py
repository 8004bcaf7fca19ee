# ============================================================================
# SYSTEM INFO
# ============================================================================
# STATUS: Infrastructure - Process information for health reports
# PURPOSE: Optional "system" block attached to every report
# CREATED: 12 OCT 2026
# ============================================================================
"""
System Info

Snapshot of the running process, included in reports when
HealthSettings.include_system_info is enabled.
"""

import asyncio
import gc
import os
import platform
import threading
from typing import Any, Dict

import psutil


def collect_system_info() -> Dict[str, Any]:
    """Collect process and host info. Never blocks on CPU sampling."""
    process = psutil.Process(os.getpid())
    memory = process.memory_info()

    info: Dict[str, Any] = {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "pid": process.pid,
        "thread_count": threading.active_count(),
        "gc_objects_count": len(gc.get_objects()),
        "rss_bytes": memory.rss,
        "vms_bytes": memory.vms,
        # interval=None: usage since the previous call, 0.0 on the first
        "cpu_percent": process.cpu_percent(interval=None),
        "system_memory_percent": psutil.virtual_memory().percent,
    }

    try:
        info["asyncio_tasks_count"] = len(asyncio.all_tasks())
    except RuntimeError:
        # No running loop
        pass

    return info


__all__ = [
    "collect_system_info",
]
