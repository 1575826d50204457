"""
Health check utilities
"""

import psutil
import time
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict


class SystemHealth(BaseModel):
    """System health status model"""

    status: str
    timestamp: datetime
    uptime: float
    memory_usage: Dict[str, Any]
    cpu_usage: float
    credentials: int
    categories: List[str]

    model_config = ConfigDict()


class HealthChecker:
    """Health checking with process metrics and search configuration"""

    def __init__(self):
        self.start_time = time.time()

    def get_memory_info(self) -> Dict[str, Any]:
        """Get memory usage information"""
        memory = psutil.virtual_memory()
        return {
            "total": memory.total,
            "available": memory.available,
            "used": memory.used,
            "percentage": memory.percent,
        }

    def get_cpu_info(self) -> float:
        """CPU usage since the previous call (non-blocking)"""
        return psutil.cpu_percent(interval=None)

    def get_system_health(self, adapters: Optional[Any] = None) -> SystemHealth:
        """Get health status; unhealthy when no search adapters are wired"""
        uptime = time.time() - self.start_time
        memory = self.get_memory_info()
        cpu = self.get_cpu_info()

        credentials = 0
        categories: List[str] = []
        if adapters is not None:
            credentials = adapters.credential_pool.size
            categories = adapters.category_router.available_categories()

        # Determine overall status
        status = "healthy"
        if credentials == 0 or memory["percentage"] > 90 or cpu > 95:
            status = "unhealthy"
        elif not categories or memory["percentage"] > 80 or cpu > 80:
            status = "warning"

        return SystemHealth(
            status=status,
            timestamp=datetime.now(),
            uptime=uptime,
            memory_usage=memory,
            cpu_usage=cpu,
            credentials=credentials,
            categories=categories,
        )


# Global health checker instance
health_checker = HealthChecker()
