__all__ = ["main", "Config", "TimeEntry", "TimeOff", "Task", "AllocationRequest", "AllocationResult"]
from .models import Config, TimeEntry, TimeOff, Task, AllocationRequest, AllocationResult
from .cli import main
__version__ = "0.1.0"
