import datetime
import os
from enum import Enum
from typing import Any, Dict, Optional

class LogCategory(Enum):
    SYSTEM = "SYSTEM"
    ZONES = "ZONES"
    JOBS = "JOBS"
    PATHFINDING = "PATHFINDING"
    AI = "AI"
    GAMEPLAY = "GAMEPLAY"
    ERROR = "ERROR"

# Category -> (environment variable, config key) for verbose tracing
DEBUG_FLAGS = {
    LogCategory.PATHFINDING: ("DEBUG_PATHFINDING", "log_pathfinding"),
    LogCategory.ZONES: ("DEBUG_PATHFINDING", "log_pathfinding"),
    LogCategory.JOBS: ("DEBUG_JOBS", "log_jobs"),
    LogCategory.AI: ("DEBUG_BOT_BEHAVIOR", "log_bot_behavior"),
}

def _parse_flag(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in ("1", "true", "yes", "on")

class Logger:
    _instance = None
    _time_manager = None
    _trace_enabled: Dict[LogCategory, bool] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
        return cls._instance

    @classmethod
    def set_time_manager(cls, time_manager: Any):
        """Injects the TimeManager instance to access current tick."""
        cls._time_manager = time_manager

    @classmethod
    def configure_debug(cls, debug_conf: Optional[Dict[str, Any]] = None):
        """
        Enables verbose tracing per category.
        Environment variables (DEBUG_PATHFINDING, DEBUG_JOBS, DEBUG_BOT_BEHAVIOR)
        win over the "debug" section of the config.
        """
        debug_conf = debug_conf or {}
        cls._trace_enabled = {}
        for category, (env_name, conf_key) in DEBUG_FLAGS.items():
            env_value = os.environ.get(env_name)
            if env_value is not None:
                cls._trace_enabled[category] = _parse_flag(env_value)
            else:
                cls._trace_enabled[category] = bool(debug_conf.get(conf_key, False))

    @classmethod
    def is_tracing(cls, category: LogCategory) -> bool:
        return cls._trace_enabled.get(category, False)

    @staticmethod
    def log(category: LogCategory, message: str, tick: int = -1):
        """
        Logs a message with format: [Time][Tick][Category] Message
        If tick is -1 (default), tries to fetch it from TimeManager.
        """
        current_tick = tick
        if current_tick == -1:
            if Logger._time_manager:
                current_tick = Logger._time_manager.total_ticks
            else:
                current_tick = 0

        timestamp = datetime.datetime.now().strftime("%H:%M:%S")
        formatted_msg = f"[{timestamp}][Tick:{current_tick}][{category.value}] {message}"
        print(formatted_msg)

    @staticmethod
    def trace(category: LogCategory, message: str, tick: int = -1):
        # Only printed when the category's debug flag is on
        if Logger.is_tracing(category):
            Logger.log(category, message, tick)

    @staticmethod
    def info(message: str, tick: int = -1):
        Logger.log(LogCategory.SYSTEM, message, tick)

    @staticmethod
    def gameplay(message: str, tick: int = -1):
        Logger.log(LogCategory.GAMEPLAY, message, tick)

    @staticmethod
    def warn(message: str, tick: int = -1):
        Logger.log(LogCategory.SYSTEM, f"WARNING: {message}", tick)

    @staticmethod
    def error(message: str, tick: int = -1):
        Logger.log(LogCategory.ERROR, message, tick)
