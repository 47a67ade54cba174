import json
import os
import time
from typing import Any, Dict, Optional
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
from machine_seed.utils.logger import Logger, LogCategory

class ConfigHandler(FileSystemEventHandler):
    def __init__(self, filename: str, callback):
        self.filename = filename
        self.callback = callback

    def on_modified(self, event):
        if not event.is_directory and os.path.basename(event.src_path) == self.filename:
            # Give file system a moment to flush
            time.sleep(0.1)
            self.callback()

class ConfigManager:
    def __init__(self, config_path: Optional[str] = None, watch: bool = True,
                 overrides: Optional[Dict[str, Any]] = None):
        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self.observer: Optional[Observer] = None
        self.overrides = dict(overrides or {})

        # Initial load
        if config_path is not None:
            self.load_config()

        self._apply_overrides()

        # Setup watcher
        if config_path is not None and watch:
            directory = os.path.dirname(os.path.abspath(config_path))
            handler = ConfigHandler(os.path.basename(config_path), self.reload)
            self.observer = Observer()
            self.observer.schedule(handler, directory, recursive=False)
            self.observer.start()
            Logger.info(f"ConfigManager watching: {config_path}")

    def load_config(self):
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self.config = json.load(f)
            self._apply_overrides()
            Logger.log(LogCategory.SYSTEM, "Config loaded successfully")
        except (OSError, json.JSONDecodeError) as e:
            # Keep the last good config
            Logger.error(f"Failed to load config: {e}")

    def reload(self):
        """Watcher callback: reloads the file and re-applies the debug flags."""
        self.load_config()
        Logger.configure_debug(self.get("debug", {}))

    def _apply_overrides(self):
        for key_path, value in self.overrides.items():
            self.set(key_path, value)

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get config value using dot notation (e.g. "bots.harvest_duration")
        """
        keys = key_path.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key_path: str, value: Any):
        """In-memory override; not written back to disk."""
        keys = key_path.split('.')
        node = self.config
        for k in keys[:-1]:
            if not isinstance(node.get(k), dict):
                node[k] = {}
            node = node[k]
        node[keys[-1]] = value

    def stop(self):
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None
