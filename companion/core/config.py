import yaml
from pathlib import Path
import os
from typing import Any, Dict, Optional, List, Callable
import logging
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileModifiedEvent
import time
import re

DEFAULT_CONFIG: Dict[str, Any] = {
    "environment": "local",
    "server": {
        "host": "127.0.0.1",
        "port": 3000,
    },
    "database": {
        "path": "~/.ramadan_companion/ramadan.db",
    },
    "logging": {
        "level": "INFO",
        "file": "~/.ramadan_companion/companion.log",
    },
    "location": {
        "city": "Dhaka",
        "country": "Bangladesh",
        "method": 2,
    },
    "prayer": {
        "base_url": "https://api.aladhan.com/v1",
        "timeout": 10,
        "countdown_interval": 1,
        "sehri_check_interval": 30,
        "sehri_alert_minutes": 15,
        "refresh_time": "00:05",
    },
    "coach": {
        "api_key": "${GEMINI_API_KEY}",
        "model": "gemini-2.0-flash",
    },
    "quran": {
        "base_url": "https://api.alquran.cloud/v1",
        "timeout": 10,
        "arabic_edition": "quran-uthmani",
        "translation_edition": "en.sahih",
    },
    "zakat": {
        "gold_price_per_gram": 65,
        "nisab_gold_grams": 87.48,
        "rate": 0.025,
    },
}


class ConfigChangeHandler(FileSystemEventHandler):
    def __init__(self, config):
        self.config = config
        self.last_modified = 0
        self.cooldown = 1.0  # seconds

    def on_modified(self, event):
        if not isinstance(event, FileModifiedEvent):
            return

        current_time = time.time()
        if current_time - self.last_modified < self.cooldown:
            return

        if event.src_path == str(self.config.config_file):
            try:
                self.last_modified = current_time
                self.config.reload()
            except Exception as e:
                logging.error(f"Error handling config change: {e}")


class Config:
    def __init__(self, config_path: Optional[str] = None, watch: bool = True):
        logging.debug("Initializing Config class")

        self.change_callbacks: List[Callable] = []
        self._loading = False  # Lock to prevent recursive reloading
        self.observer = None

        if config_path:
            self.config_file = Path(config_path).expanduser().resolve()
            self.config_dir = self.config_file.parent
        else:
            self.config_dir = Path.cwd()
            self.config_file = self.config_dir / "config.yaml"

        logging.debug(f"Using config file: {self.config_file}")

        self._load_env_file()

        self._ensure_config_exists()
        self._load_config()

        if watch:
            self.observer = Observer()
            handler = ConfigChangeHandler(self)
            logging.info(f"Path monitored for reloading: {self.config_dir}")
            self.observer.schedule(handler, str(self.config_dir), recursive=False)
            self.observer.start()

    def register_change_callback(self, callback: Callable) -> None:
        """Register a callback to be called with the new data when config changes"""
        self.change_callbacks.append(callback)

    def reload(self) -> None:
        """Reload config and notify listeners"""
        if self._loading:
            return

        self._loading = True
        try:
            logging.info("Config file change detected - reloading configuration")

            # Wait briefly for file to be fully written
            time.sleep(0.1)

            old_config = self.data.copy() if hasattr(self, 'data') else {}
            self._load_config()

            self._log_config_changes(old_config, self.data)

            for callback in self.change_callbacks:
                try:
                    callback(self.data)
                except Exception as e:
                    logging.error(f"Error in config change callback: {e}")

        except Exception as e:
            logging.error(f"Error reloading config: {e}")
            logging.exception(e)
        finally:
            self._loading = False

    def _log_config_changes(self, old_config: Dict, new_config: Dict) -> None:
        """Log the differences between old and new configs"""
        def compare_dict(path: str, dict1: Dict, dict2: Dict) -> None:
            for key in set(dict1.keys()) | set(dict2.keys()):
                current_path = f"{path}.{key}" if path else key

                if key in dict1 and key in dict2:
                    if isinstance(dict1[key], dict) and isinstance(dict2[key], dict):
                        compare_dict(current_path, dict1[key], dict2[key])
                    elif dict1[key] != dict2[key]:
                        logging.info(f"Config changed: {current_path}: {dict1[key]} -> {dict2[key]}")
                elif key in dict1:
                    logging.info(f"Config removed: {current_path}: {dict1[key]}")
                else:
                    logging.info(f"Config added: {current_path}: {dict2[key]}")

        logging.info("=== Configuration Changes Detected ===")
        compare_dict("", old_config, new_config)
        logging.info("=== End of Configuration Changes ===")

    def cleanup(self) -> None:
        """Stop the file observer"""
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None

    def _ensure_config_exists(self) -> None:
        """Create default config if it doesn't exist"""
        if not self.config_dir.exists():
            logging.info(f"Creating config directory: {self.config_dir}")
            self.config_dir.mkdir(parents=True)

        if not self.config_file.exists():
            logging.info(f"Creating default config file: {self.config_file}")
            self.config_file.write_text(yaml.dump(DEFAULT_CONFIG, sort_keys=False))

    def _load_env_file(self) -> None:
        """Load environment variables from .env file"""
        env_files = [
            self.config_dir / ".env",
            self.config_dir.parent / ".env",
            Path.cwd() / ".env"
        ]

        env_file = next((path for path in env_files if path.exists()), None)
        if not env_file:
            logging.debug("No .env file found, skipping environment variable loading")
            return

        logging.info(f"Loading environment variables from: {env_file}")
        try:
            with open(env_file, 'r') as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith('#'):
                        continue

                    # KEY=VALUE
                    match = re.match(r'^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$', line)
                    if match:
                        key, value = match.groups()
                        value = value.strip('"').strip("'")
                        # Real environment wins over .env
                        if key not in os.environ:
                            os.environ[key] = value
                            logging.debug(f"Loaded env var: {key}")
        except Exception as e:
            logging.warning(f"Error loading .env file: {e}")

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ${VAR_NAME} / $VAR_NAME string values from the environment"""
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str):
            if data.startswith('${') and data.endswith('}'):
                return os.environ.get(data[2:-1], data)
            elif data.startswith('$') and len(data) > 1:
                return os.environ.get(data[1:], data)
            return data
        return data

    def _load_config(self) -> None:
        """Load configuration from file"""
        try:
            logging.debug(f"Loading config from: {self.config_file}")
            with open(self.config_file) as f:
                new_data = yaml.safe_load(f)

            if not isinstance(new_data, dict):
                raise ValueError("Invalid config format: root must be a dictionary")

            self.data = self._substitute_env_vars(new_data)
            logging.debug(f"Loaded config sections: {list(self.data.keys())}")

            if "logging" in self.data and "file" in self.data["logging"]:
                self.data["logging"]["file"] = os.path.expanduser(self.data["logging"]["file"])

        except Exception as e:
            logging.error(f"Error loading config: {e}")
            if hasattr(self, 'data'):
                logging.info("Keeping previous configuration")
            else:
                logging.info("Using default configuration")
                self.data = self._substitute_env_vars(DEFAULT_CONFIG)

    def section(self, name: str) -> Dict[str, Any]:
        """Return a config section merged over its defaults."""
        merged = self._substitute_env_vars(dict(DEFAULT_CONFIG.get(name) or {}))
        merged.update(self.data.get(name) or {})
        return merged
