# config.py
from __future__ import annotations
import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

logger = logging.getLogger(__name__)

# Values used when neither the embedded module nor config.yaml provide a key.
DEFAULTS: Dict[str, Any] = {
    "title": "RUI",
    "host": "127.0.0.1",
    "http_port": 8000,
    "socket_port": 8001,
    "answer_timeout": 10.0,
    "debug": False,
    "log_level": "INFO",
    "window": {"width": 800, "height": 600},
}


class Config:
    """
    Singleton config loader that supports:
      - an embedded config module (default name: _embedded_config, attribute: CONFIG)
      - a fallback YAML file (config.yaml)

    Keys missing from both sources fall back to :data:`DEFAULTS`.

    Usage:
        cfg = Config()
        port = cfg.get("socket_port")
        width = cfg.get_nested("window.width")
        cfg.reload()

    :param config_file: path to YAML config (relative or absolute).
    :param prefer_embedded: when True (default) try the embedded module first.
    :param embedded_module_name: module imported when looking for embedded config.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        config_file: str = "config.yaml",
        prefer_embedded: bool = True,
        embedded_module_name: str = "_embedded_config",
    ):
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self.config_file_arg = config_file
        self.prefer_embedded = bool(prefer_embedded)
        self.embedded_module_name = embedded_module_name

        self._config: Dict[str, Any] = {}
        self._source: Optional[str] = None  # 'embedded' or 'file' or None
        self._resolved_config_path: Optional[Path] = self._resolve_config_path(config_file)

        self.reload()

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance so the next ``Config()`` reads its sources again."""
        cls._instance = None

    # ----- public API -----
    def reload(self, prefer_embedded: Optional[bool] = None) -> None:
        """
        Reload the configuration. If prefer_embedded is provided, it overrides the
        instance preference just for this reload.
        """
        prefer = self.prefer_embedded if prefer_embedded is None else bool(prefer_embedded)

        if prefer:
            loaded = self._try_load_embedded() or self._try_load_file()
        else:
            loaded = self._try_load_file() or self._try_load_embedded()

        if not loaded:
            self._source = None
            self._config = {}
        logger.debug("Configuration loaded from %s", self._source or "defaults")

    def as_dict(self) -> Dict[str, Any]:
        """Return the effective configuration (defaults merged with loaded values)."""
        merged = dict(DEFAULTS)
        for key, value in self._config.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup in the top-level config dict."""
        if key in self._config:
            return self._config[key]
        if default is None:
            return DEFAULTS.get(key)
        return default

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "window.width").
        Returns default if any step is missing.
        """
        if not path:
            return default
        for source in (self._config, DEFAULTS):
            cur: Any = source
            for part in path.split(sep):
                if not isinstance(cur, dict) or part not in cur:
                    break
                cur = cur[part]
            else:
                return cur
        return default

    def set(self, key: str, value: Any) -> None:
        """Override one top-level key at runtime (command line options use this)."""
        self._config[key] = value

    @property
    def is_embedded(self) -> bool:
        """True if the currently loaded config came from the embedded module."""
        return self._source == "embedded"

    @property
    def source(self) -> Optional[str]:
        """Return 'embedded'|'file'|None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        """If a filesystem config was resolved, return its Path, otherwise None."""
        return self._resolved_config_path

    # ----- internal helpers -----
    def _resolve_config_path(self, config_file: str) -> Optional[Path]:
        """
        Try to resolve the YAML config path:
          1. config_file is absolute and exists
          2. config_file relative to the current working directory
          3. config_file next to this package
        """
        candidate = Path(config_file)
        if candidate.is_absolute():
            return candidate.resolve() if candidate.exists() else None

        for base in (Path.cwd(), Path(__file__).resolve().parent.parent):
            path = (base / config_file).resolve()
            if path.exists():
                return path
        return None

    def _try_load_embedded(self) -> bool:
        """Try to import the embedded module and fetch CONFIG. Returns True on success."""
        try:
            module = importlib.import_module(self.embedded_module_name)
        except ModuleNotFoundError:
            return False

        cfg = getattr(module, "CONFIG", None)
        if not isinstance(cfg, dict):
            logger.warning("%s.CONFIG is not a dict, ignored", self.embedded_module_name)
            return False
        self._config = dict(cfg)
        self._source = "embedded"
        return True

    def _try_load_file(self) -> bool:
        """Try to load the YAML file from the resolved path. Returns True on success."""
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Unable to read %s: %s", self._resolved_config_path, e)
            return False

        if data is None:
            data = {}
        if not isinstance(data, dict):
            logger.error("%s must contain a mapping", self._resolved_config_path)
            return False
        self._config = data
        self._source = "file"
        return True


def get_config(*args, **kwargs) -> Config:
    """
    Convenience factory that returns the singleton Config instance.
    Arguments forwarded to Config() only on the first call.
    """
    return Config(*args, **kwargs)


def setup_logging(level: Any = None) -> None:
    """Configure the root logger for command line runs."""
    if level is None:
        level = get_config().get("log_level")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
