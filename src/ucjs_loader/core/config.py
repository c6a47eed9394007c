"""Loader configuration data structures and loading.

Configuration lives in `ucjs.toml`. It is loaded once at the CLI entry point
and stored in LoaderContext; every field is read-only after construction.

Example config:
  chrome_dir = "."
  script_folders = ["UCJS_files", "UCJS_tmp/"]
  jscript_exts = [".uc.js"]
  overlay_exts = [".uc.xul", ".xul"]
  block_urls = ["chrome://browser/content/preferences/*"]

  [system]
  min_host_version = "4.0"
  validate_script_at_run = false
"""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit

from ucjs_loader.core.patterns import UrlBlockList
from ucjs_loader.core.scanner import ScanRoot
from ucjs_loader.core.units import ExtensionClassifier, FreshnessPolicy

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "ucjs.toml"

DEFAULT_PRIMARY_URL = "chrome://browser/content/browser.xul"
DEFAULT_SCRIPT_FOLDERS = ("UCJS_files", "UCJS_tmp/")
DEFAULT_JSCRIPT_EXTS = (".uc.js",)
DEFAULT_OVERLAY_EXTS = (".uc.xul", ".xul")
DEFAULT_BLOCK_URLS = (
    "chrome://global/content/commonDialog.xul",
    "chrome://browser/content/preferences/*",
    "chrome://inspector/*",
    "chrome://adblockplus/*",
    "chrome://noscript/*",
    "chrome://securelogin/*",
)
DEFAULT_HOST_NAME = "Firefox"
DEFAULT_MIN_HOST_VERSION = "4.0"
DEFAULT_OVERLAY_CONTAINER_ID = "userChrome_js_overlay"


@dataclass(frozen=True)
class LoaderConfig:
    """Immutable loader configuration."""

    chrome_dir: Path
    script_folders: tuple[str, ...]
    jscript_exts: tuple[str, ...]
    overlay_exts: tuple[str, ...]
    block_urls: tuple[str, ...]
    primary_url: str
    host_name: str
    min_host_version: str
    overlay_container_id: str
    validate_script_at_run: bool

    @staticmethod
    def defaults(chrome_dir: Path) -> "LoaderConfig":
        return LoaderConfig(
            chrome_dir=chrome_dir,
            script_folders=DEFAULT_SCRIPT_FOLDERS,
            jscript_exts=DEFAULT_JSCRIPT_EXTS,
            overlay_exts=DEFAULT_OVERLAY_EXTS,
            block_urls=DEFAULT_BLOCK_URLS,
            primary_url=DEFAULT_PRIMARY_URL,
            host_name=DEFAULT_HOST_NAME,
            min_host_version=DEFAULT_MIN_HOST_VERSION,
            overlay_container_id=DEFAULT_OVERLAY_CONTAINER_ID,
            validate_script_at_run=False,
        )

    @property
    def freshness(self) -> FreshnessPolicy:
        return FreshnessPolicy.from_flag(self.validate_script_at_run)

    def classifier(self) -> ExtensionClassifier:
        return ExtensionClassifier(
            executable_exts=frozenset(self.jscript_exts),
            overlay_exts=frozenset(self.overlay_exts),
        )

    def block_list(self) -> UrlBlockList:
        return UrlBlockList(patterns=self.block_urls)

    def scan_roots(self) -> list[ScanRoot]:
        """Resolve script folders against chrome_dir, skipping invalid entries."""
        roots: list[ScanRoot] = []
        for folder in self.script_folders:
            root = ScanRoot.parse(folder, self.chrome_dir)
            if root is None:
                logger.warning("Ignoring script folder %r: expected 'name' or 'name/'", folder)
                continue
            roots.append(root)
        return roots


def _string_list(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list of strings")
    return tuple(str(item) for item in value)


def _flag(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false")
    return value


def parse_config(data: dict[str, Any], config_dir: Path) -> LoaderConfig:
    """Build a LoaderConfig from parsed TOML data.

    Args:
        data: Parsed TOML document
        config_dir: Directory relative chrome_dir values are resolved against

    Raises:
        ValueError: If a value has the wrong type or the extension sets overlap
    """
    system = data.get("system", {})
    if not isinstance(system, dict):
        raise ValueError("'system' must be a table")

    chrome_dir = Path(str(data.get("chrome_dir", "."))).expanduser()
    if not chrome_dir.is_absolute():
        chrome_dir = config_dir / chrome_dir

    config = LoaderConfig(
        chrome_dir=chrome_dir.resolve(),
        script_folders=_string_list(data, "script_folders", DEFAULT_SCRIPT_FOLDERS),
        jscript_exts=_string_list(data, "jscript_exts", DEFAULT_JSCRIPT_EXTS),
        overlay_exts=_string_list(data, "overlay_exts", DEFAULT_OVERLAY_EXTS),
        block_urls=_string_list(data, "block_urls", DEFAULT_BLOCK_URLS),
        primary_url=str(data.get("primary_url", DEFAULT_PRIMARY_URL)),
        host_name=str(system.get("host_name", DEFAULT_HOST_NAME)),
        min_host_version=str(system.get("min_host_version", DEFAULT_MIN_HOST_VERSION)),
        overlay_container_id=str(
            system.get("overlay_container_id", DEFAULT_OVERLAY_CONTAINER_ID)
        ),
        validate_script_at_run=_flag(system, "validate_script_at_run", False),
    )
    # Raises ValueError on overlapping extension sets.
    config.classifier()
    return config


def load_config(config_path: Path) -> LoaderConfig:
    """Load ucjs.toml if present; otherwise return defaults rooted at its directory."""
    config_dir = config_path.parent.resolve()
    if not config_path.exists():
        return LoaderConfig.defaults(config_dir)

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Malformed config {config_path}: {e}") from e
    return parse_config(data, config_dir)


def _commented(value: Any, comment: str) -> Any:
    item = tomlkit.item(value)
    item.comment(comment)
    return item


def save_config(config_path: Path, config: LoaderConfig) -> None:
    """Save a LoaderConfig to ucjs.toml, with comments describing each key.

    chrome_dir is written relative to the config file when it lies beneath it.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_dir = config_path.parent.resolve()

    if config.chrome_dir.is_relative_to(config_dir):
        chrome_dir = config.chrome_dir.relative_to(config_dir).as_posix()
    else:
        chrome_dir = str(config.chrome_dir)

    doc = tomlkit.document()
    doc.add(tomlkit.comment("ucjs loader configuration"))
    doc.add(tomlkit.nl())
    doc["chrome_dir"] = _commented(chrome_dir, "base directory of the script folders")
    doc["script_folders"] = _commented(
        list(config.script_folders), "a trailing '/' scans sub-folders too"
    )
    doc["jscript_exts"] = list(config.jscript_exts)
    doc["overlay_exts"] = list(config.overlay_exts)
    doc["primary_url"] = _commented(config.primary_url, "what '@include main' refers to")

    block_urls = tomlkit.array()
    block_urls.multiline(True)
    block_urls.extend(config.block_urls)
    doc["block_urls"] = block_urls

    system = tomlkit.table()
    system["host_name"] = config.host_name
    system["min_host_version"] = config.min_host_version
    system["overlay_container_id"] = config.overlay_container_id
    system["validate_script_at_run"] = _commented(
        config.validate_script_at_run, "re-stat scripts on every run"
    )
    doc["system"] = system

    config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
