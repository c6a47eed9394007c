"""Application context with dependency injection."""

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from ucjs_loader.core.config import CONFIG_FILE_NAME, LoaderConfig, load_config
from ucjs_loader.core.loader import Loader
from ucjs_loader.core.registry import RegistryPool
from ucjs_loader.core.scanner import ScanResult, scan_roots
from ucjs_loader.core.session import Session
from ucjs_loader.integrations.host.abc import Host
from ucjs_loader.integrations.host.console import ConsoleHost
from ucjs_loader.integrations.host.types import Document
from ucjs_loader.integrations.scheduler.queue import QueueScheduler


def build_scanner(config: LoaderConfig) -> Callable[[], ScanResult]:
    """Bind the configured roots and extensions into a zero-argument scan."""
    return partial(scan_roots, config.scan_roots(), config.classifier(), config.chrome_dir)


@dataclass(frozen=True)
class LoaderContext:
    """Immutable context holding all dependencies for loader operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime. The pool is the only
    state shared between sessions.
    """

    host: Host
    scheduler: QueueScheduler
    config: LoaderConfig
    pool: RegistryPool
    config_path: Path

    def open_session(self, window: Document, session_key: str) -> Session:
        """Create and open a session for a top-level window.

        The returned session may already be TORN_DOWN if it failed its gate.
        """
        session = Session(
            session_key=session_key,
            window=window,
            host=self.host,
            scheduler=self.scheduler,
            pool=self.pool,
            loader=Loader(
                host=self.host,
                scheduler=self.scheduler,
                freshness=self.config.freshness,
                overlay_container_id=self.config.overlay_container_id,
            ),
            block_list=self.config.block_list(),
            min_host_version=self.config.min_host_version,
        )
        session.open()
        return session

    @staticmethod
    def for_test(
        host: Host | None = None,
        scheduler: QueueScheduler | None = None,
        config: LoaderConfig | None = None,
        pool: RegistryPool | None = None,
        chrome_dir: Path | None = None,
    ) -> "LoaderContext":
        """Create test context with optional pre-configured implementations.

        Args:
            host: Optional Host implementation. If None, creates FakeHost.
            scheduler: Optional scheduler. If None, creates an empty QueueScheduler.
            config: Optional LoaderConfig. If None, uses defaults rooted at chrome_dir.
            pool: Optional RegistryPool. If None, scans according to config.
            chrome_dir: Base directory for default config (defaults to /test/chrome)

        Returns:
            LoaderContext configured with provided values and test defaults
        """
        from tests.fakes.host import FakeHost

        resolved_chrome_dir = chrome_dir if chrome_dir is not None else Path("/test/chrome")
        resolved_config = (
            config if config is not None else LoaderConfig.defaults(resolved_chrome_dir)
        )
        resolved_host: Host = (
            host if host is not None else FakeHost(primary_url=resolved_config.primary_url)
        )
        return LoaderContext(
            host=resolved_host,
            scheduler=scheduler if scheduler is not None else QueueScheduler(),
            config=resolved_config,
            pool=pool if pool is not None else RegistryPool(build_scanner(resolved_config)),
            config_path=resolved_config.chrome_dir / CONFIG_FILE_NAME,
        )


def create_context(
    config_path: Path, *, host_version: str, host_name: str | None = None
) -> LoaderContext:
    """Create production context from a config file.

    Args:
        config_path: Path to ucjs.toml (missing file means defaults)
        host_version: Application version reported by the console host
        host_name: Application name reported by the console host.
            If None, reports the name the config requires.

    Returns:
        LoaderContext with a ConsoleHost and a fresh QueueScheduler
    """
    config = load_config(config_path)
    host = ConsoleHost(
        primary_url=config.primary_url,
        host_name=host_name if host_name is not None else config.host_name,
        host_version=host_version,
        required_host_name=config.host_name,
    )
    return LoaderContext(
        host=host,
        scheduler=QueueScheduler(),
        config=config,
        pool=RegistryPool(build_scanner(config)),
        config_path=config_path,
    )
