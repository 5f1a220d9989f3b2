from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings, QThreadPool

from plainnotes.logging_setup import SESSION_ID, install_global_exception_hooks, setup_logging
from plainnotes.services import AutosaveService, RenameService, SelectionMemory, TreeService
from plainnotes.settings import APP_NAME, NotesConfig, load_config
from plainnotes.vault import DirectoryScanner, NoteRepository, TreeStore


@dataclass
class Services:
    config: NotesConfig
    store: TreeStore
    repo: NoteRepository
    tree: TreeService
    rename: RenameService
    autosave: AutosaveService
    selection: SelectionMemory


def init_app():
    """Logging + global exception hooks; returns the session logger."""
    log = setup_logging()
    install_global_exception_hooks(log)
    log.info("Session started, SID=%s", SESSION_ID)
    return log


def build_services(
    root: Path | None = None,
    *,
    settings: QSettings | None = None,
    pool: QThreadPool | None = None,
) -> Services:
    """
    Wire the notes core for a view layer.

    root overrides the configured notes directory. The root is created and
    seeded with a welcome note on first run; the tree itself is not loaded
    here (call services.tree.request_load() or load_now()).
    """
    settings = settings or QSettings(APP_NAME, APP_NAME)
    config = load_config(settings)
    if root is not None:
        config = NotesConfig(root=Path(root), max_depth=config.max_depth, extension=config.extension)

    store = TreeStore()
    scanner = DirectoryScanner(extension=config.extension, max_depth=config.max_depth)
    repo = NoteRepository(config.root, scanner=scanner, store=store, extension=config.extension)
    repo.ensure_root()

    pool = pool or QThreadPool.globalInstance()
    return Services(
        config=config,
        store=store,
        repo=repo,
        tree=TreeService(repo=repo, thread_pool=pool),
        rename=RenameService(repo=repo, thread_pool=pool),
        autosave=AutosaveService(repo=repo),
        selection=SelectionMemory(settings=settings, root=config.root, extension=config.extension),
    )
