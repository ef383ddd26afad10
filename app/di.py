# app/di.py
from dataclasses import dataclass
from app.config import Settings
from app.services.filestore import FileStore
from app.services.paths import PathResolver
from app.services.stats import StatsEngine

@dataclass
class Container:
    settings: Settings
    resolver: PathResolver
    file_store: FileStore
    stats_engine: StatsEngine

def build_container(settings: Settings | None = None) -> Container:
    s = settings or Settings()
    resolver = PathResolver(s.STORAGE_ROOT)
    store = FileStore(resolver, dir_mode=s.DIR_MODE, file_mode=s.FILE_MODE)
    stats = StatsEngine(resolver, recursive=s.STATS_RECURSIVE)
    return Container(s, resolver, store, stats)
