"""
저장소 획득 모듈

저장소 지정자를 해석하고 캐시된 아카이브로 내용을 생성한 뒤
디렉티브를 실행하는 엔진을 제공합니다.
"""

from .actions import DirectiveRunner, load_directives
from .archive import ArchiveFetcher, archive_url, extract_archive
from .cache_manager import CacheManager
from .downloader import FromGit, TemplateStage, fromgit
from .git_clone import GitCloner
from .events import EventLog
from .parser import parse_specifier
from .resolver import RefResolver
from .stash import stash, unstash
from .transport import GitTransport, HttpTransport, parse_remote_refs

__all__ = [
    "ArchiveFetcher",
    "CacheManager",
    "DirectiveRunner",
    "EventLog",
    "FromGit",
    "GitCloner",
    "GitTransport",
    "HttpTransport",
    "RefResolver",
    "TemplateStage",
    "archive_url",
    "extract_archive",
    "fromgit",
    "load_directives",
    "parse_remote_refs",
    "parse_specifier",
    "stash",
    "unstash",
]
