"""
fromgit

"user/name[/subdir]#ref" 형태의 저장소 지정자로부터 캐시된 아카이브를 내려받아
로컬 디렉토리에 프로젝트를 생성합니다.
"""

from .exceptions import FromGitException
from .models import CloneOptions, Event, EventCode, RepositoryRef
from .repos import EventLog, FromGit, fromgit, parse_specifier

__version__ = "1.0.0"

__all__ = [
    "CloneOptions",
    "Event",
    "EventCode",
    "EventLog",
    "FromGit",
    "FromGitException",
    "RepositoryRef",
    "fromgit",
    "parse_specifier",
]
