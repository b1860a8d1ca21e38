"""
데이터 모델 패키지

fromgit의 핵심 데이터 모델들을 정의합니다.
"""

from .base import (
    CloneDirective,
    CloneOptions,
    Directive,
    Event,
    RemoteRef,
    RemoveDirective,
    RepositoryRef,
)
from .enums import EventCode, EventLevel, FetchMode, RefKind, Site

__all__ = [
    "CloneDirective",
    "CloneOptions",
    "Directive",
    "Event",
    "RemoteRef",
    "RemoveDirective",
    "RepositoryRef",
    "EventCode",
    "EventLevel",
    "FetchMode",
    "RefKind",
    "Site",
]
