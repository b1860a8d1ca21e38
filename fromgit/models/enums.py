"""
열거형 정의 모듈

fromgit에서 사용되는 상수 값들을 열거형으로 정의합니다.
"""

from enum import Enum


class Site(Enum):
    """지원하는 저장소 호스트 열거형"""
    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"
    SOURCEHUT = "sourcehut"


class FetchMode(Enum):
    """콘텐츠 획득 방식 열거형"""
    TAR = "tar"
    GIT = "git"


class RefKind(Enum):
    """원격 참조 종류 열거형"""
    HEAD = "head"
    BRANCH = "branch"
    TAG = "tag"
    OTHER = "other"


class EventLevel(Enum):
    """이벤트 수준 열거형"""
    INFO = "info"
    WARN = "warn"


class EventCode(Enum):
    """오케스트레이터에 전달되는 이벤트 코드 열거형"""
    SUCCESS = "SUCCESS"
    DEST_NOT_EMPTY = "DEST_NOT_EMPTY"
    DEST_IS_EMPTY = "DEST_IS_EMPTY"
    REMOVED = "REMOVED"
    USING_CACHE = "USING_CACHE"
    FOUND_MATCH = "FOUND_MATCH"
    FILE_DOES_NOT_EXIST = "FILE_DOES_NOT_EXIST"
    DOWNLOADING = "DOWNLOADING"
    PROXY = "PROXY"
    EXTRACTING = "EXTRACTING"
    FILE_EXISTS = "FILE_EXISTS"
    COULD_NOT_FETCH = "COULD_NOT_FETCH"
