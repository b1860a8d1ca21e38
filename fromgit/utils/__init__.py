"""
유틸리티 패키지

공통으로 사용되는 유틸리티 함수들을 포함합니다.
"""

from .logging import get_logger, setup_logging
from .helpers import ensure_directory, is_commit_hash, move_path, remove_path

__all__ = [
    "get_logger",
    "setup_logging",
    "ensure_directory",
    "is_commit_hash",
    "move_path",
    "remove_path",
]
