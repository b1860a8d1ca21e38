"""
공통 유틸리티 함수 모듈

파일 시스템 조작과 JSON 입출력 등 fromgit 전반에서 사용하는 헬퍼 함수들을 제공합니다.
"""

import json
import os
import re
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

from ..utils.logging import get_logger

logger = get_logger(__name__)

_COMMIT_HASH_RE = re.compile(r"^[0-9a-f]{40}$")


def is_commit_hash(value: Any) -> bool:
    """
    40자리 16진수 커밋 해시인지 확인

    Args:
        value: 검사할 값

    Returns:
        bool: 커밋 해시 여부
    """
    return isinstance(value, str) and _COMMIT_HASH_RE.match(value) is not None


def utc_timestamp() -> str:
    """현재 시각의 ISO-8601 문자열"""
    return datetime.now(timezone.utc).isoformat()


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    디렉토리 존재 확인 및 생성

    Args:
        path: 디렉토리 경로

    Returns:
        Path: 디렉토리 경로 객체
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def list_directory(path: Union[str, Path]) -> list[str]:
    """
    디렉토리 항목 이름 목록 (없으면 빈 목록)

    Args:
        path: 디렉토리 경로

    Returns:
        list[str]: 정렬된 항목 이름 목록
    """
    try:
        return sorted(os.listdir(path))
    except FileNotFoundError:
        return []


def remove_path(path: Union[str, Path]) -> bool:
    """
    파일 또는 디렉토리 삭제

    Args:
        path: 삭제할 경로

    Returns:
        bool: 디렉토리였으면 True
    """
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    path.unlink()
    return False


def move_path(source: Union[str, Path], target: Union[str, Path]) -> None:
    """
    복사 후 삭제 방식으로 경로 이동

    원본과 대상이 다른 파일 시스템에 있을 수 있으므로 rename을 쓰지 않습니다.
    디렉토리는 기존 디렉토리에 병합하고, 그 밖의 기존 대상은 먼저 삭제합니다.

    Args:
        source: 원본 경로
        target: 대상 경로
    """
    source = Path(source)
    target = Path(target)
    source_is_dir = source.is_dir() and not source.is_symlink()
    target_is_dir = target.is_dir() and not target.is_symlink()
    if (target.exists() or target.is_symlink()) and not (source_is_dir and target_is_dir):
        remove_path(target)

    if source_is_dir:
        shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
        shutil.rmtree(source)
    else:
        shutil.copy2(source, target, follow_symlinks=False)
        source.unlink()


def read_json_mapping(path: Union[str, Path]) -> dict[str, Any]:
    """
    JSON 객체 파일 읽기 (없거나 읽을 수 없으면 빈 딕셔너리)

    Args:
        path: JSON 파일 경로

    Returns:
        dict: 파싱된 객체
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.debug(f"JSON 파일 읽기 실패, 빈 값 사용: {path} - {e}")
        return {}

    if not isinstance(data, dict):
        logger.debug(f"JSON 객체가 아님, 빈 값 사용: {path}")
        return {}
    return data


def write_json_atomic(path: Union[str, Path], data: Any) -> None:
    """
    임시 파일에 쓴 뒤 교체하는 방식으로 JSON 저장

    Args:
        path: 대상 파일 경로
        data: 저장할 데이터
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
