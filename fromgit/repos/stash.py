"""
스태시 관리 모듈

중첩 clone이 대상 디렉토리를 덮어쓰기 전에 기존 항목을 캐시 디렉토리 아래
임시 디렉토리로 옮기고, 모든 디렉티브가 끝난 뒤 되돌립니다.
"""

import asyncio
import shutil
from pathlib import Path
from typing import Iterable, Union

from ..utils.helpers import ensure_directory, list_directory, move_path
from ..utils.logging import get_logger

logger = get_logger(__name__)


async def _move_all(source: Path, target: Path, names: Iterable[str]) -> None:
    # 서로 다른 경로이므로 동시에 이동
    await asyncio.gather(*(
        asyncio.to_thread(move_path, source / name, target / name)
        for name in names
    ))


async def stash(scratch: Union[str, Path], destination: Union[str, Path]) -> list[str]:
    """
    대상 디렉토리의 모든 항목을 스태시 디렉토리로 이동

    Args:
        scratch: 스태시 디렉토리 (캐시 디렉토리 하위)
        destination: 대상 디렉토리

    Returns:
        list[str]: 스태시한 항목 이름 목록
    """
    scratch = Path(scratch)
    destination = Path(destination)

    if scratch.exists():
        shutil.rmtree(scratch)
    ensure_directory(scratch)

    names = list_directory(destination)
    await _move_all(destination, scratch, names)

    logger.debug(f"스태시 완료: {destination} -> {scratch} ({len(names)}개)")
    return names


async def unstash(
    scratch: Union[str, Path],
    destination: Union[str, Path],
    skip: Iterable[str] = (),
) -> list[str]:
    """
    스태시한 항목을 대상 디렉토리로 되돌리고 스태시 디렉토리 삭제

    skip에 포함된 파일(이미 처리된 설정 파일)은 되돌리지 않습니다.

    Args:
        scratch: 스태시 디렉토리
        destination: 대상 디렉토리
        skip: 되돌리지 않을 파일 이름

    Returns:
        list[str]: 되돌린 항목 이름 목록
    """
    scratch = Path(scratch)
    destination = ensure_directory(destination)
    skipped = set(skip)

    names = [
        name for name in list_directory(scratch)
        if not (name in skipped and not (scratch / name).is_dir())
    ]
    await _move_all(scratch, destination, names)

    if scratch.exists():
        shutil.rmtree(scratch)

    logger.debug(f"스태시 복원 완료: {scratch} -> {destination} ({len(names)}개)")
    return names
