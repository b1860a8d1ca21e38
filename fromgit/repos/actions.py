"""
디렉티브 실행 모듈

추출된 콘텐츠의 매니페스트에 기술된 후속 작업(중첩 clone, 파일 삭제)을 실행합니다.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from ..exceptions import BadDirectiveException
from ..models.base import CloneDirective, Directive, RemoveDirective
from ..models.enums import EventCode
from ..utils.helpers import remove_path
from ..utils.logging import get_logger
from .events import EventLog
from .stash import stash, unstash

logger = get_logger(__name__)

_DIRECTIVES = TypeAdapter(list[Directive])

NestedClone = Callable[[CloneDirective], Awaitable[None]]


def load_directives(dest: Path, manifest_file: str) -> Optional[list]:
    """
    매니페스트를 읽고 대상 디렉토리에서 삭제

    Args:
        dest: 대상 디렉토리
        manifest_file: 매니페스트 파일 이름

    Returns:
        디렉티브 목록 (매니페스트가 없으면 None)

    Raises:
        BadDirectiveException: JSON 또는 디렉티브 형식이 잘못되었을 때
    """
    path = Path(dest) / manifest_file
    if not path.is_file():
        return None

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except ValueError as e:
        raise BadDirectiveException(str(path), f"JSON 파싱 오류: {e}") from e
    finally:
        path.unlink(missing_ok=True)

    if isinstance(data, dict):
        data = [data]

    try:
        return _DIRECTIVES.validate_python(data)
    except ValidationError as e:
        raise BadDirectiveException(str(path), str(e)) from e


class DirectiveRunner:
    """디렉티브 실행기"""

    def __init__(
        self,
        dest: Path,
        scratch: Path,
        events: EventLog,
        clone_nested: NestedClone,
        unstash_skip: Iterable[str] = (),
    ):
        """
        디렉티브 실행기 초기화

        Args:
            dest: 대상 디렉토리
            scratch: 스태시 디렉토리
            events: 이벤트 로그
            clone_nested: 중첩 clone을 실행하는 코루틴 함수
            unstash_skip: 복원하지 않을 파일 이름
        """
        self.dest = Path(dest)
        self.scratch = Path(scratch)
        self.events = events
        self.clone_nested = clone_nested
        self.unstash_skip = list(unstash_skip)
        self.has_stashed = False
        self.logger = logger

    async def run(self, directives: list) -> None:
        """디렉티브를 순서대로 실행"""
        for directive in directives:
            if isinstance(directive, CloneDirective):
                await self.clone(directive)
            elif isinstance(directive, RemoveDirective):
                await self.remove(directive)
            else:
                raise BadDirectiveException(str(self.dest), f"알 수 없는 디렉티브: {directive!r}")

    async def clone(self, directive: CloneDirective) -> None:
        """
        중첩 clone 실행

        첫 clone 전에만 대상 디렉토리를 스태시합니다. 실패하면 전체 실행을 중단합니다.
        """
        if not self.has_stashed:
            await stash(self.scratch, self.dest)
            self.has_stashed = True

        try:
            await self.clone_nested(directive)
        except Exception as e:
            self.logger.error(f"중첩 clone 실패: {directive.src} - {e} (스태시: {self.scratch})")
            raise

    async def remove(self, directive: RemoveDirective) -> list[str]:
        """
        파일 삭제 (없는 파일은 경고 후 계속)

        Returns:
            list[str]: 실제로 삭제한 경로 (디렉토리는 "/" 접미사)
        """
        results = await asyncio.gather(*(self._remove_one(file) for file in directive.files))
        removed = [file for file in results if file]

        if removed:
            self.events.info(
                EventCode.REMOVED,
                f"삭제됨: {', '.join(removed)}",
                files=removed,
            )
        return removed

    async def _remove_one(self, file: str) -> Optional[str]:
        path = self._resolve(file)
        if not path.exists() and not path.is_symlink():
            self.events.warn(
                EventCode.FILE_DOES_NOT_EXIST,
                f"디렉티브가 '{file}' 삭제를 요청했지만 존재하지 않습니다",
                file=file,
            )
            return None

        is_dir = await asyncio.to_thread(remove_path, path)
        return f"{file}/" if is_dir else file

    def _resolve(self, file: str) -> Path:
        base = self.dest.resolve()
        # ".."는 먼저 접고, 마지막 구성 요소의 심볼릭 링크는 따라가지 않음
        path = Path(os.path.normpath(base / file))
        try:
            path.parent.resolve().relative_to(base)
        except ValueError:
            raise BadDirectiveException(str(self.dest), f"대상 디렉토리 밖의 경로: {file}") from None
        return path

    async def finish(self) -> None:
        """스태시한 항목 복원"""
        if not self.has_stashed:
            return
        await unstash(self.scratch, self.dest, skip=self.unstash_skip)
        self.has_stashed = False
