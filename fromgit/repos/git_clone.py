"""
git clone 기반 저장소 획득 모듈

아카이브 대신 저장소를 직접 clone하고 참조를 체크아웃한 뒤
.git 디렉토리를 제외한 작업 트리를 대상 디렉토리로 옮깁니다.
"""

import asyncio
import tempfile
from pathlib import Path
from typing import Union

import git

from ..config.settings import Settings
from ..exceptions import CouldNotDownloadException, MissingRefException
from ..models.base import RepositoryRef
from ..models.enums import EventCode
from ..utils.helpers import ensure_directory, list_directory, move_path
from ..utils.logging import get_logger
from .archive import check_destination
from .events import EventLog
from .transport import GitTransport

logger = get_logger(__name__)


class GitCloner:
    """git clone 기반 저장소 획득기"""

    def __init__(self, settings: Settings, transport: GitTransport, events: EventLog):
        """
        git clone 획득기 초기화

        Args:
            settings: 설정 (임시 작업 디렉토리는 cache_dir 아래에 생성)
            transport: git 전송
            events: 이벤트 로그
        """
        self.settings = settings
        self.transport = transport
        self.events = events
        self.logger = logger

    async def materialize(
        self,
        repo: RepositoryRef,
        dest: Union[str, Path],
        force: bool = False,
    ) -> str:
        """
        저장소를 clone해 대상 디렉토리에 생성

        Args:
            repo: 대상 저장소
            dest: 대상 디렉토리
            force: 비어 있지 않은 대상 디렉토리 허용

        Returns:
            str: 체크아웃된 커밋 해시

        Raises:
            DestNotEmptyException: 대상 디렉토리가 비어 있지 않을 때
            CouldNotDownloadException: clone 실패 시
            MissingRefException: 참조 체크아웃 실패 시
        """
        dest = Path(dest)
        check_destination(dest, force, self.events)

        work_root = ensure_directory(self.settings.cache_dir)
        with tempfile.TemporaryDirectory(prefix=".clone-", dir=work_root) as temp_dir:
            work = Path(temp_dir) / repo.name

            self.events.verbose(EventCode.DOWNLOADING, f"git clone 중: {repo.https_url}", url=repo.https_url)
            try:
                await self.transport.clone(repo.https_url, work)
            except git.exc.GitError as e:
                raise CouldNotDownloadException(repo.https_url, e) from e

            try:
                commit = await self.transport.checkout(work, repo.ref)
            except git.exc.GitError as e:
                raise MissingRefException(repo.ref, repo.https_url) from e

            source = work.joinpath(*repo.subdir_parts)
            names = [name for name in list_directory(source) if not (source == work and name == ".git")]
            if not names and repo.subdir:
                self.logger.warning(f"하위 디렉토리에 옮길 항목이 없습니다: {repo.subdir}")

            ensure_directory(dest)
            await asyncio.gather(*(
                asyncio.to_thread(move_path, source / name, dest / name)
                for name in names
            ))

        self.events.info(
            EventCode.SUCCESS,
            f"{repo.user}/{repo.name}#{repo.ref} 복제 완료" + (f" -> {dest}" if str(dest) != "." else ""),
            repo=str(repo),
            hash=commit,
            dest=str(dest),
        )
        return commit
