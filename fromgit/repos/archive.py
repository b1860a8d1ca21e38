"""
아카이브 다운로드 및 추출 모듈

호스트별 아카이브 URL을 만들고, 캐시에 없을 때만 다운로드한 뒤
요청한 하위 디렉토리에 맞게 경로를 잘라내어 대상 디렉토리에 추출합니다.
"""

import asyncio
import gzip
import tarfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ..config.settings import Settings
from ..exceptions import (
    CouldNotDownloadException,
    DestNotEmptyException,
    MissingRefException,
    TransportException,
)
from ..models.base import RepositoryRef
from ..models.enums import EventCode, Site
from ..utils.helpers import ensure_directory, list_directory
from ..utils.logging import get_logger
from .cache_manager import CacheManager
from .events import EventLog
from .resolver import RefResolver
from .transport import HttpTransport

logger = get_logger(__name__)


def archive_url(repo: RepositoryRef, commit: str) -> str:
    """
    호스트별 아카이브 URL 생성

    Args:
        repo: 대상 저장소
        commit: 커밋 해시

    Returns:
        str: tar.gz 아카이브 URL
    """
    if repo.site == Site.GITLAB:
        return f"{repo.https_url}/repository/archive.tar.gz?ref={commit}"
    if repo.site == Site.BITBUCKET:
        return f"{repo.https_url}/get/{commit}.tar.gz"
    return f"{repo.https_url}/archive/{commit}.tar.gz"


def _strip(path: str, strip: int, subdir_parts: list[str]) -> Optional[str]:
    parts = [part for part in PurePosixPath(path).parts if part not in (".", "/")]
    if len(parts) <= strip:
        return None
    if subdir_parts and parts[1:strip] != subdir_parts:
        return None
    return "/".join(parts[strip:])


def extract_archive(
    artifact: Union[str, Path],
    dest: Union[str, Path],
    subdir_parts: Optional[list[str]] = None,
) -> int:
    """
    아카이브를 대상 디렉토리에 추출

    최상위 "<name>-<hash>/" 래퍼 디렉토리와 하위 디렉토리 경로를 잘라내며,
    하위 디렉토리가 지정되면 그 아래 항목만 추출합니다.

    Args:
        artifact: tar.gz 파일 경로
        dest: 대상 디렉토리
        subdir_parts: 하위 디렉토리 경로 구성 요소

    Returns:
        int: 추출한 항목 수
    """
    subdir_parts = subdir_parts or []
    strip = 1 + len(subdir_parts)
    dest = ensure_directory(dest)

    with tarfile.open(artifact, "r:gz") as tar:
        members = []
        for member in tar.getmembers():
            name = _strip(member.name, strip, subdir_parts)
            if name is None:
                continue

            if member.islnk():
                linkname = _strip(member.linkname, strip, subdir_parts)
                if linkname is None:
                    logger.debug(f"범위 밖 하드 링크 건너뜀: {member.name}")
                    continue
                member.linkname = linkname

            member.name = name
            members.append(member)

        tar.extractall(dest, members=members, filter="tar")

    return len(members)


def verify_archive(artifact: Union[str, Path]) -> int:
    """
    아카이브를 끝까지 읽어 손상 여부 확인

    Returns:
        int: 아카이브 항목 수

    Raises:
        tarfile.TarError: tar 형식이 아닐 때
        EOFError: 압축 스트림이 잘렸을 때
    """
    with tarfile.open(artifact, "r:gz") as tar:
        return len(tar.getmembers())


def check_destination(dest: Path, force: bool, events: EventLog) -> None:
    """
    대상 디렉토리가 비어 있는지 확인

    Raises:
        DestNotEmptyException: 비어 있지 않고 force가 아닐 때
    """
    if list_directory(dest):
        if not force:
            raise DestNotEmptyException(str(dest))
        events.info(
            EventCode.DEST_NOT_EMPTY,
            "대상 디렉토리가 비어 있지 않지만 force 옵션으로 계속합니다",
            dest=str(dest),
        )
    else:
        events.verbose(EventCode.DEST_IS_EMPTY, "대상 디렉토리가 비어 있습니다", dest=str(dest))


class ArchiveFetcher:
    """아카이브 기반 저장소 획득기"""

    def __init__(
        self,
        settings: Settings,
        http: HttpTransport,
        resolver: RefResolver,
        events: EventLog,
    ):
        """
        아카이브 획득기 초기화

        Args:
            settings: 설정
            http: 아카이브 다운로드 전송
            resolver: 참조 해석기
            events: 이벤트 로그
        """
        self.settings = settings
        self.http = http
        self.resolver = resolver
        self.events = events
        self.logger = logger

    def check_destination(self, dest: Path, force: bool) -> None:
        check_destination(dest, force, self.events)

    async def materialize(
        self,
        repo: RepositoryRef,
        dest: Union[str, Path],
        cache_only: bool = False,
        force: bool = False,
    ) -> str:
        """
        저장소 내용을 대상 디렉토리에 생성

        Args:
            repo: 대상 저장소
            dest: 대상 디렉토리
            cache_only: 원격 조회 없이 캐시된 해시만 사용
            force: 비어 있지 않은 대상 디렉토리 허용

        Returns:
            str: 사용한 커밋 해시

        Raises:
            DestNotEmptyException: 대상 디렉토리가 비어 있지 않을 때
            MissingRefException: 커밋 해시를 찾을 수 없을 때
            CouldNotDownloadException: 다운로드 또는 아카이브 읽기 실패 시
        """
        dest = Path(dest)
        self.check_destination(dest, force)

        cache = CacheManager(self.settings, repo, self.events)
        cached = cache.load()

        if cache_only:
            commit = self.resolver.hash_from_cache(repo, cached)
        else:
            commit = await self.resolver.resolve_hash(repo, cached)
        cache.record_access(repo.ref)

        if not commit:
            raise MissingRefException(repo.ref, repo.https_url)

        url = archive_url(repo, commit)
        artifact = cache.artifact_path(commit)
        await self.download(url, artifact)

        cache.commit(repo.ref, commit)

        self.events.verbose(EventCode.EXTRACTING, f"{artifact.name} 추출 중: {dest}", file=str(artifact))
        try:
            count = await asyncio.to_thread(extract_archive, artifact, dest, repo.subdir_parts)
        except (tarfile.TarError, EOFError) as e:
            raise CouldNotDownloadException(url, e) from e

        if count == 0 and repo.subdir:
            self.logger.warning(f"하위 디렉토리에 추출할 항목이 없습니다: {repo.subdir}")

        self.events.info(
            EventCode.SUCCESS,
            f"{repo.user}/{repo.name}#{repo.ref} 복제 완료" + (f" -> {dest}" if str(dest) != "." else ""),
            repo=str(repo),
            hash=commit,
            dest=str(dest),
        )
        return commit

    async def download(self, url: str, artifact: Path) -> None:
        """
        아카이브 다운로드 (읽을 수 있는 아카이브가 이미 있으면 건너뜀)

        새로 받은 아카이브는 끝까지 읽어 본 뒤에만 캐시에 남깁니다.

        Raises:
            CouldNotDownloadException: 전송 실패 또는 받은 아카이브가 손상되었을 때
        """
        if artifact.exists():
            try:
                await self.verify(url, artifact)
            except CouldNotDownloadException as e:
                self.events.diagnostic(f"손상된 캐시 아카이브를 다시 다운로드합니다: {artifact} - {e.original}")
            else:
                self.events.verbose(EventCode.FILE_EXISTS, f"{artifact.name}이(가) 이미 존재합니다", file=str(artifact))
                return

        ensure_directory(artifact.parent)
        if self.http.proxy:
            self.events.verbose(EventCode.PROXY, f"프록시 사용: {self.http.proxy}", proxy=self.http.proxy)
        self.events.verbose(EventCode.DOWNLOADING, f"다운로드 중: {url} -> {artifact}", url=url, file=str(artifact))

        try:
            await self.http.fetch(url, artifact)
        except TransportException as e:
            raise CouldNotDownloadException(url, e) from e

        await self.verify(url, artifact)

    async def verify(self, url: str, artifact: Path) -> None:
        """
        아카이브 무결성 확인 (손상되었으면 삭제)

        Raises:
            CouldNotDownloadException: 아카이브를 읽을 수 없을 때
        """
        try:
            await asyncio.to_thread(verify_archive, artifact)
        except (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile) as e:
            self._discard_artifact(artifact)
            raise CouldNotDownloadException(url, e) from e

    def _discard_artifact(self, artifact: Path) -> None:
        try:
            artifact.unlink()
        except OSError as e:
            self.events.diagnostic(f"손상된 아카이브 삭제 실패: {artifact} - {e}")
