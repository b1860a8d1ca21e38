"""
전송 모듈

HTTPS 아카이브 다운로드(리다이렉트 추적, 프록시 터널링)와
원격 참조 목록 조회(git ls-remote)를 제공합니다.
"""

import asyncio
import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin

import aiohttp
import git

from ..config.settings import Settings
from ..exceptions import BadRefException, TransportException
from ..models.base import RemoteRef
from ..models.enums import RefKind
from ..utils.helpers import is_commit_hash
from ..utils.logging import get_logger

logger = get_logger(__name__)

_REF_RE = re.compile(r"^refs/(\w+)/(.+)$")
_REF_KINDS = {
    "heads": RefKind.BRANCH,
    "tags": RefKind.TAG,
}

CHUNK_SIZE = 64 * 1024


class HttpTransport:
    """aiohttp 기반 HTTPS 다운로드 전송"""

    def __init__(self, settings: Settings):
        """
        HTTP 전송 초기화

        Args:
            settings: 설정 (프록시, 리다이렉트 제한, User-Agent)
        """
        self.settings = settings
        self.proxy: Optional[str] = settings.https_proxy
        self.max_redirects = settings.max_redirects
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """HTTP 세션 생성"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={'User-Agent': self.settings.user_agent}
            )
        return self.session

    async def fetch(self, url: str, dest: Path) -> None:
        """
        URL 본문을 파일로 스트리밍 다운로드

        3xx 응답은 Location 헤더를 따라가며, 본문은 임시 파일에 쓴 뒤
        성공 시에만 대상 경로로 교체합니다.

        Args:
            url: 다운로드 URL
            dest: 저장할 파일 경로

        Raises:
            TransportException: 상태 코드 오류, 리다이렉트 오류, 연결/쓰기 실패 시
        """
        dest = Path(dest)
        part = dest.with_name(f"{dest.name}.part")
        try:
            await self._fetch(url, part, redirects=0)
            os.replace(part, dest)
        finally:
            if part.exists():
                part.unlink()

    async def _fetch(self, url: str, part: Path, redirects: int) -> None:
        session = await self._get_session()
        location = None

        try:
            async with session.get(url, proxy=self.proxy, allow_redirects=False) as response:
                status = response.status
                if status >= 400:
                    raise TransportException(url, status, response.reason)

                if status >= 300:
                    location = response.headers.get('Location')
                    if not location:
                        raise TransportException(url, status, "Location 헤더가 없는 리다이렉트")
                else:
                    with open(part, 'wb') as f:
                        async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                            f.write(chunk)
        except TransportException:
            raise
        except aiohttp.ClientError as e:
            raise TransportException(url, -1, str(e) or type(e).__name__) from e
        except OSError as e:
            raise TransportException(url, -3, f"파일 쓰기 실패: {e}") from e

        if location is None:
            return

        if redirects >= self.max_redirects:
            raise TransportException(url, status, f"리다이렉트가 너무 많습니다 ({self.max_redirects}회 초과)")

        target = urljoin(url, location)
        logger.debug(f"리다이렉트: {url} -> {target}")
        await self._fetch(target, part, redirects + 1)

    async def close(self) -> None:
        """세션 정리"""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None


class GitTransport:
    """GitPython 기반 원격 참조 조회 전송"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings

    async def ls_remote(self, url: str) -> str:
        """
        git ls-remote 실행

        Args:
            url: 원격 저장소 URL

        Returns:
            str: ls-remote 표준 출력

        Raises:
            git.exc.GitError: git 명령 실패 시
        """
        logger.debug(f"git ls-remote 실행: {url}")
        return await asyncio.to_thread(
            git.cmd.Git().ls_remote,
            url,
            env={"GIT_TERMINAL_PROMPT": "0"},
        )

    async def clone(self, url: str, target: Path) -> None:
        """
        저장소를 target에 clone

        Raises:
            git.exc.GitError: git 명령 실패 시
        """
        logger.debug(f"git clone 실행: {url} -> {target}")
        await asyncio.to_thread(
            git.Repo.clone_from,
            url,
            str(target),
            env={"GIT_TERMINAL_PROMPT": "0"},
        )

    async def checkout(self, target: Path, ref: str) -> str:
        """
        참조를 체크아웃하고 현재 커밋 해시 반환

        Args:
            target: clone된 작업 트리
            ref: 체크아웃할 참조 (HEAD면 체크아웃하지 않음)

        Returns:
            str: 체크아웃된 커밋 해시

        Raises:
            git.exc.GitError: 체크아웃 실패 시
        """
        def _checkout() -> str:
            repo = git.Repo(str(target))
            if ref != "HEAD":
                repo.git.checkout(ref)
            return repo.head.commit.hexsha

        return await asyncio.to_thread(_checkout)


def parse_remote_refs(output: str) -> list[RemoteRef]:
    """
    ls-remote 출력 파싱

    Args:
        output: "<hash>\\t<ref>" 형식의 행 목록

    Returns:
        list[RemoteRef]: 출력 순서를 유지한 원격 참조 목록

    Raises:
        BadRefException: 해석할 수 없는 행이 있을 때
    """
    refs = []
    for row in output.splitlines():
        if not row.strip():
            continue

        commit, _, ref = row.strip().partition("\t")
        if not is_commit_hash(commit):
            raise BadRefException(row)

        if ref == "HEAD":
            refs.append(RemoteRef(kind=RefKind.HEAD, hash=commit))
            continue

        match = _REF_RE.match(ref)
        if not match:
            raise BadRefException(row)

        refs.append(RemoteRef(
            kind=_REF_KINDS.get(match.group(1), RefKind.OTHER),
            name=match.group(2),
            hash=commit,
        ))
    return refs
