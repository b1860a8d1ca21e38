"""
참조 해석 모듈

브랜치, 태그, HEAD, 해시 접두사 같은 심볼릭 참조를 커밋 해시로 변환합니다.
원격 조회가 실패하면 캐시된 해시로 대체합니다.
"""

from typing import Mapping, Optional

import git

from ..exceptions import BadRefException, CouldNotFetchRefsException
from ..models.base import RemoteRef, RepositoryRef
from ..models.enums import EventCode, RefKind
from ..utils.logging import get_logger
from .events import EventLog
from .transport import GitTransport, parse_remote_refs

logger = get_logger(__name__)

# 이보다 짧은 참조는 해시 접두사로 취급하지 않음
MIN_HASH_PREFIX = 8


class RefResolver:
    """원격 참조 해석기"""

    def __init__(self, transport: GitTransport, events: EventLog):
        """
        참조 해석기 초기화

        Args:
            transport: ls-remote 전송
            events: 이벤트 로그
        """
        self.transport = transport
        self.events = events
        self.logger = logger

    async def fetch_refs(self, repo: RepositoryRef) -> list[RemoteRef]:
        """
        원격 참조 목록 조회

        Args:
            repo: 대상 저장소

        Returns:
            list[RemoteRef]: 원격 참조 목록

        Raises:
            CouldNotFetchRefsException: 조회 또는 파싱 실패 시
        """
        try:
            output = await self.transport.ls_remote(repo.https_url)
            return parse_remote_refs(output)
        except (git.exc.GitError, BadRefException, OSError) as e:
            raise CouldNotFetchRefsException(repo.https_url, e) from e

    async def resolve_hash(self, repo: RepositoryRef, cache: Mapping[str, str]) -> Optional[str]:
        """
        참조를 커밋 해시로 해석

        Args:
            repo: 대상 저장소 (repo.ref가 요청 참조)
            cache: 캐시된 참조→해시 매핑

        Returns:
            커밋 해시 (찾지 못하면 None)
        """
        try:
            refs = await self.fetch_refs(repo)
        except CouldNotFetchRefsException as e:
            self.events.warn(
                EventCode.COULD_NOT_FETCH,
                e.message,
                url=e.url,
                error=str(e.original) if e.original else None,
            )
            if repo.ref == "HEAD":
                # HEAD는 항상 원격 기준
                return None
            return self.hash_from_cache(repo, cache)

        if repo.ref == "HEAD":
            return next((r.hash for r in refs if r.kind == RefKind.HEAD), None)

        return self.select_ref(refs, repo.ref)

    def hash_from_cache(self, repo: RepositoryRef, cache: Mapping[str, str]) -> Optional[str]:
        commit = cache.get(repo.ref)
        if commit is None:
            return None

        self.events.info(
            EventCode.USING_CACHE,
            f"캐시된 커밋 해시 사용: {commit}",
            ref=repo.ref,
            hash=commit,
        )
        return commit

    def select_ref(self, refs: list[RemoteRef], selector: str) -> Optional[str]:
        """
        이름 일치 우선, 이후 해시 접두사 일치로 참조 선택

        Args:
            refs: 원격 참조 목록 (목록 순서대로 검사)
            selector: 요청 참조

        Returns:
            커밋 해시 (없으면 None)
        """
        for ref in refs:
            if ref.name == selector:
                self.events.verbose(
                    EventCode.FOUND_MATCH,
                    f"일치하는 커밋 해시 발견: {ref.hash}",
                    ref=selector,
                    hash=ref.hash,
                )
                return ref.hash

        if len(selector) < MIN_HASH_PREFIX:
            return None

        for ref in refs:
            if ref.hash.startswith(selector):
                self.events.verbose(
                    EventCode.FOUND_MATCH,
                    f"해시 접두사와 일치하는 커밋 발견: {ref.hash}",
                    ref=selector,
                    hash=ref.hash,
                )
                return ref.hash

        return None
