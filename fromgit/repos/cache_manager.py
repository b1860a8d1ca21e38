"""
저장소 캐시 관리 모듈

저장소별 캐시 디렉토리의 참조→해시 맵(map.json), 접근 기록(access.json),
<hash>.tar.gz 아티팩트와 더 이상 참조되지 않는 아티팩트의 정리를 담당합니다.
"""

from pathlib import Path
from typing import Optional

from ..config.settings import Settings
from ..models.base import RepositoryRef
from ..utils.helpers import is_commit_hash, read_json_mapping, utc_timestamp, write_json_atomic
from ..utils.logging import get_logger
from .events import EventLog

logger = get_logger(__name__)

MAP_FILE = "map.json"
ACCESS_FILE = "access.json"


class CacheManager:
    """저장소 하나의 캐시 디렉토리 관리자"""

    def __init__(self, settings: Settings, repo: RepositoryRef, events: Optional[EventLog] = None):
        """
        캐시 매니저 초기화

        디렉토리는 실제로 쓸 때 생성됩니다.

        Args:
            settings: 설정 (cache_dir 기준 경로)
            repo: 대상 저장소
            events: 진단 기록을 공유할 이벤트 로그
        """
        self.settings = settings
        self.repo = repo
        self.events = events or EventLog()
        self.logger = logger

        site, user, name = repo.key
        self.cache_dir = Path(settings.cache_dir) / site / user / name
        self.refs: dict[str, str] = {}
        self.access: dict[str, str] = {}

    @property
    def map_path(self) -> Path:
        return self.cache_dir / MAP_FILE

    @property
    def access_path(self) -> Path:
        return self.cache_dir / ACCESS_FILE

    def stash_dir(self, depth: int = 1) -> Path:
        """
        스태시 디렉토리 경로

        같은 저장소가 중첩 clone 체인에 다시 나타나도 스태시가 겹치지 않도록
        최상위가 아니면 깊이를 접미사로 붙입니다.
        """
        name = self.settings.stash_dir_name
        if depth > 1:
            name = f"{name}-{depth}"
        return self.cache_dir / name

    def artifact_path(self, commit: str) -> Path:
        """아카이브 경로 생성"""
        return self.cache_dir / f"{commit}.tar.gz"

    def load(self) -> dict[str, str]:
        """
        map.json과 access.json 로드

        파일이 없거나 읽을 수 없으면 빈 매핑을 사용하며, 커밋 해시가 아닌 값은 버립니다.

        Returns:
            dict[str, str]: 참조→해시 매핑
        """
        refs = {}
        for ref, commit in read_json_mapping(self.map_path).items():
            if is_commit_hash(commit):
                refs[ref] = commit
            else:
                self.events.diagnostic(f"잘못된 캐시 항목 무시: {self.map_path} {ref}={commit!r}")

        self.refs = refs
        self.access = {
            ref: stamp
            for ref, stamp in read_json_mapping(self.access_path).items()
            if isinstance(stamp, str)
        }
        self.logger.debug(f"캐시 로드: {self.cache_dir} ({len(self.refs)}개 참조)")
        return self.refs

    def get(self, ref: str) -> Optional[str]:
        return self.refs.get(ref)

    def record_access(self, ref: str) -> None:
        """
        접근 시각 기록 (실패해도 진행)

        Args:
            ref: 요청한 참조
        """
        self.access[ref] = utc_timestamp()
        try:
            write_json_atomic(self.access_path, self.access)
        except OSError as e:
            self.events.diagnostic(f"접근 기록 저장 실패: {self.access_path} - {e}")

    def is_referenced(self, commit: str, exclude: Optional[str] = None) -> bool:
        """exclude를 제외한 어떤 참조라도 commit을 가리키는지 확인"""
        return any(value == commit for ref, value in self.refs.items() if ref != exclude)

    def commit(self, ref: str, commit: str) -> None:
        """
        참조→해시 갱신 및 고아 아티팩트 정리

        이전 해시를 가리키는 다른 참조가 없으면 이전 아카이브를 삭제합니다.
        다운로드가 성공한 뒤에만 호출해야 합니다.

        Args:
            ref: 요청한 심볼릭 참조
            commit: 해석된 커밋 해시
        """
        old = self.refs.get(ref)
        if old == commit:
            return

        if old and not self.is_referenced(old, exclude=ref):
            self._remove_artifact(old)

        self.refs[ref] = commit
        write_json_atomic(self.map_path, self.refs)
        self.logger.debug(f"캐시 갱신: {self.repo.key} {ref} -> {commit}")

    def _remove_artifact(self, commit: str) -> None:
        artifact = self.artifact_path(commit)
        try:
            artifact.unlink()
            self.logger.debug(f"참조되지 않는 아카이브 삭제: {artifact}")
        except FileNotFoundError:
            pass
        except OSError as e:
            self.events.diagnostic(f"아카이브 삭제 실패: {artifact} - {e}")
