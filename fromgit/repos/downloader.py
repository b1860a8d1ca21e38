"""
저장소 다운로더 오케스트레이터 모듈

지정자 파싱, 참조 해석, 아카이브 획득, 디렉티브 실행, 템플릿 단계 호출을
하나의 clone 흐름으로 통합하는 메인 인터페이스를 제공합니다.
"""

from pathlib import Path
from typing import Any, Optional, Protocol, Union

from ..config.settings import Settings
from ..exceptions import DirectiveCycleException
from ..models.base import CloneDirective, CloneOptions, RepositoryRef
from ..models.enums import FetchMode
from ..utils.logging import get_logger
from .actions import DirectiveRunner, load_directives
from .archive import ArchiveFetcher
from .cache_manager import CacheManager
from .events import EventLog
from .git_clone import GitCloner
from .parser import parse_specifier
from .resolver import RefResolver
from .transport import GitTransport, HttpTransport

logger = get_logger(__name__)


class TemplateStage(Protocol):
    """clone 이후 실행되는 외부 템플릿 단계"""

    async def read_configuration(self, directory: Path) -> dict[str, Any]:
        ...

    async def render_file(self, directory: Path, file: str, variables: dict[str, Any]) -> None:
        ...


def repository_identity(repo: RepositoryRef) -> str:
    """순환 감지용 저장소 식별자"""
    return f"{repo.site.value}:{repo}"


class FromGit:
    """저장소 clone 오케스트레이터"""

    def __init__(
        self,
        src: str,
        options: Optional[CloneOptions] = None,
        settings: Optional[Settings] = None,
        events: Optional[EventLog] = None,
        http: Optional[HttpTransport] = None,
        git_transport: Optional[GitTransport] = None,
        template_stage: Optional[TemplateStage] = None,
        chain: tuple[str, ...] = (),
    ):
        """
        오케스트레이터 초기화

        Args:
            src: 저장소 지정자
            options: clone 옵션
            settings: 설정 (None이면 기본 설정 사용)
            events: 이벤트 로그 (None이면 새로 생성)
            http: 아카이브 다운로드 전송 (None이면 새로 생성하고 close()에서 정리)
            git_transport: ls-remote 전송
            template_stage: clone 후 실행할 템플릿 단계
            chain: 상위 clone 체인 (중첩 clone 전용)

        Raises:
            BadSpecifierException: 지정자를 파싱할 수 없을 때
            UnsupportedHostException: 지원하지 않는 호스트일 때
        """
        if settings is None:
            from ..config.settings import get_settings
            settings = get_settings()

        self.settings = settings
        self.src = src
        self.options = options or CloneOptions()
        self.repo = parse_specifier(src, self.options.ref)
        self.events = events or EventLog(verbose=self.options.verbose)
        self.template_stage = template_stage
        self.logger = logger

        self._owns_http = http is None
        self.http = http or HttpTransport(settings)
        self.git = git_transport or GitTransport(settings)
        self.resolver = RefResolver(self.git, self.events)
        self.fetcher = ArchiveFetcher(settings, self.http, self.resolver, self.events)
        self.cloner = GitCloner(settings, self.git, self.events)
        self.cache = CacheManager(settings, self.repo, self.events)

        self.chain = chain + (repository_identity(self.repo),)

    @property
    def mode(self) -> FetchMode:
        return self.options.mode or self.repo.mode

    @property
    def diagnostics(self) -> list[str]:
        return self.events.diagnostics

    async def resolve_hash(self) -> Optional[str]:
        """이 저장소의 요청 참조를 커밋 해시로 해석"""
        return await self.resolver.resolve_hash(self.repo, self.cache.load())

    async def materialize(
        self,
        dest: Union[str, Path],
        cache_only: Optional[bool] = None,
        force: Optional[bool] = None,
    ) -> str:
        """
        저장소 내용을 대상 디렉토리에 생성 (디렉티브 미실행)

        Args:
            dest: 대상 디렉토리
            cache_only: None이면 options.cache 사용
            force: None이면 options.force 사용

        Returns:
            str: 사용한 커밋 해시
        """
        force = self.options.force if force is None else force
        if self.mode == FetchMode.GIT:
            return await self.cloner.materialize(self.repo, dest, force=force)

        return await self.fetcher.materialize(
            self.repo,
            dest,
            cache_only=self.options.cache if cache_only is None else cache_only,
            force=force,
        )

    async def clone(self, dest: Union[str, Path]) -> str:
        """
        저장소 clone 전체 흐름 실행

        대상 디렉토리 생성, 템플릿 설정 읽기, 디렉티브 실행, 스태시 복원,
        템플릿 렌더링 순으로 진행합니다.

        Args:
            dest: 대상 디렉토리

        Returns:
            str: 사용한 커밋 해시
        """
        dest = Path(dest)
        self.logger.info(f"clone 시작: {self.src} -> {dest}")

        commit = await self.materialize(dest)

        directives = load_directives(dest, self.settings.manifest_file)
        configuration = await self.read_template_configuration(dest)

        if directives:
            runner = DirectiveRunner(
                dest,
                self.cache.stash_dir(len(self.chain)),
                self.events,
                lambda directive: self._clone_nested(directive, dest),
                unstash_skip=[self.settings.template_config_file, self.settings.manifest_file],
            )
            await runner.run(directives)
            await runner.finish()

        if configuration is not None:
            await self.render(dest, configuration)

        self.logger.info(f"clone 완료: {self.src} -> {dest} ({commit})")
        return commit

    async def _clone_nested(self, directive: CloneDirective, dest: Path) -> None:
        if len(self.chain) >= self.settings.max_clone_depth:
            raise DirectiveCycleException(
                list(self.chain) + [directive.src],
                f"최대 중첩 깊이 {self.settings.max_clone_depth} 초과",
            )

        nested = FromGit(
            directive.src,
            CloneOptions(
                force=True,
                cache=directive.cache,
                verbose=directive.verbose,
                variables=self.options.variables,
            ),
            settings=self.settings,
            events=self.events.child(directive.verbose),
            http=self.http,
            git_transport=self.git,
            template_stage=self.template_stage,
            chain=self.chain,
        )

        identity = repository_identity(nested.repo)
        if identity in self.chain:
            raise DirectiveCycleException(list(nested.chain), f"상위 저장소를 다시 clone합니다: {identity}")

        await nested.clone(dest)

    async def read_template_configuration(self, dest: Path) -> Optional[dict[str, Any]]:
        """
        템플릿 설정을 읽고 대상 디렉토리에서 삭제

        디렉티브 실행 전에 소비하므로 스태시된 설정 파일이 되살아나지 않습니다.

        Returns:
            템플릿 설정 (템플릿 단계나 설정 파일이 없으면 None)
        """
        if self.template_stage is None:
            return None

        config_path = Path(dest) / self.settings.template_config_file
        if not config_path.is_file():
            return None

        configuration = await self.template_stage.read_configuration(Path(dest))
        config_path.unlink(missing_ok=True)
        return configuration or {}

    async def render(self, dest: Path, configuration: dict[str, Any]) -> list[str]:
        """
        템플릿 설정의 templates 목록에 있는 파일 렌더링

        Returns:
            list[str]: 렌더링한 파일 목록
        """
        templates = list(configuration.get("templates") or [])
        for template in templates:
            await self.template_stage.render_file(Path(dest), template, self.options.variables)
        return templates

    async def close(self) -> None:
        """리소스 정리"""
        if self._owns_http:
            await self.http.close()

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        await self.close()


# 편의 함수
async def fromgit(
    src: str,
    dest: Union[str, Path],
    settings: Optional[Settings] = None,
    events: Optional[EventLog] = None,
    template_stage: Optional[TemplateStage] = None,
    **options: Any,
) -> str:
    """
    편의 함수: 저장소를 대상 디렉토리로 clone

    Args:
        src: 저장소 지정자
        dest: 대상 디렉토리
        settings: 설정
        events: 이벤트 로그
        template_stage: 템플릿 단계
        **options: CloneOptions 필드 (force, verbose, cache, ref, mode, variables)

    Returns:
        str: 사용한 커밋 해시
    """
    async with FromGit(
        src,
        CloneOptions(**options),
        settings=settings,
        events=events,
        template_stage=template_stage,
    ) as project:
        return await project.clone(dest)
