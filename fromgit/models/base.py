"""
기본 데이터 모델 모듈

저장소 참조, 원격 참조, 이벤트, 디렉티브 등 fromgit의 핵심 데이터 구조들을 정의합니다.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .enums import EventCode, EventLevel, FetchMode, RefKind, Site

# 호스트별 도메인 (sourcehut은 TLD 접미사가 없음)
SITE_DOMAINS: Dict[Site, str] = {
    Site.GITHUB: "github.com",
    Site.GITLAB: "gitlab.com",
    Site.BITBUCKET: "bitbucket.org",
    Site.SOURCEHUT: "git.sr.ht",
}


class RepositoryRef(BaseModel):
    """파싱된 저장소 참조 데이터 모델"""

    site: Site = Field(
        ...,
        description="저장소 호스트"
    )
    user: str = Field(
        ...,
        description="저장소 소유자",
        min_length=1
    )
    name: str = Field(
        ...,
        description="저장소 이름 (.git 제외)",
        min_length=1
    )
    subdir: Optional[str] = Field(
        default=None,
        description="추출할 하위 디렉토리 (앞뒤 슬래시 제외)"
    )
    https_url: str = Field(
        ...,
        description="HTTPS 저장소 URL"
    )
    ssh_url: str = Field(
        ...,
        description="SSH 저장소 URL"
    )
    ref: str = Field(
        default="HEAD",
        description="요청한 심볼릭 참조 (브랜치, 태그, HEAD, 해시 접두사)",
        min_length=1
    )

    class Config:
        frozen = True

    @property
    def domain(self) -> str:
        return SITE_DOMAINS[self.site]

    @property
    def mode(self) -> FetchMode:
        """지원 호스트는 모두 아카이브(tar) 방식"""
        return FetchMode.TAR if self.site in SITE_DOMAINS else FetchMode.GIT

    @property
    def subdir_parts(self) -> list[str]:
        if not self.subdir:
            return []
        return [part for part in self.subdir.split("/") if part]

    @property
    def key(self) -> tuple[str, str, str]:
        """캐시 디렉토리 키 (site, user, name)"""
        return (self.site.value, self.user, self.name)

    def with_ref(self, ref: str) -> "RepositoryRef":
        """참조만 바꾼 새 인스턴스 반환"""
        return self.model_copy(update={"ref": ref})

    def __str__(self) -> str:
        path = f"{self.user}/{self.name}"
        if self.subdir:
            path = f"{path}/{self.subdir}"
        return f"{path}#{self.ref}"


class RemoteRef(BaseModel):
    """원격 참조 목록의 한 행"""

    kind: RefKind = Field(
        ...,
        description="참조 종류"
    )
    name: Optional[str] = Field(
        default=None,
        description="참조 이름 (HEAD는 없음)"
    )
    hash: str = Field(
        ...,
        description="커밋 해시"
    )

    class Config:
        frozen = True


class Event(BaseModel):
    """오케스트레이터에 전달되는 이벤트"""

    level: EventLevel = Field(
        ...,
        description="이벤트 수준"
    )
    code: EventCode = Field(
        ...,
        description="이벤트 코드"
    )
    message: str = Field(
        ...,
        description="사람이 읽을 수 있는 메시지"
    )
    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="추가 컨텍스트 (저장소, 경로, URL 등)"
    )


class CloneDirective(BaseModel):
    """중첩 clone 디렉티브"""

    action: Literal["clone"] = "clone"
    src: str = Field(
        ...,
        description="복제할 저장소 지정자",
        min_length=1
    )
    cache: bool = Field(
        default=False,
        description="원격 조회 없이 캐시만 사용"
    )
    force: bool = Field(
        default=True,
        description="대상 덮어쓰기 (중첩 clone은 항상 true로 실행)"
    )
    verbose: bool = Field(
        default=False,
        description="상세 이벤트 출력"
    )


class RemoveDirective(BaseModel):
    """파일 삭제 디렉티브"""

    action: Literal["remove"] = "remove"
    files: list[str] = Field(
        ...,
        description="대상 디렉토리 기준 삭제할 경로 목록"
    )

    @field_validator("files", mode="before")
    @classmethod
    def _wrap_single_file(cls, value):
        if isinstance(value, str):
            return [value]
        return value


Directive = Annotated[Union[CloneDirective, RemoveDirective], Field(discriminator="action")]


class CloneOptions(BaseModel):
    """clone 실행 옵션"""

    force: bool = Field(
        default=False,
        description="비어 있지 않은 대상 디렉토리 덮어쓰기"
    )
    verbose: bool = Field(
        default=False,
        description="상세 이벤트를 info로 출력"
    )
    cache: bool = Field(
        default=False,
        description="원격 조회 없이 캐시된 해시만 사용"
    )
    ref: Optional[str] = Field(
        default=None,
        description="지정자의 #ref 대신 사용할 참조"
    )
    mode: Optional[FetchMode] = Field(
        default=None,
        description="획득 방식 (None이면 호스트 기본값)"
    )
    variables: Dict[str, Any] = Field(
        default_factory=dict,
        description="템플릿 렌더링 변수"
    )
