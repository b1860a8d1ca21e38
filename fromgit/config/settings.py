"""
설정 관리 모듈

환경 변수를 통한 fromgit 설정을 관리합니다.
"""

import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from ..exceptions import ConfigurationException


def default_cache_dir() -> str:
    """
    기본 캐시 디렉토리 경로

    홈 디렉토리를 알 수 없으면 임시 디렉토리 아래를 사용합니다.

    Returns:
        str: 캐시 디렉토리 경로
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        return str(Path(tempfile.gettempdir()) / ".fromgit")
    return str(home / ".fromgit")


class Settings(BaseSettings):
    """fromgit 설정 관리 클래스"""

    # 캐시 설정
    cache_dir: str = Field(
        default_factory=default_cache_dir,
        description="저장소 아카이브 캐시 기본 디렉토리"
    )
    stash_dir_name: str = Field(
        default=".tmp",
        description="스태시용 임시 하위 디렉토리 이름"
    )

    # 전송 설정
    https_proxy: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("https_proxy", "fromgit_https_proxy"),
        description="HTTPS 프록시 URL"
    )
    max_redirects: int = Field(
        default=10,
        description="최대 리다이렉트 횟수"
    )
    user_agent: str = Field(
        default="fromgit/1.0",
        description="HTTP User-Agent 헤더"
    )

    # 디렉티브 설정
    manifest_file: str = Field(
        default="fromgit.json",
        description="디렉티브 매니페스트 파일 이름"
    )
    template_config_file: str = Field(
        default=".template",
        description="템플릿 설정 파일 이름"
    )
    max_clone_depth: int = Field(
        default=8,
        description="중첩 clone 디렉티브 최대 깊이"
    )

    # 로깅 설정
    log_level: str = Field(
        default="INFO",
        description="로그 레벨"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="로그 포맷"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="로그 파일 경로"
    )

    class Config:
        env_prefix = "FROMGIT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def validate_configuration(self) -> None:
        """설정 유효성 검증"""
        if self.max_redirects < 0:
            raise ConfigurationException(
                "FROMGIT_MAX_REDIRECTS", "0 이상이어야 합니다"
            )

        if self.max_clone_depth < 1:
            raise ConfigurationException(
                "FROMGIT_MAX_CLONE_DEPTH", "1 이상이어야 합니다"
            )

        # 파일 이름 설정 검증
        for key in ("manifest_file", "template_config_file", "stash_dir_name"):
            value = getattr(self, key)
            if not value or "/" in value or os.sep in value:
                raise ConfigurationException(
                    f"FROMGIT_{key.upper()}", f"경로 구분자 없는 파일 이름이어야 합니다: {value!r}"
                )

        # 캐시 디렉토리 생성
        os.makedirs(self.cache_dir, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """
    설정 인스턴스를 반환합니다 (싱글톤 패턴)

    Returns:
        Settings: 설정 인스턴스
    """
    settings = Settings()
    settings.validate_configuration()
    return settings
