"""
저장소 지정자 파서 모듈

"user/name[/subdir]#ref" 형태의 짧은 지정자나 호스트 URL을 RepositoryRef로 변환합니다.
"""

import re
from typing import Optional

from ..exceptions import BadSpecifierException, UnsupportedHostException
from ..models.base import SITE_DOMAINS, RepositoryRef
from ..models.enums import Site
from ..utils.logging import get_logger

logger = get_logger(__name__)

# [https://host/ | git@host: | shorthost:] user/name[/subdir...][#ref]
_SPECIFIER_RE = re.compile(
    r"^(?:(?:https://)?([^:/\s]+\.[^:/\s]+)/|git@([^:/\s]+)[:/]|([^/:\s]+):)?"
    r"([^/\s#]+)/([^/\s#]+)"
    r"((?:/[^/\s#]+)+)?"
    r"/?"
    r"(?:#(\S+))?$"
)

_HOST_ALIASES = {
    "github": Site.GITHUB,
    "github.com": Site.GITHUB,
    "gitlab": Site.GITLAB,
    "gitlab.com": Site.GITLAB,
    "bitbucket": Site.BITBUCKET,
    "bitbucket.org": Site.BITBUCKET,
    "sourcehut": Site.SOURCEHUT,
    "git.sr.ht": Site.SOURCEHUT,
}


def resolve_host(host: Optional[str]) -> Optional[Site]:
    """
    호스트 문자열을 Site로 변환

    Args:
        host: 호스트 이름 또는 약칭 (None이면 github)

    Returns:
        Site 또는 지원하지 않으면 None
    """
    if not host:
        return Site.GITHUB
    return _HOST_ALIASES.get(host.lower())


def parse_specifier(src: str, ref: Optional[str] = None) -> RepositoryRef:
    """
    저장소 지정자 파싱

    Args:
        src: 저장소 지정자 또는 URL
        ref: 지정자의 #ref 대신 사용할 참조 (선택사항)

    Returns:
        RepositoryRef: 파싱된 저장소 참조

    Raises:
        BadSpecifierException: 문법에 맞지 않을 때
        UnsupportedHostException: 지원하지 않는 호스트일 때
    """
    match = _SPECIFIER_RE.match(src.strip())
    if not match:
        raise BadSpecifierException(src)

    host = match.group(1) or match.group(2) or match.group(3)
    site = resolve_host(host)
    if site is None:
        raise UnsupportedHostException(src, host)

    user = match.group(4)
    name = re.sub(r"\.git$", "", match.group(5))
    if not name:
        raise BadSpecifierException(src)

    subdir = match.group(6).strip("/") if match.group(6) else None
    domain = SITE_DOMAINS[site]

    repo = RepositoryRef(
        site=site,
        user=user,
        name=name,
        subdir=subdir,
        https_url=f"https://{domain}/{user}/{name}",
        ssh_url=f"git@{domain}:{user}/{name}",
        ref=ref or match.group(7) or "HEAD",
    )
    logger.debug(f"지정자 파싱: {src} -> {repo.site.value}:{repo}")
    return repo
