"""
저장소 지정자 파서 테스트
"""

import pytest

from fromgit.exceptions import BadSpecifierException, UnsupportedHostException
from fromgit.models.enums import FetchMode, Site
from fromgit.repos.parser import parse_specifier, resolve_host


class TestParseSpecifier:
    """지정자 파싱 테스트"""

    @pytest.mark.parametrize("src", [
        "user/repo",
        "github:user/repo",
        "github.com/user/repo",
        "https://github.com/user/repo",
        "https://github.com/user/repo.git",
        "git@github.com:user/repo",
        "git@github.com:user/repo.git",
    ])
    def test_equivalent_github_forms(self, src):
        """동일한 저장소를 가리키는 여러 형태 테스트"""
        repo = parse_specifier(src)

        assert repo.site == Site.GITHUB
        assert repo.user == "user"
        assert repo.name == "repo"
        assert repo.subdir is None
        assert repo.ref == "HEAD"
        assert repo.https_url == "https://github.com/user/repo"
        assert repo.ssh_url == "git@github.com:user/repo"
        assert repo.mode == FetchMode.TAR

    def test_equivalent_forms_are_equal(self):
        """같은 입력은 같은 RepositoryRef 생성 테스트"""
        assert parse_specifier("gitlab:user/repo#dev") == parse_specifier("https://gitlab.com/user/repo.git#dev")
        assert parse_specifier("git@gitlab.com:user/repo#dev") == parse_specifier("gitlab.com/user/repo#dev")

    @pytest.mark.parametrize("src,site,https_url,ssh_url", [
        ("gitlab:user/repo", Site.GITLAB, "https://gitlab.com/user/repo", "git@gitlab.com:user/repo"),
        ("bitbucket:user/repo", Site.BITBUCKET, "https://bitbucket.org/user/repo", "git@bitbucket.org:user/repo"),
        ("https://bitbucket.org/user/repo", Site.BITBUCKET, "https://bitbucket.org/user/repo", "git@bitbucket.org:user/repo"),
        ("git.sr.ht/~user/repo", Site.SOURCEHUT, "https://git.sr.ht/~user/repo", "git@git.sr.ht:~user/repo"),
        ("sourcehut:~user/repo", Site.SOURCEHUT, "https://git.sr.ht/~user/repo", "git@git.sr.ht:~user/repo"),
    ])
    def test_host_domains(self, src, site, https_url, ssh_url):
        """호스트별 도메인 매핑 테스트"""
        repo = parse_specifier(src)

        assert repo.site == site
        assert repo.https_url == https_url
        assert repo.ssh_url == ssh_url

    def test_subdir_and_ref(self):
        """하위 디렉토리와 참조 파싱 테스트"""
        repo = parse_specifier("user/repo/src/templates#v1.2.3")

        assert repo.name == "repo"
        assert repo.subdir == "src/templates"
        assert repo.subdir_parts == ["src", "templates"]
        assert repo.ref == "v1.2.3"
        assert str(repo) == "user/repo/src/templates#v1.2.3"

    def test_trailing_slash_ignored(self):
        """끝 슬래시 무시 테스트"""
        repo = parse_specifier("user/repo/docs/")

        assert repo.subdir == "docs"

    def test_git_suffix_stripped_with_ref(self):
        """.git 접미사 제거 테스트"""
        repo = parse_specifier("git@github.com:user/repo.git#main")

        assert repo.name == "repo"
        assert repo.ref == "main"

    def test_explicit_ref_overrides(self):
        """명시적 참조가 #ref보다 우선하는지 테스트"""
        repo = parse_specifier("user/repo#main", ref="release")

        assert repo.ref == "release"

    @pytest.mark.parametrize("src", [
        "",
        "repo",
        "user/",
        "/repo",
        "user repo/name",
        "http://github.com/user/repo",
    ])
    def test_bad_specifier(self, src):
        """문법 오류 테스트"""
        with pytest.raises(BadSpecifierException) as exc_info:
            parse_specifier(src)

        assert exc_info.value.error_code == "BAD_SRC"
        assert exc_info.value.src == src

    @pytest.mark.parametrize("src,host", [
        ("https://example.com/user/repo", "example.com"),
        ("git@codeberg.org:user/repo", "codeberg.org"),
        ("gitea:user/repo", "gitea"),
    ])
    def test_unsupported_host(self, src, host):
        """미지원 호스트 테스트"""
        with pytest.raises(UnsupportedHostException) as exc_info:
            parse_specifier(src)

        assert exc_info.value.error_code == "UNSUPPORTED_HOST"
        assert exc_info.value.host == host


class TestResolveHost:
    """호스트 별칭 테스트"""

    def test_default_is_github(self):
        """호스트 생략 시 github"""
        assert resolve_host(None) == Site.GITHUB

    def test_case_insensitive(self):
        """대소문자 무시"""
        assert resolve_host("GitLab.com") == Site.GITLAB

    def test_unknown(self):
        """알 수 없는 호스트는 None"""
        assert resolve_host("example.org") is None
