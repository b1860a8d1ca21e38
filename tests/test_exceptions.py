"""
예외 클래스 테스트 모듈
"""

import pytest

from fromgit.exceptions import (
    BadDirectiveException,
    BadRefException,
    BadSpecifierException,
    ConfigurationException,
    CouldNotDownloadException,
    CouldNotFetchRefsException,
    DestNotEmptyException,
    DirectiveCycleException,
    FromGitException,
    MissingRefException,
    TransportException,
    UnsupportedHostException,
)


class TestFromGitException:
    """기본 예외 테스트"""

    def test_basic(self):
        """메시지와 오류 코드"""
        error = FromGitException("문제 발생", "SOME_CODE")

        assert str(error) == "문제 발생"
        assert error.message == "문제 발생"
        assert error.error_code == "SOME_CODE"

    def test_without_code(self):
        """오류 코드 생략"""
        assert FromGitException("x").error_code is None


class TestSpecificExceptions:
    """개별 예외 테스트"""

    @pytest.mark.parametrize("error,code", [
        (BadSpecifierException("bad"), "BAD_SRC"),
        (UnsupportedHostException("x:y/z", "x"), "UNSUPPORTED_HOST"),
        (TransportException("https://a", 500), "TRANSPORT_ERROR"),
        (CouldNotFetchRefsException("https://a"), "COULD_NOT_FETCH"),
        (BadRefException("row"), "BAD_REF"),
        (MissingRefException("main", "https://a"), "MISSING_REF"),
        (CouldNotDownloadException("https://a"), "COULD_NOT_DOWNLOAD"),
        (DestNotEmptyException("/tmp/x"), "DEST_NOT_EMPTY"),
        (BadDirectiveException("/tmp/x/fromgit.json", "bad"), "BAD_DIRECTIVE"),
        (DirectiveCycleException(["a", "b"], "loop"), "DIRECTIVE_CYCLE"),
        (ConfigurationException("KEY", "bad"), "CONFIGURATION_ERROR"),
    ])
    def test_error_codes(self, error, code):
        """모든 예외가 기본 예외를 상속하고 코드를 가짐"""
        assert isinstance(error, FromGitException)
        assert error.error_code == code

    def test_transport_message(self):
        """상태 코드와 URL을 포함한 메시지"""
        error = TransportException("https://a", 404, "Not Found")

        assert error.status == 404
        assert error.reason == "Not Found"
        assert "404" in error.message
        assert "Not Found" in error.message

    def test_missing_ref_context(self):
        """참조와 URL 보존"""
        error = MissingRefException("v9", "https://github.com/u/r")

        assert error.ref == "v9"
        assert error.url == "https://github.com/u/r"
        assert "https://github.com/u/r#v9" in error.message

    def test_download_keeps_original(self):
        """원인 예외 보존"""
        original = TransportException("https://a", 404)
        error = CouldNotDownloadException("https://a", original)

        assert error.original is original
        assert "404" in error.message

    def test_cycle_chain_in_message(self):
        """순환 체인을 메시지에 포함"""
        error = DirectiveCycleException(["github:u/a#HEAD", "github:u/a#HEAD"], "순환")

        assert error.chain == ["github:u/a#HEAD", "github:u/a#HEAD"]
        assert "github:u/a#HEAD -> github:u/a#HEAD" in error.message
