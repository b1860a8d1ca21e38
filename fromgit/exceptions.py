"""
예외 클래스 정의 모듈

저장소 지정자 파싱, 참조 해석, 아카이브 다운로드, 디렉티브 실행 과정에서
사용되는 커스텀 예외들을 정의합니다.
"""

from typing import Optional


class FromGitException(Exception):
    """fromgit 기본 예외 클래스"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        """
        예외 초기화

        Args:
            message: 오류 메시지
            error_code: 오류 코드 (선택사항)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class BadSpecifierException(FromGitException):
    """저장소 지정자를 파싱할 수 없을 때 발생하는 예외"""

    def __init__(self, src: str):
        """
        지정자 파싱 실패 예외 초기화

        Args:
            src: 입력된 저장소 지정자
        """
        message = f"저장소 지정자를 파싱할 수 없습니다: {src}"
        super().__init__(message, "BAD_SRC")
        self.src = src


class UnsupportedHostException(FromGitException):
    """지원하지 않는 호스트일 때 발생하는 예외"""

    def __init__(self, src: str, host: str):
        """
        미지원 호스트 예외 초기화

        Args:
            src: 입력된 저장소 지정자
            host: 해석된 호스트 이름
        """
        message = f"지원하지 않는 호스트입니다: {host} ({src})"
        super().__init__(message, "UNSUPPORTED_HOST")
        self.src = src
        self.host = host


class TransportException(FromGitException):
    """HTTP 전송 실패 시 발생하는 예외"""

    def __init__(self, url: str, status: int, reason: Optional[str] = None):
        """
        전송 예외 초기화

        Args:
            url: 요청 URL
            status: HTTP 상태 코드 (응답이 없으면 음수)
            reason: 상태 메시지
        """
        message = f"전송 실패 ({status}): {url}"
        if reason:
            message = f"{message} - {reason}"
        super().__init__(message, "TRANSPORT_ERROR")
        self.url = url
        self.status = status
        self.reason = reason


class CouldNotFetchRefsException(FromGitException):
    """원격 참조 목록을 가져오지 못했을 때 발생하는 예외"""

    def __init__(self, url: str, original: Optional[BaseException] = None):
        """
        참조 목록 조회 실패 예외 초기화

        Args:
            url: 원격 저장소 URL
            original: 원인 예외
        """
        message = f"원격 저장소를 조회할 수 없습니다: {url}"
        super().__init__(message, "COULD_NOT_FETCH")
        self.url = url
        self.original = original


class BadRefException(FromGitException):
    """원격 참조 행을 해석할 수 없을 때 발생하는 예외"""

    def __init__(self, line: str):
        message = f"참조를 해석할 수 없습니다: {line}"
        super().__init__(message, "BAD_REF")
        self.line = line


class MissingRefException(FromGitException):
    """요청한 참조의 커밋 해시를 찾을 수 없을 때 발생하는 예외"""

    def __init__(self, ref: str, url: str):
        """
        참조 누락 예외 초기화

        Args:
            ref: 요청한 참조
            url: 원격 저장소 URL
        """
        message = f"참조를 찾을 수 없습니다: {url}#{ref}"
        super().__init__(message, "MISSING_REF")
        self.ref = ref
        self.url = url


class CouldNotDownloadException(FromGitException):
    """아카이브 다운로드 실패 시 발생하는 예외"""

    def __init__(self, url: str, original: Optional[BaseException] = None):
        """
        다운로드 실패 예외 초기화

        Args:
            url: 아카이브 URL
            original: 원인 예외
        """
        message = f"아카이브를 다운로드할 수 없습니다: {url}"
        if original is not None:
            message = f"{message} ({original})"
        super().__init__(message, "COULD_NOT_DOWNLOAD")
        self.url = url
        self.original = original


class DestNotEmptyException(FromGitException):
    """대상 디렉토리가 비어 있지 않을 때 발생하는 예외"""

    def __init__(self, dest: str):
        message = f"대상 디렉토리가 비어 있지 않습니다. force 옵션으로 덮어쓸 수 있습니다: {dest}"
        super().__init__(message, "DEST_NOT_EMPTY")
        self.dest = dest


class BadDirectiveException(FromGitException):
    """디렉티브 매니페스트가 잘못되었을 때 발생하는 예외"""

    def __init__(self, path: str, detail: str):
        """
        디렉티브 예외 초기화

        Args:
            path: 매니페스트 파일 경로
            detail: 오류 상세 정보
        """
        message = f"잘못된 디렉티브 ({path}): {detail}"
        super().__init__(message, "BAD_DIRECTIVE")
        self.path = path
        self.detail = detail


class DirectiveCycleException(FromGitException):
    """중첩 clone 디렉티브가 순환하거나 깊이 제한을 넘었을 때 발생하는 예외"""

    def __init__(self, chain: list[str], detail: str):
        """
        디렉티브 순환 예외 초기화

        Args:
            chain: 상위 clone 체인 (바깥쪽부터)
            detail: 오류 상세 정보
        """
        message = f"중첩 clone 중단: {detail} ({' -> '.join(chain)})"
        super().__init__(message, "DIRECTIVE_CYCLE")
        self.chain = chain
        self.detail = detail


class ConfigurationException(FromGitException):
    """설정 오류 시 발생하는 예외"""

    def __init__(self, config_key: str, error_detail: str):
        """
        설정 예외 초기화

        Args:
            config_key: 설정 키
            error_detail: 오류 상세 정보
        """
        message = f"설정 오류: {config_key} - {error_detail}"
        super().__init__(message, "CONFIGURATION_ERROR")
        self.config_key = config_key
        self.error_detail = error_detail
