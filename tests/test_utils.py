"""
유틸리티 모듈 테스트
"""

import json
import logging

from fromgit.config.settings import Settings
from fromgit.utils.helpers import (
    ensure_directory,
    is_commit_hash,
    list_directory,
    move_path,
    read_json_mapping,
    remove_path,
    write_json_atomic,
)
from fromgit.utils.logging import KoreanFormatter, get_logger, setup_logging


class TestHelpers:
    """헬퍼 함수 테스트"""

    def test_is_commit_hash(self):
        """40자리 소문자 16진수만 커밋 해시"""
        assert is_commit_hash("0123456789abcdef0123456789abcdef01234567")
        assert not is_commit_hash("0123456789ABCDEF0123456789ABCDEF01234567")
        assert not is_commit_hash("abc123")
        assert not is_commit_hash(None)

    def test_ensure_directory(self, tmp_path):
        """중첩 디렉토리 생성"""
        path = ensure_directory(tmp_path / "a" / "b")

        assert path.is_dir()

    def test_list_directory(self, tmp_path):
        """정렬된 항목 목록, 없는 디렉토리는 빈 목록"""
        (tmp_path / "b").write_text("b")
        (tmp_path / "a").mkdir()

        assert list_directory(tmp_path) == ["a", "b"]
        assert list_directory(tmp_path / "missing") == []

    def test_remove_path(self, tmp_path):
        """파일과 디렉토리 삭제"""
        (tmp_path / "dir" / "sub").mkdir(parents=True)
        (tmp_path / "file").write_text("x")

        assert remove_path(tmp_path / "dir") is True
        assert remove_path(tmp_path / "file") is False
        assert list(tmp_path.iterdir()) == []

    def test_move_directory_merges(self, tmp_path):
        """기존 디렉토리로 이동 시 병합 및 덮어쓰기"""
        source = tmp_path / "src"
        target = tmp_path / "dst"
        (source / "sub").mkdir(parents=True)
        (source / "sub" / "a.txt").write_text("new")
        (target / "sub").mkdir(parents=True)
        (target / "sub" / "a.txt").write_text("old")
        (target / "sub" / "b.txt").write_text("keep")

        move_path(source, target)

        assert not source.exists()
        assert (target / "sub" / "a.txt").read_text() == "new"
        assert (target / "sub" / "b.txt").read_text() == "keep"

    def test_move_file(self, tmp_path):
        """파일 이동"""
        (tmp_path / "a.txt").write_text("a")

        move_path(tmp_path / "a.txt", tmp_path / "b.txt")

        assert not (tmp_path / "a.txt").exists()
        assert (tmp_path / "b.txt").read_text() == "a"

    def test_move_replaces_other_type(self, tmp_path):
        """종류가 다른 기존 대상은 삭제 후 이동"""
        (tmp_path / "file").write_text("f")
        (tmp_path / "dir_target" / "x").mkdir(parents=True)
        (tmp_path / "dir" / "sub").mkdir(parents=True)
        (tmp_path / "file_target").write_text("old")

        move_path(tmp_path / "file", tmp_path / "dir_target")
        move_path(tmp_path / "dir", tmp_path / "file_target")

        assert (tmp_path / "dir_target").read_text() == "f"
        assert (tmp_path / "file_target" / "sub").is_dir()
        assert not (tmp_path / "file").exists()
        assert not (tmp_path / "dir").exists()

    def test_read_json_mapping(self, tmp_path):
        """JSON 객체 읽기, 잘못된 파일은 빈 딕셔너리"""
        good = tmp_path / "good.json"
        good.write_text(json.dumps({"a": 1}))
        bad = tmp_path / "bad.json"
        bad.write_text("{")
        listing = tmp_path / "list.json"
        listing.write_text("[1, 2]")

        assert read_json_mapping(good) == {"a": 1}
        assert read_json_mapping(bad) == {}
        assert read_json_mapping(listing) == {}
        assert read_json_mapping(tmp_path / "missing.json") == {}

    def test_write_json_atomic(self, tmp_path):
        """임시 파일을 거쳐 JSON 저장"""
        path = tmp_path / "nested" / "map.json"

        write_json_atomic(path, {"main": "x"})
        write_json_atomic(path, {"main": "y"})

        assert json.loads(path.read_text()) == {"main": "y"}
        assert [p.name for p in path.parent.iterdir()] == ["map.json"]


class TestLogging:
    """로깅 설정 테스트"""

    def test_korean_formatter(self):
        """한국어 로그 형식"""
        formatter = KoreanFormatter(fmt="%(levelname)s: %(message)s")
        record = logging.LogRecord("fromgit", logging.WARNING, __file__, 1, "메시지", None, None)

        assert formatter.format(record) == "경고: 메시지"
        assert record.levelname == "WARNING"

    def test_get_logger_prefix(self):
        """fromgit 로거 아래 이름"""
        assert get_logger("tests.module").name == "fromgit.tests.module"
        assert get_logger("fromgit.repos.parser").name == "fromgit.repos.parser"
        assert get_logger("fromgit").name == "fromgit"

    def test_setup_logging_with_file(self, tmp_path):
        """파일 핸들러 설정"""
        log_file = tmp_path / "logs" / "fromgit.log"
        settings = Settings(cache_dir=str(tmp_path), log_file=str(log_file), log_level="DEBUG")

        logger = setup_logging(settings)
        try:
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 2
            assert logger.propagate is False

            get_logger("tests").info("기록")
            for handler in logger.handlers:
                handler.flush()

            assert "정보" in log_file.read_text(encoding='utf-8')
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True

    def test_setup_logging_level_override(self, tmp_path):
        """로그 레벨 재정의"""
        settings = Settings(cache_dir=str(tmp_path))

        logger = setup_logging(settings, level="error")
        try:
            assert logger.level == logging.ERROR
            assert len(logger.handlers) == 1
        finally:
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True
