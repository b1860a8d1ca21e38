"""
명령줄 인터페이스 모듈

fromgit <src> [dest] 형태로 저장소를 clone합니다.
"""

import argparse
import asyncio
import sys
from typing import Optional

from pydantic import ValidationError

from .config.settings import Settings
from .exceptions import FromGitException
from .models.base import Event
from .models.enums import FetchMode
from .repos.downloader import fromgit
from .repos.events import EventLog
from .utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """인자 파서 생성"""
    parser = argparse.ArgumentParser(
        prog="fromgit",
        description="저장소로부터 새 프로젝트를 시작합니다",
    )
    parser.add_argument("src", help="저장소 지정자 (user/name[/subdir][#ref] 또는 URL)")
    parser.add_argument("dest", nargs="?", default=".", help="clone할 디렉토리 (기본값: 현재 디렉토리)")
    parser.add_argument("--ref", "--branch", dest="ref", help="체크아웃할 참조 또는 브랜치")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in FetchMode],
        help="획득 방식 (tar: 캐시된 아카이브, git: 직접 clone)",
    )
    parser.add_argument("--cache", action="store_true", help="원격 조회 없이 캐시만 사용")
    parser.add_argument("--force", action="store_true", help="비어 있지 않은 대상 디렉토리 덮어쓰기")
    parser.add_argument("--verbose", action="store_true", help="상세 이벤트 출력")
    parser.add_argument("--cache-dir", help="캐시 디렉토리")
    return parser


def _print_info(event: Event) -> None:
    print(f"> {event.message}", file=sys.stderr)


def _print_warn(event: Event) -> None:
    print(f"! {event.message}", file=sys.stderr)


def _format_validation_error(error: ValidationError) -> str:
    return ", ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    )


def main(argv: Optional[list[str]] = None) -> int:
    """CLI 메인 함수"""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings(cache_dir=args.cache_dir) if args.cache_dir else Settings()
        setup_logging(settings, level="DEBUG" if args.verbose else "ERROR")
        settings.validate_configuration()

        events = EventLog(on_info=_print_info, on_warn=_print_warn, verbose=args.verbose)
        asyncio.run(fromgit(
            args.src,
            args.dest,
            settings=settings,
            events=events,
            force=args.force,
            verbose=args.verbose,
            cache=args.cache,
            ref=args.ref,
            mode=args.mode,
        ))
    except FromGitException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: 잘못된 설정입니다 - {_format_validation_error(e)}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: 파일 시스템 오류 - {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
