"""
공통 테스트 픽스처

격리된 캐시 디렉토리 설정, 테스트용 tarball 생성기, 가짜 전송 객체를 제공합니다.
"""

import hashlib
import io
import shutil
import tarfile
from pathlib import Path
from typing import Union

import git
import pytest

from fromgit.config.settings import Settings
from fromgit.exceptions import TransportException


def fake_hash(seed: str) -> str:
    """테스트용 40자리 커밋 해시"""
    return hashlib.sha1(seed.encode('utf-8')).hexdigest()


HASH_MAIN = fake_hash("main")
HASH_RELEASE = fake_hash("release")
HASH_TAG = fake_hash("v1.2.3")


def ls_remote_output(*rows: tuple[str, str]) -> str:
    """(hash, ref) 목록을 ls-remote 출력 형식으로 변환"""
    return "\n".join(f"{commit}\t{ref}" for commit, ref in rows)


def build_tarball(path: Path, wrapper: str, files: dict[str, str]) -> Path:
    """
    GitHub 아카이브와 같은 구조("<wrapper>/...")의 tar.gz 생성

    Args:
        path: 생성할 파일 경로
        wrapper: 최상위 래퍼 디렉토리 이름
        files: 래퍼 기준 상대 경로 → 내용
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        root = tarfile.TarInfo(wrapper)
        root.type = tarfile.DIRTYPE
        root.mode = 0o755
        tar.addfile(root)

        for name, content in files.items():
            data = content.encode('utf-8')
            info = tarfile.TarInfo(f"{wrapper}/{name}")
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return path


def write_files(root: Path, files: dict[str, str]) -> None:
    for name, content in files.items():
        path = Path(root) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')


class FakeGitTransport:
    """
    URL별 ls-remote 출력과 clone 결과를 돌려주는 가짜 전송

    repositories는 URL → {ref: (commit, files)} 형태이며 "HEAD" 항목이 clone 직후 상태입니다.
    """

    def __init__(self, listings: dict[str, str], repositories: dict[str, dict] = None):
        self.listings = listings
        self.repositories = repositories or {}
        self.calls: list[str] = []
        self.clones: dict[Path, str] = {}

    async def ls_remote(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.listings:
            raise git.exc.GitCommandError(["git", "ls-remote", url], 128, b"fatal: unable to access")
        return self.listings[url]

    async def clone(self, url: str, target: Path) -> None:
        if url not in self.repositories:
            raise git.exc.GitCommandError(["git", "clone", url], 128, b"fatal: repository not found")
        _, files = self.repositories[url]["HEAD"]
        write_files(Path(target) / ".git", {"HEAD": "ref: refs/heads/main"})
        write_files(target, files)
        self.clones[Path(target)] = url

    async def checkout(self, target: Path, ref: str) -> str:
        refs = self.repositories[self.clones[Path(target)]]
        if ref not in refs:
            raise git.exc.GitCommandError(["git", "checkout", ref], 1, b"error: pathspec did not match")
        commit, files = refs[ref]
        if ref != "HEAD":
            for entry in Path(target).iterdir():
                if entry.name == ".git":
                    continue
                if entry.is_dir():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            write_files(target, files)
        return commit


class FakeHttpTransport:
    """
    URL별 tarball을 생성해 주는 가짜 전송 (요청 횟수 기록)

    archives 값이 bytes이면 그 내용을 그대로 응답 본문으로 씁니다.
    """

    def __init__(self, archives: dict[str, Union[tuple[str, dict[str, str]], bytes]], proxy: str = None):
        self.archives = archives
        self.proxy = proxy
        self.requests: list[str] = []
        self.closed = False

    async def fetch(self, url: str, dest: Path) -> None:
        self.requests.append(url)
        if url not in self.archives:
            raise TransportException(url, 404, "Not Found")
        body = self.archives[url]
        if isinstance(body, bytes):
            Path(dest).parent.mkdir(parents=True, exist_ok=True)
            Path(dest).write_bytes(body)
            return
        wrapper, files = body
        build_tarball(dest, wrapper, files)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    """임시 캐시 디렉토리를 쓰는 설정"""
    return Settings(cache_dir=str(tmp_path / "cache"), https_proxy=None)


@pytest.fixture
def dest(tmp_path):
    """clone 대상 디렉토리 경로 (아직 생성되지 않음)"""
    return tmp_path / "project"
