"""
core/config.py - 애플리케이션 런타임 설정

현재 리전/프로파일 선택, 계정 ID, 읽기 전용 모드 등 화면 간에 공유되는
런타임 설정을 보관합니다. CLI에서 한 번 생성하여 각 컴포넌트에 주입합니다.

주요 구성 요소:
- CredentialMode / ProfileSelection: 자격 증명 선택 방식
- AppConfig: 스레드 세이프 설정 컨테이너
- is_valid_profile_name / is_valid_region: 입력 검증
- get_version: 설치된 패키지 버전

Example:
    config = AppConfig.from_env()
    config.set_regions(["ap-northeast-2", "us-east-1"])
    if config.read_only:
        ...
"""

from __future__ import annotations

import logging
import os
import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from importlib.metadata import PackageNotFoundError, version

logger = logging.getLogger(__name__)

# 데모 모드에서 표시되는 계정 ID
DEMO_ACCOUNT_ID = "123456789012"

# 특수 프로파일 ID (프로파일 이름과 충돌하지 않도록 밑줄로 감쌈)
PROFILE_ID_SDK_DEFAULT = "__sdk_default__"
PROFILE_ID_ENV_ONLY = "__env_only__"

PACKAGE_NAME = "aws-browser"

# 환경변수
ENV_READ_ONLY = "AB_READ_ONLY"

_PROFILE_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")
_REGION_RE = re.compile(r"^[a-z]{2}(-[a-z]+)+-\d{1,2}$")


def is_valid_profile_name(name: str) -> bool:
    """프로파일 이름 형식 검증 (영숫자, 하이픈, 밑줄, 마침표)"""
    return bool(name) and bool(_PROFILE_NAME_RE.match(name))


def is_valid_region(region: str) -> bool:
    """리전 형식 검증 (예: ap-northeast-2, us-gov-west-1)"""
    return bool(region) and bool(_REGION_RE.match(region))


def get_version() -> str:
    """설치된 패키지 버전 (소스 트리에서 직접 실행하면 0.0.0)"""
    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0"


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# 프로파일 선택
# =============================================================================


class CredentialMode(Enum):
    """자격 증명 선택 방식"""

    SDK_DEFAULT = "sdk_default"  # SDK 기본 체인 (~/.aws + 환경변수 + IMDS)
    NAMED_PROFILE = "named_profile"  # ~/.aws/config의 명명된 프로파일
    ENV_ONLY = "env_only"  # 환경변수/IMDS만 사용, ~/.aws 파일 무시


@dataclass(frozen=True)
class ProfileSelection:
    """자격 증명 선택

    Attributes:
        mode: 자격 증명 방식
        profile_name: NAMED_PROFILE일 때의 프로파일 이름
    """

    mode: CredentialMode = CredentialMode.SDK_DEFAULT
    profile_name: str = ""

    @classmethod
    def sdk_default(cls) -> ProfileSelection:
        return cls(CredentialMode.SDK_DEFAULT)

    @classmethod
    def env_only(cls) -> ProfileSelection:
        return cls(CredentialMode.ENV_ONLY)

    @classmethod
    def named(cls, profile_name: str) -> ProfileSelection:
        return cls(CredentialMode.NAMED_PROFILE, profile_name)

    @classmethod
    def from_id(cls, selection_id: str) -> ProfileSelection:
        """ID 문자열에서 선택 복원 (특수 ID 또는 프로파일 이름)"""
        if selection_id in ("", PROFILE_ID_SDK_DEFAULT):
            return cls.sdk_default()
        if selection_id == PROFILE_ID_ENV_ONLY:
            return cls.env_only()
        return cls.named(selection_id)

    @property
    def id(self) -> str:
        if self.mode == CredentialMode.NAMED_PROFILE:
            return self.profile_name
        if self.mode == CredentialMode.ENV_ONLY:
            return PROFILE_ID_ENV_ONLY
        return PROFILE_ID_SDK_DEFAULT

    @property
    def is_named_profile(self) -> bool:
        return self.mode == CredentialMode.NAMED_PROFILE

    @property
    def is_env_only(self) -> bool:
        return self.mode == CredentialMode.ENV_ONLY

    @property
    def display_name(self) -> str:
        if self.mode == CredentialMode.NAMED_PROFILE:
            return self.profile_name
        if self.mode == CredentialMode.ENV_ONLY:
            return "(env only)"
        return "(sdk default)"


# =============================================================================
# 애플리케이션 설정
# =============================================================================


class AppConfig:
    """스레드 세이프 런타임 설정

    조회 작업은 워커 스레드에서 실행되므로 모든 접근은 락으로 보호합니다.
    """

    def __init__(
        self,
        regions: list[str] | None = None,
        selections: list[ProfileSelection] | None = None,
        read_only: bool = False,
        demo_mode: bool = False,
    ):
        self._lock = threading.RLock()
        self._regions: list[str] = list(regions or [])
        self._selections: list[ProfileSelection] = list(selections or [ProfileSelection.sdk_default()])
        self._account_ids: dict[str, str] = {}
        self._warnings: list[str] = []
        self._read_only = read_only
        self._demo_mode = demo_mode

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """환경변수에서 초기 설정 생성

        - AB_READ_ONLY=1|true: 읽기 전용 모드
        - AWS_PROFILE: 명명된 프로파일
        - AWS_REGION / AWS_DEFAULT_REGION: 기본 리전
        """
        env = os.environ if environ is None else environ

        config = cls(read_only=_is_truthy(env.get(ENV_READ_ONLY)))

        profile = env.get("AWS_PROFILE", "")
        if profile:
            config.set_selection(ProfileSelection.named(profile))

        region = env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or ""
        if region:
            config.set_regions([region])

        return config

    # -------------------------------------------------------------------------
    # 리전
    # -------------------------------------------------------------------------

    @property
    def region(self) -> str:
        """현재(첫 번째) 리전, 없으면 빈 문자열"""
        with self._lock:
            return self._regions[0] if self._regions else ""

    @property
    def regions(self) -> list[str]:
        with self._lock:
            return list(self._regions)

    def set_region(self, region: str) -> None:
        self.set_regions([region] if region else [])

    def set_regions(self, regions: list[str]) -> None:
        # 순서를 유지하며 중복 제거
        unique = list(dict.fromkeys(r for r in regions if r))
        with self._lock:
            self._regions = unique
        logger.debug(f"리전 설정: {unique}")

    @property
    def is_multi_region(self) -> bool:
        with self._lock:
            return len(self._regions) > 1

    # -------------------------------------------------------------------------
    # 프로파일
    # -------------------------------------------------------------------------

    @property
    def selection(self) -> ProfileSelection:
        with self._lock:
            return self._selections[0]

    @property
    def selections(self) -> list[ProfileSelection]:
        with self._lock:
            return list(self._selections)

    def set_selection(self, selection: ProfileSelection) -> None:
        self.set_selections([selection])

    def set_selections(self, selections: list[ProfileSelection]) -> None:
        unique = list(dict.fromkeys(selections)) or [ProfileSelection.sdk_default()]
        with self._lock:
            self._selections = unique
            # 선택이 바뀌면 이전 계정 ID는 무효
            self._account_ids = {k: v for k, v in self._account_ids.items() if k in {s.id for s in unique}}

    @property
    def is_multi_profile(self) -> bool:
        with self._lock:
            return len(self._selections) > 1

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    @property
    def account_id(self) -> str:
        """현재 선택의 계정 ID (데모 모드에서는 마스킹)"""
        with self._lock:
            if self._demo_mode:
                return DEMO_ACCOUNT_ID
            return self._account_ids.get(self._selections[0].id, "")

    def account_id_for(self, selection: ProfileSelection) -> str:
        with self._lock:
            if self._demo_mode:
                return DEMO_ACCOUNT_ID
            return self._account_ids.get(selection.id, "")

    def set_account_id(self, account_id: str, selection: ProfileSelection | None = None) -> None:
        with self._lock:
            key = (selection or self._selections[0]).id
            self._account_ids[key] = account_id

    def set_account_ids(self, account_ids: Mapping[str, str]) -> None:
        with self._lock:
            self._account_ids.update(account_ids)

    def mask_account_id(self, text: str) -> str:
        """데모 모드일 때 문자열 안의 실제 계정 ID를 데모 ID로 치환"""
        with self._lock:
            if not self._demo_mode:
                return text
            for account_id in self._account_ids.values():
                if account_id:
                    text = text.replace(account_id, DEMO_ACCOUNT_ID)
            return text

    # -------------------------------------------------------------------------
    # 모드 / 경고
    # -------------------------------------------------------------------------

    @property
    def read_only(self) -> bool:
        with self._lock:
            return self._read_only

    def set_read_only(self, read_only: bool) -> None:
        with self._lock:
            self._read_only = read_only

    @property
    def demo_mode(self) -> bool:
        with self._lock:
            return self._demo_mode

    def set_demo_mode(self, demo_mode: bool) -> None:
        with self._lock:
            self._demo_mode = demo_mode

    @property
    def warnings(self) -> list[str]:
        with self._lock:
            return list(self._warnings)

    def add_warning(self, message: str) -> None:
        """시작 시 경고 추가 (화면 상단에 표시)"""
        with self._lock:
            self._warnings.append(message)
        logger.warning(message)
