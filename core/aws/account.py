"""
core/aws/account.py - 계정 ID 조회

STS GetCallerIdentity로 프로파일 선택별 계정 ID를 병렬 조회합니다.
하나 이상 성공하면 부분 성공으로 간주하고, 성공한 선택만 반환합니다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from botocore.exceptions import BotoCoreError, ClientError

from core.config import ProfileSelection
from core.exceptions import FetchError, format_error_for_user

from .client import build_session, get_client

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

AccountResolver = Callable[[ProfileSelection], str]


@dataclass
class AccountRefreshResult:
    """계정 조회 결과

    Attributes:
        account_ids: 선택 ID -> 계정 ID (성공한 선택만)
        errors: 선택 ID -> 에러 메시지
    """

    account_ids: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return len(self.account_ids)

    @property
    def error_count(self) -> int:
        return len(self.errors)


def fetch_account_id(selection: ProfileSelection, region: str = "") -> str:
    """STS로 선택의 계정 ID 조회

    Raises:
        ClientError / BotoCoreError: 자격 증명 또는 네트워크 오류
    """
    session = build_session(selection, region)
    sts = get_client(session, "sts", max_attempts=2)
    return str(sts.get_caller_identity()["Account"])


def refresh_accounts(
    selections: list[ProfileSelection],
    resolver: AccountResolver | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> AccountRefreshResult:
    """선택별 계정 ID 병렬 조회

    Args:
        selections: 조회할 프로파일 선택 목록
        resolver: 선택 -> 계정 ID 함수 (기본: fetch_account_id)
        max_workers: 최대 동시 스레드 수

    Returns:
        AccountRefreshResult

    Raises:
        FetchError: 모든 선택이 실패한 경우
    """
    resolve = resolver or fetch_account_id
    result = AccountRefreshResult()

    if not selections:
        return result

    with ThreadPoolExecutor(max_workers=min(max_workers, len(selections))) as executor:
        futures = {executor.submit(resolve, selection): selection for selection in selections}

        for future in as_completed(futures):
            selection = futures[future]
            try:
                result.account_ids[selection.id] = future.result()
            except (ClientError, BotoCoreError, FetchError) as e:
                logger.warning(f"계정 조회 실패 [{selection.display_name}]: {e}")
                result.errors[selection.id] = format_error_for_user(e)

    logger.debug(f"계정 조회 완료: 성공 {result.success_count}, 실패 {result.error_count}")

    if result.success_count == 0:
        summary = "; ".join(f"{k}: {v}" for k, v in sorted(result.errors.items()))
        raise FetchError("sts", "accounts", f"모든 프로파일 조회 실패: {summary}")

    return result
