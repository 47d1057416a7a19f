"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
레지스트리를 생성하고 플러그인 카탈로그를 등록한 뒤 리소스 브라우저 셸을 실행합니다.

명령어 구조:
    ab                          # 대화형 브라우저 (첫 번째 서비스)
    ab <target>                 # 특정 리소스 타입으로 시작 (service[/resource] 또는 별칭)
    ab ls                       # 리소스 타입 목록
    ab get <target> [옵션]      # 리소스 목록 출력 (비대화형)
    ab --version                # 버전 표시

    예시:
    ab ec2                      # EC2 인스턴스
    ab sg -r ap-northeast-2     # 보안 그룹 (서울 리전)
    ab i -r ap-northeast-2 -r us-east-1   # 멀티 리전 조회
    ab get lambda --sort MEMORY --desc

아키텍처:
    1. cli(): Click 그룹 - 공통 옵션 검증, 설정/레지스트리 구성
    2. _build_registries(): Registry + ActionRegistry 생성, load_catalog()로 플러그인 등록
    3. TargetGroup: 등록되지 않은 명령 이름은 TARGET으로 보고 Shell(...).run(target) 실행
    4. get_resources(): ResourceBrowser를 동기 구동하여 표 출력

Usage:
    $ ab
    $ ab ec2/security-groups -p dev --read-only
    $ python -m cli.app
"""

from __future__ import annotations

import logging
from typing import Any

import click
from click import Command, Context
from rich.table import Table

from cli.i18n import SUPPORTED_LANGS, set_lang, t
from cli.ui.console import configure_logging, console, print_info, print_table, print_warning
from core.action.registry import ActionRegistry
from core.aws.account import refresh_accounts
from core.browser.messages import (
    KeyPress,
    NoticeEffect,
    SortRequested,
    TagFilterRequested,
    TextFilterChanged,
    UpdateResult,
)
from core.browser.surface import ResourceBrowser
from core.catalog import load_catalog
from core.config import AppConfig, ProfileSelection, get_version, is_valid_profile_name, is_valid_region
from core.exceptions import FetchError, ResourceTypeNotFoundError, format_error_for_user
from core.registry import Registry

logger = logging.getLogger(__name__)

VERSION = get_version()

# 비대화형 조회에서 --all 일 때 최대 페이지 수
MAX_HEADLESS_PAGES = 100


# =============================================================================
# 옵션 검증
# =============================================================================


def _validate_profiles(ctx: Context, param: click.Parameter, value: tuple[str, ...]) -> tuple[str, ...]:
    for name in value:
        if not is_valid_profile_name(name):
            raise click.BadParameter(t("cli.invalid_profile", name=name))
    return value


def _validate_regions(ctx: Context, param: click.Parameter, value: tuple[str, ...]) -> tuple[str, ...]:
    for region in value:
        if not is_valid_region(region):
            raise click.BadParameter(t("cli.invalid_region", region=region))
    return value


def build_config(
    profiles: tuple[str, ...] = (),
    regions: tuple[str, ...] = (),
    env_only: bool = False,
    read_only: bool = False,
    demo: bool = False,
    environ: dict[str, str] | None = None,
) -> AppConfig:
    """환경변수 + 명령줄 옵션으로 AppConfig 생성 (옵션이 우선)"""
    if env_only and profiles:
        raise click.UsageError(t("cli.profile_env_conflict"))

    config = AppConfig.from_env(environ)
    if env_only:
        config.set_selection(ProfileSelection.env_only())
    elif profiles:
        config.set_selections([ProfileSelection.named(p) for p in profiles])
    if regions:
        config.set_regions(list(regions))
    if read_only:
        config.set_read_only(True)
    if demo:
        config.set_demo_mode(True)
    return config


def _build_registries() -> tuple[Registry, ActionRegistry]:
    registry = Registry()
    actions = ActionRegistry()
    count = load_catalog(registry, actions)
    logger.debug(f"리소스 타입 {count}개 등록")
    return registry, actions


def _refresh_accounts(config: AppConfig) -> None:
    """계정 ID 조회 (실패해도 브라우저는 실행, 경고만 남김)"""
    try:
        result = refresh_accounts(config.selections)
    except FetchError as e:
        config.add_warning(t("cli.account_refresh_failed", error=format_error_for_user(e)))
        return
    config.set_account_ids(result.account_ids)
    for selection_id, error in result.errors.items():
        config.add_warning(t("cli.account_refresh_failed", error=f"{selection_id}: {error}"))


def _build_help_text() -> str:
    lines = [
        "AB - AWS Resource Browser",
        "",
        t("cli.help_intro"),
        "",
        "\b",  # Click 줄바꿈 유지 마커
        t("cli.help_basic_usage"),
        f"  ab                  {t('cli.help_browse')}",
        f"  ab <target>         {t('cli.help_browse_target')}",
        f"  ab ls               {t('cli.help_list_types')}",
        f"  ab get <target>     {t('cli.help_get')}",
        "",
        "\b",
        "  ab ec2 -r ap-northeast-2",
        "  ab sg -p dev --read-only",
        "  ab get lambda --sort MEMORY --desc",
    ]
    return "\n".join(lines)


# =============================================================================
# 메인 그룹
# =============================================================================


class TargetGroup(click.Group):
    """등록된 명령이 아닌 이름은 브라우저 시작 대상(TARGET)으로 처리하는 그룹

    ab ec2/instances, ab sg 처럼 리소스 타입을 바로 지정할 수 있습니다.
    """

    def get_command(self, ctx: Context, cmd_name: str) -> Command | None:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        if cmd_name.startswith("-"):
            return None
        return self._create_browse_command(cmd_name)

    def _create_browse_command(self, target: str) -> Command:
        @click.command(name=target)
        @click.pass_context
        def browse_cmd(ctx: Context) -> None:
            """리소스 타입으로 브라우저 시작"""
            _browse(ctx.obj, target)

        return browse_cmd


def _browse(obj: dict[str, Any], target: str = "") -> None:
    from cli.ui.shell import Shell

    config: AppConfig = obj["config"]
    _refresh_accounts(config)
    for warning in config.warnings:
        print_warning(warning)
    if config.read_only:
        print_info(t("browser.read_only_banner"))
    Shell(obj["registry"], config, obj["actions"], auto_reload=obj["auto_reload"]).run(target)


@click.group(cls=TargetGroup, invoke_without_command=True)
@click.version_option(VERSION, prog_name="ab")
@click.option("-p", "--profile", "profiles", multiple=True, callback=_validate_profiles, help="AWS 프로파일 (다중 가능)")
@click.option("-r", "--region", "regions", multiple=True, callback=_validate_regions, help="리전 (다중 가능)")
@click.option("-e", "--env", "env_only", is_flag=True, help="환경변수 자격 증명만 사용 (~/.aws 무시)")
@click.option("--read-only", is_flag=True, help="읽기 전용 모드 (변경 액션 차단)")
@click.option("--demo", is_flag=True, help="데모 모드 (계정 ID 마스킹)")
@click.option("--reload", "auto_reload", type=click.FloatRange(min=0), default=0.0, help="자동 새로고침 간격(초)")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="디버그 로그 파일 경로")
@click.option("-v", "--verbose", is_flag=True, help="INFO 로그를 콘솔에 출력")
@click.option(
    "--lang",
    type=click.Choice(list(SUPPORTED_LANGS)),
    default="ko",
    help="UI 언어 설정 / UI language (ko: 한국어, en: English)",
)
@click.pass_context
def cli(
    ctx: Context,
    profiles: tuple[str, ...],
    regions: tuple[str, ...],
    env_only: bool,
    read_only: bool,
    demo: bool,
    auto_reload: float,
    log_file: str | None,
    verbose: bool,
    lang: str,
) -> None:
    """AB - AWS Resource Browser"""
    set_lang(lang)
    configure_logging(log_file, verbose)

    config = build_config(profiles, regions, env_only, read_only, demo)
    registry, actions = _build_registries()

    ctx.ensure_object(dict)
    ctx.obj.update(lang=lang, config=config, registry=registry, actions=actions, auto_reload=auto_reload)

    if ctx.invoked_subcommand is None:
        _browse(ctx.obj)


cli.help = _build_help_text()


# =============================================================================
# ls - 리소스 타입 목록
# =============================================================================


@cli.command("ls")
@click.pass_context
def list_types(ctx: Context) -> None:
    """리소스 타입 목록"""
    registry: Registry = ctx.obj["registry"]

    aliases_by_target: dict[str, list[str]] = {}
    for alias, (domain, kind) in sorted(registry.aliases().items()):
        key = f"{domain}/{kind}" if kind else domain
        aliases_by_target.setdefault(key, []).append(alias)

    rows = []
    for target in registry.list_types():
        domain = target.partition("/")[0]
        names = aliases_by_target.get(target, []) + aliases_by_target.get(domain, [])
        rows.append([target, registry.display_name(domain), ", ".join(dict.fromkeys(names))])

    columns = [t("browser.col_target"), t("browser.col_service"), t("browser.col_aliases")]
    print_table(t("browser.types_title"), columns, rows)


# =============================================================================
# get - 비대화형 조회
# =============================================================================


def run_until_idle(browser: ResourceBrowser, result: UpdateResult) -> list[NoticeEffect]:
    """작업을 현재 스레드에서 순서대로 실행하며 결과를 update()에 전달

    Returns:
        처리 중 발생한 안내 효과
    """
    notices = [e for e in result.effects if isinstance(e, NoticeEffect)]
    pending = list(result.tasks)
    while pending:
        msg = pending.pop(0)()
        step = browser.update(msg)
        pending.extend(step.tasks)
        notices.extend(e for e in step.effects if isinstance(e, NoticeEffect))
    return notices


def load_browser(
    registry: Registry,
    config: AppConfig,
    target: str,
    *,
    text_filter: str = "",
    tag_filter: str = "",
    sort_column: str = "",
    descending: bool = False,
    fetch_all: bool = False,
) -> tuple[ResourceBrowser, list[NoticeEffect]]:
    """대상 리소스 타입을 조회하고 필터/정렬까지 적용한 브라우저 반환

    Raises:
        ResourceTypeNotFoundError: 대상을 해석할 수 없는 경우
    """
    domain, kind = registry.resolve(target)
    browser = ResourceBrowser(registry, config, domain, kind)
    notices = run_until_idle(browser, browser.init())

    if fetch_all:
        for _ in range(MAX_HEADLESS_PAGES):
            if browser.error is not None or not browser.pagination.state.has_more:
                break
            step = browser.update(KeyPress("N"))
            if not step.tasks:
                break
            notices.extend(run_until_idle(browser, step))

    if text_filter:
        notices.extend(run_until_idle(browser, browser.update(TextFilterChanged(text_filter))))
    if tag_filter:
        browser.update(TagFilterRequested(tag_filter))
    if sort_column:
        step = browser.update(SortRequested(sort_column, ascending=not descending))
        notices.extend(e for e in step.effects if isinstance(e, NoticeEffect))
    return browser, notices


@cli.command("get")
@click.argument("target")
@click.option("-f", "--filter", "text_filter", default="", help="텍스트 필터 (퍼지 일치)")
@click.option("-t", "--tag", "tag_filter", default="", help="태그 필터 (key, key=value, key~sub)")
@click.option("-s", "--sort", "sort_column", default="", help="정렬 컬럼 이름")
@click.option("--desc", is_flag=True, help="내림차순 정렬")
@click.option("-a", "--all", "fetch_all", is_flag=True, help="모든 페이지 조회")
@click.pass_context
def get_resources(
    ctx: Context,
    target: str,
    text_filter: str,
    tag_filter: str,
    sort_column: str,
    desc: bool,
    fetch_all: bool,
) -> None:
    """리소스 목록 출력 (비대화형)"""
    registry: Registry = ctx.obj["registry"]
    config: AppConfig = ctx.obj["config"]

    try:
        with console.status(f"[bold blue]{t('browser.loading')}"):
            browser, notices = load_browser(
                registry,
                config,
                target,
                text_filter=text_filter,
                tag_filter=tag_filter,
                sort_column=sort_column,
                descending=desc,
                fetch_all=fetch_all,
            )
    except ResourceTypeNotFoundError:
        click.echo(t("cli.target_not_found", target=target), err=True)
        raise SystemExit(1) from None

    for notice in notices:
        print_warning(notice.text)

    if browser.error is not None:
        click.echo(t("cli.fetch_failed", error=format_error_for_user(browser.error)), err=True)
        raise SystemExit(1)

    table_spec, rows = browser.table()
    # 첫 컬럼은 마크 표시용
    table = Table(title=browser.title, show_header=True, header_style="bold magenta")
    for column in table_spec.columns[1:]:
        table.add_column(column.title, overflow="fold")
    for row in rows:
        table.add_row(*row[1:])
    console.print(table)
    console.print(f"[dim]{t('cli.items_count', count=len(rows))}[/dim]")


if __name__ == "__main__":
    cli()
