# core/__init__.py
"""
core - AWS 리소스 브라우저 엔진

UI와 무관한 브라우저 엔진 전체를 포함하는 최상위 패키지입니다.
리소스 모델, 레지스트리, 목록 화면 상태, 액션 안전 계층을 통합합니다.

아키텍처:
    core/
    ├── aws/            # 세션/클라이언트, 페이지 파라미터, 계정 조회
    ├── resource/       # 리소스 모델, capability 계약, 표시 포맷
    ├── registry/       # 리소스 타입 레지스트리 (별칭, 리전 래퍼)
    ├── browser/        # 필터/정렬/페이지네이션, ResourceBrowser
    ├── action/         # 액션 정책, 변수 치환, 입력 확인, 실행
    ├── metrics/        # CloudWatch 메트릭 오버레이
    ├── catalog.py      # 플러그인 discovery 및 등록
    ├── config.py       # 런타임 설정 (AppConfig)
    ├── context.py      # 조회 컨텍스트 (FetchContext)
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 레지스트리 구성
    from core.registry import Registry
    from core.action import ActionRegistry
    from core.catalog import load_catalog

    registry, actions = Registry(), ActionRegistry()
    load_catalog(registry, actions)

    # 예외 처리
    from core.exceptions import FetchError, is_access_denied
    try:
        ...
    except FetchError as e:
        if is_access_denied(e):
            print("권한이 없습니다")
"""

from core import action, aws, browser, config, context, exceptions, metrics, registry, resource

__all__: list[str] = [
    # 서브패키지
    "action",
    "aws",
    "browser",
    "metrics",
    "registry",
    "resource",
    # 모듈
    "config",
    "context",
    "exceptions",
]
