# fba/__init__.py

"""
FBA 관리자 백오피스 API의 메인 패키지입니다.

이 패키지는 플러그인 조립 프레임워크(core), 공통 미들웨어(middleware),
그리고 각 기능을 담당하는 플러그인(plugins) 서브패키지로 구성됩니다.
애플리케이션 진입점은 main.py(create_app)와 cli.py(typer 명령)입니다.
"""

APP_NAME = "FBA Admin API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"      # API 라우트의 공통 접두사
ADMIN_NAMESPACE = "/sys"    # Extension 플러그인이 붙는 관리자 네임스페이스

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Plugin-organized administrative back-office API."
__author__ = "wu-clan"
__license__ = "MIT"
__all__ = []
