# tests/__init__.py

"""
fba 테스트 스위트 패키지입니다.

- test_core.py: 응답 봉투, 검증, 페이지, 플러그인 조립, CRUDBase 단위 테스트
- test_main.py: 앱 팩토리, 헬스 체크, 접근 로그 미들웨어
- test_tasks.py: arq 워커 작업
- test_utils.py: 클라이언트 IP / User-Agent 판별
- plugins/: 플러그인별 API 통합 테스트
"""
