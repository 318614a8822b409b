# fba/core/__init__.py

"""
플러그인 조립 프레임워크의 핵심 패키지입니다.

설정, 오류/응답 봉투, 검증 규칙, 엔티티 저장소 기반 클래스, 인증, 플러그인 계약과
호스트 조립기를 포함합니다.
"""
