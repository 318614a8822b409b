# fba/utils/__init__.py

"""
특정 플러그인에 속하지 않는 범용 유틸리티 패키지입니다.

- request: 클라이언트 IP 추출, User-Agent 파싱
- files: 업로드 파일 저장 (aiofiles)
- tree: parent_id 행 목록 → children 트리
"""
