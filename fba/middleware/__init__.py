# fba/middleware/__init__.py

"""횡단 관심사 미들웨어 (접근 로그, 작업 로그)."""
