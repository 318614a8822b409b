# fba/plugins/__init__.py

"""
기능 플러그인 모음입니다.

각 하위 패키지는 models / schemas / errors / crud / routers 와 Plugin 하위 클래스를
가진 자기 완결적 기능 묶음입니다. 등록 순서는 registry.py 가 정합니다.
"""
