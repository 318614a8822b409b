# tests/plugins/__init__.py
