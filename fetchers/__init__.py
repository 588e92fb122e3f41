# fetchers/__init__.py
