"""Pytest configuration and hooks for automatic test skipping.

Skips test modules whose third-party dependencies are not importable, so a
partial environment (e.g. without FastAPI) still runs the routing tests.
"""

import importlib.util

import pytest  # noqa: F401 - Required by pytest hooks

# Cache for module availability checks
_module_check_cache: dict[str, bool] = {}

# (import_pattern_in_file, required_module_to_check)
OPTIONAL_IMPORTS = [
    ("from fastapi", "fastapi"),
    ("from ai_router.api", "fastapi"),
    ("from ai_router.config", "yaml"),
]


def _check_module_importable(module_name: str) -> bool:
    """
    Check if a module can be found on the import path.

    Args:
        module_name: Name of the module to check

    Returns:
        True if module is installed, False otherwise
    """
    if module_name not in _module_check_cache:
        _module_check_cache[module_name] = importlib.util.find_spec(module_name) is not None
    return _module_check_cache[module_name]


def pytest_ignore_collect(collection_path, config):
    """
    Decide whether to ignore a test file during collection.

    Args:
        collection_path: Path object for the file/directory
        config: pytest config object

    Returns:
        True to ignore the file, None to collect it
    """
    if collection_path.suffix != ".py" or "tests" not in str(collection_path):
        return None

    try:
        content = collection_path.read_text()
    except OSError:
        return None

    for import_pattern, required_module in OPTIONAL_IMPORTS:
        if import_pattern in content and not _check_module_importable(required_module):
            return True
    return None


def pytest_report_header(config):
    """
    Add custom header to pytest output.

    Returns:
        List of header lines
    """
    return [
        "Auto-skip enabled: Tests with missing dependencies will be skipped",
        "Run 'pip install -e .[test]' to enable all tests",
    ]
