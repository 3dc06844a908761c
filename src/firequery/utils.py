"""
Utility functions for firequery.
"""

import os


def get_project_root() -> str:
    """
    Get the project root directory (parent of src/firequery).

    Returns:
        Absolute path to the project root directory
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def last_path_segment(path: str) -> str:
    """
    Return the final ``/``-separated segment of a path.

    Falls back to the whole path when the final segment is empty
    (e.g. a trailing slash).

    Examples:
        'users' -> 'users'
        'users/abc/orders' -> 'orders'
    """
    return path.split("/")[-1] or path
