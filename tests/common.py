"""Provide common functionality across different tests."""
import os
import pathlib

#: If set, this environment variable indicates that the golden files should be
#: re-recorded instead of checked against.
RERECORD = os.environ.get("XMLEXACT_RERECORD", "").lower() in (
    "1",
    "true",
    "on",
)

#: Root of the repository
REPO_DIR = pathlib.Path(os.path.realpath(__file__)).parent.parent

#: Directory with the test data shared among the tests
TEST_DATA_DIR = REPO_DIR / "test_data"


def join_lines(*lines: str) -> str:
    """Join the ``lines`` with new-lines, without a trailing new-line."""
    return "\n".join(lines)
