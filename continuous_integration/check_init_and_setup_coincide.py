#!/usr/bin/env python3

"""Check that the distribution and xmlexact/__init__.py are in sync."""
import os
import pathlib
import subprocess
import sys
from typing import Optional

import xmlexact


def _query_setup(setup_py_pth: pathlib.Path, field: str) -> str:
    """Retrieve the ``field`` of the distribution as reported by the setup.py."""
    return subprocess.check_output(
        [sys.executable, str(setup_py_pth), f"--{field}"], encoding="utf-8"
    ).strip()


def main() -> int:
    """Execute the main routine."""
    repo_root = pathlib.Path(os.path.realpath(__file__)).parent.parent

    setup_py_pth = repo_root / "setup.py"
    if not setup_py_pth.exists():
        raise RuntimeError(f"Could not find the setup.py: {setup_py_pth}")

    success = True

    expected_in_init = {
        "version": xmlexact.__version__,
        "author": xmlexact.__author__,
        "license": xmlexact.__license__,
        "description": xmlexact.__doc__,
    }

    for field, in_init in expected_in_init.items():
        in_setup = _query_setup(setup_py_pth, field)
        if in_setup != in_init:
            print(
                f"The {field} in the setup.py is {in_setup!r}, "
                f"while the {field} in xmlexact/__init__.py is: {in_init!r}",
                file=sys.stderr,
            )
            success = False

    # NOTE: The status classifier reads "Development Status :: 4 - Beta", while
    # xmlexact/__init__.py states only "Beta".
    status = None  # type: Optional[str]
    for classifier in _query_setup(setup_py_pth, "classifiers").splitlines():
        if classifier.startswith("Development Status ::"):
            status = classifier.split(" - ", 1)[-1]
            break

    if status != xmlexact.__status__:
        print(
            f"The status classifier in the setup.py gives {status!r}, "
            f"while the status in xmlexact/__init__.py is: {xmlexact.__status__!r}",
            file=sys.stderr,
        )
        success = False

    if not success:
        return -1

    return 0


if __name__ == "__main__":
    sys.exit(main())
