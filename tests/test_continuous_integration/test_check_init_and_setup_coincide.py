# pylint: disable=missing-docstring

import contextlib
import io
import unittest

import continuous_integration.check_init_and_setup_coincide


class Test_check_init_and_setup_coincide(unittest.TestCase):
    def test_repository_is_in_sync(self) -> None:
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            exit_code = continuous_integration.check_init_and_setup_coincide.main()

        self.assertEqual(0, exit_code, stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
