import base64
import unittest

from crashidsync.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def test_bearer_is_passed_through(self) -> None:
        info = AuthInfo("Bearer abc.def")
        self.assertTrue(info.is_bearer)
        self.assertEqual(info.header_value, "Bearer abc.def")

    def test_other_credentials_use_basic_scheme(self) -> None:
        info = AuthInfo("user:pass")
        self.assertFalse(info.is_bearer)
        expected = "Basic " + base64.b64encode(b"user:pass").decode("ascii")
        self.assertEqual(info.header_value, expected)

    def test_lowercase_bearer_is_not_bearer(self) -> None:
        info = AuthInfo("bearer abc")
        self.assertTrue(info.header_value.startswith("Basic "))

    def test_empty_credential_rejected(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo("")
        with self.assertRaises(ValueError):
            AuthInfo("   ")

    def test_repr_hides_credential(self) -> None:
        self.assertNotIn("secret", repr(AuthInfo("user:secret")))


if __name__ == "__main__":
    unittest.main()
