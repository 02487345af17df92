"""Unit tests for path-based authorization helpers."""

import pytest

from keyhold_identity import has_permission, is_whitelisted, path_matches_pattern

PERMISSIONS = {
    "admin": ["*"],
    "user": ["/dashboard", "/profile/*", "/projects/*/settings"],
}


class TestPathMatchesPattern:
    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("/dashboard", "/dashboard", True),
            ("/dashboard/x", "/dashboard", False),
            ("/anything/at/all", "*", True),
            ("/profile", "/profile/*", True),
            ("/profile/edit", "/profile/*", True),
            ("/profile/edit/avatar", "/profile/*", True),
            ("/profiles", "/profile/*", False),
            ("/projects/42/settings", "/projects/*/settings", True),
            ("/projects/42/43/settings", "/projects/*/settings", False),
            ("/api/v1/users/7", "/api/*/users/*", True),
            ("/api/v1/users/7/tokens", "/api/*/users/*", False),
            ("/files/report.pdf", "/files/*.pdf", True),
            ("/files/reportXpdf", "/files/*.pdf", False),
        ],
    )
    def test_matching(self, path, pattern, expected):
        assert path_matches_pattern(path, pattern) is expected


class TestHasPermission:
    def test_unconfigured_permissions_deny_everything(self):
        assert has_permission("admin", "/dashboard", {}) is False

    def test_unknown_role_is_denied(self):
        assert has_permission("guest", "/dashboard", PERMISSIONS) is False

    def test_admin_wildcard(self):
        assert has_permission("admin", "/admin/users", PERMISSIONS) is True

    def test_user_patterns(self):
        assert has_permission("user", "/profile/password", PERMISSIONS) is True
        assert has_permission("user", "/admin/users", PERMISSIONS) is False


class TestIsWhitelisted:
    def test_matches_patterns(self):
        whitelist = ["/login", "/reset-password", "/public/*"]

        assert is_whitelisted("/login", whitelist) is True
        assert is_whitelisted("/public/logo.svg", whitelist) is True
        assert is_whitelisted("/dashboard", whitelist) is False

    def test_empty_whitelist(self):
        assert is_whitelisted("/login", []) is False
