"""
Tests for post ownership checks.
"""

from types import SimpleNamespace

import pytest

from apps.posts.permissions import is_post_owner, normalize_principal_id


class TestNormalizePrincipalId:
    @pytest.mark.parametrize("value,expected", [(7, 7), ("7", 7), ("0042", 42)])
    def test_accepts_ints_and_digit_strings(self, value, expected):
        assert normalize_principal_id(value) == expected

    @pytest.mark.parametrize(
        "value", [None, "", " 7", "7 ", "+7", "-7", "7.0", "1e3", "٧", True, False, 7.0, [7]]
    )
    def test_rejects_everything_else(self, value):
        assert normalize_principal_id(value) is None


class TestIsPostOwner:
    def test_matches_author(self):
        post = SimpleNamespace(author_id=7)

        assert is_post_owner(post, 7) is True
        assert is_post_owner(post, "7") is True

    def test_other_user_is_not_owner(self):
        post = SimpleNamespace(author_id=7)

        assert is_post_owner(post, 8) is False

    def test_missing_or_malformed_principal_is_not_owner(self):
        post = SimpleNamespace(author_id=1)

        assert is_post_owner(post, None) is False
        assert is_post_owner(post, True) is False
        assert is_post_owner(post, "1.0") is False
