# =============================================================================
# tests/test_body_parsing.py - Form Body Expansion Tests
# =============================================================================
# This module contains tests for:
# - Splitting bracketed form keys
# - Building nested objects and lists from flat form pairs
# =============================================================================

from __future__ import annotations

import pytest

from app.dependencies import expand_form, split_form_key


class TestSplitFormKey:
    """Bracket syntax in form field names."""

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("name", ["name"]),
            ("product[name]", ["product", "name"]),
            ("product[origin][country]", ["product", "origin", "country"]),
            ("tags[]", ["tags", ""]),
            ("[orphan]", ["[orphan]"]),
            ("broken[key", ["broken[key"]),
            ("trailing[a]b", ["trailing[a]b"]),
        ],
    )
    def test_split(self, key, expected):
        assert split_form_key(key) == expected


class TestExpandForm:
    """Flat pairs to nested dicts."""

    def test_plain_fields(self):
        assert expand_form([("name", "Tea"), ("sku", "T-1")]) == {"name": "Tea", "sku": "T-1"}

    def test_nested_objects(self):
        body = expand_form([
            ("batch[product][name]", "Tea"),
            ("batch[product][grade]", "A"),
            ("batch[quantity]", "40"),
        ])

        assert body == {"batch": {"product": {"name": "Tea", "grade": "A"}, "quantity": "40"}}

    def test_list_syntax(self):
        body = expand_form([("tags[]", "organic"), ("tags[]", "vegan")])

        assert body == {"tags": ["organic", "vegan"]}

    def test_single_list_item_is_still_a_list(self):
        assert expand_form([("tags[]", "organic")]) == {"tags": ["organic"]}

    def test_repeated_plain_key_collects_values(self):
        body = expand_form([("stop", "Nairobi"), ("stop", "Mombasa"), ("stop", "Dubai")])

        assert body == {"stop": ["Nairobi", "Mombasa", "Dubai"]}

    def test_empty_form(self):
        assert expand_form([]) == {}
