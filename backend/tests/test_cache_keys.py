"""
Tests for cache-key building and pattern invalidation.
"""

import fnmatch

import pytest
from hypothesis import given, settings, strategies as st

from shared.config.constants import CacheDomain
from shared.infrastructure.cache import (
    CacheKeyBuilder,
    canonical_json,
    get_or_set,
    invalidate_domain,
    invalidate_entity,
    stable_serialize,
)
from shared.query.pagination import PaginatedRequest


json_scalars = st.none() | st.booleans() | st.integers() | st.text(max_size=20)
json_values = st.recursive(
    json_scalars,
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=12,
)


class TestStableSerialize:

    @given(st.dictionaries(st.text(max_size=8), json_values, max_size=6))
    @settings(max_examples=100)
    def test_key_order_does_not_matter(self, data):
        reordered = dict(reversed(list(data.items())))
        assert stable_serialize(data) == stable_serialize(reordered)

    @given(json_values)
    @settings(max_examples=100)
    def test_no_glob_metacharacters(self, data):
        encoded = stable_serialize(data)
        assert not set(encoded) & set("*?[]:")

    def test_canonical_json_is_compact_and_sorted(self):
        assert canonical_json({"b": 1, "a": [1, {"d": 2, "c": 3}]}) == '{"a":[1,{"c":3,"d":2}],"b":1}'


class TestCacheKeyBuilder:

    def test_by_id(self):
        keys = CacheKeyBuilder(CacheDomain.COURSE)
        assert keys.by_id(12) == "course:id:12"
        assert keys.by_id(12, "fr") == "course:id:12:fr"

    def test_paginated_same_request_same_key(self):
        keys = CacheKeyBuilder(CacheDomain.COURSE)
        first = PaginatedRequest(filter='{"field": "level", "value": "beginner", "operator": "eq"}')
        second = PaginatedRequest(filter='{"operator": "eq", "value": "beginner", "field": "level"}')
        assert keys.paginated(first) == keys.paginated(second)

    def test_paginated_differs_by_page(self):
        keys = CacheKeyBuilder(CacheDomain.COURSE)
        assert keys.paginated(PaginatedRequest(page=1)) != keys.paginated(PaginatedRequest(page=2))

    def test_paginated_differs_by_locale_and_relations(self):
        keys = CacheKeyBuilder(CacheDomain.COURSE)
        base = keys.paginated(PaginatedRequest())
        assert keys.paginated(PaginatedRequest(locale="fr")) != base
        assert keys.paginated(PaginatedRequest(relations=["instructor"])) != base

    def test_relation_order_does_not_change_key(self):
        keys = CacheKeyBuilder(CacheDomain.ARTIST)
        first = PaginatedRequest(relations=[{"albums": ["songs", "artist"]}])
        second = PaginatedRequest(relations=[{"albums": ["artist", "songs"]}])
        assert keys.paginated(first) == keys.paginated(second)

    def test_patterns(self):
        keys = CacheKeyBuilder(CacheDomain.COURSE)
        paginated = keys.paginated(PaginatedRequest())
        assert fnmatch.fnmatchcase(paginated, keys.all_paginated())
        assert fnmatch.fnmatchcase(paginated, keys.all_for_domain())
        assert fnmatch.fnmatchcase(keys.by_id(3, "fr"), keys.all_for_id(3))
        assert not fnmatch.fnmatchcase(keys.by_id(30, "fr"), keys.all_for_id(3))
        assert not fnmatch.fnmatchcase("lesson:id:3", keys.all_for_domain())

    def test_user_scoped(self):
        keys = CacheKeyBuilder(CacheDomain.COURSE)
        key = keys.user_scoped(7, {"page": 1})
        assert key.startswith("course:user:7:")
        assert fnmatch.fnmatchcase(key, keys.all_for_user(7))
        assert not fnmatch.fnmatchcase(key, keys.all_for_user(70))

    @pytest.mark.parametrize("domain", ["", "bad:domain"])
    def test_invalid_domain(self, domain):
        with pytest.raises(ValueError):
            CacheKeyBuilder(domain)


class TestCacheHelpers:

    def test_get_or_set_caches_factory_result(self, cache):
        calls = []

        def factory():
            calls.append(1)
            return {"value": 1}

        assert get_or_set(cache, "k", factory, 60) == {"value": 1}
        assert get_or_set(cache, "k", factory, 60) == {"value": 1}
        assert len(calls) == 1
        assert cache.ttls["k"] == 60

    def test_get_or_set_does_not_cache_errors(self, cache):

        def factory():
            raise LookupError("missing")

        with pytest.raises(LookupError):
            get_or_set(cache, "k", factory)
        assert cache.get("k") is None

    def test_invalidate_entity(self, cache):
        keys = CacheKeyBuilder(CacheDomain.COURSE)
        other = CacheKeyBuilder(CacheDomain.LESSON)
        for key in (
            keys.by_id(1),
            keys.by_id(1, "fr"),
            keys.by_id(2),
            keys.paginated(PaginatedRequest()),
            other.paginated(PaginatedRequest()),
        ):
            cache.set(key, {})

        invalidate_entity(cache, keys, 1)

        assert cache.keys() == sorted([keys.by_id(2), other.paginated(PaginatedRequest())])

    def test_invalidate_domain(self, cache):
        keys = CacheKeyBuilder(CacheDomain.ALBUM)
        cache.set(keys.by_id(1), {})
        cache.set(keys.paginated(PaginatedRequest()), {})
        cache.set("artist:id:1", {})

        invalidate_domain(cache, keys)

        assert cache.keys() == ["artist:id:1"]
