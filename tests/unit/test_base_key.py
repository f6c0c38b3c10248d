import re

from site_walker.base_key import BaseKeyDeriver


def test_uuid_token_is_the_base_key():
    derive = BaseKeyDeriver().derive
    url = "https://example.test/shop/0F8FAD5B-D9CB-469F-A165-70867728950E/price?tab=2"
    assert derive(url) == "0f8fad5b-d9cb-469f-a165-70867728950e"
    assert derive("https://example.test/x/0f8fad5b-d9cb-469f-a165-70867728950e") == derive(url)


def test_detail_page_sub_paths_share_a_key():
    derive = BaseKeyDeriver().derive
    root = "https://www.esthe-ranking.jp/funabashi/shop-detail/monroe"
    assert derive(root + "/") == root
    assert derive(root + "/therapist/") == root
    assert derive(root + "?tab=price") == root


def test_other_locations_are_their_own_key():
    url = "https://www.esthe-ranking.jp/funabashi/"
    assert BaseKeyDeriver().derive(url) == url


def test_custom_patterns():
    deriver = BaseKeyDeriver(id_pattern=re.compile(r"shop-\d+"), detail_pattern=None)
    assert deriver.derive("https://example.test/shop-123/tab/video") == "shop-123"
    assert deriver.derive("https://example.test/shop-detail/x/y") == "https://example.test/shop-detail/x/y"
