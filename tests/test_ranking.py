from socials.core.ranking import apply_source_limits, effective_limit, limit_and_rank, rank_by_recency
from helpers import make_item, make_matched


def test_effective_limit_prefers_override_including_zero():
    assert effective_limit("hn", {"hn": 3}, 10) == 3
    assert effective_limit("hn", {"hn": 0}, 10) == 0
    assert effective_limit("ddg", {"hn": 3}, 10) == 10


def test_source_limit_keeps_head_of_arrival_order():
    items = [make_matched(make_item(source="reddit", link=f"https://r/{i}", hours_ago=10 - i)) for i in range(5)]
    limited = apply_source_limits(items, {"reddit": 2}, 10)
    assert [m.item.link for m in limited] == ["https://r/0", "https://r/1"]


def test_zero_limit_suppresses_source():
    items = [
        make_matched(make_item(source="hn", link="https://h/1")),
        make_matched(make_item(source="ddg", link="https://d/1")),
    ]
    limited = apply_source_limits(items, {"hn": 0}, 10)
    assert [m.item.source for m in limited] == ["ddg"]


def test_global_limit_applies_per_source():
    items = [make_matched(make_item(source="hn", link=f"https://h/{i}")) for i in range(3)]
    items += [make_matched(make_item(source="ddg", link=f"https://d/{i}")) for i in range(3)]
    limited = apply_source_limits(items, {}, 2)
    assert len(limited) == 4


def test_rank_newest_first_and_undated_last():
    undated = make_matched(make_item(link="https://none"))
    older = make_matched(make_item(link="https://t1", hours_ago=5))
    newer = make_matched(make_item(link="https://t2", hours_ago=1))
    ranked = rank_by_recency([undated, older, newer])
    assert [m.item.link for m in ranked] == ["https://t2", "https://t1", "https://none"]


def test_rank_is_stable_for_ties():
    first = make_matched(make_item(source="ddg", link="https://d/1"))
    second = make_matched(make_item(source="ddg", link="https://d/2"))
    assert rank_by_recency([first, second]) == [first, second]


def test_limit_happens_before_sort():
    # The newest reddit item arrives last and is cut by the cap.
    items = [
        make_matched(make_item(source="reddit", link="https://r/old", hours_ago=48)),
        make_matched(make_item(source="reddit", link="https://r/new", hours_ago=1)),
        make_matched(make_item(source="hn", link="https://h/mid", hours_ago=24)),
    ]
    final = limit_and_rank(items, {"reddit": 1}, 10)
    assert [m.item.link for m in final] == ["https://h/mid", "https://r/old"]
