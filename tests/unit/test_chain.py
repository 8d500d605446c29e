from threadstacks.services.topology.chain import get_thread_chain


def _chain_ids(items):  # noqa: ANN001
    return [c.id for c in items]


def test_chain_ancestors_root_first_and_descendants_in_tree_order(make_thread):
    threads = [
        make_thread("root", "2025-01-01T00:00:00Z"),
        make_thread("mid", "2025-01-02T00:00:00Z", parent="root"),
        make_thread("me", "2025-01-03T00:00:00Z", parent="mid"),
        make_thread("kid-old", "2025-01-04T00:00:00Z", parent="me"),
        make_thread("kid-new", "2025-01-06T00:00:00Z", parent="me"),
        make_thread("grandkid", "2025-01-05T00:00:00Z", parent="kid-old"),
        make_thread("sibling", "2025-01-07T00:00:00Z", parent="mid"),
    ]

    chain = get_thread_chain(threads, "me")

    assert chain.current.id == "me"
    assert _chain_ids(chain.ancestors) == ["root", "mid"]
    assert _chain_ids(chain.descendants) == ["kid-new", "kid-old", "grandkid"]


def test_chain_carries_display_fields(make_thread):
    threads = [
        make_thread("p", workspace="repo-a"),
        make_thread("c", parent="p"),
    ]

    chain = get_thread_chain(threads, "c")

    assert chain.ancestors[0].title == "Thread p"
    assert chain.ancestors[0].workspace == "repo-a"
    assert chain.ancestors[0].last_updated == "2 hours ago"


def test_chain_unknown_thread_is_empty(make_thread):
    chain = get_thread_chain([make_thread("a")], "zzz")

    assert chain.current is None
    assert chain.ancestors == []
    assert chain.descendants == []


def test_chain_ignores_dangling_parent(make_thread):
    chain = get_thread_chain([make_thread("a", parent="gone")], "a")

    assert chain.ancestors == []
    assert chain.current.id == "a"


def test_chain_cycle_terminates(make_thread):
    threads = [make_thread("a", parent="b"), make_thread("b", parent="a")]

    chain = get_thread_chain(threads, "a")

    assert _chain_ids(chain.ancestors) == ["b"]
    assert chain.descendants == []


def test_chain_out_of_range_timestamps_do_not_raise(make_thread):
    threads = [
        make_thread("p"),
        make_thread("c1", "9999-12-31T23:00:00-05:00", parent="p"),
        make_thread("c2", "2025-01-01T00:00:00Z", parent="p"),
    ]

    chain = get_thread_chain(threads, "p")

    assert _chain_ids(chain.descendants) == ["c2", "c1"]
