from mlrest.entities import PagedList


def test_paged_list():
    items = [1, 2, 3]
    paged = PagedList(items, "abc")
    assert paged == items
    assert paged.token == "abc"
    assert list(paged) == items
    assert PagedList([], None).token is None
