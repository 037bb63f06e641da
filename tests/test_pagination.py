from catalog_seeder.client.pagination import walk_pages
from catalog_seeder.client.results import FetchResult


# --- FIXTURES ---
# Logic: A scripted page source that records which pages were requested.
class ScriptedPages:
    def __init__(self, pages, total_pages=None, fail_on=None):
        self.pages = pages
        self.total_pages = total_pages
        self.fail_on = fail_on
        self.requested = []

    def __call__(self, page):
        self.requested.append(page)
        if page == self.fail_on:
            return FetchResult.failure("HTTPError: 500 Server Error")
        payload = {"page": page, "results": self.pages.get(page, [])}
        if self.total_pages is not None:
            payload["total_pages"] = self.total_pages
        return FetchResult.success(payload)


# --- 1. POSITIVE TESTING (The Contract) ---
def test_pages_are_concatenated_in_order():
    source = ScriptedPages({1: [{"id": 1}, {"id": 2}], 2: [{"id": 3}]}, total_pages=10)

    items = walk_pages(source, 2)

    assert [i["id"] for i in items] == [1, 2, 3]
    assert source.requested == [1, 2]


# --- 2. NEGATIVE TESTING (The Fragility) ---
def test_failed_page_returns_partial_result():
    # Logic: Pages collected before the failure survive; later pages are never requested.
    source = ScriptedPages({1: [{"id": 1}], 2: [{"id": 2}], 3: [{"id": 3}]}, fail_on=2)

    items = walk_pages(source, 5)

    assert items == [{"id": 1}]
    assert source.requested == [1, 2]


def test_failure_on_first_page_yields_empty_list():
    source = ScriptedPages({}, fail_on=1)

    assert walk_pages(source, 3) == []


# --- 3. CONSTRAINTS (The Limits) ---
def test_total_pages_stops_before_cap():
    # Logic: A cap of 5 against a source reporting 2 pages issues exactly 2 requests.
    source = ScriptedPages({1: [{"id": 1}], 2: [{"id": 2}]}, total_pages=2)

    items = walk_pages(source, 5)

    assert len(items) == 2
    assert source.requested == [1, 2]


def test_cap_stops_before_total_pages():
    source = ScriptedPages({n: [{"id": n}] for n in range(1, 6)}, total_pages=500)

    walk_pages(source, 3)

    assert source.requested == [1, 2, 3]


def test_zero_cap_makes_no_requests():
    source = ScriptedPages({1: [{"id": 1}]})

    assert walk_pages(source, 0) == []
    assert source.requested == []


# --- 4. THE BRANCHES (Missing fields) ---
def test_missing_total_pages_walks_to_cap():
    # Logic: Without total_pages only the cap ends the walk.
    source = ScriptedPages({1: [{"id": 1}], 2: [], 3: [{"id": 3}]})

    items = walk_pages(source, 3)

    assert [i["id"] for i in items] == [1, 3]
    assert source.requested == [1, 2, 3]
