from services.scanner.app.index import InventoryIndex

from .conftest import record


def make_index():
    return InventoryIndex.build([
        ("R-001", record("R-001", "Cotton Blend", 25.5, category="Fabric")),
        ("R-002", record("R-002", "Silk Red", 4.0, category="Fabric")),
        ("T-010", record("T-010", "Polyester Spool", 40, category="Thread", unit="pieces")),
    ])


def test_lookup_by_exact_rack_id():
    index = make_index()
    assert index.lookup("R-002").display_name == "Silk Red"
    assert index.lookup("r-002") is None
    assert index.lookup("R-999") is None


def test_search_matches_name_rack_and_category_case_insensitively():
    index = make_index()
    assert [rack for rack, _ in index.search("cotton")] == ["R-001"]
    assert [rack for rack, _ in index.search("r-00")] == ["R-001", "R-002"]
    assert [rack for rack, _ in index.search("THREAD")] == ["T-010"]
    assert list(index.search("velvet")) == []


def test_blank_search_returns_everything_in_insertion_order():
    index = make_index()
    assert [rack for rack, _ in index.search("  ")] == ["R-001", "R-002", "T-010"]


def test_search_is_repeatable():
    index = make_index()
    assert list(index.search("r")) == list(index.search("r"))


def test_search_is_lazy():
    index = make_index()
    results = index.search("fabric")
    assert next(results)[0] == "R-001"


def test_duplicate_rack_id_keeps_last_record_at_first_position():
    index = InventoryIndex.build([
        ("R-001", record("R-001", "Old Name")),
        ("R-002", record("R-002", "Other")),
        ("R-001", record("R-001", "New Name")),
    ])
    assert len(index) == 2
    assert index.lookup("R-001").display_name == "New Name"
    assert [rack for rack, _ in index] == ["R-001", "R-002"]


def test_from_records_keys_by_rack_id():
    index = InventoryIndex.from_records([record("A", "Denim"), record("B", "Linen")])
    assert index.lookup("B").display_name == "Linen"
    assert len(InventoryIndex()) == 0
