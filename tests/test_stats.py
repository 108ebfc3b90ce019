from webunlock.models import ElementRecord
from webunlock.stats import empty_selectors, extraction_stats, table_stats


def test_extraction_stats_counts_elements():
    data = {
        "p": [ElementRecord(text="a"), ElementRecord(text="b")],
        ".missing": [],
        "h1": [ElementRecord()],
    }

    stats = extraction_stats(data, execution_time=120)

    assert stats.total_selectors == 3
    assert stats.total_elements == 3
    assert stats.model_dump(by_alias=True) == {
        "totalSelectors": 3,
        "totalElements": 3,
        "executionTime": 120,
    }


def test_table_stats():
    stats = table_stats([{"A": "1"}, {"A": None}], execution_time=5)
    assert stats.model_dump(by_alias=True) == {"totalRows": 2, "executionTime": 5}


def test_empty_selectors():
    data = {"p": [ElementRecord(text="a")], ".missing": [], "nav": []}
    assert empty_selectors(data) == [".missing", "nav"]
