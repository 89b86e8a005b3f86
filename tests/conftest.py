import pytest

from sheet_analyzer.core.dataset import build_dataset


@pytest.fixture
def sales_rows():
    """Eight order rows: one category, two linked numbers, a date and a flag"""
    regions = ["North", "South", "North", "East", "South", "North", "East", "South"]
    returned = [True, False, False, False, True, False, False, False]
    return [
        {
            "Region": regions[i],
            "Units": i + 1,
            "Revenue": (i + 1) * 12.5,
            "Date": f"2024-01-0{i + 1}",
            "Returned": returned[i],
        }
        for i in range(8)
    ]


@pytest.fixture
def sales_dataset(sales_rows):
    return build_dataset(sales_rows, sheet_name="Orders")


@pytest.fixture
def outlier_dataset():
    values = [1, 1, 1, 1, 100]
    return build_dataset([{"Name": f"r{i}", "V": v} for i, v in enumerate(values)])


@pytest.fixture
def duplicate_dataset():
    rows = [{"id": i, "name": f"n{i}"} for i in range(15)]
    rows += [{"id": 99, "name": "dup"} for _ in range(5)]
    return build_dataset(rows)
