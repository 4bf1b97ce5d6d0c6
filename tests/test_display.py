# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.12
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_display.py

from rich.console import Console

from zabstract.core.destroy import BatchDestroyResult
from zabstract.core.listing import list_abstractions
from zabstract.system.display import abstractions_to_table, destroy_results_to_table, display_list_errors
from zabstract.system.exceptions import ListAbstractionsError, ZFSOperationError

from tests.fixtures.queries import make_query


def render(renderable) -> str:
    console = Console(width=240, record=True)
    console.print(renderable)
    return console.export_text()


class TestAbstractionsTable:
    def test_rows_sorted_by_createtxg(self, replicated_driver):
        abstractions, _ = list_abstractions(replicated_driver, make_query())
        table = abstractions_to_table(abstractions, title="Abstractions")
        assert table.row_count == 7
        text = render(table)
        assert text.index("replication-cursor-bookmark-v1") < text.index("snap15") < text.index("snap25")

    def test_verbose_adds_guid_and_age(self, replicated_driver):
        abstractions, _ = list_abstractions(replicated_driver, make_query())
        table = abstractions_to_table(abstractions, verbose=True)
        assert [c.header for c in table.columns][-2:] == ["GUID", "Creation"]
        text = render(table)
        assert "2025-07-01 12:00:00" in text
        assert "ago" in text

    def test_hold_tag_column(self, replicated_driver):
        abstractions, _ = list_abstractions(replicated_driver, make_query())
        assert "zrepl_STEP_J_backup" in render(abstractions_to_table(abstractions))


class TestDestroyResults:
    def test_failed_rows_show_error(self, replicated_driver):
        abstractions, _ = list_abstractions(replicated_driver, make_query(fs="pool/home"))
        results = [
            BatchDestroyResult(abstractions[0]),
            BatchDestroyResult(abstractions[1], ZFSOperationError("dataset is busy")),
        ]
        text = render(destroy_results_to_table(results))
        assert "dataset is busy" in text
        assert "✓" in text and "✗" in text


class TestListErrors:
    def test_markup_in_errors_is_escaped(self):
        console = Console(width=240, record=True)
        err = ListAbstractionsError(ZFSOperationError("range [10,~ rejected"), fs="pool/a", what="list filesystem versions")
        display_list_errors(console, [err])
        text = console.export_text()
        assert "1 filesystem(s)" in text
        assert "[10,~ rejected" in text

    def test_no_errors_prints_nothing(self):
        console = Console(record=True)
        display_list_errors(console, [])
        assert console.export_text() == ""
