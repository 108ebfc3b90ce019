import json

import pytest

from webunlock.export import ExportError, export_filename, to_csv, to_json


class TestCsvExport:

    def test_extraction_result_layout(self):
        data = {
            "p": [
                {"text": "First", "attributes": {"class": "lead"}},
                {"text": 'Say "hi"', "attributes": None},
            ]
        }

        lines = to_csv(data).splitlines()

        assert len(lines) == 3
        assert lines[0] == '"selector","index","text","attributes"'
        assert lines[1] == '"p","0","First","{""class"": ""lead""}"'
        assert lines[2] == '"p","1","Say ""hi""",""'

    def test_absent_text_is_empty_field(self):
        lines = to_csv({"img": [{"text": None, "attributes": {"src": "/a.png"}}]}).splitlines()
        assert lines[1].startswith('"img","0","",')

    def test_selector_without_matches_adds_no_rows(self):
        lines = to_csv({"p": [{"text": "x", "attributes": None}], ".missing": []}).splitlines()
        assert len(lines) == 2

    def test_table_rows_layout(self):
        rows = [{"Name": "Ana", "Age": "30"}, {"Name": "Bo", "Age": None}]

        lines = to_csv(rows).splitlines()

        assert lines == ['"Name","Age"', '"Ana","30"', '"Bo",""']

    def test_table_columns_are_union_in_first_seen_order(self):
        lines = to_csv([{"A": "1"}, {"B": "2", "A": "3"}]).splitlines()
        assert lines[0] == '"A","B"'
        assert lines[1] == '"1",""'

    @pytest.mark.parametrize("data", [None, [], {}, "text", 42])
    def test_unusable_data(self, data):
        with pytest.raises(ExportError):
            to_csv(data)

    def test_selector_value_must_be_list(self):
        with pytest.raises(ExportError):
            to_csv({"p": "not a list"})


class TestJsonExport:

    def test_pretty_printed(self):
        content = to_json({"p": [{"text": "ção", "attributes": None}]})
        assert json.loads(content) == {"p": [{"text": "ção", "attributes": None}]}
        assert "ção" in content
        assert "\n  " in content

    def test_missing_data(self):
        with pytest.raises(ExportError):
            to_json(None)


class TestFilename:

    def test_adds_extension(self):
        assert export_filename("report", "csv") == "report.csv"
        assert export_filename("report.csv", "csv") == "report.csv"

    def test_unsafe_characters_replaced(self):
        assert export_filename('a"b/c', "json") == "a_b_c.json"

    def test_default_name(self):
        name = export_filename(None, "csv")
        assert name.startswith("webunlock-")
        assert name.endswith(".csv")
