"""Unit tests for the catalog parser."""

import logging

from virgin_initiatives.domain.initiative.parsing.catalog_parser import (
    parse_catalog,
    split_links,
)

HEADER = "Company,Initiative,Challenge,Solution,Call to Action,Links\n"


class TestParseCatalog:
    """Test parse_catalog."""

    def test_minimal_record(self):
        catalog = parse_catalog('h1,h2,h3,h4,h5,h6\nA,B,C,D,E,"http://x"\n')

        assert len(catalog) == 1
        record = catalog.records[0]
        assert (record.company, record.initiative, record.challenge) == ("A", "B", "C")
        assert (record.solution, record.call_to_action) == ("D", "E")
        assert record.links == ("http://x",)
        assert catalog.skipped_count == 0

    def test_header_is_dropped_and_order_kept(self, catalog):
        assert [r.company for r in catalog] == ["Acme", "Acme", "Globex", "Acme"]
        assert catalog.records[0].initiative == "Tree Planting"

    def test_quoted_field_keeps_commas_and_newlines(self, catalog):
        record = catalog.records[1]

        assert record.solution == "Clean, sort, recycle"
        assert record.links == ("https://acme.example/beach", "https://acme.example/plastic")

    def test_empty_links_field(self, catalog):
        assert catalog.records[2].links == ()
        assert catalog.records[2].primary_link == ""

    def test_short_row_is_skipped_and_reported(self, caplog):
        text = HEADER + "A,B,C,D\nE,F,G,H,I,http://ok\n"

        with caplog.at_level(logging.WARNING):
            catalog = parse_catalog(text)

        assert len(catalog) == 1
        assert catalog.records[0].company == "E"
        assert catalog.skipped_count == 1
        skipped = catalog.skipped_rows[0]
        assert skipped.field_count == 4
        assert skipped.line_number == 2
        assert skipped.raw == "A,B,C,D"
        assert "Skipping malformed catalog row" in caplog.text

    def test_extra_fields_keep_first_six(self):
        catalog = parse_catalog(HEADER + "A,B,C,D,E,http://x,extra,more\n")

        assert len(catalog) == 1
        assert catalog.records[0].links == ("http://x",)
        assert catalog.skipped_count == 0

    def test_blank_lines_ignored_without_counting(self):
        catalog = parse_catalog(HEADER + "\nA,B,C,D,E,F\n\n   \n")

        assert len(catalog) == 1
        assert catalog.skipped_count == 0

    def test_comma_only_row_is_counted_as_short(self):
        catalog = parse_catalog(HEADER + ",,,\nA,B,C,D,E,\"http://x\"\n")

        assert len(catalog) == 1
        assert catalog.skipped_count == 1
        assert catalog.skipped_rows[0].field_count == 4

    def test_fields_are_trimmed(self):
        catalog = parse_catalog(HEADER + "  Acme ,  Tree Planting  , C , D , E , http://x \n")

        record = catalog.records[0]
        assert record.company == "Acme"
        assert record.initiative == "Tree Planting"
        assert record.links == ("http://x",)

    def test_crlf_line_endings(self):
        catalog = parse_catalog(HEADER.replace("\n", "\r\n") + "A,B,C,D,E,F\r\nG,H,I,J,K,L\r\n")

        assert [r.company for r in catalog] == ["A", "G"]
        assert catalog.records[1].links == ("L",)

    def test_leading_bom_is_ignored(self, catalog_text):
        with_bom = parse_catalog("\ufeff" + catalog_text)

        assert with_bom.records == parse_catalog(catalog_text).records

    def test_bom_before_header_still_drops_header(self):
        catalog = parse_catalog("\ufeffh1,h2,h3,h4,h5,h6\nA,B,C,D,E,F\n")

        assert catalog.records[0].company == "A"

    def test_empty_and_header_only_text(self):
        assert len(parse_catalog("")) == 0
        assert len(parse_catalog(HEADER)) == 0

    def test_unterminated_quote_is_not_fatal(self):
        catalog = parse_catalog(HEADER + 'Acme,"Unclosed,x,y,z,w\n')

        assert len(catalog) == 0
        assert catalog.skipped_count == 1

    def test_duplicate_rows_are_kept(self, catalog):
        trees = [r for r in catalog if r.initiative == "Tree Planting"]

        assert len(trees) == 2
        assert trees[0].solution != trees[1].solution


class TestSplitLinks:
    def test_blank_entries_dropped(self):
        assert split_links(" https://a.com \n\n  \nhttps://b.com") == [
            "https://a.com",
            "https://b.com",
        ]

    def test_empty(self):
        assert split_links("") == []
