"""
Tests for the bill file importer: delimiter detection, header
classification, value/date normalization and row parsing.
"""

import pytest
from datetime import date
from decimal import Decimal

from bill_tracker.config import ImportSettings
from bill_tracker.dates import normalize_date_string, parse_calendar_date
from bill_tracker.ingestion import (
    EmptyImportResultError,
    RowParser,
    UnsupportedFileTypeError,
    check_file_type,
    classify_header,
    detect_delimiter,
    find_column,
    matches_synonym,
    normalize_value,
    parse_bills,
    split_fields,
)
from bill_tracker.models.bill import ColumnMapping, RowAccepted, RowSkipped, SkipReason


class TestDelimiterDetection:
    """Tests for detect_delimiter."""

    def test_more_semicolons_selects_semicolon(self):
        assert detect_delimiter("a;b;c;1,5\n") == ";"

    def test_tie_selects_semicolon(self):
        """Equal counts favor the semicolon."""
        assert detect_delimiter("a;b,c\n") == ";"

    def test_more_commas_selects_comma(self):
        assert detect_delimiter("Title,Amount,Date\n") == ","

    def test_only_first_content_line_counts(self):
        """Blank lines are skipped; later lines are ignored."""
        text = "\n   \nTitle,Amount,Date\nx;y;z;w;v\n"
        assert detect_delimiter(text) == ","

    def test_empty_text(self):
        assert detect_delimiter("") == ";"


class TestFieldSplitting:
    """Tests for split_fields."""

    def test_trims_and_strips_quotes(self):
        assert split_fields(' "Energia" ; \'150,50\' ; 10/12/2024 ', ";") == [
            "Energia", "150,50", "10/12/2024",
        ]

    def test_only_one_layer_of_quotes(self):
        assert split_fields('""x""', ";") == ['"x"']

    def test_unmatched_quote_is_kept(self):
        assert split_fields('"abc', ";") == ['"abc']


class TestHeaderClassification:
    """Tests for header synonym matching and classify_header."""

    def test_matches_synonym_folds_case_and_accents(self):
        assert matches_synonym("Descrição", "title")
        assert matches_synonym("VALOR", "value")
        assert matches_synonym("Due Date (dd/mm)", "due_date")
        assert matches_synonym("Código de Barras", "barcode")

    def test_matches_synonym_negative(self):
        assert not matches_synonym("Energia", "title")
        assert not matches_synonym("", "value")

    @pytest.mark.parametrize("cell,field", [
        ("Holiday Inn", "due_date"),
        ("Birthday gift", "due_date"),
        ("Sunday market", "due_date"),
        ("Totalpass", "value"),
        ("Deadline", "barcode"),
        ("Surname", "title"),
    ])
    def test_synonym_must_be_a_whole_word(self, cell, field):
        assert not matches_synonym(cell, field)

    def test_synonym_inside_longer_header(self):
        assert matches_synonym("Data de Vencimento", "due_date")
        assert matches_synonym("Dt. Venc.", "due_date")
        assert matches_synonym("Total Amount", "value")

    def test_claimed_columns_are_skipped(self):
        assert find_column(["Date", "Due"], "due_date", claimed={0}) == 1
        assert find_column(["Date"], "due_date", claimed={0}) is None

    def test_containment_never_reuses_an_exact_column(self):
        """'Title' is the title; 'Title Date' is left for the due date."""
        scan = classify_header(["Valor;Title Date;Title"], ";")
        assert scan.mapping.title == 2
        assert scan.mapping.due_date == 1
        assert scan.mapping.value == 0

    def test_barcode_does_not_take_a_bill_column(self):
        """A barcode header on the default due date column is ignored."""
        scan = classify_header(["Descricao;Valor;Codigo"], ";")
        assert scan.mapping == ColumnMapping()

    def test_mapped_columns_are_distinct(self):
        scan = classify_header(["Description;Value;Deadline"], ";")
        mapping = scan.mapping
        assert len({mapping.title, mapping.value, mapping.due_date, mapping.barcode}) == 4

    def test_exact_match_beats_containment(self):
        """'Amount Due' must not steal the due date column."""
        cells = ["Title", "Amount Due", "Date"]
        assert find_column(cells, "value") == 1
        assert find_column(cells, "due_date") == 2

    def test_portuguese_header(self):
        lines = ["Descricao;Valor;Vencimento", "Energia;150,50;10/12/2024"]
        scan = classify_header(lines, ";")
        assert scan.mapping == ColumnMapping(title=0, value=1, due_date=2, barcode=3)
        assert scan.header_index == 0
        assert scan.data_start == 1

    def test_reordered_header_with_barcode(self):
        lines = ["Vencimento;Codigo de Barras;Valor;Descricao"]
        scan = classify_header(lines, ";")
        assert scan.mapping == ColumnMapping(title=3, value=2, due_date=0, barcode=1)

    def test_header_below_preamble(self):
        """The header may follow a few lines of boilerplate."""
        lines = ["Extrato bancario", "", "Descricao;Valor;Vencimento", "Energia;150,50;10/12/2024"]
        scan = classify_header(lines, ";")
        assert scan.header_index == 2
        assert scan.data_start == 3

    def test_barcode_alone_is_not_a_header(self):
        lines = ["Codigo;xyz", "Descricao;Valor;Vencimento"]
        scan = classify_header(lines, ";")
        assert scan.header_index == 1

    def test_no_header_uses_defaults(self):
        lines = ["Energia;150,50;10/12/2024", "Aluguel;1.500,00;05/01/2025"]
        scan = classify_header(lines, ";")
        assert scan.header_index is None
        assert scan.mapping == ColumnMapping()
        assert scan.data_start == 0

    def test_scan_stops_after_limit(self):
        """Only the first N non-blank lines are searched."""
        lines = ["foo;bar"] * 10 + ["Descricao;Valor;Vencimento"]
        assert classify_header(lines, ";").header_index is None
        assert classify_header(lines, ";", scan_limit=11).header_index == 10

    def test_blank_lines_do_not_use_up_the_window(self):
        lines = [""] * 15 + ["Descricao;Valor;Vencimento"]
        assert classify_header(lines, ";").header_index == 15


class TestValueNormalization:
    """Tests for normalize_value."""

    @pytest.mark.parametrize("raw,expected", [
        ("1.234,56", Decimal("1234.56")),
        ("1,234.56", Decimal("1234.56")),
        ("100,50", Decimal("100.50")),
        ("R$ 50", Decimal("50")),
        ("R$ 1.234,56", Decimal("1234.56")),
        ("$1,000", Decimal("1.000")),
        ("  42  ", Decimal("42")),
        ("1234.5", Decimal("1234.5")),
    ])
    def test_auto_detection(self, raw, expected):
        assert normalize_value(raw) == expected

    def test_ambiguous_value_follows_configured_locale(self):
        """'1,234' is 1.234 with comma decimals, 1234 with dot decimals."""
        assert normalize_value("1,234", ",") == Decimal("1.234")
        assert normalize_value("1,234", ".") == Decimal("1234")

    def test_forced_comma_decimal(self):
        assert normalize_value("1.234", ",") == Decimal("1234")

    @pytest.mark.parametrize("raw", ["abc", "R$", "NaN", "Infinity", "1,2,3,4.5.6"])
    def test_rejects_non_numbers(self, raw):
        with pytest.raises(ValueError):
            normalize_value(raw)


class TestDateNormalization:
    """Tests for the shared date primitives."""

    def test_day_month_year(self):
        assert normalize_date_string("31/01/2024") == "2024-01-31"

    def test_iso_unchanged(self):
        assert normalize_date_string("2024-01-31") == "2024-01-31"

    def test_year_first_slashes(self):
        assert normalize_date_string("2024/01/31") == "2024-01-31"

    def test_wrong_number_of_parts(self):
        assert normalize_date_string("31/01") == ""

    def test_parse_calendar_date(self):
        assert parse_calendar_date("2024-01-31") == date(2024, 1, 31)
        assert parse_calendar_date("2024-1-5") == date(2024, 1, 5)

    @pytest.mark.parametrize("text", [
        "2024-02-30",
        "24-01-31",
        "2024-13-01",
        "2024-01-31T10:00",
        "hello",
        "2024-99999999999999999999-01",
        "2024-01-0031",
    ])
    def test_parse_calendar_date_rejects(self, text):
        with pytest.raises(ValueError):
            parse_calendar_date(text)


class TestRowParser:
    """Tests for RowParser outcomes."""

    @pytest.fixture
    def parser(self):
        return RowParser(";", ColumnMapping())

    def test_accepts_valid_row(self, parser):
        outcome = parser.parse("Energia;150,50;10/12/2024", line_number=2)
        assert isinstance(outcome, RowAccepted)
        assert outcome.line_number == 2
        assert outcome.bill.title == "Energia"
        assert outcome.bill.value == Decimal("150.50")
        assert outcome.bill.due_date == date(2024, 12, 10)
        assert outcome.bill.status.value == "pending"
        assert outcome.bill.barcode is None

    def test_passes_barcode_through(self, parser):
        outcome = parser.parse("Energia;150,50;10/12/2024;23790.12345 60000", line_number=1)
        assert outcome.bill.barcode == "23790.12345 60000"

    def test_quoted_fields(self, parser):
        outcome = parser.parse('"Energia";"150,50";"2024-12-10"', line_number=1)
        assert isinstance(outcome, RowAccepted)
        assert outcome.bill.title == "Energia"

    @pytest.mark.parametrize("line,reason", [
        ("just one field", SkipReason.MALFORMED_ROW),
        ("Energia;150,50", SkipReason.MISSING_FIELD),
        (";150,50;10/12/2024", SkipReason.MISSING_FIELD),
        ("Energia;;10/12/2024", SkipReason.MISSING_FIELD),
        ("Energia;abc;10/12/2024", SkipReason.VALUE_PARSE_FAILURE),
        ("Energia;-10,00;10/12/2024", SkipReason.VALUE_PARSE_FAILURE),
        ("Energia;150,50;1/1/24", SkipReason.DATE_TOO_SHORT),
        ("Energia;150,50;10/12", SkipReason.DATE_TOO_SHORT),
        ("Energia;150,50;31/02/2024", SkipReason.INVALID_DATE),
        ("Energia;150,50;amanha-cedo", SkipReason.INVALID_DATE),
        ("Energia;150,50;2024-99999999999999999999-01", SkipReason.INVALID_DATE),
        ("Energia;150,50;01/99999999999999999999/2024", SkipReason.INVALID_DATE),
    ])
    def test_skips_with_reason(self, parser, line, reason):
        outcome = parser.parse(line, line_number=7)
        assert isinstance(outcome, RowSkipped)
        assert outcome.reason == reason
        assert outcome.line_number == 7

    def test_custom_mapping(self):
        parser = RowParser(",", ColumnMapping(title=2, value=0, due_date=1, barcode=3))
        outcome = parser.parse("99.90,2024-03-05,Internet", line_number=1)
        assert outcome.bill.title == "Internet"
        assert outcome.bill.value == Decimal("99.90")

    def test_decimal_separator_setting(self):
        parser = RowParser(";", ColumnMapping(), decimal_separator=".")
        outcome = parser.parse("Loan;1,234;2024-03-05", line_number=1)
        assert outcome.bill.value == Decimal("1234")


class TestParseBills:
    """Tests for the whole-file pipeline."""

    def test_header_file(self):
        text = "Descricao;Valor;Vencimento\nEnergia;150,50;10/12/2024\nInternet;99,90;15/12/2024\n"
        result = parse_bills(text, ImportSettings())
        assert result.delimiter == ";"
        assert result.header_index == 0
        assert [b.title for b in result.bills] == ["Energia", "Internet"]

    def test_headerless_comma_file(self):
        text = "Rent,1234.56,2024-02-01\nGym,89.90,2024-02-05\n"
        result = parse_bills(text, ImportSettings())
        assert result.delimiter == ","
        assert result.header_index is None
        assert [b.value for b in result.bills] == [Decimal("1234.56"), Decimal("89.90")]

    @pytest.mark.parametrize("first_title", ["Holiday Inn", "Birthday gift", "Totalpass"])
    def test_headerless_file_with_word_like_title(self, first_title):
        """A title that merely contains a header word is still data."""
        text = f"{first_title};100,00;10/01/2024\nEnergia;50,00;11/01/2024\n"
        result = parse_bills(text, ImportSettings())
        assert result.header_index is None
        assert result.accepted_count == 2
        assert result.bills[0].title == first_title

    def test_oversized_date_does_not_abort_the_file(self):
        text = "Energia;10;2024-99999999999999999999-01\nInternet;99,90;15/12/2024\n"
        result = parse_bills(text, ImportSettings())
        assert result.accepted_count == 1
        assert result.skip_counts() == {SkipReason.INVALID_DATE: 1}

    def test_partial_failure_counts(self):
        """Bad rows are counted, not fatal."""
        text = (
            "Descricao;Valor;Vencimento\n"
            "Energia;150,50;10/12/2024\n"
            "Agua;80,00;\n"
            "Internet;99,90;15/12/2024\n"
            "Aluguel;1.500,00;\n"
            "Gas;45,00;20/12/2024\n"
        )
        result = parse_bills(text, ImportSettings())
        assert result.processed_count == 5
        assert result.accepted_count == 3
        assert result.skip_counts() == {SkipReason.MISSING_FIELD: 2}
        assert [s.line_number for s in result.skipped] == [3, 5]

    def test_blank_lines_are_ignored(self):
        text = "Energia;150,50;10/12/2024\n\n   \r\nInternet;99,90;15/12/2024\r\n"
        result = parse_bills(text, ImportSettings())
        assert result.processed_count == 2
        assert result.accepted_count == 2

    def test_ids_unique_within_batch(self):
        text = "\n".join(f"Bill {i};10,00;01/0{i}/2024" for i in range(1, 10))
        result = parse_bills(text, ImportSettings())
        assert len({b.id for b in result.bills}) == 9

    def test_raise_if_empty(self):
        result = parse_bills("nothing useful here\n", ImportSettings())
        with pytest.raises(EmptyImportResultError):
            result.raise_if_empty()


class TestFileTypeCheck:
    """Tests for check_file_type."""

    @pytest.mark.parametrize("name", ["sheet.xlsx", "OLD.XLS", "dir/budget.xlsx"])
    def test_rejects_spreadsheets(self, name):
        with pytest.raises(UnsupportedFileTypeError):
            check_file_type(name, ImportSettings())

    @pytest.mark.parametrize("name", ["bills.csv", "bills.txt", "noextension", None, ""])
    def test_accepts_text_files(self, name):
        check_file_type(name, ImportSettings())

    def test_rejected_list_is_configurable(self):
        settings = ImportSettings(rejected_extensions="ods, .numbers")
        with pytest.raises(UnsupportedFileTypeError):
            check_file_type("budget.numbers", settings)
        check_file_type("sheet.xlsx", settings)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
