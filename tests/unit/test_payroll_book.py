"""Tests for the payroll book (batch liquidation of a month)."""

import pytest

from liqcalc.sdk import (
    InvalidInputError,
    LegalParameterTable,
    NegativeNetSalaryError,
    UnknownPeriodError,
    calculate_payroll_book,
)


def make_entries(employee_data, count):
    entries = []
    for i in range(count):
        employee = dict(employee_data)
        employee["rut"] = f"{10000000 + i}-{i % 10}"
        employee["base_salary_clp"] = 600000 + i * 100000
        entries.append({"employee": employee})
    return entries


class TestPayrollBook:

    def test_results_keep_input_order(self, employee_data, params):
        """Entries come back in input order whatever finishes first."""
        entries = make_entries(employee_data, 12)
        book = calculate_payroll_book(entries, 2025, 3, params=params, max_workers=4)

        assert [e.rut for e in book.entries] == [e["employee"]["rut"] for e in entries]
        assert all(e.ok for e in book.entries)
        assert book.period_key == "2025-03"

    def test_matches_single_liquidation(self, employee_data, params):
        """A book entry equals the single-employee liquidation."""
        from liqcalc.sdk import calculate_liquidation

        entries = make_entries(employee_data, 3)
        book = calculate_payroll_book(entries, 2025, 3, params=params)

        for entry, book_entry in zip(entries, book.entries):
            single = calculate_liquidation(
                entry["employee"], {"year": 2025, "month": 3}, params=params
            )
            assert book_entry.result == single

    def test_failures_do_not_block_others(self, employee_data, params):
        """One bad employee is recorded and the rest are liquidated."""
        entries = make_entries(employee_data, 3)
        entries[1]["employee"]["base_salary_clp"] = -5
        entries.append({
            "employee": dict(employee_data, rut="22.222.222-2"),
            "deduction_adjustments": {"loan_deductions": 5000000},
        })

        book = calculate_payroll_book(entries, 2025, 3, params=params)

        assert [e.ok for e in book.entries] == [True, False, True, False]
        assert isinstance(book.entries[1].error, InvalidInputError)
        assert isinstance(book.entries[3].error, NegativeNetSalaryError)
        assert book.entries[3].rut == "22.222.222-2"
        assert len(book.failures) == 2

    def test_totals_cover_successful_entries(self, employee_data, params):
        """Totals only sum successful entries."""
        entries = make_entries(employee_data, 3)
        entries.append({"employee": None})

        book = calculate_payroll_book(entries, 2025, 3, params=params)

        results = book.results
        assert len(results) == 3
        assert book.total_gross_income == sum(r.total_gross_income for r in results)
        assert book.total_net_salary == book.total_gross_income - book.total_deductions
        assert book.total_employer_costs == sum(r.employer_costs.total for r in results)

    def test_days_worked_per_entry(self, employee_data, params):
        """Each entry may carry its own days worked."""
        book = calculate_payroll_book(
            [{"employee": employee_data, "days_worked": 10}], 2025, 3, params=params
        )
        result = book.entries[0].result
        assert result.period.days_worked == 10
        assert result.base_salary == 333333

    def test_unknown_entry_key_is_an_entry_error(self, employee_data, params):
        """Unknown keys fail that entry only."""
        book = calculate_payroll_book(
            [{"employee": employee_data, "bonus": 5}], 2025, 3, params=params
        )
        assert isinstance(book.entries[0].error, InvalidInputError)
        assert book.entries[0].rut == employee_data["rut"]

    def test_uncovered_period_is_fatal(self, employee_data, params):
        """An uncovered period stops the whole book."""
        table = LegalParameterTable([params])
        with pytest.raises(UnknownPeriodError):
            calculate_payroll_book(make_entries(employee_data, 2), 2030, 1, table=table)

    def test_invalid_month(self, employee_data, params):
        with pytest.raises(InvalidInputError):
            calculate_payroll_book([], 2025, 0, params=params)

    def test_empty_book(self, params):
        """An empty book has zero totals."""
        book = calculate_payroll_book([], 2025, 3, params=params)
        assert book.entries == []
        assert book.total_net_salary == 0

    def test_to_dict(self, employee_data, params):
        """The dict form is ready for JSON output."""
        entries = make_entries(employee_data, 1) + [{"employee": None}]
        data = calculate_payroll_book(entries, 2025, 3, params=params).to_dict()

        assert data["period"] == "2025-03"
        assert data["totals"]["employees"] == 2
        assert data["totals"]["failed"] == 1
        assert data["entries"][0]["result"]["rut"] == entries[0]["employee"]["rut"]
        assert data["entries"][1]["error"]["type"] == "InvalidInputError"
