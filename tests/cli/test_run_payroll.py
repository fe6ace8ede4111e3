"""
Tests for scripts/run_payroll.py.

Runs ``main()`` in-process with a generated workbook, scripted input and
captured output streams.
"""

from io import StringIO

import openpyxl
import pytest

from payroll_config import CONFIG_ENV_VAR
from scripts.run_payroll import EXIT_OK, EXIT_OUTCOME_FAILED, EXIT_USAGE, main


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.fixture
def workbook(tmp_path):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Employee Details"
    ws.append(["Employee #"] + [f"col{i}" for i in range(1, 19)])
    employee = [None] * 19
    employee[0], employee[1], employee[2], employee[3] = 10001, "Garcia", "Manuel III", "10/11/1983"
    employee[14], employee[15], employee[16], employee[18] = 1500, 2000, 1000, 535.71
    ws.append(employee)
    ws = wb.create_sheet("Attendance Record")
    ws.append(["Employee #", "Last Name", "First Name", "Date", "Log In", "Log Out"])
    for day in (3, 4, 5, 6, 7):
        ws.append([10001, "Garcia", "Manuel III", f"06/{day:02d}/2024", "8:00", "17:00"])
    path = tmp_path / "payroll.xlsx"
    wb.save(path)
    return path


def _scripted(*answers):
    it = iter(answers)
    prompts = []

    def input_fn(prompt):
        prompts.append(prompt)
        return next(it)

    input_fn.prompts = prompts
    return input_fn


def _run(argv, input_fn=None):
    out, err = StringIO(), StringIO()
    kwargs = {"stdout": out, "stderr": err}
    if input_fn is not None:
        kwargs["input_fn"] = input_fn
    code = main(argv, **kwargs)
    return code, out.getvalue(), err.getvalue()


class TestNonInteractive:

    def test_success(self, workbook):
        code, out, _ = _run(["--workbook", str(workbook), "--employee", "10001", "--month", "june"])
        assert code == EXIT_OK
        assert "Name: Garcia, Manuel III" in out
        assert "Regular Hours: 40 hrs 0 min/s" in out
        assert "Net Pay: Php" in out

    def test_employee_not_found(self, workbook):
        code, out, _ = _run(["--workbook", str(workbook), "--employee", "42", "--month", "JUNE"])
        assert code == EXIT_OUTCOME_FAILED
        assert "Employee Number 42 not found." in out

    def test_month_not_computable(self, workbook):
        code, out, _ = _run(["--workbook", str(workbook), "--employee", "10001", "--month", "JANUARY"])
        assert code == EXIT_OUTCOME_FAILED
        assert "JANUARY has no pay periods" in out

    def test_invalid_month_argument(self, workbook):
        code, out, _ = _run(["--workbook", str(workbook), "--employee", "10001", "--month", "Jun"])
        assert code == EXIT_OUTCOME_FAILED
        assert "Invalid month" in out

    def test_bad_employee_argument(self, workbook):
        code, _, err = _run(["--workbook", str(workbook), "--employee", "abc", "--month", "JUNE"])
        assert code == EXIT_USAGE
        assert "numeric value" in err


class TestInteractive:

    def test_prompts_for_missing_arguments(self, workbook):
        input_fn = _scripted("10001", "july")
        code, out, _ = _run(["--workbook", str(workbook)], input_fn)
        assert code == EXIT_OUTCOME_FAILED  # no July attendance -> zero gross
        assert len(input_fn.prompts) == 2

    def test_reprompts_invalid_month(self, workbook):
        input_fn = _scripted("Jun", "Smarch", "June")
        code, out, _ = _run(["--workbook", str(workbook), "--employee", "10001"], input_fn)
        assert code == EXIT_OK
        assert out.count("Invalid month") == 2
        assert len(input_fn.prompts) == 3

    def test_reprompts_invalid_employee_number(self, workbook):
        input_fn = _scripted("ten", "10001")
        code, out, _ = _run(["--workbook", str(workbook), "--month", "JUNE"], input_fn)
        assert code == EXIT_OK
        assert "numeric value" in out

    def test_unknown_employee_stops_before_month_prompt(self, workbook):
        input_fn = _scripted("42")
        code, out, _ = _run(["--workbook", str(workbook)], input_fn)
        assert code == EXIT_OUTCOME_FAILED
        assert out.strip().endswith("Error: Employee Number 42 not found.")
        assert input_fn.prompts == ["Enter Employee Number: "]

    def test_closed_input(self, workbook):
        def input_fn(prompt):
            raise EOFError

        code, _, err = _run(["--workbook", str(workbook)], input_fn)
        assert code == EXIT_USAGE
        assert "input closed" in err


class TestSourceAndSettings:

    def test_missing_workbook(self, tmp_path):
        code, _, err = _run(["--workbook", str(tmp_path / "absent.xlsx"), "--employee", "1", "--month", "JUNE"])
        assert code == EXIT_USAGE
        assert "File not found" in err

    def test_file_that_is_not_a_workbook(self, tmp_path):
        path = tmp_path / "payroll.xlsx"
        path.write_text("Employee #,Last Name\n10001,Garcia\n", encoding="utf-8")
        code, out, err = _run(["--workbook", str(path), "--employee", "10001", "--month", "JUNE"])
        assert code == EXIT_USAGE
        assert "Cannot read workbook" in err
        assert out == ""

    def test_unreadable_workbook_in_interactive_run(self, tmp_path):
        path = tmp_path / "payroll.xlsx"
        path.write_bytes(b"not a zip archive")
        input_fn = _scripted("10001")
        code, _, err = _run(["--workbook", str(path)], input_fn)
        assert code == EXIT_USAGE
        assert "Cannot read workbook" in err
        assert len(input_fn.prompts) == 1

    def test_no_workbook_configured(self):
        code, _, err = _run(["--employee", "1", "--month", "JUNE"])
        assert code == EXIT_USAGE
        assert "no workbook" in err

    def test_workbook_from_settings_file(self, tmp_path, workbook):
        config = tmp_path / "payroll.yaml"
        config.write_text(f"source:\n  workbook: '{workbook}'\n", encoding="utf-8")
        code, _, _ = _run(["--config", str(config), "--employee", "10001", "--month", "JUNE"])
        assert code == EXIT_OK

    def test_bad_settings_file(self, tmp_path):
        config = tmp_path / "payroll.yaml"
        config.write_text("policy:\n  overtime:\n    mode: triple\n", encoding="utf-8")
        code, _, err = _run(["--config", str(config), "--employee", "1", "--month", "JUNE"])
        assert code == EXIT_USAGE
        assert "policy.overtime.mode" in err

    def test_non_mapping_policy_section(self, tmp_path):
        config = tmp_path / "payroll.yaml"
        config.write_text("policy:\n  overtime: 5\n", encoding="utf-8")
        code, _, err = _run(["--config", str(config), "--employee", "1", "--month", "JUNE"])
        assert code == EXIT_USAGE
        assert "policy.overtime" in err

    def test_log_file_written(self, tmp_path, workbook):
        log_file = tmp_path / "payroll_system.log"
        code, _, _ = _run([
            "--workbook", str(workbook), "--employee", "10001", "--month", "JUNE",
            "--log-file", str(log_file), "--log-level", "debug",
        ])
        assert code == EXIT_OK
        assert "payroll_request_completed" in log_file.read_text(encoding="utf-8")

    def test_bad_log_level_is_usage_error(self, workbook):
        with pytest.raises(SystemExit) as exc_info:
            _run(["--workbook", str(workbook), "--log-level", "loud"])
        assert exc_info.value.code == EXIT_USAGE
