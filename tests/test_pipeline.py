import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime
from pathlib import Path
from unittest import mock

import httpx

import main
from comm_monitor.extractors import csv_reader
from comm_monitor.pipelines import pipeline
from comm_monitor.utilities import config

NOW = datetime(2024, 3, 15)

STUDENTS_CSV = "姓名,类型,导师\n张三,研究生,王老师\n李四,本科生,赵老师\n王五,研究生,王老师\n"
COMMUNICATIONS_CSV = (
    "姓名,类型,日期\n"
    "张三,面谈,2024-03-10\n"
    "李四,电话,2024-01-20\n"
    "张三,邮件,2024-02-01\n"
    "王五,邮件,2024-02-20\n"
)


class RunDashboardTest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.source = Path(self.tmp.name)
        (self.source / config.STUDENTS_FILE).write_text(STUDENTS_CSV, encoding="utf-8")
        (self.source / config.COMMUNICATIONS_FILE).write_text(COMMUNICATIONS_CSV, encoding="utf-8")

    def tearDown(self):
        self.tmp.cleanup()

    def test_local_run_writes_report(self):
        output = self.source / "report.txt"
        result = pipeline.run_dashboard(
            source=str(self.source),
            periods=config.PERIODS,
            output_path=output,
            now=NOW,
        )

        self.assertIsNone(result.alert)
        self.assertEqual(result.errors, [])
        self.assertIn("Overdue students: 2", result.report)
        self.assertEqual(output.read_text(encoding="utf-8"), result.report + "\n")
        for label in config.PERIOD_LABELS.values():
            self.assertIn(label.upper(), result.report)

    def test_build_dashboard_lists(self):
        data = csv_reader.load_dashboard_data(str(self.source))
        dashboard = pipeline.build_dashboard(data, [config.PERIOD_MONTH], NOW)

        self.assertEqual([r.name for r in dashboard.graduate_overdue], ["王五"])
        self.assertEqual([r.name for r in dashboard.undergraduate_overdue], ["李四"])
        self.assertEqual(dashboard.summary.graduates, 2)
        self.assertEqual([s.name for s in dashboard.periods[0].stats], ["张三", "王五", "李四"])

    def test_load_failure_raises_alert_but_still_reports(self):
        def handler(request):
            if request.url.path.endswith(config.STUDENTS_FILE):
                return httpx.Response(200, text=STUDENTS_CSV)
            return httpx.Response(500, text="")

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            result = pipeline.run_dashboard(source="http://example.org/data", client=client, now=NOW)

        self.assertIsNotNone(result.alert)
        self.assertIn(config.LOAD_ALERT_MESSAGE, result.alert)
        self.assertIn("Total students: 3", result.report)
        self.assertIn("Overdue students: 3", result.report)


class MainTest(unittest.TestCase):
    def test_cli_run(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, config.STUDENTS_FILE).write_text(STUDENTS_CSV, encoding="utf-8")
            stdout = io.StringIO()
            with redirect_stdout(stdout):
                exit_code = main.main(
                    ["--data-source", tmp, "--period", "year", "--as-of", "2024-03-15", "--log-level", "ERROR"]
                )

        self.assertEqual(exit_code, 0)
        self.assertIn("Total students: 3", stdout.getvalue())
        self.assertIn("LAST YEAR (SINCE 2023-03-15)", stdout.getvalue())

    def test_cli_alert_exit_code(self):
        stderr = io.StringIO()
        with redirect_stdout(io.StringIO()), redirect_stderr(stderr):
            with mock.patch.object(
                csv_reader, "fetch_csv_text", side_effect=csv_reader.DataLoadError("boom")
            ):
                exit_code = main.main(["--log-level", "ERROR"])

        self.assertEqual(exit_code, 1)
        self.assertIn(config.LOAD_ALERT_MESSAGE, stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
