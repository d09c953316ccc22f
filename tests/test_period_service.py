import unittest
from datetime import date, datetime

import pandas as pd

from comm_monitor.transformers import data_processor, period_service
from comm_monitor.utilities import config, utils

NOW = datetime(2024, 3, 15)


class ShiftMonthsTest(unittest.TestCase):
    def test_keeps_day_of_month(self):
        self.assertEqual(utils.shift_months(date(2024, 1, 15), 1), date(2023, 12, 15))
        self.assertEqual(utils.shift_months(date(2024, 3, 15), 12), date(2023, 3, 15))

    def test_missing_days_roll_over(self):
        self.assertEqual(utils.shift_months(date(2023, 3, 31), 1), date(2023, 3, 3))
        self.assertEqual(utils.shift_months(date(2024, 2, 29), 12), date(2023, 3, 1))
        self.assertEqual(utils.shift_months(date(2024, 8, 31), 6), date(2024, 3, 2))


class PeriodWindowTest(unittest.TestCase):
    def test_total_starts_at_epoch(self):
        window = utils.create_period_window(config.PERIOD_TOTAL, NOW)
        self.assertEqual(window.start, datetime(1970, 1, 1))

    def test_rolling_windows_start_at_midnight(self):
        now = datetime(2024, 3, 15, 10, 30)
        self.assertEqual(utils.create_period_window("month", now).start, datetime(2024, 2, 15))
        self.assertEqual(utils.create_period_window("halfyear", now).start, datetime(2023, 9, 15))
        self.assertEqual(utils.create_period_window("year", now).start, datetime(2023, 3, 15))

    def test_unknown_period_falls_back_to_total(self):
        window = utils.create_period_window("decade", NOW)
        self.assertEqual(window.period, config.PERIOD_TOTAL)


class PeriodStatsTest(unittest.TestCase):
    def setUp(self):
        self.students = data_processor.prepare_students(
            pd.DataFrame(
                [
                    {"name": "赵六", "type": config.UNDERGRADUATE_TYPE},
                    {"name": "张三", "type": config.GRADUATE_TYPE},
                    {"name": "李四", "type": config.UNDERGRADUATE_TYPE},
                ]
            )
        )
        self.communications, _ = data_processor.prepare_communications(
            pd.DataFrame(
                [
                    {"name": "张三", "type": "面谈", "date": "2024-03-10"},
                    {"name": "张三", "type": "电话", "date": "2024-02-15"},
                    {"name": "张三", "type": "邮件", "date": "2024-02-14"},
                    {"name": "张三", "type": "面谈", "date": "2023-12-01"},
                    {"name": "李四", "type": "电话", "date": "2024-03-01"},
                    {"name": "李四", "type": "电话", "date": "2022-05-01"},
                ]
            )
        )

    def counts(self, period):
        result = period_service.compute_period_stats(self.students, self.communications, period, NOW)
        return [(stat.name, stat.count) for stat in result.stats]

    def test_month_excludes_older_communications(self):
        result = period_service.compute_period_stats(self.students, self.communications, "month", NOW)

        self.assertEqual(result.window.start, datetime(2024, 2, 15))
        self.assertEqual([(stat.name, stat.count) for stat in result.stats], [("张三", 2), ("李四", 1), ("赵六", 0)])
        self.assertEqual(result.stats[0].last_comm, datetime(2024, 3, 10))
        self.assertIsNone(result.stats[2].last_comm)

    def test_year_and_total(self):
        self.assertEqual(self.counts("year"), [("张三", 4), ("李四", 1), ("赵六", 0)])
        self.assertEqual(self.counts("total"), [("张三", 4), ("李四", 2), ("赵六", 0)])

    def test_ties_keep_student_order(self):
        self.assertEqual(self.counts("halfyear"), [("张三", 4), ("李四", 1), ("赵六", 0)])
        result = period_service.compute_period_stats(
            self.students, self.communications.iloc[0:0], "total", NOW
        )
        self.assertEqual([stat.name for stat in result.stats], ["赵六", "张三", "李四"])

    def test_last_comm_is_latest_in_window(self):
        result = period_service.compute_period_stats(self.students, self.communications, "total", NOW)
        by_name = {stat.name: stat for stat in result.stats}
        self.assertEqual(by_name["李四"].last_comm, datetime(2024, 3, 1))


if __name__ == "__main__":
    unittest.main()
