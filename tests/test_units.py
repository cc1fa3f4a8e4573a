import unittest
from datetime import timedelta

from dateutil.relativedelta import relativedelta

from cadence.scheduling import Cadence, Unit


class UnitParseTests(unittest.TestCase):
    def test_codes_are_preserved(self):
        codes = [unit.value for unit in Unit]
        self.assertEqual(codes, ["ns", "µs", "ms", "sec", "min", "hr", "day", "week", "month", "year"])

    def test_parse_accepts_codes_names_and_aliases(self):
        self.assertIs(Unit.parse("sec"), Unit.SECOND)
        self.assertIs(Unit.parse("µs"), Unit.MICROSECOND)
        self.assertIs(Unit.parse("us"), Unit.MICROSECOND)
        self.assertIs(Unit.parse("SECONDS"), Unit.SECOND)
        self.assertIs(Unit.parse("Hr"), Unit.HOUR)
        self.assertIs(Unit.parse("MS"), Unit.MILLISECOND)
        self.assertIs(Unit.parse("m"), Unit.MINUTE)
        self.assertIs(Unit.parse("years"), Unit.YEAR)
        self.assertIs(Unit.parse(Unit.WEEK), Unit.WEEK)

    def test_parse_rejects_unknown_units(self):
        for value in ("fortnight", "", "5", None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    Unit.parse(value)  # type: ignore[arg-type]

    def test_str_is_the_code(self):
        self.assertEqual(str(Unit.MONTH), "month")
        self.assertEqual(f"{Unit.HOUR}", "hr")


class UnitOffsetTests(unittest.TestCase):
    def test_fixed_units_are_timedeltas(self):
        self.assertEqual(Unit.NANOSECOND.offset(1000), timedelta(microseconds=1))
        self.assertEqual(Unit.MICROSECOND.offset(500), timedelta(microseconds=500))
        self.assertEqual(Unit.MILLISECOND.offset(200), timedelta(milliseconds=200))
        self.assertEqual(Unit.SECOND.offset(1), timedelta(seconds=1))
        self.assertEqual(Unit.MINUTE.offset(5), timedelta(minutes=5))
        self.assertEqual(Unit.HOUR.offset(6), timedelta(hours=6))
        self.assertFalse(Unit.HOUR.is_calendar)

    def test_sub_microsecond_nanoseconds_round_up(self):
        self.assertEqual(Unit.NANOSECOND.offset(1), timedelta(microseconds=1))
        self.assertEqual(Unit.NANOSECOND.offset(500), timedelta(microseconds=1))
        self.assertEqual(Unit.NANOSECOND.offset(1001), timedelta(microseconds=2))

    def test_calendar_units_are_relativedeltas(self):
        self.assertEqual(Unit.DAY.offset(15), relativedelta(days=15))
        self.assertEqual(Unit.WEEK.offset(3), relativedelta(days=21))
        self.assertEqual(Unit.MONTH.offset(1), relativedelta(months=1))
        self.assertEqual(Unit.YEAR.offset(2), relativedelta(years=2))
        self.assertTrue(Unit.WEEK.is_calendar)


class CadenceTests(unittest.TestCase):
    def test_non_positive_frequency_is_coerced_to_one(self):
        self.assertEqual(Cadence(0, Unit.SECOND), Cadence(1, Unit.SECOND))
        self.assertEqual(Cadence(-7, "min").frequency, 1)

    def test_renders_frequency_times_code(self):
        self.assertEqual(str(Cadence(1, Unit.SECOND)), "1 * sec")
        self.assertEqual(str(Cadence(3, "weeks")), "3 * week")

    def test_parse_expressions(self):
        self.assertEqual(Cadence.parse("5sec"), Cadence(5, Unit.SECOND))
        self.assertEqual(Cadence.parse("5 * sec"), Cadence(5, Unit.SECOND))
        self.assertEqual(Cadence.parse("every 2 years"), Cadence(2, Unit.YEAR))
        self.assertEqual(Cadence.parse("month"), Cadence(1, Unit.MONTH))
        self.assertEqual(Cadence.parse("0 min"), Cadence(1, Unit.MINUTE))

    def test_parse_rejects_malformed_expressions(self):
        for expression in ("abc5", "5 fortnights", "", "5 5 sec"):
            with self.subTest(expression=expression):
                with self.assertRaises(ValueError):
                    Cadence.parse(expression)


if __name__ == "__main__":
    unittest.main()
