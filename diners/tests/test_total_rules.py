import random
import unittest

from diners.domain.ExtraDietColumn import ExtraDietColumn
from diners.logic.totals.rules import (
    ACCOUNT_OVERRIDES, MealClassifier, avg_of_existing, compute_total, resolve_rule,
    RULE_DEFAULT, RULE_MAIN_PLUS_EXTRAS, RULE_OVERRIDE, RULE_PREFIX_AVERAGE, RULE_SIMPLE_MEAL,
)
from diners.utilities.numbers import parse_number, round_half_up, try_parse_number


class TestNumbers(unittest.TestCase):

    def test_parse_number_lenient(self):
        self.assertEqual(parse_number("1,000"), 1000)
        self.assertEqual(parse_number(""), 0)
        self.assertEqual(parse_number(None), 0)
        self.assertEqual(parse_number("abc"), 0)
        self.assertEqual(parse_number("2.5"), 2.5)

    def test_try_parse_number_strict(self):
        self.assertIsNone(try_parse_number(""))
        self.assertIsNone(try_parse_number("12a"))
        self.assertIsNone(try_parse_number(True))
        self.assertIsNone(try_parse_number("nan"))
        self.assertEqual(try_parse_number(" 7 "), 7)
        self.assertIsInstance(try_parse_number("7.0"), int)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(3.5), 4)
        self.assertEqual(round_half_up(2.4999), 2)
        self.assertEqual(round_half_up(-2.5), -2)


class TestAvgOfExisting(unittest.TestCase):

    def test_zero_and_blank_are_absent(self):
        self.assertEqual(avg_of_existing(0, 0, 0), 0)
        self.assertEqual(avg_of_existing(0, 10, 0), 10)
        self.assertEqual(avg_of_existing(6, 10, 0), 8)
        self.assertEqual(avg_of_existing("", None, "4"), 4)

    def test_no_values(self):
        self.assertEqual(avg_of_existing(), 0)


class TestDefaultRule(unittest.TestCase):

    def test_default_example(self):
        row = {"breakfast": 10, "lunch": 20, "dinner": 30, "ceremony": 5}
        self.assertEqual(compute_total(row, "위탁급식", [], "20990101000000"), 25)

    def test_unknown_type_falls_back_to_default(self):
        row = {"breakfast": 10, "lunch": 20, "dinner": 30, "ceremony": 5}
        self.assertEqual(resolve_rule("unknown-type", [], "x"), RULE_DEFAULT)
        self.assertEqual(compute_total(row, "unknown-type", None, None), 25)

    def test_zero_counts_in_plain_mean(self):
        # Default rule divides by three even when a meal is 0
        self.assertEqual(compute_total({"breakfast": 3, "lunch": 3}, 1), 2)

    def test_half_up_rounding(self):
        # 6/3 + 0.5 = 2.5 rounds to 3
        self.assertEqual(compute_total({"breakfast": 6, "ceremony": 0.5}, 1), 3)

    def test_string_values_and_separators(self):
        row = {"breakfast": "1,500", "lunch": "1,500", "dinner": "1,500", "ceremony": ""}
        self.assertEqual(compute_total(row, 1), 1500)

    def test_non_dict_row(self):
        self.assertEqual(compute_total(None, 1), 0)


class TestAccountOverrides(unittest.TestCase):

    def test_override_table(self):
        self.assertEqual(
            set(ACCOUNT_OVERRIDES),
            {"20250819193617", "20250819193620", "20250819193630", "20250919162439"},
        )
        for account_id in ACCOUNT_OVERRIDES:
            self.assertEqual(resolve_rule("학교", [], account_id), RULE_OVERRIDE)

    def test_meals_average_plus_employ(self):
        row = {"breakfast": 10, "lunch": 0, "dinner": 20, "employ": 3}
        self.assertEqual(compute_total(row, 1, [], "20250819193617"), 18)

    def test_daycare_average_plus_ceremony(self):
        row = {"daycare_breakfast": 9, "daycare_lunch": 10, "daycare_diner": 0, "ceremony": 2, "breakfast": 100}
        # (9 + 10) / 2 + 2 = 11.5
        self.assertEqual(compute_total(row, 1, [], "20250819193620"), 12)

    def test_floor_average_plus_two_ceremonies(self):
        row = {"breakfast": 10, "lunch": 11, "dinner": 0, "ceremony": 1, "ceremony2": 2}
        # (10 + 11) / 2 + 1 + 2 = 13.5
        self.assertEqual(compute_total(row, 1, [], "20250819193630"), 14)

    def test_meals_average_plus_daycare_lunch(self):
        self.assertEqual(compute_total({"daycare_lunch": 4}, 1, [], "20250919162439"), 4)
        row = {"breakfast": 20, "lunch": 40, "dinner": 0, "daycare_lunch": 5}
        self.assertEqual(compute_total(row, 1, [], "20250919162439"), 35)


class TestSchoolIndustrialRules(unittest.TestCase):

    def test_main_plus_extras_example(self):
        extras = [ExtraDietColumn("a", "a"), ExtraDietColumn("b", "b")]
        row = {"lunch": 100, "a": 20, "b": 5}
        self.assertEqual(resolve_rule("학교", extras, "S-1"), RULE_MAIN_PLUS_EXTRAS)
        self.assertEqual(compute_total(row, "학교", extras, "S-1"), 125)
        self.assertEqual(compute_total(row, 5, extras, "S-1"), 125)

    def test_industrial_without_simple_meal(self):
        extras = [ExtraDietColumn("특식", "extra_diet1_price")]
        row = {"lunch": 50, "extra_diet1_price": 5, "breakfast": 99}
        self.assertEqual(compute_total(row, "산업체", extras, "I-1"), 55)

    def test_breakfast_main_prefix_average(self):
        extras = [
            ExtraDietColumn("중식(교직원)", "extra_diet1_price"),
            ExtraDietColumn("석식", "extra_diet2_price"),
            ExtraDietColumn("석식(기숙사)", "extra_diet3_price"),
        ]
        row = {"breakfast": 30, "extra_diet1_price": 20, "extra_diet2_price": 10, "extra_diet3_price": 5}
        self.assertEqual(resolve_rule("학교", extras, "20250819193651"), RULE_PREFIX_AVERAGE)
        # avg(30, 20, 10 + 5) = 21.67
        self.assertEqual(compute_total(row, "학교", extras, "20250819193651"), 22)

    def test_prefix_average_skips_absent_groups(self):
        extras = [ExtraDietColumn("석식", "extra_diet1_price")]
        row = {"breakfast": 30, "extra_diet1_price": 0}
        self.assertEqual(compute_total(row, "학교", extras, "20250819193651"), 30)

    def test_unclassified_extra_is_ignored_by_prefix_average(self):
        extras = [ExtraDietColumn("간식", "extra_diet1_price")]
        row = {"breakfast": 30, "extra_diet1_price": 300}
        self.assertEqual(compute_total(row, "학교", extras, "20250819193651"), 30)

    def test_custom_classifier(self):
        classifier = MealClassifier(lunch_prefixes=("LUNCH",), dinner_prefixes=("DINNER",))
        extras = [ExtraDietColumn("LUNCH-staff", "extra_diet1_price")]
        row = {"breakfast": 10, "extra_diet1_price": 20}
        self.assertEqual(compute_total(row, "학교", extras, "20250819193651", classifier), 15)

    def test_simple_meal_branch(self):
        extras = [
            ExtraDietColumn("간편식(포케)", "extra_diet1_price"),
            ExtraDietColumn("석식", "extra_diet2_price"),
            ExtraDietColumn("야식", "extra_diet3_price"),
        ]
        self.assertEqual(resolve_rule("산업체", extras, "I-2"), RULE_SIMPLE_MEAL)
        row = {"lunch": 100, "extra_diet1_price": 20, "extra_diet2_price": 30, "extra_diet3_price": 7}
        # mean(100, 20, 30) + 7
        self.assertEqual(compute_total(row, "산업체", extras, "I-2"), 57)
        zero_row = {"lunch": 90, "extra_diet1_price": 0, "extra_diet2_price": 0, "extra_diet3_price": 0}
        self.assertEqual(compute_total(zero_row, "산업체", extras, "I-2"), 30)

    def test_simple_meal_only_for_industrial(self):
        extras = [ExtraDietColumn("석식", "extra_diet1_price")]
        self.assertEqual(resolve_rule("학교", extras, "S-2"), RULE_MAIN_PLUS_EXTRAS)
        self.assertEqual(compute_total({"lunch": 10, "extra_diet1_price": 4}, "학교", extras, "S-2"), 14)


class TestPurity(unittest.TestCase):

    def test_deterministic_and_non_negative(self):
        rng = random.Random(20250301)
        keys = ["breakfast", "lunch", "dinner", "ceremony", "ceremony2", "employ", "daycare_breakfast",
                "daycare_lunch", "daycare_diner", "extra_diet1_price", "extra_diet2_price"]
        extras = [ExtraDietColumn("중식", "extra_diet1_price"), ExtraDietColumn("간편식", "extra_diet2_price")]
        account_ids = list(ACCOUNT_OVERRIDES) + ["20250819193651", "plain"]
        for _ in range(200):
            row = {k: rng.choice([0, "", None, rng.randint(0, 500), str(rng.randint(0, 500))]) for k in keys}
            account_type = rng.choice([1, 2, 3, 4, 5, "학교", "산업체", None, "??"])
            account_id = rng.choice(account_ids)
            first = compute_total(dict(row), account_type, extras, account_id)
            second = compute_total(dict(row), account_type, extras, account_id)
            self.assertEqual(first, second)
            self.assertIsInstance(first, int)
            self.assertGreaterEqual(first, 0)


if __name__ == "__main__":
    unittest.main()
