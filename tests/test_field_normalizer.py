from __future__ import annotations

import unittest

from app.mappers.field_normalizer import (
    FIELD_ALIASES,
    clean_number,
    coerce_number,
    normalize_keys,
    resolve_field,
    resolve_text,
)


class TestNormalizeKeys(unittest.TestCase):
    def test_trims_and_lowercases_keys_without_touching_values(self) -> None:
        row = {"  DogName ": " Rex ", "Fecha Sesión": "01/02/2024", "UAC": "8"}

        normalized = normalize_keys(row)

        self.assertEqual(
            normalized,
            {"dogname": " Rex ", "fecha sesión": "01/02/2024", "uac": "8"},
        )

    def test_normalizing_twice_is_identity(self) -> None:
        row = {"Name": "Luna", " BREED": "Pastor", "age ": 4, "Nivel": "Master"}

        once = normalize_keys(row)
        twice = normalize_keys(once)

        self.assertEqual(once, twice)

    def test_non_mapping_rows_become_empty(self) -> None:
        self.assertEqual(normalize_keys(None), {})
        self.assertEqual(normalize_keys(["name", "Rex"]), {})
        self.assertEqual(normalize_keys("Rex"), {})


class TestResolveField(unittest.TestCase):
    def test_first_alias_wins_when_several_are_present(self) -> None:
        row = normalize_keys({"DogName": "Rex", "Perro": "Toby"})

        self.assertEqual(resolve_field(row, "session.dog"), "Rex")

    def test_blank_alias_falls_through_to_the_next(self) -> None:
        row = normalize_keys({"DogName": "  ", "Perro": "Toby"})

        self.assertEqual(resolve_text(row, "session.dog"), "Toby")

    def test_spanish_headers_resolve(self) -> None:
        row = normalize_keys({"Fecha Sesión": "03/03/2024", "Entrenador": "Ana", "UA Incorrectas": "2"})

        self.assertEqual(resolve_text(row, "session.date"), "03/03/2024")
        self.assertEqual(resolve_text(row, "session.trainer"), "Ana")
        self.assertEqual(resolve_field(row, "session.ua_i"), "2")

    def test_missing_field_returns_default(self) -> None:
        self.assertEqual(resolve_field({}, "session.mode", "Entrenamiento"), "Entrenamiento")
        self.assertEqual(resolve_text({}, "session.notes"), "")

    def test_unknown_logical_field_raises(self) -> None:
        with self.assertRaises(KeyError):
            resolve_field({"x": 1}, "session.unknown")

    def test_every_alias_is_already_normalized(self) -> None:
        for field, aliases in FIELD_ALIASES.items():
            for alias in aliases:
                self.assertEqual(alias, alias.strip().lower(), msg=field)


class TestNumberCoercion(unittest.TestCase):
    def test_clean_number_strips_non_numeric_characters(self) -> None:
        self.assertEqual(clean_number("8 UA"), 8)
        self.assertEqual(clean_number(" 2.5 "), 2.5)
        self.assertEqual(clean_number(7), 7)

    def test_clean_number_falls_back_to_zero(self) -> None:
        self.assertEqual(clean_number(""), 0)
        self.assertEqual(clean_number(None), 0)
        self.assertEqual(clean_number("n/a"), 0)
        self.assertEqual(clean_number("1.2.3"), 0)
        self.assertEqual(clean_number(True), 0)

    def test_coerce_number_is_plain(self) -> None:
        self.assertEqual(coerce_number("4"), 4)
        self.assertEqual(coerce_number("3.5"), 3.5)
        self.assertEqual(coerce_number("four"), 0)
        self.assertEqual(coerce_number(None), 0)


if __name__ == "__main__":
    unittest.main()
