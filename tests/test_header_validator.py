from __future__ import annotations

import unittest

from app.validators.header_validator import (
    CSVHeaderValidationError,
    MissingMandatoryFieldsError,
    validate_headers,
)


class TestHeaderValidator(unittest.TestCase):
    def test_returns_trimmed_headers_in_order(self) -> None:
        headers = validate_headers([" name.firstName", "name.lastName ", "age", "address.city"])

        self.assertEqual(headers, ("name.firstName", "name.lastName", "age", "address.city"))

    def test_header_order_is_free(self) -> None:
        headers = validate_headers(["age", "gender", "name.lastName", "name.firstName"])

        self.assertEqual(headers[0], "age")

    def test_missing_fields_are_listed(self) -> None:
        with self.assertRaises(MissingMandatoryFieldsError) as ctx:
            validate_headers(["name.firstName", "address.city"])

        self.assertEqual(ctx.exception.missing_fields, ("name.lastName", "age"))
        self.assertEqual(str(ctx.exception), "Missing mandatory fields: name.lastName, age")

    def test_missing_fields_error_is_a_header_error(self) -> None:
        with self.assertRaises(CSVHeaderValidationError):
            validate_headers(["firstName", "lastName", "age"])

    def test_prefix_match_is_not_enough(self) -> None:
        with self.assertRaises(MissingMandatoryFieldsError) as ctx:
            validate_headers(["name.firstName", "name.lastName", "age.years"])

        self.assertEqual(ctx.exception.missing_fields, ("age",))


if __name__ == "__main__":
    unittest.main()
