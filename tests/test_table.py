import unittest

from app.utils.table import build_table, filter_rows, paginate, search_rows

ROWS = [
    {"requestId": 1, "userId": 7, "issueDescription": "Refund for cancelled trip", "status": "Pending"},
    {"requestId": 2, "userId": 8, "issueDescription": "Change travel dates", "status": "Resolved"},
    {"requestId": 3, "userId": 7, "issueDescription": "REFUND not received", "status": "Resolved"},
    {"requestId": 4, "userId": 9, "issueDescription": None, "status": "Pending"},
]


class SearchRowsTests(unittest.TestCase):
    def test_search_is_case_insensitive_substring(self):
        matched = search_rows(ROWS, "refund", ["issueDescription"])
        self.assertEqual([r["requestId"] for r in matched], [1, 3])

    def test_search_matches_any_key(self):
        matched = search_rows(ROWS, "9", ["requestId", "userId"])
        self.assertEqual([r["requestId"] for r in matched], [4])

    def test_empty_term_or_no_keys_keeps_everything(self):
        self.assertEqual(len(search_rows(ROWS, "", ["issueDescription"])), 4)
        self.assertEqual(len(search_rows(ROWS, "   ", ["issueDescription"])), 4)
        self.assertEqual(len(search_rows(ROWS, "refund", [])), 4)

    def test_missing_values_do_not_match(self):
        matched = search_rows(ROWS, "none", ["issueDescription"])
        self.assertEqual(matched, [])

    def test_nested_keys(self):
        rows = [{"payment": {"status": "PAID"}}, {"payment": None}]
        self.assertEqual(len(search_rows(rows, "paid", ["payment.status"])), 1)

    def test_zero_values_are_searchable(self):
        rows = [{"price": 0}, {"price": 10}, {"price": 25}]
        self.assertEqual(search_rows(rows, "0", ["price"]), [{"price": 0}, {"price": 10}])


class FilterRowsTests(unittest.TestCase):
    def test_all_and_empty_disable_filter(self):
        self.assertEqual(len(filter_rows(ROWS, {"status": "all"})), 4)
        self.assertEqual(len(filter_rows(ROWS, {"status": ""})), 4)
        self.assertEqual(len(filter_rows(ROWS, {"status": None})), 4)

    def test_filter_compares_as_text(self):
        self.assertEqual([r["requestId"] for r in filter_rows(ROWS, {"userId": "7"})], [1, 3])

    def test_boolean_fields_filter_as_true_false(self):
        rows = [{"id": 1, "active": True}, {"id": 2, "active": False}]
        self.assertEqual(filter_rows(rows, {"active": "false"}), [{"id": 2, "active": False}])

    def test_filters_combine(self):
        matched = filter_rows(ROWS, {"userId": "7", "status": "Resolved"})
        self.assertEqual([r["requestId"] for r in matched], [3])


class PaginateTests(unittest.TestCase):
    def test_pages_are_sliced(self):
        page = paginate(list(range(25)), page=3, per_page=10)
        self.assertEqual(page["items"], [20, 21, 22, 23, 24])
        self.assertEqual(page["total"], 25)
        self.assertEqual(page["total_pages"], 3)

    def test_page_is_clamped(self):
        self.assertEqual(paginate(list(range(5)), page=9, per_page=2)["page"], 3)
        self.assertEqual(paginate(list(range(5)), page=0, per_page=2)["page"], 1)

    def test_pages_partition_the_filtered_rows(self):
        rows = [
            {"bookingId": n, "status": "CONFIRMED" if n % 3 else "PENDING", "contactFullName": f"Guest {n}"}
            for n in range(1, 48)
        ]
        expected = search_rows(filter_rows(rows, {"status": "CONFIRMED"}), "guest 1", ["contactFullName"])
        self.assertEqual(len(expected), 8)

        first = build_table(rows, search="guest 1", search_keys=["contactFullName"],
                            filters={"status": "CONFIRMED"}, page=1, per_page=3)
        seen = []
        for number in range(1, first["total_pages"] + 1):
            page = build_table(rows, search="guest 1", search_keys=["contactFullName"],
                               filters={"status": "CONFIRMED"}, page=number, per_page=3)
            self.assertLessEqual(len(page["items"]), 3)
            seen.extend(page["items"])

        self.assertEqual(seen, expected)
        self.assertEqual(first["total"], len(expected))
        self.assertEqual(first["total_pages"], 3)

    def test_empty_list_has_one_page(self):
        page = paginate([], page=4)
        self.assertEqual(page["total_pages"], 1)
        self.assertEqual(page["page"], 1)
        self.assertEqual(page["items"], [])


class BuildTableTests(unittest.TestCase):
    def test_filter_then_search_then_page(self):
        table = build_table(
            ROWS,
            search="refund",
            search_keys=["issueDescription"],
            filters={"status": "Resolved"},
            page=1,
            per_page=10,
        )
        self.assertEqual([r["requestId"] for r in table["items"]], [3])
        self.assertEqual(table["filters"], {"status": "Resolved"})
        self.assertEqual(table["search"], "refund")

    def test_empty_result_carries_message(self):
        table = build_table(ROWS, search="visa", search_keys=["issueDescription"], filters={"status": ""})
        self.assertEqual(table["items"], [])
        self.assertEqual(table["empty_message"], "No data found.")
        self.assertEqual(table["filters"], {"status": "all"})


if __name__ == "__main__":
    unittest.main()
