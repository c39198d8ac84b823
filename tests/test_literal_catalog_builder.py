import unittest

from src.application.services.literal_catalog_builder import LiteralCatalogBuilder
from src.domain.field_map import DEFAULT_FIELD_MAP
from src.domain.field_value import FieldValueKind, classify
from src.domain.jira import JiraIssue
from src.domain.literals import LiteralCatalog, custom_catalog_name


class LiteralCatalogBuilderTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.builder = LiteralCatalogBuilder()

    def test_status_names_are_sorted_and_absent_fields_omitted(self) -> None:
        issues = [
            JiraIssue(key="A-1", fields={"status": {"name": "Open"}}),
            JiraIssue(key="A-2", fields={"status": {"name": "Done"}}),
        ]

        aggregates = self.builder.build(issues)

        self.assertEqual(aggregates["StatusName"], ["Done", "Open"])
        self.assertNotIn("ComponentName", aggregates)
        self.assertNotIn("Label", aggregates)

    def test_nested_objects_and_user_roles(self) -> None:
        issue = JiraIssue(key="A-1", fields={
            "status": {
                "name": "In Progress",
                "id": "3",
                "statusCategory": {"id": 4, "key": "indeterminate", "colorName": "yellow", "name": "In Progress"},
            },
            "priority": {"id": "2", "name": "High"},
            "project": {"key": "A", "name": "Alpha", "projectTypeKey": "software"},
            "issuetype": {"id": "10001", "name": "Story"},
            "assignee": {"displayName": "Kim", "emailAddress": "kim@example.com", "accountId": "acc-1"},
            "reporter": None,
        })

        aggregates = self.builder.build([issue])

        self.assertEqual(aggregates["StatusId"], ["3"])
        self.assertEqual(aggregates["StatusCategoryKey"], ["indeterminate"])
        self.assertEqual(aggregates["StatusCategoryColorName"], ["yellow"])
        self.assertNotIn("StatusCategoryId", aggregates)
        self.assertEqual(aggregates["PriorityName"], ["High"])
        self.assertEqual(aggregates["ProjectProjectTypeKey"], ["software"])
        self.assertEqual(aggregates["IssueTypeName"], ["Story"])
        self.assertEqual(aggregates["AssigneeEmailAddress"], ["kim@example.com"])
        self.assertFalse(any(name.startswith("Reporter") for name in aggregates))

    def test_labels_and_components(self) -> None:
        issue = JiraIssue(key="A-1", fields={
            "labels": ["web", "  ", "api", "web"],
            "components": [
                "Billing",
                {"name": "Checkout"},
                {"value": "Search"},
                {"displayName": "Mobile"},
                {"key": "CORE"},
                {"name": None, "value": "Fallback"},
                {"id": "no-name"},
            ],
        })

        aggregates = self.builder.build([issue])

        self.assertEqual(aggregates["Label"], ["api", "web"])
        self.assertEqual(
            aggregates["ComponentName"],
            ["Billing", "CORE", "Checkout", "Fallback", "Mobile", "Search"],
        )

    def test_custom_field_shapes(self) -> None:
        issue = JiraIssue(key="A-1", fields={
            "customfield_20001": "Enterprise",
            "customfield_20002": ["alpha", {"id": "7", "value": "Android"}],
            "customfield_20003": {"id": "9", "value": "EU"},
            "customfield_20004": 12,
            "requirementId": "R-1",
        })

        aggregates = self.builder.build([issue])

        self.assertEqual(aggregates["Custom20001"], ["Enterprise"])
        self.assertEqual(aggregates["Custom20002"], ["alpha"])
        self.assertEqual(aggregates["Custom20002Id"], ["7"])
        self.assertEqual(aggregates["Custom20002Value"], ["Android"])
        self.assertEqual(aggregates["Custom20003Id"], ["9"])
        self.assertEqual(aggregates["Custom20003Value"], ["EU"])
        self.assertNotIn("Custom20004", aggregates)

    def test_standardized_custom_fields_keep_raw_catalog_names(self) -> None:
        builder = LiteralCatalogBuilder(DEFAULT_FIELD_MAP)
        issue = JiraIssue(key="A-1", fields={
            "requirementId": "R-9",
            "devices": [{"id": "1", "value": "iOS"}],
            "summary": "not a custom field",
        })

        aggregates = builder.build([issue])

        self.assertEqual(aggregates["Custom12001"], ["R-9"])
        self.assertEqual(aggregates["Custom12236Id"], ["1"])
        self.assertEqual(aggregates["Custom12236Value"], ["iOS"])
        self.assertEqual(list(aggregates), ["Custom12001", "Custom12236Id", "Custom12236Value"])

    def test_rendered_fields_are_collected_too(self) -> None:
        issue = JiraIssue(
            key="A-1",
            fields={"labels": ["web"]},
            rendered_fields={"labels": ["rendered"], "customfield_1": "html"},
        )

        aggregates = self.builder.build([issue])

        self.assertEqual(aggregates["Label"], ["rendered", "web"])
        self.assertEqual(aggregates["Custom1"], ["html"])

    def test_output_is_idempotent(self) -> None:
        issues = [
            JiraIssue(key="A-1", fields={"status": {"name": "Open"}, "labels": ["b", "a"]}),
            JiraIssue(key="A-2", fields={"status": {"name": "Done"}, "labels": ["a"]}),
        ]

        self.assertEqual(self.builder.build(issues), self.builder.build(list(reversed(issues))))

    def test_catalog_names_are_sorted(self) -> None:
        issue = JiraIssue(key="A-1", fields={"status": {"name": "Open"}, "labels": ["x"]})

        self.assertEqual(list(self.builder.build([issue])), ["Label", "StatusName"])


class LiteralCatalogTestCase(unittest.TestCase):
    def test_blank_and_non_string_values_are_ignored(self) -> None:
        catalog = LiteralCatalog()
        catalog.add("Label", "")
        catalog.add("Label", "   ")
        catalog.add("Label", None)
        catalog.add("Label", 3)

        self.assertEqual(catalog.aggregates(), {})
        self.assertEqual(len(catalog), 0)

    def test_custom_catalog_name(self) -> None:
        self.assertEqual(custom_catalog_name("customfield_12001"), "Custom12001")
        self.assertNotEqual(custom_catalog_name("customfield_1"), custom_catalog_name("customfield_11"))

    def test_classify(self) -> None:
        self.assertIs(classify("x").kind, FieldValueKind.TEXT)
        self.assertIs(classify({"a": 1}).kind, FieldValueKind.OBJECT)
        self.assertIs(classify(["a"]).kind, FieldValueKind.LIST)
        self.assertIs(classify(None).kind, FieldValueKind.OTHER)
        self.assertIsNone(classify("x").prop("name"))
        self.assertEqual(classify({"value": "v", "key": "k"}).first_prop("name", "value", "key"), "v")
