import unittest

from src.application.services.field_normalizer import FieldNormalizer
from src.domain.errors import ConfigurationError
from src.domain.field_map import DEFAULT_FIELD_MAP
from src.domain.jira import JiraIssue


class FieldNormalizerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.normalizer = FieldNormalizer(DEFAULT_FIELD_MAP)

    def test_normalize_renames_mapped_custom_field(self) -> None:
        fields = self.normalizer.normalize({"customfield_12001": "R-9"})

        self.assertEqual(fields["requirementId"], "R-9")
        self.assertNotIn("customfield_12001", fields)

    def test_denormalize_restores_raw_key(self) -> None:
        fields = self.normalizer.denormalize({"requirementId": "R-9"})

        self.assertEqual(fields["customfield_12001"], "R-9")

    def test_unmapped_keys_and_nested_values_pass_through(self) -> None:
        status = {"name": "Open", "customfield_12001": "nested"}
        fields = self.normalizer.normalize({"status": status, "customfield_99999": "x"})

        self.assertIs(fields["status"], status)
        self.assertEqual(fields["customfield_99999"], "x")

    def test_round_trip_is_identity(self) -> None:
        raw = {
            "summary": "Checkout flow",
            "customfield_12236": [{"id": "1", "value": "iOS"}],
            "customfield_10001": None,
            "customfield_55555": "unmapped",
            "labels": ["web"],
        }

        self.assertEqual(self.normalizer.denormalize(self.normalizer.normalize(raw)), raw)

    def test_colliding_table_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            FieldNormalizer({"customfield_1": "sameName", "customfield_2": "sameName"})

    def test_independent_tables(self) -> None:
        other = FieldNormalizer({"customfield_12001": "ticketRef"})

        self.assertIn("ticketRef", other.normalize({"customfield_12001": "A"}))
        self.assertIn("requirementId", self.normalizer.normalize({"customfield_12001": "A"}))

    def test_normalize_handles_none(self) -> None:
        self.assertEqual(self.normalizer.normalize(None), {})
        self.assertEqual(self.normalizer.denormalize(None), {})

    def test_normalize_issue_fills_missing_envelope_fields(self) -> None:
        issue = self.normalizer.normalize_issue({
            "id": 10001,
            "key": "ABC-1",
            "fields": {"customfield_11303": "2024-05-01"},
            "renderedFields": {"customfield_11303": "01/May/24"},
        })

        self.assertEqual(issue.key, "ABC-1")
        self.assertEqual(issue.id, "10001")
        self.assertEqual(issue.expand, "")
        self.assertEqual(issue.self_url, "")
        self.assertEqual(issue.fields["startDate"], "2024-05-01")
        self.assertEqual(issue.rendered_fields["startDate"], "01/May/24")

    def test_denormalize_issue(self) -> None:
        issue = JiraIssue(key="ABC-2", id="2", fields={"epicLink": "ABC-1"})

        raw = self.normalizer.denormalize_issue(issue)

        self.assertEqual(raw["key"], "ABC-2")
        self.assertEqual(raw["fields"], {"customfield_10002": "ABC-1"})
        self.assertEqual(raw["renderedFields"], {})

    def test_issues_compare_by_key(self) -> None:
        self.assertEqual(JiraIssue(key="ABC-1", id="1"), JiraIssue(key="ABC-1", id="other"))
        self.assertEqual(len({JiraIssue(key="ABC-1"), JiraIssue(key="ABC-1", fields={"a": 1})}), 1)
