"""
Tests for resolving request paths to entity references.
"""

import pytest

from audit.resolver import ENTITY_RULES, SYSTEM_REFERENCE, EntityReference, EntityRule, resolve_entity


class TestResolveEntity:
    """Path to (type, id, sub-action) resolution."""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/api/cards/10", EntityReference("card", "10", None)),
            ("/api/cards/10/", EntityReference("card", "10", None)),
            ("/api/cards/10/complete/", EntityReference("card", "10", "complete")),
            ("/api/users/12/change-password", EntityReference("user", "12", "change-password")),
            ("/api/users/12/profile-image/", EntityReference("user", "12", "profile-image")),
            ("/api/boards/3/members/", EntityReference("board", "3", "members")),
            ("/api/checklist-items/42/", EntityReference("checklist_item", "42", None)),
            ("/api/portfolios/", EntityReference("portfolio", None, None)),
            ("/api/notifications/5/read/", EntityReference("notification", "5", "read")),
        ],
    )
    def test_known_prefixes(self, path, expected):
        assert resolve_entity(path) == expected

    def test_unknown_path_is_system_reference(self):
        reference = resolve_entity("/api/check-overdue-tasks/")
        assert reference == SYSTEM_REFERENCE
        assert reference.entity_type == "system"
        assert reference.entity_id == "system"

    def test_empty_path_is_system_reference(self):
        assert resolve_entity("/") == SYSTEM_REFERENCE

    def test_first_rule_wins(self):
        # users precedes boards in the rule table
        reference = resolve_entity("/api/boards/3/users/9")
        assert reference == EntityReference("user", "9", None)

    def test_custom_rule_offsets(self):
        rules = (EntityRule("export", "board", id_offset=2, sub_action_offset=1),)
        reference = resolve_entity("/api/export/csv/7", rules=rules)
        assert reference == EntityReference("board", "7", "csv")

    def test_rule_table_prefixes_are_unique(self):
        prefixes = [rule.prefix for rule in ENTITY_RULES]
        assert len(prefixes) == len(set(prefixes))
