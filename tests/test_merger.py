"""Tests for folding fragment frontmatter into the effective configuration."""

import pytest

from agentflow.spec.imports import ImportResolver, VirtualFileSource
from agentflow.spec.merger import merge_frontmatter, merge_maps, union_lists
from agentflow.spec.parser import parse_document
from agentflow.spec.permissions import PermissionLevel
from agentflow.validator.errors import ConfigurationError


def _merge(files, root_path="root.md"):
    root = parse_document(files[root_path], root_path)
    graph = ImportResolver(VirtualFileSource(files)).resolve(root)
    return merge_frontmatter(graph, default_engine="copilot")


class TestPrimitives:
    """Tests for union_lists and merge_maps."""

    def test_union_keeps_first_seen_order(self):
        """Duplicates are dropped; first occurrence keeps its place."""
        assert union_lists(["a", "b"], ["b", "c"], None, ["a"]) == ["a", "b", "c"]

    def test_merge_maps_recurses(self):
        """Nested maps merge; the override wins on scalar conflicts."""
        base = {"github": {"allowed": ["a"], "read-only": True}, "bash": ["ls"]}
        override = {"github": {"allowed": ["b"], "read-only": False}}
        merged = merge_maps(base, override)
        assert merged == {"github": {"allowed": ["a", "b"], "read-only": False}, "bash": ["ls"]}

    def test_merge_maps_does_not_mutate(self):
        """Inputs are left untouched."""
        base = {"a": {"x": 1}}
        merge_maps(base, {"a": {"y": 2}})
        assert base == {"a": {"x": 1}}


class TestMergeFrontmatter:
    """Tests for merge_frontmatter."""

    def test_root_scalar_wins(self):
        """A scalar set by the root overrides fragments."""
        files = {
            "root.md": "---\non: push\ndescription: Root\nimports: [a.md]\n---\nR\n",
            "a.md": "---\ndescription: Fragment\n---\nA\n",
        }
        assert _merge(files).description == "Root"

    def test_first_fragment_scalar_used(self):
        """Without a root value the first fragment that sets it wins."""
        files = {
            "root.md": "---\non: push\nimports: [a.md, b.md]\n---\nR\n",
            "a.md": "---\nengine: claude\n---\nA\n",
            "b.md": "---\nengine: custom\n---\nB\n",
        }
        assert _merge(files).engine.id == "claude"

    def test_default_engine(self):
        """No engine anywhere selects the default id."""
        fm = _merge({"root.md": "---\non: push\n---\nR\n"})
        assert fm.engine.id == "copilot"

    def test_list_fields_union(self):
        """labels and steps union across documents, fragments first."""
        files = {
            "root.md": "---\non: push\nlabels: [triage, bot]\nimports: [a.md]\n---\nR\n",
            "a.md": "---\nlabels: [bot, shared]\nsteps:\n  - run: echo a\n---\nA\n",
        }
        fm = _merge(files)
        assert fm.labels == ("bot", "shared", "triage")
        assert fm.steps == ({"run": "echo a"},)

    def test_map_fields_merge_per_key(self):
        """tools merge recursively; env conflicts go to the root."""
        files = {
            "root.md": (
                "---\non: push\nimports: [a.md]\ntools:\n  github:\n    allowed: [list_issues]\n"
                "env:\n  MODE: root\n---\nR\n"
            ),
            "a.md": (
                "---\ntools:\n  github:\n    allowed: [get_issue]\n  bash: [ls]\n"
                "env:\n  MODE: fragment\n  EXTRA: '1'\n---\nA\n"
            ),
        }
        fm = _merge(files)
        assert fm.tools["github"]["allowed"] == ["get_issue", "list_issues"]
        assert fm.tools["bash"] == ["ls"]
        assert fm.env == {"MODE": "root", "EXTRA": "1"}

    def test_permissions_fragment_read_root_write(self):
        """Fragment issues: read plus root issues: write is issues: write."""
        files = {
            "root.md": "---\non: push\nimports: [shared/a.md]\npermissions:\n  issues: write\n---\nR\n",
            "shared/a.md": "---\npermissions:\n  issues: read\n---\nA\n",
        }
        fm = _merge(files)
        assert fm.permissions.get("issues") == (PermissionLevel.WRITE, True)
        assert fm.raw["permissions"] == {"issues": "write"}

    def test_permissions_fragment_adds_scopes(self):
        """Scopes only a fragment requests are kept."""
        files = {
            "root.md": "---\non: push\nimports: [a.md]\npermissions:\n  contents: read\n---\nR\n",
            "a.md": "---\npermissions:\n  pull-requests: read\n---\nA\n",
        }
        fm = _merge(files)
        assert fm.permissions.to_yaml_value() == {"contents": "read", "pull-requests": "read"}

    def test_no_permissions_anywhere(self):
        """Absent permissions stay absent."""
        assert _merge({"root.md": "---\non: push\n---\nR\n"}).permissions is None

    def test_bad_fragment_permissions_positioned(self):
        """Permission errors point at the declaring fragment."""
        files = {
            "root.md": "---\non: push\nimports: [a.md]\n---\nR\n",
            "a.md": "---\npermissions:\n  id-token: read\n---\nA\n",
        }
        with pytest.raises(ConfigurationError) as exc_info:
            _merge(files)
        assert exc_info.value.file_path == "a.md"
        assert exc_info.value.line == 2

    def test_network_union(self):
        """Allowed and blocked lists union across documents."""
        files = {
            "root.md": "---\non: push\nimports: [a.md]\nnetwork:\n  allowed: [defaults]\n---\nR\n",
            "a.md": "---\nnetwork:\n  allowed: [python, example.com]\n  blocked: [bad.example.com]\n---\nA\n",
        }
        fm = _merge(files)
        assert fm.network.allowed == ("python", "example.com", "defaults")
        assert fm.network.blocked == ("bad.example.com",)

    def test_imported_files_recorded(self):
        """The effective configuration lists fragments in merge order."""
        files = {
            "root.md": "---\non: push\nimports: [a.md, b.md]\n---\nR\n",
            "a.md": "A\n",
            "b.md": "B\n",
        }
        fm = _merge(files)
        assert fm.imported_files == ("a.md", "b.md")
        assert fm.raw["imports"] == ["a.md", "b.md"]
