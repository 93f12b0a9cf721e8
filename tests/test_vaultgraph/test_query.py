"""Unit tests for vaultgraph.query.VaultQuery."""

from pathlib import Path

import pytest

from vaultgraph.errors import AmbiguousLinkTarget, EmptyVaultError, NoteNotFoundError
from vaultgraph.index import VaultIndex
from vaultgraph.query import VaultQuery


def _query(vault: Path) -> VaultQuery:
    index = VaultIndex(vault)
    index.build()
    return VaultQuery(index)


@pytest.fixture()
def abc(abc_vault: Path) -> VaultQuery:
    return _query(abc_vault)


# ---------------------------------------------------------------------------
# The four core queries
# ---------------------------------------------------------------------------


class TestCoreQueries:
    def test_tags(self, abc: VaultQuery):
        assert abc.tags() == {"project": ["A"]}

    def test_backlinks(self, abc: VaultQuery):
        assert abc.backlinks("B") == ["A"]
        assert abc.backlinks("A") == []

    def test_orphans(self, abc: VaultQuery):
        assert abc.orphans() == ["A", "C"]

    def test_files(self, abc: VaultQuery):
        assert abc.files() == ["A", "B", "C"]

    def test_tags_of_one_note(self, abc: VaultQuery):
        assert abc.tags("A") == ["project"]
        assert abc.tags("B") == []

    def test_backlinks_accepts_file_name(self, abc: VaultQuery):
        assert abc.backlinks("B.md") == ["A"]

    def test_backlinks_for_missing_note(self, abc: VaultQuery):
        with pytest.raises(NoteNotFoundError) as info:
            abc.backlinks("Z")
        assert info.value.note_id == "Z"

    def test_tags_for_missing_note(self, abc: VaultQuery):
        with pytest.raises(NoteNotFoundError):
            abc.tags("Nope")


class TestEmptyVault:
    @pytest.mark.parametrize(
        "call",
        [
            lambda q: q.tags(),
            lambda q: q.backlinks("A"),
            lambda q: q.orphans(),
            lambda q: q.files(),
            lambda q: q.links(),
            lambda q: q.stats(),
        ],
    )
    def test_every_query_reports_empty_vault(self, tmp_path: Path, call):
        with pytest.raises(EmptyVaultError):
            call(_query(tmp_path))

    def test_empty_vault_is_not_note_not_found(self):
        assert not issubclass(EmptyVaultError, NoteNotFoundError)
        assert not issubclass(NoteNotFoundError, EmptyVaultError)


# ---------------------------------------------------------------------------
# Supplementary queries
# ---------------------------------------------------------------------------


class TestTagQueries:
    def test_tag_counts(self, make_vault):
        q = _query(make_vault({"a": "#x #y", "b": "#x", "c": "---\ntags: [y, z]\n---\n"}))
        assert q.tag_counts() == [
            {"tag": "x", "count": 2},
            {"tag": "y", "count": 2},
            {"tag": "z", "count": 1},
        ]

    def test_notes_with_tag_normalises_input(self, abc: VaultQuery):
        assert abc.notes_with_tag("#Project") == ["A"]
        assert abc.notes_with_tag("unknown") == []


class TestLinkQueries:
    def test_links(self, abc: VaultQuery):
        assert abc.links() == {
            "links": [
                {"source": "A", "target": "B", "resolved": "B", "status": "resolved"},
                {"source": "C", "target": "Z", "resolved": None, "status": "dangling"},
            ],
            "broken_count": 1,
        }

    def test_broken_links_only(self, abc: VaultQuery):
        result = abc.links(broken_only=True)
        assert [link["target"] for link in result["links"]] == ["Z"]
        assert result["broken_count"] == 1

    def test_outlinks(self, abc: VaultQuery):
        assert abc.outlinks("A") == ["B"]
        assert abc.outlinks("C") == []

    def test_alias_and_anchor_resolve_to_target(self, make_vault):
        q = _query(make_vault({"Target Note": "x", "D": "[[Target Note#Section|Display Text]]"}))
        assert q.backlinks("Target Note") == ["D"]

    def test_self_link_keeps_note_orphaned(self, make_vault):
        q = _query(make_vault({"solo": "me: [[solo]]", "other": "[[solo]]"}))
        assert q.backlinks("solo") == ["other"]
        assert q.orphans() == ["other"]

    def test_ambiguous_query_argument(self, make_vault):
        q = _query(make_vault({"a/Index": "x", "b/Index": "y"}))
        with pytest.raises(AmbiguousLinkTarget):
            q.backlinks("Index")
        assert q.backlinks("a/Index") == []

    def test_orphans_match_backlink_index(self, make_vault):
        q = _query(
            make_vault(
                {
                    "hub": "[[a]] [[b]] [[sub/c]]",
                    "a": "[[hub]] [[a]]",
                    "b": "",
                    "sub/c": "[[b]]",
                    "lonely": "[[lonely]] [[nowhere]]",
                }
            )
        )
        backlinks = q.index.backlinks
        assert q.orphans() == sorted(n for n, sources in backlinks.items() if not sources)
        assert q.orphans() == ["lonely"]


class TestFilesAndStats:
    def test_file_details(self, abc: VaultQuery):
        details = {entry["path"]: entry for entry in abc.files(details=True)}
        assert list(details) == ["A", "B", "C"]
        assert details["A"]["word_count"] == 4
        assert details["A"]["link_count"] == 1
        assert details["A"]["tag_count"] == 1
        assert details["B"]["link_count"] == 0
        assert details["C"]["modified"]

    def test_stats(self, abc: VaultQuery):
        assert abc.stats() == {
            "total_notes": 3,
            "total_tags": 1,
            "total_links": 2,
            "broken_links": 1,
            "ambiguous_links": 0,
            "orphaned_notes": 2,
            "skipped_files": 0,
        }

    def test_stats_counts_skipped_files(self, abc_vault: Path):
        (abc_vault / "bad.md").write_bytes(b"\xff\xfe\xfa")
        assert _query(abc_vault).stats()["skipped_files"] == 1
