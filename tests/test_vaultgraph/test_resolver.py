"""Unit tests for vaultgraph.resolver.LinkResolver."""

import pytest

from vaultgraph.resolver import LinkResolver, LinkStatus, Resolution

NOTE_IDS = {
    "Index",
    "projects/Index",
    "projects/Plan",
    "areas/Plan",
    "Notes/Target Note",
    "x/y/Deep",
}


@pytest.fixture()
def resolver() -> LinkResolver:
    return LinkResolver(NOTE_IDS)


class TestExactAndShortLinks:
    def test_exact_match_wins_over_short_name(self, resolver: LinkResolver):
        assert resolver.resolve("Index") == Resolution(LinkStatus.RESOLVED, "Index")

    def test_exact_path(self, resolver: LinkResolver):
        assert resolver.resolve("projects/Plan").note_id == "projects/Plan"

    def test_unique_base_name(self, resolver: LinkResolver):
        assert resolver.resolve("Target Note").note_id == "Notes/Target Note"

    def test_partial_path(self, resolver: LinkResolver):
        assert resolver.resolve("y/Deep").note_id == "x/y/Deep"

    def test_extension_is_stripped(self, resolver: LinkResolver):
        assert resolver.resolve("Target Note.md").note_id == "Notes/Target Note"
        assert resolver.resolve("projects/Plan.MD").note_id == "projects/Plan"

    def test_backslash_separators(self, resolver: LinkResolver):
        assert resolver.resolve("projects\\Plan").note_id == "projects/Plan"

    def test_leading_slash(self, resolver: LinkResolver):
        assert resolver.resolve("/projects/Plan").note_id == "projects/Plan"

    def test_short_links_disabled(self):
        strict = LinkResolver(NOTE_IDS, short_links=False)
        assert strict.resolve("Target Note").status is LinkStatus.DANGLING
        assert strict.resolve("Notes/Target Note").status is LinkStatus.RESOLVED


class TestAmbiguity:
    def test_shared_base_name_is_ambiguous(self, resolver: LinkResolver):
        result = resolver.resolve("Plan")
        assert result.status is LinkStatus.AMBIGUOUS
        assert result.note_id is None
        assert result.candidates == ("areas/Plan", "projects/Plan")

    def test_two_index_notes_without_root_index(self):
        result = LinkResolver({"a/Index", "b/Index"}).resolve("Index")
        assert result.status is LinkStatus.AMBIGUOUS
        assert result.candidates == ("a/Index", "b/Index")


class TestRelativeLinks:
    def test_same_folder(self, resolver: LinkResolver):
        assert resolver.resolve("./Index", source="projects/Plan").note_id == "projects/Index"

    def test_parent_folder(self, resolver: LinkResolver):
        assert resolver.resolve("../Index", source="projects/Plan").note_id == "Index"

    def test_escaping_the_vault_is_dangling(self, resolver: LinkResolver):
        assert resolver.resolve("../../Index", source="projects/Plan").status is LinkStatus.DANGLING

    def test_relative_links_do_not_fall_back_to_short_names(self, resolver: LinkResolver):
        assert resolver.resolve("./Target Note", source="projects/Plan").status is LinkStatus.DANGLING


class TestUnresolved:
    def test_missing_note_is_dangling(self, resolver: LinkResolver):
        assert resolver.resolve("Missing") == Resolution(LinkStatus.DANGLING)

    def test_attachment(self, resolver: LinkResolver):
        assert resolver.resolve("assets/photo.PNG").status is LinkStatus.ATTACHMENT

    def test_empty_target(self, resolver: LinkResolver):
        assert resolver.resolve("   ").status is LinkStatus.DANGLING

    def test_empty_vault(self):
        assert LinkResolver(()).resolve("Anything").status is LinkStatus.DANGLING
