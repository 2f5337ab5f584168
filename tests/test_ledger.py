"""Unit tests for the write staging ledger."""

from __future__ import annotations

import pytest

from wsmeta_core.plugin import DuplicateWriteError, WriteLedger, normalize_path


def test_normalize_path_converts_backslashes() -> None:
    assert normalize_path("a\\b\\c") == "a/b/c"
    assert normalize_path("a/b/c") == "a/b/c"
    assert normalize_path("/a/b") == "a/b"


def test_staging_same_path_twice_fails_even_with_equal_content() -> None:
    ledger = WriteLedger()
    ledger.stage("README.md", "same")

    with pytest.raises(DuplicateWriteError) as excinfo:
        ledger.stage("README.md", "same")

    assert excinfo.value.path == "README.md"
    assert list(ledger.pending()) == [("README.md", "same")]


def test_separator_variants_share_one_key() -> None:
    ledger = WriteLedger()
    ledger.stage("src\\components\\Button.tsx", "export default Button")

    with pytest.raises(DuplicateWriteError, match="'src/components/Button.tsx' has already been targeted"):
        ledger.stage("src/components/Button.tsx", "duplicate")


def test_claim_without_proposal_still_blocks_later_writes() -> None:
    ledger = WriteLedger()
    key = ledger.claim("package.json")

    assert key == "package.json"
    assert ledger.is_targeted("package.json")
    assert not ledger.has_changes
    with pytest.raises(DuplicateWriteError):
        ledger.claim("package.json")


def test_propose_requires_claim() -> None:
    ledger = WriteLedger()
    with pytest.raises(KeyError):
        ledger.propose("unclaimed.txt", "content")


def test_pending_preserves_staging_order() -> None:
    ledger = WriteLedger()
    ledger.stage("b.txt", "b")
    ledger.claim("skipped.txt")
    ledger.stage("a.txt", "a")

    assert [path for path, _ in ledger.pending()] == ["b.txt", "a.txt"]
    assert ledger.targeted == ("b.txt", "skipped.txt", "a.txt")
    assert len(ledger) == 2
