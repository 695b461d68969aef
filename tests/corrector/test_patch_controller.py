# tests/corrector/test_patch_controller.py
from unittest.mock import MagicMock

import pytest

from copydeck.core.utils.path_utils import PathUtils
from copydeck.errors import BackupError, DocumentIOError, InputFileError, PatchConflictError
from corrector.controllers.patch_controller import DocumentPatcher
from corrector.managers.backup_manager import BackupManager
from corrector.model import Correction, OutcomeStatus, PatchState
from scraper.rules import ExtractionRules
from scraper.selector import SelectorGenerator


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "backups"


@pytest.fixture
def patcher(backup_dir):
    return DocumentPatcher(backup_manager=BackupManager(backup_dir))


def correction_for(item, corrected, original=None):
    return Correction(
        id=item.id,
        identity=item.identity,
        tag=item.tag,
        original_text=item.original_text if original is None else original,
        corrected_text=corrected,
    )


def text_at(doc, selector):
    return ExtractionRules().extract_text(SelectorGenerator.resolve(doc, selector)[0])


# --- Validation ---

def test_validation_rejects_lorem_and_honorifics(patcher, page_items):
    item = page_items["Your order has shiped"]
    report = patcher.validate_corrections([
        correction_for(item, "LOREM IPSUM placeholder"),
        correction_for(item, "Thanks, Dr. Jones"),
        correction_for(item, "Your order has shipped"),
    ])

    assert not report.passed
    assert len(report.violations) == 2
    assert "lorem ipsum" in report.violations[0]
    assert "Dr." in report.violations[1]


def test_validation_requires_identity_and_original(patcher):
    report = patcher.validate_corrections([
        Correction(id="x_0", identity=" ", original_text="Old", corrected_text="New"),
        Correction(id="x_1", identity="body > p", original_text="", corrected_text="New"),
    ])
    assert not report.passed
    assert len(report.violations) == 2


def test_validation_passes_clean_batch(patcher, page_items):
    report = patcher.validate_corrections([correction_for(page_items["Welcome, Mr. Smith"], "Welcome back")])
    assert report.passed and report.violations == []


# --- Apply ---

def test_apply_is_idempotent(patcher, page_doc, page_items):
    """Eerste keer toegepast, tweede keer op hetzelfde document overgeslagen."""
    item = page_items["Welcome, Mr. Smith"]
    corrections = [correction_for(item, "Welcome back")]

    first = patcher.apply_corrections(page_doc, corrections)
    assert (first.applied, first.skipped, first.total) == (1, 0, 1)
    assert text_at(page_doc, item.identity) == "Welcome back"

    second = patcher.apply_corrections(page_doc, corrections)
    assert (second.applied, second.skipped) == (0, 1)
    assert second.outcomes[0].status == OutcomeStatus.ALREADY_APPLIED
    assert text_at(page_doc, item.identity) == "Welcome back"


def test_placeholder_attribute_is_patched(patcher, page_doc, page_items):
    item = page_items["Emial address"]
    result = patcher.apply_corrections(page_doc, [correction_for(item, "Email address")])

    assert result.applied == 1
    assert page_doc.find("input")["placeholder"] == "Email address"


def test_no_op_leaves_document_untouched(patcher, page_doc, page_items):
    before = str(page_doc)
    item = page_items["Lorem ipsum dolor"]
    result = patcher.apply_corrections(page_doc, [correction_for(item, "Lorem ipsum dolor")])

    assert result.outcomes[0].status == OutcomeStatus.NO_OP
    assert result.skipped == 1
    assert str(page_doc) == before


def test_unresolved_identity_is_skipped(patcher, page_doc, page_items):
    """Een selector zonder match wordt overgeslagen; de rest van de batch gaat door."""
    missing = Correction(id="x_9", identity="#gone", original_text="Old", corrected_text="New")
    ok = correction_for(page_items["Your order has shiped"], "Your order has shipped")

    result = patcher.apply_corrections(page_doc, [missing, ok])

    assert [o.status for o in result.outcomes] == [OutcomeStatus.UNRESOLVED, OutcomeStatus.APPLIED]
    assert (result.applied, result.skipped, result.total) == (1, 1, 2)


def test_drifted_text_is_a_conflict(patcher, page_doc, page_items):
    """Als de node intussen andere tekst heeft, wordt niets overschreven."""
    item = page_items["Your order has shiped"]
    result = patcher.apply_corrections(page_doc, [correction_for(item, "Shipped!", original="Something else")])

    assert result.outcomes[0].status == OutcomeStatus.CONFLICT
    assert text_at(page_doc, item.identity) == "Your order has shiped"


def test_ambiguous_selector_is_a_conflict(patcher, page_doc):
    c = Correction(id="x_0", identity="p", original_text="Lorem ipsum dolor", corrected_text="Intro")
    result = patcher.apply_corrections(page_doc, [c])
    assert result.outcomes[0].status == OutcomeStatus.CONFLICT


# --- File cycle ---

def test_patch_file_backs_up_then_writes(patcher, page_file, page_html, page_items, backup_dir):
    """De backup is byte-gelijk aan het origineel; het bestand zelf bevat de correctie."""
    original_bytes = page_file.read_bytes()
    corrections = [
        correction_for(page_items["Welcome, Mr. Smith"], "Welcome back"),
        correction_for(page_items["Your order has shiped"], "Your order has shipped"),
    ]

    run = patcher.patch_file(page_file, corrections)

    assert run.state == PatchState.APPLIED
    assert run.result.applied == 2
    assert run.backup_path.parent == backup_dir
    assert run.backup_path.name.endswith("_page.html")
    assert run.backup_path.read_bytes() == original_bytes

    patched = page_file.read_text(encoding="utf-8")
    assert "Welcome back" in patched
    assert "Your order has shipped" in patched
    assert "Mr. Smith" not in patched


def test_rejected_batch_writes_nothing(patcher, page_file, page_items):
    before = page_file.read_bytes()
    corrections = [
        correction_for(page_items["Welcome, Mr. Smith"], "Welcome back"),
        correction_for(page_items["Your order has shiped"], "lorem ipsum"),
    ]

    run = patcher.patch_file(page_file, corrections)

    assert run.state == PatchState.REJECTED
    assert run.result is None
    assert not run.validation.passed
    assert page_file.read_bytes() == before
    assert run.backup_path.exists()


def test_strict_mode_aborts_on_conflict(backup_dir, page_file, page_items):
    patcher = DocumentPatcher(backup_manager=BackupManager(backup_dir), strict=True)
    before = page_file.read_bytes()
    corrections = [
        correction_for(page_items["Welcome, Mr. Smith"], "Welcome back"),
        correction_for(page_items["Your order has shiped"], "Shipped", original="Changed meanwhile"),
    ]

    with pytest.raises(PatchConflictError) as exc_info:
        patcher.patch_file(page_file, corrections)

    assert len(exc_info.value.outcomes) == 1
    assert page_file.read_bytes() == before


def test_patch_file_to_separate_output(patcher, page_file, page_items, tmp_path):
    before = page_file.read_bytes()
    target = tmp_path / "patched.html"

    run = patcher.patch_file(page_file, [correction_for(page_items["Welcome, Mr. Smith"], "Hi")], output_path=target)

    assert run.output_path == target
    assert "<h1>Hi</h1>" in target.read_text(encoding="utf-8")
    assert page_file.read_bytes() == before


def test_missing_source_is_fatal(patcher, tmp_path):
    with pytest.raises(InputFileError):
        patcher.patch_file(tmp_path / "missing.html", [])


def test_unwritable_output_is_fatal(patcher, page_file, page_items, tmp_path):
    target = tmp_path / "no-such-dir" / "out.html"
    with pytest.raises(DocumentIOError):
        patcher.patch_file(page_file, [correction_for(page_items["Welcome, Mr. Smith"], "Hi")], output_path=target)


def test_failed_backup_aborts_before_writing(page_file, page_items, tmp_path):
    """Mislukt de backup, dan stopt de cyclus en blijft de pagina byte-gelijk."""
    blocker = tmp_path / "backups"
    blocker.write_text("not a directory", encoding="utf-8")
    patcher = DocumentPatcher(backup_manager=BackupManager(blocker))
    before = page_file.read_bytes()
    item = page_items["Your order has shiped"]

    with pytest.raises(BackupError):
        patcher.patch_file(page_file, [correction_for(item, "Your order has shipped")])

    assert page_file.read_bytes() == before


def test_backup_error_from_manager_propagates(page_file, page_items):
    manager = MagicMock(spec=BackupManager)
    manager.create_backup.side_effect = BackupError("disk full")
    patcher = DocumentPatcher(backup_manager=manager)
    before = page_file.read_bytes()

    with pytest.raises(BackupError, match="disk full"):
        patcher.patch_file(page_file, [correction_for(page_items["Welcome, Mr. Smith"], "Welcome")])

    assert page_file.read_bytes() == before
    manager.create_backup.assert_called_once_with(page_file)


# --- Backups ---

def test_backups_never_overwrite(backup_dir, page_file, monkeypatch):
    """Twee backups in dezelfde seconde krijgen elk een eigen bestand."""
    monkeypatch.setattr(PathUtils, "file_timestamp", staticmethod(lambda moment=None: "2024-05-01T09-30-12"))
    manager = BackupManager(backup_dir)

    first = manager.create_backup(page_file)
    second = manager.create_backup(page_file)

    assert first.name == "2024-05-01T09-30-12_page.html"
    assert second != first
    assert first.exists() and second.exists()


def test_backup_of_missing_file_fails(backup_dir, tmp_path):
    with pytest.raises(BackupError):
        BackupManager(backup_dir).create_backup(tmp_path / "missing.html")
