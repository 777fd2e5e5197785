import pytest

from quotetonic.schemas import QuoteStatus
from quotetonic.settings_store import SettingsStore
from quotetonic.tutorial import STEP_TARGET_IDS, TOTAL_STEPS, TutorialEvent, target_for
from quotetonic.workspace import Workspace


@pytest.fixture
def tutorial(workspace):
    return workspace.tutorial


def walk_to(tutorial, step):
    if tutorial.step == 0:
        tutorial.start()
    while tutorial.step < step:
        tutorial.advance()


def test_fresh_install_shows_welcome(tutorial):
    assert tutorial.visible is True
    assert tutorial.step == 0
    assert tutorial.at_welcome is True
    assert tutorial.target is None


def test_next_at_welcome_is_ignored(tutorial):
    assert tutorial.advance() == 0


def test_start_goes_to_step_one_on_dashboard(workspace, tutorial):
    workspace.quote_store.set_active_tab("settings")
    tutorial.start()
    assert tutorial.step == 1
    assert workspace.quote_store.active_tab == "dashboard"
    assert tutorial.target == "guide-target-new-btn"


def test_next_at_step_one_creates_draft(workspace, tutorial):
    tutorial.start()
    tutorial.advance()

    current = workspace.quote_store.current_quote
    assert tutorial.step == 2
    assert current is not None
    assert current.status == QuoteStatus.DRAFT
    assert current.number == "QT-001001"
    assert workspace.quote_store.is_editing is True


def test_step_two_applies_standard_template_to_current(workspace, tutorial):
    tutorial.start()
    tutorial.advance()
    workspace.apply_template("bold")

    tutorial.advance()

    assert tutorial.step == 3
    assert workspace.quote_store.current_quote.template_id == "standard"
    assert workspace.settings.next_doc_number == 1002


def test_ui_events_jump_only_from_their_step(tutorial):
    walk_to(tutorial, 3)

    assert tutorial.dispatch(TutorialEvent.LOGO_UPLOADED) == 3
    assert tutorial.dispatch(TutorialEvent.CLIENT_NAME_CONFIRMED) == 5
    assert tutorial.dispatch(TutorialEvent.ITEM_DESCRIPTION_CONFIRMED) == 6


def test_document_created_event_moves_past_template_step(tutorial):
    tutorial.start()
    assert tutorial.dispatch(TutorialEvent.DOCUMENT_CREATED) == 2
    assert tutorial.dispatch(TutorialEvent.DOCUMENT_CREATED) == 3


def test_item_focus_skips_from_draft_helper(tutorial):
    walk_to(tutorial, 4)
    assert tutorial.dispatch("ItemDescriptionFocused") == 5


def test_preview_then_finalize(workspace, tutorial):
    walk_to(tutorial, 6)
    workspace.editor.set_client(name="Tour Client")

    tutorial.advance()
    assert tutorial.step == 7
    assert workspace.quote_store.is_preview_open is True

    tutorial.advance()
    assert tutorial.step == 8
    saved = workspace.quote_store.quotes
    assert len(saved) == 1
    assert saved[0].status == QuoteStatus.FINALIZED
    assert saved[0].client_name == "Tour Client"
    assert workspace.quote_store.current_quote is None


def test_tab_switching_steps(workspace, tutorial):
    walk_to(tutorial, 9)
    assert workspace.quote_store.active_tab == "quotes"
    walk_to(tutorial, 11)
    assert workspace.quote_store.active_tab == "templates"
    walk_to(tutorial, 13)
    assert workspace.quote_store.active_tab == "settings"


def test_settings_events(tutorial):
    walk_to(tutorial, 12)
    assert tutorial.dispatch(TutorialEvent.LOGO_UPLOADED) == 13
    tutorial.advance()
    assert tutorial.dispatch(TutorialEvent.SIGNATURE_COMPLETED) == 15
    assert tutorial.dispatch(TutorialEvent.SETTINGS_SAVED) == 16


def test_retreat_restores_navigation_without_undo(workspace, tutorial):
    walk_to(tutorial, 8)
    assert len(workspace.quote_store.quotes) == 1

    tutorial.retreat()

    assert tutorial.step == 7
    assert workspace.quote_store.is_editing is True
    assert workspace.quote_store.is_preview_open is True
    assert workspace.quote_store.quotes[0].status == QuoteStatus.FINALIZED


def test_retreat_stops_at_step_one(workspace, tutorial):
    tutorial.start()
    assert tutorial.retreat() == 1
    assert workspace.quote_store.is_editing is False


def test_finish_hides_and_resets(workspace, tutorial, config):
    walk_to(tutorial, TOTAL_STEPS)
    assert tutorial.at_finish is True
    assert tutorial.progress == 100

    tutorial.advance()

    assert tutorial.visible is False
    assert tutorial.step == 0
    assert workspace.settings.has_seen_tutorial is True
    assert SettingsStore(workspace.storage).settings.tutorial_step == 0
    assert Workspace(config).tutorial.visible is False


def test_events_are_ignored_when_hidden(tutorial):
    tutorial.stop()
    assert tutorial.advance() == 0
    assert tutorial.dispatch(TutorialEvent.DOCUMENT_CREATED) == 0


def test_toggle_reopens_at_welcome(workspace, tutorial):
    tutorial.stop()
    workspace.create_quote()

    tutorial.toggle()

    assert tutorial.visible is True
    assert tutorial.step == 0
    assert workspace.quote_store.current_quote is None
    assert workspace.editor is None

    tutorial.toggle()
    assert tutorial.visible is False


def test_step_is_restored_from_settings(workspace, config):
    workspace.settings_store.set_tutorial_step(5)
    assert Workspace(config).tutorial.step == 5


def test_targets_cover_every_step():
    assert len(STEP_TARGET_IDS) == TOTAL_STEPS
    assert target_for(0) is None
    assert target_for(TOTAL_STEPS) is None
    assert target_for(16) == "tutorial-target-settings-save"
