import math
from urllib.parse import unquote

import pytest


@pytest.fixture
def editor(workspace):
    workspace.create_quote()
    return workspace.editor


def test_edits_reach_store_only_after_debounce(workspace, editor, clock):
    store = workspace.quote_store
    editor.set_client(name="Acme", email="ap@acme.test")

    clock.advance(0.2)
    assert editor.poll() is False
    assert store.current_quote.client_name == ""

    clock.advance(0.4)
    assert editor.poll() is True
    assert store.current_quote.client_name == "Acme"
    assert store.current_quote is not editor.quote
    assert editor.dirty is False


def test_each_edit_restarts_the_window(workspace, editor, clock):
    editor.set_notes("a")
    clock.advance(0.4)
    editor.set_notes("ab")
    clock.advance(0.4)

    assert editor.poll() is False
    assert editor.poll(now=clock.now + 0.2) is True
    assert workspace.quote_store.current_quote.notes == "ab"


def test_poll_without_edits_does_nothing(editor):
    assert editor.poll(now=100.0) is False


def test_flush_is_immediate(workspace, editor):
    editor.set_currency("KRW")
    editor.flush()
    assert workspace.quote_store.current_quote.currency == "KRW"


def test_save_flushes_and_persists(workspace, editor):
    editor.set_client(name="Globex")

    saved = editor.save(close_editor=False)

    assert saved.client_name == "Globex"
    assert workspace.quote_store.get_quote(saved.id).client_name == "Globex"
    assert workspace.quote_store.is_editing is True


def test_update_item_coerces_numbers(editor):
    item_id = editor.quote.items[0].id

    editor.update_item(item_id, quantity="3", unit_price="50", tax_rate="10")
    assert editor.totals().grand_total == pytest.approx(165)

    editor.update_item(item_id, quantity="")
    assert math.isnan(editor.quote.items[0].quantity)
    assert math.isnan(editor.totals().grand_total)


def test_update_item_rejects_unknown_fields(editor):
    item_id = editor.quote.items[0].id
    with pytest.raises(ValueError):
        editor.update_item(item_id, colour="red")
    with pytest.raises(ValueError):
        editor.update_item(item_id, discount_type="bogus")
    with pytest.raises(KeyError):
        editor.update_item("missing", quantity=1)


def test_add_remove_and_duplicate_items(editor):
    first = editor.quote.items[0]
    editor.update_item(first.id, description="Design")
    added = editor.add_item()
    copy = editor.duplicate_item(first.id)

    assert [i.description for i in editor.quote.items] == ["Design", "", "Design (Copy)"]
    assert copy.id != first.id
    assert added.tax_rate == 8.875

    editor.remove_item(added.id)
    assert [i.id for i in editor.quote.items] == [first.id, copy.id]


def test_move_item_at_edges_is_noop(editor):
    editor.add_item()
    ids = [i.id for i in editor.quote.items]

    editor.move_item(0, "up")
    editor.move_item(1, "down")
    assert [i.id for i in editor.quote.items] == ids

    editor.move_item(0, "down")
    assert [i.id for i in editor.quote.items] == ids[::-1]


def test_bulk_import_rows(editor):
    added = editor.bulk_import("Hosting\t12\t$25.00\nSetup, 300\nLogo")

    assert [(i.description, i.quantity, i.unit_price) for i in added] == [
        ("Hosting", 12.0, 25.0),
        ("Setup", 1.0, 300.0),
        ("Logo", 1.0, 0.0),
    ]
    assert len(editor.quote.items) == 4
    assert editor.bulk_import("   ") == []


def test_doc_type_and_terms(editor):
    editor.set_doc_type("invoice")
    editor.apply_terms_preset("Payment due in 30 days")
    editor.apply_terms_preset("")

    assert editor.quote.doc_type == "invoice"
    assert editor.quote.terms == "Payment due in 30 days"
    with pytest.raises(ValueError):
        editor.set_doc_type("receipt")


def test_email_draft_and_mailto(editor):
    item_id = editor.quote.items[0].id
    editor.set_client(name="Acme", email="ap@acme.test")
    editor.update_item(item_id, quantity=3, unit_price=50, tax_rate=10)

    subject, body = editor.email_draft()

    assert subject == "[Quotation] QT-001001 - Acme Corp"
    assert body.startswith("Dear Acme,")
    assert "USD 165" in body

    url = editor.mailto_url()
    assert url.startswith("mailto:ap@acme.test?subject=")
    assert unquote(url.split("body=", 1)[1]) == body


def test_clipboard_summary(editor):
    item_id = editor.quote.items[0].id
    editor.set_client(name="Acme")
    editor.update_item(item_id, description="Consulting", quantity=2, unit_price=100, tax_rate=0)

    text = editor.clipboard_summary()

    assert text.splitlines()[0] == "[Quotation] QT-001001"
    assert "- Consulting (2 x $100)" in text
    assert "Total: $200" in text


def test_move_item_out_of_range_is_noop(editor):
    editor.add_item()
    ids = [i.id for i in editor.quote.items]

    editor.move_item(5, "up")
    editor.move_item(-1, "down")
    editor.move_item(2, "down")

    assert [i.id for i in editor.quote.items] == ids


def test_editor_reads_settings_changed_while_open(workspace, editor):
    workspace.settings_store.set_defaults(tax_rate=20)
    workspace.settings_store.set_company_profile(company_name="Globex", representative_name="Jane Roe")

    assert editor.add_item().tax_rate == 20
    assert editor.bulk_import("Setup, 300")[0].tax_rate == 20

    subject, body = editor.email_draft()
    assert subject.endswith("- Globex")
    assert body.endswith("Jane Roe\nGlobex")
    assert editor.clipboard_summary().endswith("Globex\nJane Roe")
